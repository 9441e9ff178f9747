"""Tests for the selection committer."""

from unittest.mock import MagicMock

import pytest

from cultimap.selection.committer import (
    SelectionCommitter,
    collect_items,
    merge_selection,
    should_commit,
)
from cultimap.selection.drag_state import DragStateMachine
from cultimap.selection.rect import SelectionRect


def _released(start, end, additive=False):
    machine = DragStateMachine()
    machine.start(*start, additive)
    machine.extend(*end)
    machine.end()
    return machine


class TestMergeSelection:
    def test_additive_union(self):
        assert merge_selection({"A", "B"}, {"B", "C"}, additive=True) == {"A", "B", "C"}

    def test_replace(self):
        assert merge_selection({"A", "B"}, {"B", "C"}, additive=False) == {"B", "C"}

    def test_replace_with_empty_clears(self):
        assert merge_selection({"A", "B"}, set(), additive=False) == set()


class TestShouldCommit:
    @pytest.mark.parametrize(
        "single,mode,additive,expected",
        [
            (True, False, False, False),
            (True, True, False, True),
            (True, False, True, True),
            (False, False, False, True),
            (False, True, True, True),
        ],
    )
    def test_policy(self, single, mode, additive, expected):
        assert should_commit(single, mode, additive) is expected


class TestCollectItems:
    def test_skips_empty_cells(self, sample_map):
        rect = SelectionRect(0, 2, 0, 2)
        assert collect_items(rect, sample_map.item_at) == {"id1", "id2", "id3"}

    def test_empty_area(self, sample_map):
        rect = SelectionRect(5, 9, 5, 9)
        assert collect_items(rect, sample_map.item_at) == set()


class TestSelectionCommitter:
    def test_end_to_end_a1_to_b2(self, sample_map):
        applied = MagicMock()
        committer = SelectionCommitter(sample_map.item_at, applied)
        machine = _released((0, 0), (1, 1))

        result = committer.commit(machine, set(), selection_mode_active=False)

        assert result.committed
        assert result.selection == {"id1", "id2"}
        applied.assert_called_once_with({"id1", "id2"})

    def test_machine_reset_after_commit(self, sample_map):
        committer = SelectionCommitter(sample_map.item_at)
        machine = _released((0, 0), (1, 1))
        committer.commit(machine, set(), selection_mode_active=True)
        assert machine.drag_start is None
        assert machine.get_selection_rect() is None

    def test_additive_keeps_prior(self, sample_map):
        committer = SelectionCommitter(sample_map.item_at)
        machine = _released((2, 2), (2, 2), additive=True)
        result = committer.commit(machine, {"id1"}, selection_mode_active=False)
        assert result.selection == {"id1", "id3"}

    def test_background_drag_clears(self, sample_map):
        applied = MagicMock()
        committer = SelectionCommitter(sample_map.item_at, applied)
        machine = _released((5, 5), (8, 8))
        result = committer.commit(machine, {"id1", "id2"}, selection_mode_active=True)
        assert result.committed
        assert result.selection == frozenset()
        applied.assert_called_once_with(set())

    def test_single_cell_click_outside_selection_mode_not_committed(self, sample_map):
        applied = MagicMock()
        committer = SelectionCommitter(sample_map.item_at, applied)
        machine = _released((0, 0), (0, 0))
        result = committer.commit(machine, {"id3"}, selection_mode_active=False)
        assert not result.committed
        assert result.is_single_cell
        assert result.selection == {"id3"}
        applied.assert_not_called()
        assert machine.drag_start is None

    def test_single_selected_cell_reselects(self, sample_map):
        committer = SelectionCommitter(sample_map.item_at)
        machine = _released((0, 0), (0, 0))
        result = committer.commit(machine, {"id1", "id2"}, selection_mode_active=True)
        assert result.selection == {"id1"}

    def test_commit_while_dragging_is_ignored(self, sample_map):
        committer = SelectionCommitter(sample_map.item_at)
        machine = DragStateMachine()
        machine.start(0, 0)
        assert committer.commit(machine, set(), selection_mode_active=True) is None
        assert machine.is_dragging

    def test_commit_when_idle_returns_none(self, sample_map):
        committer = SelectionCommitter(sample_map.item_at)
        assert committer.commit(DragStateMachine(), set(), True) is None

    def test_lookup_not_called_when_not_committed(self):
        lookup = MagicMock(return_value=None)
        committer = SelectionCommitter(lookup)
        committer.commit(_released((0, 0), (0, 0)), set(), selection_mode_active=False)
        lookup.assert_not_called()

    def test_machine_reset_when_callback_raises(self, sample_map):
        applied = MagicMock(side_effect=RuntimeError("host failed"))
        committer = SelectionCommitter(sample_map.item_at, applied)
        machine = _released((0, 0), (1, 1))

        with pytest.raises(RuntimeError):
            committer.commit(machine, set(), selection_mode_active=True)

        assert machine.drag_start is None
        assert machine.get_selection_rect() is None

    def test_custom_policy(self, sample_map):
        committer = SelectionCommitter(sample_map.item_at, policy=lambda *_: False)
        result = committer.commit(_released((0, 0), (3, 3)), set(), True)
        assert not result.committed
