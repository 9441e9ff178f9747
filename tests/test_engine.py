"""Tests for the SelectionEngine facade."""

from unittest.mock import MagicMock

import pytest

from cultimap.selection import GridPoint, ModifierFlags, PointerSample
from cultimap.selection.engine import SelectionConfig
from cultimap.utils.exceptions import ConfigurationError

# With 80px cells: offset 61, stride 84. These land inside A1 and B2.
A1 = (100.0, 100.0)
B2 = (185.0, 185.0)
CTRL = ModifierFlags(ctrl=True)


class TestCellLevelApi:
    def test_end_to_end_a1_to_b2(self, make_engine, selection, capture):
        engine = make_engine()
        engine.start(0, 0, False)
        engine.extend(1, 1)
        result = engine.end()

        assert result.committed
        assert selection == {"id1", "id2"}
        assert capture.attach_count == 1
        assert capture.detach_count == 1
        assert not engine.is_dragging
        assert engine.get_selection_rect() is None

    def test_commit_enters_selection_mode(self, make_engine):
        mode_changes = MagicMock()
        engine = make_engine(on_selection_mode_change=mode_changes)
        engine.start(0, 0)
        engine.extend(2, 2)
        engine.end()
        assert engine.selection_mode
        mode_changes.assert_called_once_with(True)

    def test_single_cell_outside_selection_mode_is_not_committed(self, make_engine, selection):
        selection.add("id3")
        engine = make_engine()
        engine.start(0, 0)
        result = engine.end()
        assert not result.committed
        assert selection == {"id3"}
        assert not engine.selection_mode

    def test_start_clamps_into_grid(self, make_engine):
        engine = make_engine()
        engine.start(50, 0)
        assert engine.drag_start == GridPoint(9, 0)
        engine.extend(99, 99)
        assert engine.drag_end == GridPoint(9, 9)

    def test_end_when_idle(self, make_engine):
        assert make_engine().end() is None

    def test_on_commit_receives_result(self, make_engine):
        engine = make_engine()
        seen = []
        engine.on_commit = seen.append
        engine.start(0, 0)
        engine.extend(1, 1)
        result = engine.end()
        assert seen == [result]

    def test_is_in_drag_box_only_while_dragging(self, make_engine):
        engine = make_engine()
        engine.start(0, 0)
        engine.extend(2, 2)
        assert engine.is_in_drag_box(1, 1)
        engine.end()
        assert not engine.is_in_drag_box(1, 1)


class TestPointerPromotion:
    def test_drag_is_promoted_and_committed(self, make_engine, selection, capture, scheduler):
        engine = make_engine()
        engine.pointer_down(PointerSample(*A1))
        assert capture.attach_count == 1
        assert not engine.is_dragging

        capture.on_move(PointerSample(A1[0] + 3, A1[1]))
        assert not engine.is_dragging

        capture.on_move(PointerSample(*B2))
        assert engine.is_dragging
        assert engine.selection_mode
        assert engine.drag_start == GridPoint(0, 0)
        assert engine.drag_end == GridPoint(1, 1)

        result = capture.on_release(PointerSample(*B2))
        assert result.committed
        assert selection == {"id1", "id2"}
        assert capture.attach_count == 1
        assert capture.detach_count == 1
        assert scheduler.pending == 0

    def test_plain_click_activates_cell(self, make_engine, selection, capture):
        clicked = MagicMock()
        engine = make_engine()
        engine.on_click = clicked

        engine.pointer_down(PointerSample(*A1))
        result = capture.on_release(PointerSample(A1[0] + 2, A1[1] + 2))

        assert result is None
        clicked.assert_called_once_with(GridPoint(0, 0))
        assert selection == set()
        assert not engine.selection_mode
        assert capture.detach_count == 1

    def test_click_on_header_is_not_a_cell_click(self, make_engine, capture):
        clicked = MagicMock()
        engine = make_engine()
        engine.on_click = clicked
        engine.pointer_down(PointerSample(10, 10))
        capture.on_release(PointerSample(10, 10))
        clicked.assert_not_called()

    def test_promoted_drag_keeps_press_modifiers(self, make_engine, selection, capture):
        selection.add("id3")
        engine = make_engine()
        engine.pointer_down(PointerSample(*A1, CTRL))
        capture.on_move(PointerSample(*B2))
        assert engine.is_additive
        capture.on_release(PointerSample(*B2))
        assert selection == {"id1", "id2", "id3"}

    def test_immediate_start_without_promotion(self, make_engine, capture):
        engine = make_engine(promote_clicks=False)
        engine.pointer_down(PointerSample(*A1))
        assert engine.is_dragging
        assert capture.attach_count == 1

    def test_click_without_promotion_activates_cell(self, make_engine, selection, capture):
        clicked = MagicMock()
        engine = make_engine(promote_clicks=False)
        engine.on_click = clicked

        engine.pointer_down(PointerSample(*A1))
        result = capture.on_release(PointerSample(*A1))

        assert not result.committed
        clicked.assert_called_once_with(GridPoint(0, 0))
        assert selection == set()
        assert not engine.selection_mode

    def test_committed_press_without_promotion_is_not_a_click(self, make_engine, capture):
        clicked = MagicMock()
        engine = make_engine(promote_clicks=False)
        engine.on_click = clicked
        engine.pointer_down(PointerSample(*A1, CTRL))
        result = capture.on_release(PointerSample(*A1, CTRL))
        assert result.committed
        clicked.assert_not_called()


class TestSelectionMode:
    def test_press_starts_drag_immediately(self, make_engine):
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(*A1))
        assert engine.is_dragging

    def test_motionless_click_reselects_single_cell(self, make_engine, selection, capture):
        selection.update({"id1", "id2"})
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(*A1))
        result = capture.on_release(PointerSample(*A1))
        assert result.committed
        assert result.moved is False
        assert selection == {"id1"}

    def test_background_drag_clears(self, make_engine, selection, capture):
        selection.update({"id1"})
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(500, 500))
        capture.on_move(PointerSample(700, 560))
        capture.on_release(PointerSample(700, 560))
        assert selection == set()

    def test_masks_prior_selection_only_when_replacing(self, make_engine):
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(*A1))
        assert engine.masks_prior_selection
        engine.cancel()
        engine.pointer_down(PointerSample(*A1, CTRL))
        assert not engine.masks_prior_selection

    def test_leaving_selection_mode_cancels_drag(self, make_engine, selection, capture, scheduler):
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(*A1))
        capture.on_move(PointerSample(A1[0], 590))
        assert scheduler.pending == 1

        engine.set_selection_mode(False)

        assert not engine.is_dragging
        assert engine.drag_start is None
        assert capture.detach_count == 1
        assert scheduler.pending == 0
        assert selection == set()

    def test_second_press_ignored_while_dragging(self, make_engine, capture):
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(*A1))
        engine.pointer_down(PointerSample(*B2))
        assert engine.drag_start == GridPoint(0, 0)
        assert capture.attach_count == 1


class TestAutoScrollDuringDrag:
    def test_drag_end_follows_scrolled_content(self, make_engine, viewport, scheduler, capture):
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(*A1))
        capture.on_move(PointerSample(A1[0], 590))
        assert engine.drag_end == GridPoint(6, 0)

        for _ in range(3):
            scheduler.run_frame()

        assert viewport.scroll_y == pytest.approx(81)
        assert engine.drag_end == GridPoint(7, 0)
        assert engine.pixel_state.current_y == pytest.approx(671)

    def test_release_stops_scrolling(self, make_engine, viewport, scheduler, capture):
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(*A1))
        capture.on_move(PointerSample(A1[0], 590))
        scheduler.run_frame()
        capture.on_release(PointerSample(A1[0], 590))
        assert scheduler.pending == 0
        calls = len(viewport.scroll_calls)
        scheduler.run_until_idle()
        assert len(viewport.scroll_calls) == calls

    def test_reset_mid_drag_stops_scrolling(self, make_engine, viewport, scheduler, capture):
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(300, 300))
        capture.on_move(PointerSample(300, 590))
        assert scheduler.pending == 1

        engine.reset()

        assert not engine.is_dragging
        assert scheduler.pending == 0
        assert not capture.attached
        assert engine.pixel_state is None
        calls = len(viewport.scroll_calls)
        assert scheduler.run_until_idle(50) == 0
        assert len(viewport.scroll_calls) == calls

    def test_release_after_reset_is_ignored(self, make_engine, scheduler, capture):
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(300, 300))
        capture.on_move(PointerSample(300, 590))
        engine.reset()
        assert engine.pointer_up(PointerSample(300, 590)) is None
        assert scheduler.pending == 0
        assert capture.detach_count == 1

    def test_pixel_state_tracks_pointer(self, make_engine, capture):
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(*A1))
        capture.on_move(PointerSample(150, 130))
        assert engine.pixel_state.bounds() == (100, 100, 50, 30)
        capture.on_release(PointerSample(150, 130))
        assert engine.pixel_state is None


class TestLifecycle:
    def test_dispose_ignores_input(self, make_engine, capture):
        engine = make_engine(selection_mode=True)
        engine.dispose()
        engine.pointer_down(PointerSample(*A1))
        assert not engine.is_dragging
        assert capture.attach_count == 0

    def test_dispose_mid_drag_detaches(self, make_engine, capture, scheduler):
        engine = make_engine(selection_mode=True)
        engine.pointer_down(PointerSample(*A1))
        capture.on_move(PointerSample(A1[0], 590))
        engine.dispose()
        assert capture.detach_count == 1
        assert scheduler.pending == 0

    def test_set_cell_size_changes_mapping(self, make_engine):
        engine = make_engine(selection_mode=True)
        engine.set_cell_size(20)
        assert engine.layout.cell_size == 20
        assert engine.layout.gap == 1

    def test_works_without_capture(self, make_engine, selection):
        engine = make_engine(capture=None, selection_mode=True)
        engine.pointer_down(PointerSample(*A1))
        engine.pointer_move(PointerSample(*B2))
        engine.pointer_up(PointerSample(*B2))
        assert selection == {"id1", "id2"}


class TestSelectionConfig:
    def test_defaults(self):
        config = SelectionConfig()
        assert config.edge_threshold == 100
        assert config.max_scroll_speed == 30
        assert config.promotion_distance == 5

    @pytest.mark.parametrize("field", ["edge_threshold", "max_scroll_speed", "promotion_distance"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ConfigurationError):
            SelectionConfig(**{field: 0})

    def test_from_settings_reads_values(self):
        settings = MagicMock()
        settings.get.side_effect = lambda key, default=None: {
            "selection.edge_threshold": 60.0,
        }.get(key, default)
        config = SelectionConfig.from_settings(settings)
        assert config.edge_threshold == 60.0
        assert config.max_scroll_speed == 30

    def test_from_settings_falls_back_on_invalid(self):
        settings = MagicMock()
        settings.get.side_effect = lambda key, default=None: -1
        assert SelectionConfig.from_settings(settings) == SelectionConfig()
