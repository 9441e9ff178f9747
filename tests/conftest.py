"""Pytest configuration for cultimap tests.

Shared fixtures: a small placement map and a selection engine wired to
fake ports (manual frame scheduler, in-memory viewport, recording capture).
"""

import pytest

from cultimap.map_model import PlacedItem, PlacementMap
from cultimap.selection import ManualFrameScheduler, SelectionEngine


class FakeViewport:
    """Scrollable viewport with a fixed height and a clamped scroll offset."""

    def __init__(self, height=600.0, content_height=5000.0):
        self.height = height
        self.content_height = content_height
        self.scroll_y = 0.0
        self.scroll_calls = []

    def edges(self):
        return 0.0, self.height

    def scroll_by(self, delta):
        self.scroll_calls.append(delta)
        max_scroll = max(0.0, self.content_height - self.height)
        self.scroll_y = max(0.0, min(max_scroll, self.scroll_y + delta))

    def to_content(self, x, y):
        return x, y + self.scroll_y


class RecordingCapture:
    """Pointer capture that records attach/detach calls."""

    def __init__(self):
        self.attach_count = 0
        self.detach_count = 0
        self.on_move = None
        self.on_release = None

    @property
    def attached(self):
        return self.on_move is not None

    def attach(self, on_move, on_release):
        self.attach_count += 1
        self.on_move = on_move
        self.on_release = on_release

    def detach(self):
        self.detach_count += 1
        self.on_move = None
        self.on_release = None


@pytest.fixture
def sample_map():
    """10x10 map with id1 at A1, id2 at B2 and id3 at C3."""
    return PlacementMap(
        map_id="sample",
        rows=10,
        cols=10,
        name="Sample",
        items=[
            PlacedItem("id1", "A1"),
            PlacedItem("id2", "B2"),
            PlacedItem("id3", "C3"),
        ],
    )


@pytest.fixture
def viewport():
    return FakeViewport()


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


@pytest.fixture
def capture():
    return RecordingCapture()


@pytest.fixture
def selection():
    """Host selection set the engine reads and replaces."""
    return set()


@pytest.fixture
def make_engine(sample_map, viewport, scheduler, capture, selection):
    """Factory for engines over sample_map sharing the selection fixture."""

    def _make(**kwargs):
        def apply(new_selection):
            selection.clear()
            selection.update(new_selection)

        options = dict(
            rows=sample_map.rows,
            cols=sample_map.cols,
            cell_size=80,
            lookup=sample_map.item_at,
            get_selection=lambda: selection,
            on_selection_change=apply,
            scheduler=scheduler,
            viewport=viewport,
            capture=capture,
        )
        options.update(kwargs)
        return SelectionEngine(**options)

    return _make
