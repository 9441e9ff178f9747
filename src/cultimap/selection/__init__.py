"""
CultiMap - Rectangular Selection Engine

Pure-Python selection logic for zoomable item grids. Nothing in this
package imports GTK; hosts plug in through the small ports defined in
``auto_scroll`` (frame scheduling, scrolling) and ``engine`` (pointer capture).
"""

from cultimap.selection.auto_scroll import (
    AutoScrollConfig,
    AutoScrollController,
    FrameScheduler,
    ManualFrameScheduler,
    ScrollViewport,
    WindowViewport,
    compute_scroll_speed,
)
from cultimap.selection.committer import (
    CommitResult,
    SelectionCommitter,
    merge_selection,
    should_commit,
)
from cultimap.selection.drag_state import DragState, DragStateMachine, ModifierFlags
from cultimap.selection.engine import (
    PixelDragState,
    PointerCapture,
    PointerSample,
    SelectionConfig,
    SelectionEngine,
)
from cultimap.selection.geometry import GridLayout, GridPoint, gap_for_cell_size
from cultimap.selection.promotion import GesturePromotion, PotentialDrag
from cultimap.selection.rect import SelectionRect, resolve_rect

__all__ = [
    "AutoScrollConfig",
    "AutoScrollController",
    "CommitResult",
    "DragState",
    "DragStateMachine",
    "FrameScheduler",
    "GesturePromotion",
    "GridLayout",
    "GridPoint",
    "ManualFrameScheduler",
    "ModifierFlags",
    "PixelDragState",
    "PointerCapture",
    "PointerSample",
    "PotentialDrag",
    "ScrollViewport",
    "SelectionCommitter",
    "SelectionConfig",
    "SelectionEngine",
    "SelectionRect",
    "WindowViewport",
    "compute_scroll_speed",
    "gap_for_cell_size",
    "merge_selection",
    "resolve_rect",
    "should_commit",
]
