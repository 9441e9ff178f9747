"""
CultiMap - Selection Engine

Host-facing facade that connects pointer events to the coordinate mapper,
the drag state machine, edge auto-scroll, click-drag promotion and the
committer. One engine instance serves one grid widget and is the single
owner of the gesture state; the pixel overlay and the cell highlight are
both read from it.

Typical host wiring::

    engine = SelectionEngine(
        rows=map.rows, cols=map.cols, cell_size=80,
        lookup=map.item_at,
        get_selection=lambda: selected,
        on_selection_change=apply_selection,
        scheduler=frame_scheduler,
        viewport=viewport,
        capture=capture,
    )
    # press on the grid:
    engine.pointer_down(PointerSample(x, y, modifiers))
    # moves/release arrive through the capture while a gesture is live
"""

from collections.abc import Callable, Set
from dataclasses import dataclass
from typing import Protocol

from cultimap.constants import (
    EDGE_SCROLL_OUTSIDE_SLACK_PX,
    EDGE_SCROLL_THRESHOLD_PX,
    GAP_SIZE_THRESHOLD_PX,
    LARGE_GAP_PX,
    MAX_SCROLL_SPEED_PX,
    PROMOTION_DISTANCE_PX,
    SMALL_GAP_PX,
)
from cultimap.selection.auto_scroll import (
    AutoScrollConfig,
    AutoScrollController,
    FrameScheduler,
    ScrollViewport,
)
from cultimap.selection.committer import (
    CommitPolicy,
    CommitResult,
    ItemLookup,
    SelectionCommitter,
    should_commit,
)
from cultimap.selection.drag_state import DragState, DragStateMachine, ModifierFlags
from cultimap.selection.geometry import GridLayout, GridPoint
from cultimap.selection.promotion import GesturePromotion
from cultimap.selection.rect import SelectionRect
from cultimap.utils.exceptions import ConfigurationError
from cultimap.utils.logger import logger


@dataclass(frozen=True)
class PointerSample:
    """Pointer position in viewport (client) coordinates plus modifier state."""

    x: float
    y: float
    modifiers: ModifierFlags = ModifierFlags()


@dataclass(frozen=True)
class PixelDragState:
    """Continuous drag box in grid content coordinates, for smooth overlays."""

    start_x: float
    start_y: float
    current_x: float
    current_y: float

    def bounds(self) -> tuple[float, float, float, float]:
        """Return (x, y, width, height) of the box."""
        x = min(self.start_x, self.current_x)
        y = min(self.start_y, self.current_y)
        return x, y, abs(self.current_x - self.start_x), abs(self.current_y - self.start_y)


class PointerCapture(Protocol):
    """Delivers pointer moves and the release at the widest scope the host has.

    The engine attaches once when a gesture begins and detaches once when it
    ends, so moves and the release are seen even after the pointer leaves
    the grid widget.
    """

    def attach(
        self,
        on_move: Callable[[PointerSample], None],
        on_release: Callable[[PointerSample | None], None],
    ) -> None: ...

    def detach(self) -> None: ...


@dataclass(frozen=True)
class SelectionConfig:
    """Host-overridable tuning values."""

    edge_threshold: float = EDGE_SCROLL_THRESHOLD_PX
    max_scroll_speed: float = MAX_SCROLL_SPEED_PX
    outside_slack: float = EDGE_SCROLL_OUTSIDE_SLACK_PX
    promotion_distance: float = PROMOTION_DISTANCE_PX
    gap_threshold: float = GAP_SIZE_THRESHOLD_PX
    small_gap: int = SMALL_GAP_PX
    large_gap: int = LARGE_GAP_PX

    def __post_init__(self) -> None:
        for name in ("edge_threshold", "max_scroll_speed", "promotion_distance"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationError(name, f"must be a positive number, got {value!r}")
        if self.outside_slack < 0:
            raise ConfigurationError("outside_slack", "must not be negative")

    @property
    def auto_scroll(self) -> AutoScrollConfig:
        return AutoScrollConfig(
            edge_threshold=self.edge_threshold,
            max_speed=self.max_scroll_speed,
            outside_slack=self.outside_slack,
        )

    def layout(self, cell_size: float) -> GridLayout:
        return GridLayout(
            cell_size=cell_size,
            gap_threshold=self.gap_threshold,
            small_gap=self.small_gap,
            large_gap=self.large_gap,
        )

    @classmethod
    def from_settings(cls, config_manager) -> "SelectionConfig":
        """Build from the ``selection`` section of a ConfigManager.

        Invalid stored values are logged and the defaults are used instead.
        """
        defaults = cls()
        try:
            return cls(
                edge_threshold=config_manager.get(
                    "selection.edge_threshold", defaults.edge_threshold
                ),
                max_scroll_speed=config_manager.get(
                    "selection.max_scroll_speed", defaults.max_scroll_speed
                ),
                promotion_distance=config_manager.get(
                    "selection.promotion_distance", defaults.promotion_distance
                ),
            )
        except ConfigurationError as e:
            logger.error(f"Invalid selection settings, using defaults: {e}")
            return defaults


class SelectionEngine:
    """Rectangular drag selection over a zoomable rows x cols grid."""

    def __init__(
        self,
        *,
        rows: int,
        cols: int,
        cell_size: float,
        lookup: ItemLookup,
        get_selection: Callable[[], Set],
        on_selection_change: Callable[[set], None] | None,
        scheduler: FrameScheduler,
        viewport: ScrollViewport,
        capture: PointerCapture | None = None,
        config: SelectionConfig = SelectionConfig(),
        on_selection_mode_change: Callable[[bool], None] | None = None,
        selection_mode: bool = False,
        promote_clicks: bool = True,
        policy: CommitPolicy = should_commit,
    ) -> None:
        """Initialize the engine.

        Args:
            rows: Number of grid rows
            cols: Number of grid columns
            cell_size: Current cell size in pixels
            lookup: (row, col) -> item id or None, used only at commit time
            get_selection: Returns the host's current selection
            on_selection_change: Receives the proposed next selection
            scheduler: Frame scheduler for auto-scroll
            viewport: Scrollable area hosting the grid (or a WindowViewport)
            capture: Global pointer listener registration, if the host has one
            config: Tuning values
            on_selection_mode_change: Called when the engine turns selection mode on
            selection_mode: Initial selection mode
            promote_clicks: Outside selection mode, wait for the promotion
                distance before starting a drag; when False a press starts
                the drag immediately and the commit policy filters clicks
            policy: Commit policy for released gestures
        """
        self._rows = rows
        self._cols = cols
        self._config = config
        self._layout = config.layout(cell_size)
        self._get_selection = get_selection
        self._viewport = viewport
        self._capture = capture
        self._captured = False
        self._selection_mode = selection_mode
        self._promote_clicks = promote_clicks
        self._disposed = False

        self.on_selection_mode_change = on_selection_mode_change
        self.on_changed: Callable[[], None] | None = None
        # Plain click (released before promotion) on a cell inside the grid
        self.on_click: Callable[[GridPoint], None] | None = None
        self.on_commit: Callable[[CommitResult], None] | None = None

        self._machine = DragStateMachine()
        self._machine.on_changed = self._on_state_changed
        self._committer = SelectionCommitter(lookup, on_selection_change, policy)
        self._promotion = GesturePromotion(config.promotion_distance)
        self._auto_scroll = AutoScrollController(scheduler, viewport, config.auto_scroll)
        self._auto_scroll.on_scrolled = self._on_auto_scrolled

        self._pixel_state: PixelDragState | None = None
        self._last_sample: PointerSample | None = None
        self._moved = False

    # --- Host inputs ---

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def layout(self) -> GridLayout:
        return self._layout

    @property
    def config(self) -> SelectionConfig:
        return self._config

    def set_dimensions(self, rows: int, cols: int) -> None:
        self._rows = rows
        self._cols = cols

    def set_cell_size(self, cell_size: float) -> None:
        if cell_size != self._layout.cell_size:
            self._layout = self._layout.with_cell_size(cell_size)

    @property
    def selection_mode(self) -> bool:
        return self._selection_mode

    def set_selection_mode(self, active: bool) -> None:
        """Mirror the host's selection mode.

        Turning it off cancels any gesture in progress without committing.
        """
        if active == self._selection_mode:
            return
        self._selection_mode = active
        if not active:
            self.cancel()

    @property
    def auto_scroll(self) -> AutoScrollController:
        return self._auto_scroll

    @property
    def promotion(self) -> GesturePromotion:
        return self._promotion

    # --- Gesture state ---

    @property
    def state(self) -> DragState:
        return self._machine.state

    @property
    def is_dragging(self) -> bool:
        return self._machine.is_dragging

    @property
    def drag_start(self) -> GridPoint | None:
        return self._machine.drag_start

    @property
    def drag_end(self) -> GridPoint | None:
        return self._machine.drag_end

    @property
    def is_additive(self) -> bool:
        return self._machine.is_additive

    @property
    def pixel_state(self) -> PixelDragState | None:
        return self._pixel_state

    @property
    def is_capturing(self) -> bool:
        return self._captured

    @property
    def masks_prior_selection(self) -> bool:
        """True while a replacing drag is live; hosts hide the old selection."""
        return self._machine.is_dragging and not self._machine.is_additive

    def get_selection_rect(self) -> SelectionRect | None:
        return self._machine.get_selection_rect()

    def is_in_drag_box(self, row: int, col: int) -> bool:
        return self._machine.is_in_drag_box(row, col)

    # --- Cell-level API ---

    def start(self, row: int, col: int, modifiers: ModifierFlags | bool = False) -> bool:
        """Start a drag at a cell (clamped into the grid)."""
        if self._disposed:
            return False
        point = self._clamp(row, col)
        if not self._machine.start(point.row, point.col, modifiers):
            return False
        self._auto_scroll.activate()
        self._attach_capture()
        return True

    def extend(self, row: int, col: int) -> bool:
        if not self._machine.is_dragging:
            return False
        point = self._clamp(row, col)
        return self._machine.extend(point.row, point.col)

    def end(self) -> CommitResult | None:
        """Release the drag and commit it.

        Returns:
            The commit outcome, or None when no drag was in progress
        """
        if not self._machine.end():
            return None
        press = self._pixel_state
        self._auto_scroll.stop()
        self._pixel_state = None
        self._detach_capture()

        result = self._committer.commit(
            self._machine,
            self._get_selection(),
            self._selection_mode,
            moved=self._moved,
        )
        if result and result.committed and not self._selection_mode:
            self._enter_selection_mode()
        if result and not result.committed and not result.moved and press is not None:
            # Press and release on one cell that the policy treated as a click
            self._emit_click(press.start_x, press.start_y)
        if result and self.on_commit:
            self.on_commit(result)
        return result

    def reset(self) -> None:
        """Clear the gesture without committing.

        Auto-scroll stops and the pointer capture is released along with the
        drag state, so a reset never leaves a scroll loop running.
        """
        self.cancel()

    def cancel(self) -> None:
        """Abandon any gesture without committing."""
        self._promotion.cancel()
        self._auto_scroll.stop()
        self._pixel_state = None
        self._last_sample = None
        self._machine.reset()
        self._detach_capture()

    def dispose(self) -> None:
        """Release everything; the engine ignores input afterwards."""
        self.cancel()
        self._disposed = True

    # --- Pointer-level API ---

    def pointer_down(self, sample: PointerSample) -> None:
        """Handle a primary-button press inside the grid."""
        if self._disposed:
            return
        if self._machine.is_dragging or self._promotion.is_armed:
            logger.debug("Press ignored, a gesture is already in progress")
            return

        content_x, content_y = self._viewport.to_content(sample.x, sample.y)
        self._moved = False
        self._last_sample = sample

        if not self._selection_mode and self._promote_clicks:
            self._promotion.arm(content_x, content_y, sample.x, sample.y, sample.modifiers)
            self._attach_capture()
            return

        self._begin_drag(content_x, content_y, sample.modifiers)

    def pointer_move(self, sample: PointerSample) -> None:
        """Handle a pointer move delivered while a gesture is live."""
        if self._disposed:
            return

        if self._promotion.is_armed:
            self._moved = True
            promoted = self._promotion.observe(sample.x, sample.y)
            if promoted is None:
                return
            self._enter_selection_mode()
            self._begin_drag(promoted.content_x, promoted.content_y, promoted.modifiers)

        if not self._machine.is_dragging:
            return

        self._moved = True
        self._track(sample)

    def pointer_up(self, sample: PointerSample | None = None) -> CommitResult | None:
        """Handle the release.

        Returns:
            The commit outcome of a selection drag, or None for a plain
            click (release before promotion) or when nothing was live
        """
        pending = self._promotion.pending
        if self._promotion.cancel():
            self._detach_capture()
            self._emit_click(pending.content_x, pending.content_y)
            return None
        if not self._machine.is_dragging:
            self._auto_scroll.stop()
            self._detach_capture()
            return None
        if sample is not None and sample != self._last_sample:
            self._track(sample)
        return self.end()

    # --- Internals ---

    def _clamp(self, row: int, col: int) -> GridPoint:
        return GridPoint(
            max(0, min(row, max(0, self._rows - 1))),
            max(0, min(col, max(0, self._cols - 1))),
        )

    def _begin_drag(self, content_x: float, content_y: float, modifiers: ModifierFlags) -> None:
        self._pixel_state = PixelDragState(content_x, content_y, content_x, content_y)
        row, col = self._layout.raw_cell_at(content_x, content_y)
        self.start(row, col, modifiers)

    def _track(self, sample: PointerSample) -> None:
        """Map a pointer sample with the current scroll offset and extend the drag."""
        self._last_sample = sample
        content_x, content_y = self._viewport.to_content(sample.x, sample.y)
        if self._pixel_state is not None:
            self._pixel_state = PixelDragState(
                self._pixel_state.start_x, self._pixel_state.start_y, content_x, content_y
            )
        point = self._layout.cell_at(content_x, content_y, self._rows, self._cols)
        self._machine.extend(point.row, point.col)
        self._auto_scroll.update_pointer(sample.y)
        if self.on_changed:
            self.on_changed()

    def _on_auto_scrolled(self, _delta: float) -> None:
        # Content moved under a stationary pointer
        if self._machine.is_dragging and self._last_sample is not None:
            self._track(self._last_sample)

    def _emit_click(self, content_x: float, content_y: float) -> None:
        if self.on_click is None:
            return
        if self._layout.is_inside(content_x, content_y, self._rows, self._cols):
            row, col = self._layout.raw_cell_at(content_x, content_y)
            self.on_click(GridPoint(row, col))

    def _on_state_changed(self, _state: DragState) -> None:
        if self.on_changed:
            self.on_changed()

    def _enter_selection_mode(self) -> None:
        if self._selection_mode:
            return
        self._selection_mode = True
        logger.debug("Selection mode enabled by drag")
        if self.on_selection_mode_change:
            self.on_selection_mode_change(True)

    def _attach_capture(self) -> None:
        if self._captured or self._capture is None:
            return
        self._capture.attach(self.pointer_move, self.pointer_up)
        self._captured = True

    def _detach_capture(self) -> None:
        if not self._captured or self._capture is None:
            return
        self._capture.detach()
        self._captured = False
