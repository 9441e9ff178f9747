"""
CultiMap - Edge Auto-Scroll

While a selection drag is active and the pointer comes within a threshold
of the top or bottom edge of the scrollable viewport, the viewport scrolls
by a per-frame amount proportional to how close the pointer is to the edge.

The loop is cooperative: each frame does O(1) work and asks the scheduler
for the next frame only while the computed speed is non-zero. Only vertical
scrolling is performed.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from cultimap.constants import (
    EDGE_SCROLL_OUTSIDE_SLACK_PX,
    EDGE_SCROLL_THRESHOLD_PX,
    MAX_SCROLL_SPEED_PX,
)
from cultimap.utils.logger import logger


class FrameScheduler(Protocol):
    """Runs a callback once on the next frame."""

    def request_frame(self, callback: Callable[[], None]) -> int:
        """Schedule ``callback`` for the next frame and return a handle."""
        ...

    def cancel_frame(self, handle: int) -> None:
        """Cancel a callback that has not run yet."""
        ...


class ScrollViewport(Protocol):
    """The scrollable area a grid lives in."""

    def edges(self) -> tuple[float, float]:
        """Return the (top, bottom) of the visible area in pointer coordinates."""
        ...

    def scroll_by(self, delta: float) -> None:
        """Scroll vertically; the implementation clamps to its own range."""
        ...

    def to_content(self, x: float, y: float) -> tuple[float, float]:
        """Convert pointer coordinates to grid content coordinates at the current scroll offset."""
        ...


@dataclass(frozen=True)
class AutoScrollConfig:
    """Tuning for edge auto-scroll.

    Attributes:
        edge_threshold: Distance from an edge (px) at which scrolling begins
        max_speed: Scroll distance per frame (px) with the pointer on the edge
        outside_slack: How far past an edge (px) the pointer may go and still scroll
    """

    edge_threshold: float = EDGE_SCROLL_THRESHOLD_PX
    max_speed: float = MAX_SCROLL_SPEED_PX
    outside_slack: float = EDGE_SCROLL_OUTSIDE_SLACK_PX


def compute_scroll_speed(
    pointer_y: float,
    top: float,
    bottom: float,
    config: AutoScrollConfig = AutoScrollConfig(),
) -> float:
    """Signed per-frame scroll speed for a pointer position.

    Negative scrolls up, positive scrolls down, zero means the pointer is
    away from both edges (or too far outside the viewport).

    Args:
        pointer_y: Pointer vertical position
        top: Top edge of the viewport, same coordinate space
        bottom: Bottom edge of the viewport, same coordinate space
        config: Threshold and speed settings

    Returns:
        Scroll delta in pixels for one frame
    """
    threshold = config.edge_threshold
    if threshold <= 0:
        return 0.0

    dist_top = pointer_y - top
    dist_bottom = bottom - pointer_y

    if -config.outside_slack < dist_top < threshold:
        ratio = 1 - (min(max(dist_top, 0.0), threshold) / threshold)
        return -config.max_speed * ratio
    if -config.outside_slack < dist_bottom < threshold:
        ratio = 1 - (min(max(dist_bottom, 0.0), threshold) / threshold)
        return config.max_speed * ratio
    return 0.0


class WindowViewport:
    """Fallback viewport that scrolls the whole top-level window.

    The visible area spans from 0 to the window height in pointer
    coordinates.
    """

    def __init__(
        self,
        get_height: Callable[[], float],
        scroll_by: Callable[[float], None],
        to_content: Callable[[float, float], tuple[float, float]] | None = None,
    ) -> None:
        self._get_height = get_height
        self._scroll_by = scroll_by
        self._to_content = to_content

    def edges(self) -> tuple[float, float]:
        return 0.0, float(self._get_height())

    def scroll_by(self, delta: float) -> None:
        self._scroll_by(delta)

    def to_content(self, x: float, y: float) -> tuple[float, float]:
        if self._to_content is None:
            return x, y
        return self._to_content(x, y)


class ManualFrameScheduler:
    """Frame scheduler driven explicitly by the caller.

    Used where no display frame clock exists (the command line tool);
    ``run_frame()`` plays the role of one display refresh.
    """

    def __init__(self) -> None:
        self._next_handle = 1
        self._pending: dict[int, Callable[[], None]] = {}

    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_frame(self) -> int:
        """Run every callback scheduled before this call.

        Returns:
            Number of callbacks run
        """
        due = list(self._pending.items())
        self._pending.clear()
        for _handle, callback in due:
            callback()
        return len(due)

    def run_until_idle(self, max_frames: int = 1000) -> int:
        """Run frames until nothing reschedules or max_frames is reached."""
        frames = 0
        while self._pending and frames < max_frames:
            self.run_frame()
            frames += 1
        return frames


class AutoScrollController:
    """Self-rescheduling edge scroller for one viewport.

    The controller only scrolls while activated (between drag start and
    drag end). ``stop()`` cancels any pending frame immediately.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        viewport: ScrollViewport,
        config: AutoScrollConfig = AutoScrollConfig(),
    ) -> None:
        self._scheduler = scheduler
        self._viewport = viewport
        self._config = config
        self._active = False
        self._pointer_y: float | None = None
        self._frame_handle: int | None = None
        self.last_speed: float = 0.0
        self.on_scrolled: Callable[[float], None] | None = None

    @property
    def viewport(self) -> ScrollViewport:
        return self._viewport

    @property
    def config(self) -> AutoScrollConfig:
        return self._config

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_running(self) -> bool:
        """True while a frame is scheduled."""
        return self._frame_handle is not None

    def activate(self) -> None:
        self._active = True

    def update_pointer(self, pointer_y: float) -> None:
        """Record the pointer position and start the loop if it is idle."""
        self._pointer_y = pointer_y
        if self._active and self._frame_handle is None:
            self._frame_handle = self._scheduler.request_frame(self._on_frame)

    def stop(self) -> None:
        """Deactivate and cancel any pending frame."""
        self._active = False
        self._pointer_y = None
        self.last_speed = 0.0
        if self._frame_handle is not None:
            self._scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None

    def _on_frame(self) -> None:
        self._frame_handle = None
        if not self._active or self._pointer_y is None:
            return

        top, bottom = self._viewport.edges()
        speed = compute_scroll_speed(self._pointer_y, top, bottom, self._config)
        self.last_speed = speed
        if speed == 0:
            logger.debug("Auto-scroll idle, loop stopped")
            return

        self._viewport.scroll_by(speed)
        if self.on_scrolled:
            self.on_scrolled(speed)

        # on_scrolled may have ended the drag
        if self._active and self._frame_handle is None:
            self._frame_handle = self._scheduler.request_frame(self._on_frame)
