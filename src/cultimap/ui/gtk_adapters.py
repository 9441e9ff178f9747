"""
CultiMap - GTK Engine Adapters

GTK/GLib implementations of the selection engine ports:
- GtkFrameScheduler: one-shot callbacks on the widget's frame clock
- ScrolledWindowViewport: vertical scrolling of a Gtk.ScrolledWindow
- DragGestureCapture: routes a Gtk.GestureDrag's updates and end to the engine
"""

from collections.abc import Callable

import gi

gi.require_version("Gtk", "4.0")
from gi.repository import Gdk, GLib, Gtk

from cultimap.constants import FRAME_INTERVAL_MS
from cultimap.selection.drag_state import ModifierFlags
from cultimap.selection.engine import PointerSample


def modifiers_from_state(state: Gdk.ModifierType) -> ModifierFlags:
    """Translate a GDK modifier mask into engine modifier flags."""
    return ModifierFlags(
        ctrl=bool(state & Gdk.ModifierType.CONTROL_MASK),
        meta=bool(state & (Gdk.ModifierType.META_MASK | Gdk.ModifierType.SUPER_MASK)),
        shift=bool(state & Gdk.ModifierType.SHIFT_MASK),
    )


class GtkFrameScheduler:
    """Schedules one callback per display frame.

    Uses the widget's frame clock while it is mapped; an unmapped widget
    gets no frame ticks, so a GLib timeout stands in until it is shown.
    """

    def __init__(self, widget: Gtk.Widget) -> None:
        self._widget = widget
        self._next_handle = 1
        # handle -> ("tick" | "timeout", GTK/GLib id)
        self._sources: dict[int, tuple[str, int]] = {}

    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = self._next_handle
        self._next_handle += 1

        def _fire(*_args) -> bool:
            self._sources.pop(handle, None)
            callback()
            return GLib.SOURCE_REMOVE

        if self._widget.get_mapped():
            source_id = self._widget.add_tick_callback(_fire)
            self._sources[handle] = ("tick", source_id)
        else:
            source_id = GLib.timeout_add(FRAME_INTERVAL_MS, _fire)
            self._sources[handle] = ("timeout", source_id)
        return handle

    def cancel_frame(self, handle: int) -> None:
        entry = self._sources.pop(handle, None)
        if entry is None:
            return
        kind, source_id = entry
        if kind == "tick":
            self._widget.remove_tick_callback(source_id)
        else:
            GLib.source_remove(source_id)

    @property
    def pending(self) -> int:
        return len(self._sources)


class ScrolledWindowViewport:
    """Viewport backed by a Gtk.ScrolledWindow.

    Pointer coordinates are relative to the scrolled window; content
    coordinates are relative to its child at scroll offset zero.
    """

    def __init__(self, scrolled: Gtk.ScrolledWindow) -> None:
        self._scrolled = scrolled

    def edges(self) -> tuple[float, float]:
        return 0.0, float(self._scrolled.get_height())

    def scroll_by(self, delta: float) -> None:
        # Gtk.Adjustment.set_value clamps to [lower, upper - page_size]
        vadj = self._scrolled.get_vadjustment()
        vadj.set_value(vadj.get_value() + delta)

    def to_content(self, x: float, y: float) -> tuple[float, float]:
        hadj = self._scrolled.get_hadjustment()
        vadj = self._scrolled.get_vadjustment()
        return x + hadj.get_value(), y + vadj.get_value()


class DragGestureCapture:
    """Pointer capture built on a Gtk.GestureDrag.

    A drag gesture keeps receiving motion and the release after the
    pointer leaves its widget, so connecting to its signals for the
    duration of a gesture gives engine-wide listeners.
    """

    def __init__(self, gesture: Gtk.GestureDrag) -> None:
        self._gesture = gesture
        self._handler_ids: list[int] = []

    @property
    def is_attached(self) -> bool:
        return bool(self._handler_ids)

    def attach(
        self,
        on_move: Callable[[PointerSample], None],
        on_release: Callable[[PointerSample | None], None],
    ) -> None:
        if self._handler_ids:
            return

        def _on_update(gesture: Gtk.GestureDrag, offset_x: float, offset_y: float) -> None:
            on_move(self._sample(gesture, offset_x, offset_y))

        def _on_end(gesture: Gtk.GestureDrag, offset_x: float, offset_y: float) -> None:
            on_release(self._sample(gesture, offset_x, offset_y))

        self._handler_ids = [
            self._gesture.connect("drag-update", _on_update),
            self._gesture.connect("drag-end", _on_end),
        ]

    def detach(self) -> None:
        for handler_id in self._handler_ids:
            self._gesture.disconnect(handler_id)
        self._handler_ids = []

    @staticmethod
    def _sample(gesture: Gtk.GestureDrag, offset_x: float, offset_y: float) -> PointerSample:
        _ok, start_x, start_y = gesture.get_start_point()
        return PointerSample(
            start_x + offset_x,
            start_y + offset_y,
            modifiers_from_state(gesture.get_current_event_state()),
        )
