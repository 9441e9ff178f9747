"""
CultiMap - Placement Grid Widget

A scrollable, zoomable grid of placed items with rectangular drag selection,
edge auto-scroll and keyboard shortcuts. All gesture logic lives in the
SelectionEngine; this widget only draws it and feeds it pointer events.
"""

import gi

gi.require_version("Gtk", "4.0")
from gi.repository import Gdk, GObject, Gtk

from cultimap.map_model import PlacementMap, position_label, row_label
from cultimap.selection import CommitResult, GridPoint, PointerSample, SelectionEngine
from cultimap.selection.engine import SelectionConfig
from cultimap.ui.gtk_adapters import (
    DragGestureCapture,
    GtkFrameScheduler,
    ScrolledWindowViewport,
    modifiers_from_state,
)
from cultimap.utils.config_manager import ConfigManager, get_config_manager
from cultimap.utils.i18n import _
from cultimap.utils.logger import logger
from cultimap.zoom import ZoomModel


class PlacementGrid(Gtk.ScrolledWindow):
    """Grid display of a placement map.

    Features:
    - Drag a rectangle to select every item inside it
    - Ctrl/Meta/Shift + drag to add to the current selection
    - Auto-scroll while dragging near the top or bottom edge
    - Click an item to activate it (outside selection mode)
    - Zoom in steps, remembered per map
    """

    __gsignals__ = {
        "selection-changed": (GObject.SignalFlags.RUN_FIRST, None, ()),
        "item-activated": (GObject.SignalFlags.RUN_FIRST, None, (str,)),
        "selection-mode-changed": (GObject.SignalFlags.RUN_FIRST, None, (bool,)),
    }

    def __init__(
        self,
        placement_map: PlacementMap,
        config_manager: ConfigManager | None = None,
    ) -> None:
        """Initialize the grid.

        Args:
            placement_map: Map to display
            config_manager: Settings store for tuning values and zoom
        """
        super().__init__()

        self._map = placement_map
        self._config_manager = config_manager or get_config_manager()
        self._selected: set[str] = set()
        self._zoom = ZoomModel.for_map(placement_map.map_id, placement_map.cols, self._config_manager)

        self.set_policy(Gtk.PolicyType.AUTOMATIC, Gtk.PolicyType.AUTOMATIC)
        self.set_vexpand(True)
        self.set_hexpand(True)
        self.set_focusable(True)

        self._setup_ui()
        self._setup_engine()
        self._setup_keyboard_shortcuts()
        self._update_content_size()

        self.connect("unrealize", self._on_unrealize)

    def _setup_ui(self) -> None:
        """Set up the drawing area."""
        self._area = Gtk.DrawingArea()
        self._area.set_draw_func(self._draw_grid)
        self._area.set_halign(Gtk.Align.START)
        self._area.set_valign(Gtk.Align.START)
        self._area.set_accessible_role(Gtk.AccessibleRole.GRID)
        self._area.update_property(
            [Gtk.AccessibleProperty.LABEL],
            [_("Placement map. Drag to select, Ctrl+A select all, Escape to finish selecting")],
        )
        self.set_child(self._area)

    def _setup_engine(self) -> None:
        """Create the selection engine and its GTK ports."""
        # Drag gesture on the scrolled window: coordinates are viewport-relative
        self._gesture = Gtk.GestureDrag()
        self._gesture.set_button(1)
        self._gesture.set_propagation_phase(Gtk.PropagationPhase.BUBBLE)
        self._gesture.connect("drag-begin", self._on_drag_begin)
        self.add_controller(self._gesture)

        self._engine = SelectionEngine(
            rows=self._map.rows,
            cols=self._map.cols,
            cell_size=self._zoom.cell_size,
            lookup=self._map.item_at,
            get_selection=lambda: self._selected,
            on_selection_change=self._apply_selection,
            scheduler=GtkFrameScheduler(self),
            viewport=ScrolledWindowViewport(self),
            capture=DragGestureCapture(self._gesture),
            config=SelectionConfig.from_settings(self._config_manager),
            on_selection_mode_change=self._on_engine_selection_mode,
        )
        self._engine.on_changed = self._area.queue_draw
        self._engine.on_click = self._on_cell_clicked
        self._engine.on_commit = self._on_commit

    def _setup_keyboard_shortcuts(self) -> None:
        """Set up keyboard event handling."""
        key_controller = Gtk.EventControllerKey()
        key_controller.connect("key-pressed", self._on_key_pressed)
        self.add_controller(key_controller)

    # --- Public API ---

    @property
    def engine(self) -> SelectionEngine:
        return self._engine

    @property
    def selection_mode(self) -> bool:
        return self._engine.selection_mode

    def set_selection_mode(self, active: bool) -> None:
        """Enter or leave selection mode; leaving clears the selection."""
        if active == self._engine.selection_mode:
            return
        self._engine.set_selection_mode(active)
        if not active and self._selected:
            self._apply_selection(set())
        self.emit("selection-mode-changed", active)
        self._area.queue_draw()

    def get_selected_ids(self) -> list[str]:
        return sorted(self._selected)

    def select_all(self) -> None:
        self._apply_selection(self._map.all_item_ids())
        if not self._engine.selection_mode:
            self.set_selection_mode(True)

    def deselect_all(self) -> None:
        self._apply_selection(set())

    @property
    def cell_size(self) -> int:
        return self._zoom.cell_size

    def zoom_in(self) -> None:
        if self._zoom.zoom_in():
            self._on_zoom_changed()

    def zoom_out(self) -> None:
        if self._zoom.zoom_out():
            self._on_zoom_changed()

    # --- Engine callbacks ---

    def _apply_selection(self, selection: set) -> None:
        if selection == self._selected:
            return
        self._selected = set(selection)
        logger.debug(f"Selection now has {len(self._selected)} items")
        self.emit("selection-changed")
        self._area.queue_draw()

    def _on_engine_selection_mode(self, active: bool) -> None:
        self.emit("selection-mode-changed", active)

    def _on_cell_clicked(self, point: GridPoint) -> None:
        item_id = self._map.item_at(point.row, point.col)
        if item_id is not None:
            logger.debug(f"Activated {item_id} at {position_label(point.row, point.col)}")
            self.emit("item-activated", item_id)

    def _on_commit(self, result: CommitResult) -> None:
        # A motionless click on an empty cell while selecting ends selection mode
        if (
            result.was_selection_mode_active
            and not result.moved
            and result.is_single_cell
            and not result.candidates
        ):
            self.set_selection_mode(False)

    # --- Event handlers ---

    def _on_drag_begin(self, gesture: Gtk.GestureDrag, x: float, y: float) -> None:
        self.grab_focus()
        gesture.set_state(Gtk.EventSequenceState.CLAIMED)
        state = gesture.get_current_event_state()
        self._engine.pointer_down(PointerSample(x, y, modifiers_from_state(state)))

    def _on_key_pressed(
        self,
        controller: Gtk.EventControllerKey,
        keyval: int,
        _keycode: int,
        state: Gdk.ModifierType,
    ) -> bool:
        """Handle keyboard events."""
        ctrl = state & Gdk.ModifierType.CONTROL_MASK

        if keyval == Gdk.KEY_a and ctrl:
            self.select_all()
            return True
        elif keyval == Gdk.KEY_Escape:
            if self._engine.selection_mode or self._engine.is_dragging:
                self._engine.cancel()
                self.set_selection_mode(False)
                self._area.queue_draw()
                return True

        return False

    def _on_zoom_changed(self) -> None:
        self._engine.set_cell_size(self._zoom.cell_size)
        self._zoom.save(self._map.map_id, self._config_manager)
        self._update_content_size()

    def _on_unrealize(self, _widget: Gtk.Widget) -> None:
        self._engine.cancel()

    def _update_content_size(self) -> None:
        width, height = self._engine.layout.content_size(self._map.rows, self._map.cols)
        self._area.set_content_width(int(width))
        self._area.set_content_height(int(height))
        self._area.queue_draw()

    # --- Drawing ---

    def _draw_grid(self, area, cr, width, height) -> None:
        layout = self._engine.layout
        rows, cols = self._map.rows, self._map.cols
        size = layout.cell_size
        hide_selection = self._engine.masks_prior_selection

        # Headers
        cr.set_source_rgba(0.5, 0.5, 0.5, 1.0)
        cr.set_font_size(min(12, max(8, size / 3)))
        label_base = layout.header_size + layout.padding + layout.border
        for col in range(cols):
            x, _y = layout.cell_origin(0, col)
            cr.move_to(x + 2, label_base - 6)
            cr.show_text(str(col + 1))
        for row in range(rows):
            _x, y = layout.cell_origin(row, 0)
            cr.move_to(layout.padding + layout.border + 4, y + min(size, 14))
            cr.show_text(row_label(row))

        # Cells
        for row in range(rows):
            for col in range(cols):
                x, y, w, h = layout.cell_rect(row, col)
                item_id = self._map.item_at(row, col)
                in_box = self._engine.is_in_drag_box(row, col)
                selected = item_id in self._selected and not hide_selection

                if in_box:
                    cr.set_source_rgba(0.2, 0.4, 0.8, 0.45)
                elif selected:
                    cr.set_source_rgba(0.2, 0.4, 0.8, 0.8)
                elif item_id is not None:
                    cr.set_source_rgba(0.3, 0.6, 0.3, 0.8)
                else:
                    cr.set_source_rgba(0.5, 0.5, 0.5, 0.15)
                cr.rectangle(x, y, w, h)
                cr.fill()

        # Drag overlay follows the pointer, not the cell boundaries
        pixel_state = self._engine.pixel_state
        if pixel_state is not None:
            x, y, w, h = pixel_state.bounds()
            cr.set_source_rgba(0.2, 0.4, 0.8, 0.3)
            cr.rectangle(x, y, w, h)
            cr.fill_preserve()
            cr.set_source_rgba(0.2, 0.4, 0.8, 0.8)
            cr.set_line_width(1)
            cr.stroke()
