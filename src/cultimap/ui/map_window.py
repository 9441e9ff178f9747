"""
CultiMap - Map Window

Window showing one placement map with zoom controls, a selection mode
toggle and a count of selected items.
"""

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Adw, Gio, Gtk

from cultimap.config import DEFAULT_WINDOW_HEIGHT, DEFAULT_WINDOW_WIDTH
from cultimap.map_model import PlacementMap
from cultimap.ui.placement_grid import PlacementGrid
from cultimap.utils.config_manager import get_config_manager
from cultimap.utils.i18n import _
from cultimap.utils.logger import logger


class MapWindow(Adw.ApplicationWindow):
    """Main window for a placement map.

    UI Layout:
    - Header bar: Selection toggle | Title | Clear + Zoom out/in
    - Content: Placement grid
    - Bottom bar: Selected item count
    """

    def __init__(self, application: Adw.Application, placement_map: PlacementMap) -> None:
        """Initialize the window.

        Args:
            application: Owning application
            placement_map: Map to display
        """
        super().__init__(application=application)

        self._map = placement_map
        self._config_manager = get_config_manager()

        self.set_title(placement_map.name or placement_map.map_id)
        self.set_default_size(
            self._config_manager.get("window.width", DEFAULT_WINDOW_WIDTH),
            self._config_manager.get("window.height", DEFAULT_WINDOW_HEIGHT),
        )

        self._setup_ui()
        self._setup_actions()
        self._update_status()

        self.connect("close-request", self._on_close_request)

    def _setup_ui(self) -> None:
        toolbar = Adw.ToolbarView()

        header = Adw.HeaderBar()
        self._select_toggle = Gtk.ToggleButton()
        self._select_toggle.set_icon_name("selection-mode-symbolic")
        self._select_toggle.set_tooltip_text(_("Select items"))
        self._select_toggle.connect("toggled", self._on_select_toggled)
        header.pack_start(self._select_toggle)

        self._clear_button = Gtk.Button.new_from_icon_name("edit-clear-all-symbolic")
        self._clear_button.set_tooltip_text(_("Clear selection"))
        self._clear_button.connect("clicked", lambda *_: self._grid.deselect_all())
        header.pack_start(self._clear_button)

        zoom_in = Gtk.Button.new_from_icon_name("zoom-in-symbolic")
        zoom_in.set_tooltip_text(_("Zoom in"))
        zoom_in.set_action_name("win.zoom-in")
        header.pack_end(zoom_in)

        zoom_out = Gtk.Button.new_from_icon_name("zoom-out-symbolic")
        zoom_out.set_tooltip_text(_("Zoom out"))
        zoom_out.set_action_name("win.zoom-out")
        header.pack_end(zoom_out)

        toolbar.add_top_bar(header)

        self._grid = PlacementGrid(self._map, self._config_manager)
        self._grid.connect("selection-changed", self._on_selection_changed)
        self._grid.connect("selection-mode-changed", self._on_selection_mode_changed)
        self._grid.connect("item-activated", self._on_item_activated)
        toolbar.set_content(self._grid)

        self._status_label = Gtk.Label()
        self._status_label.add_css_class("dim-label")
        self._status_label.set_margin_top(6)
        self._status_label.set_margin_bottom(6)
        toolbar.add_bottom_bar(self._status_label)

        self.set_content(toolbar)

    def _setup_actions(self) -> None:
        zoom_in_action = Gio.SimpleAction.new("zoom-in", None)
        zoom_in_action.connect("activate", lambda *_: self._grid.zoom_in())
        self.add_action(zoom_in_action)

        zoom_out_action = Gio.SimpleAction.new("zoom-out", None)
        zoom_out_action.connect("activate", lambda *_: self._grid.zoom_out())
        self.add_action(zoom_out_action)

    @property
    def grid(self) -> PlacementGrid:
        return self._grid

    def _update_status(self) -> None:
        count = len(self._grid.get_selected_ids())
        self._clear_button.set_sensitive(count > 0)
        if self._grid.selection_mode:
            self._status_label.set_label(_("{0} of {1} selected").format(count, len(self._map.items)))
        else:
            self._status_label.set_label(
                _("{0} items, {1} x {2}").format(len(self._map.items), self._map.rows, self._map.cols)
            )

    def _on_select_toggled(self, button: Gtk.ToggleButton) -> None:
        self._grid.set_selection_mode(button.get_active())

    def _on_selection_changed(self, _grid: PlacementGrid) -> None:
        self._update_status()

    def _on_selection_mode_changed(self, _grid: PlacementGrid, active: bool) -> None:
        if self._select_toggle.get_active() != active:
            self._select_toggle.set_active(active)
        self._update_status()

    def _on_item_activated(self, _grid: PlacementGrid, item_id: str) -> None:
        logger.info(f"Item activated: {item_id}")

    def _on_close_request(self, _window: Gtk.Window) -> bool:
        self._config_manager.set("window.width", self.get_width(), save_immediately=False)
        self._config_manager.set("window.height", self.get_height())
        return False
