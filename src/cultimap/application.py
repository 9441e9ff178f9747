"""
CultiMap - Application Module

This module contains the main application class for the CultiMap application.
"""

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Adw, Gio, GLib, Gtk

from cultimap.config import APP_ID, APP_NAME, APP_VERSION, SHORTCUTS
from cultimap.map_model import PlacementMap
from cultimap.ui.map_window import MapWindow
from cultimap.utils.exceptions import CultiMapError
from cultimap.utils.i18n import _
from cultimap.utils.logger import logger


class CultiMapApp(Adw.Application):
    """Application class for CultiMap."""

    def __init__(self) -> None:
        """Initialize the application."""
        super().__init__(application_id=APP_ID, flags=Gio.ApplicationFlags.HANDLES_OPEN)

        self.add_main_option(
            "version",
            ord("v"),
            GLib.OptionFlags.NONE,
            GLib.OptionArg.NONE,
            _("Print version information and exit"),
            None,
        )

        self.connect("activate", self.on_activate)
        self.connect("open", self.on_open)
        self.connect("handle-local-options", self.on_handle_local_options)

        self._setup_actions()

    def _setup_actions(self) -> None:
        """Set up application actions."""
        open_action = Gio.SimpleAction.new("open", None)
        open_action.connect("activate", lambda *_: self._choose_map())
        self.add_action(open_action)

        quit_action = Gio.SimpleAction.new("quit", None)
        quit_action.connect("activate", lambda *_: self.quit())
        self.add_action(quit_action)

        self.set_accels_for_action("app.open", ["<Control>o"])
        self.set_accels_for_action("app.quit", [SHORTCUTS.get("quit", "<Control>q")])
        self.set_accels_for_action("win.zoom-in", [SHORTCUTS.get("zoom-in", "<Control>plus")])
        self.set_accels_for_action("win.zoom-out", [SHORTCUTS.get("zoom-out", "<Control>minus")])

    def on_handle_local_options(self, app: Adw.Application, options: GLib.VariantDict) -> int:
        """Handle command line options.

        Returns:
            Integer value indicating if processing should continue
        """
        if options.contains("version"):
            print(f"{APP_NAME} {APP_VERSION}")
            return 0
        return -1

    def on_activate(self, app: Adw.Application) -> None:
        """Present the active window, or ask for a map when there is none."""
        win = self.get_active_window()
        if win:
            win.present()
            return
        self._choose_map()

    def on_open(self, app: Adw.Application, files: list, n_files: int, _hint: str) -> None:
        """Open placement maps given on the command line."""
        for gfile in files:
            path = gfile.get_path()
            if path:
                self.open_map(path)
        logger.info(_("Opened {0} file(s)").format(n_files))

    def open_map(self, path: str) -> MapWindow | None:
        """Load a map file and show it in a new window."""
        try:
            placement_map = PlacementMap.load(path)
        except CultiMapError as e:
            logger.error(f"{_('Error opening map')}: {e}")
            self._show_error(_("Could not open map"), str(e))
            return None

        win = MapWindow(self, placement_map)
        win.present()
        return win

    def _choose_map(self) -> None:
        dialog = Gtk.FileDialog()
        dialog.set_title(_("Open Placement Map"))

        json_filter = Gtk.FileFilter()
        json_filter.set_name(_("Placement maps"))
        json_filter.add_pattern("*.json")
        filters = Gio.ListStore.new(Gtk.FileFilter)
        filters.append(json_filter)
        dialog.set_filters(filters)

        dialog.open(self.get_active_window(), None, self._on_map_chosen)

    def _on_map_chosen(self, dialog: Gtk.FileDialog, result: Gio.AsyncResult) -> None:
        try:
            gfile = dialog.open_finish(result)
        except GLib.Error as e:
            # Dismissing the dialog also lands here
            logger.debug(f"No map chosen: {e.message}")
            return
        if gfile and gfile.get_path():
            self.open_map(gfile.get_path())

    def _show_error(self, message: str, detail: str) -> None:
        error_dialog = Gtk.AlertDialog()
        error_dialog.set_message(message)
        error_dialog.set_detail(detail)
        error_dialog.show(self.get_active_window())
