"""
CultiMap - Plant placement maps with rectangular drag selection

This package provides a GTK4 application for browsing grid-based placement
maps and selecting the items in them by dragging rectangles.
"""

import locale
import sys

__version__ = "1.0.0"
__license__ = "GPL-3.0"


def setup_i18n() -> None:
    """Initialize internationalization."""
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        # Fallback to C locale if system locale is not properly configured
        locale.setlocale(locale.LC_ALL, "C")


def _check_gtk_dependencies() -> bool:
    """Check if GTK dependencies are available.

    Returns:
        True if dependencies are met, False otherwise
    """
    try:
        import gi

        gi.require_version("Gtk", "4.0")
        gi.require_version("Adw", "1")

        from gi.repository import (
            Adw,  # noqa: F401
            Gtk,  # noqa: F401
        )

        return True
    except (ImportError, ValueError) as e:
        print(f"Error: Missing dependencies: {e}", file=sys.stderr)
        print("Please make sure GTK4 and libadwaita are installed", file=sys.stderr)
        return False


def main() -> int:
    """Main entry point for the application.

    Returns:
        The application exit code.
    """
    setup_i18n()

    from cultimap.config import setup_environment
    from cultimap.utils.logger import logger

    args = setup_environment(sys.argv[1:])

    if not _check_gtk_dependencies():
        return 1

    from cultimap.application import CultiMapApp

    app = CultiMapApp()
    argv = [sys.argv[0]]
    if args.map_file:
        logger.debug(f"Map provided in arguments: {args.map_file}")
        argv.append(args.map_file)
    return app.run(argv)
