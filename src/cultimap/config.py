#!/usr/bin/env python3
"""
CultiMap - Configuration Module

This module contains all configuration constants and paths used by the application.
"""

import argparse
import logging
import os
import sys
from typing import Final

from cultimap.utils.i18n import _

# ============================================================================
# Application Constants
# ============================================================================

APP_NAME: Final[str] = "CultiMap"
APP_ID: Final[str] = "org.cultimap.CultiMap"
APP_VERSION: Final[str] = "1.0.0"
APP_DESCRIPTION: Final[str] = _("Select and act on plants placed in zoomable grid maps")
APP_ICON_NAME: Final[str] = "cultimap"


# ============================================================================
# Configuration Directory
# ============================================================================

CONFIG_DIR: Final[str] = os.path.expanduser("~/.config/cultimap")


# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL: int = logging.INFO
LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME: Final[str] = "CultiMap"


# ============================================================================
# Window Configuration
# ============================================================================

DEFAULT_WINDOW_WIDTH: Final[int] = 1000
DEFAULT_WINDOW_HEIGHT: Final[int] = 700


# ============================================================================
# Keyboard Shortcuts
# ============================================================================

SHORTCUTS: Final[dict[str, str]] = {
    "zoom-in": "<Control>plus",
    "zoom-out": "<Control>minus",
    "quit": "<Control>q",
}


def parse_command_line(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Parsed command line arguments.
    """
    parser = argparse.ArgumentParser(description=APP_DESCRIPTION)
    parser.add_argument(
        "-v",
        "--version",
        action="store_true",
        help=_("Print version information and exit"),
    )
    parser.add_argument("-d", "--debug", action="store_true", help=_("Enable debug mode"))
    parser.add_argument("map_file", nargs="?", default=None, help=_("Placement map to open"))

    return parser.parse_args(argv)


def setup_environment(argv: list[str] | None = None) -> argparse.Namespace:
    """Configure environment variables and settings.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Parsed command line arguments.
    """
    global LOG_LEVEL

    args = parse_command_line(argv)

    if args.version:
        print(f"{APP_NAME} {APP_VERSION}")
        sys.exit(0)

    if args.debug:
        LOG_LEVEL = logging.DEBUG
        from cultimap.utils.logger import set_log_level

        set_log_level(logging.DEBUG)

    os.makedirs(CONFIG_DIR, exist_ok=True)

    return args
