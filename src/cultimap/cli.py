#!/usr/bin/env python3
"""
CultiMap CLI - drag selections on placement maps from the terminal.

Usage:
    python -m cultimap.cli <command> [options]

Commands:
    select      Run a rectangular drag over a map and print the selection
    info        Show map dimensions and item count

Examples:
    # Drag from cell A1 to B2
    cultimap-cli select map.json --from A1 --to B2

    # Add to an existing selection
    cultimap-cli select map.json --from C3 --to C5 --additive --prior p1 p2

    # Replay a pointer drag in content pixels at a given zoom
    cultimap-cli select map.json --pixels 70,70:200,160 --cell-size 80

    # Info
    cultimap-cli info map.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from cultimap.map_model import PlacementMap, parse_position, position_label
from cultimap.selection import (
    CommitResult,
    ManualFrameScheduler,
    ModifierFlags,
    PointerSample,
    SelectionEngine,
    WindowViewport,
)
from cultimap.utils.exceptions import CultiMapError
from cultimap.utils.i18n import _
from cultimap.utils.logger import set_log_level
from cultimap.zoom import default_cell_size

# ---------------------------------------------------------------------------
# Argument parsers (shared)
# ---------------------------------------------------------------------------


def _parse_pixel_drag(text: str) -> tuple[tuple[float, float], tuple[float, float]]:
    """Parse "X1,Y1:X2,Y2" into a pair of content pixel points.

    Raises:
        ValueError: If the text is malformed
    """
    try:
        start_s, end_s = text.split(":", 1)
        x1, y1 = (float(v) for v in start_s.split(","))
        x2, y2 = (float(v) for v in end_s.split(","))
    except ValueError:
        raise ValueError(
            f"Invalid pixel drag '{text}'. Use X1,Y1:X2,Y2 such as '70,70:200,160'."
        ) from None
    return (x1, y1), (x2, y2)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with subcommands."""
    p = argparse.ArgumentParser(
        prog="cultimap-cli",
        description="CultiMap - rectangular selection on placement maps.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-v", "--verbose", action="store_true", help=_("Verbose logging (DEBUG)"))

    sub = p.add_subparsers(dest="command", help=_("Available commands"))

    # --- select ---
    select_p = sub.add_parser("select", help=_("Drag a selection rectangle over a map"))
    select_p.add_argument("input", type=Path, help=_("Placement map (JSON)"))
    select_p.add_argument("--from", dest="start", help=_("Start cell, e.g. A1"))
    select_p.add_argument("--to", dest="end", help=_("End cell, e.g. B2 (default: start)"))
    select_p.add_argument(
        "--pixels",
        type=str,
        default=None,
        help=_("Pointer drag in content pixels, X1,Y1:X2,Y2"),
    )
    select_p.add_argument(
        "--cell-size",
        type=int,
        default=None,
        help=_("Cell size in pixels for --pixels (default: by column count)"),
    )
    select_p.add_argument(
        "--additive",
        action="store_true",
        help=_("Add to the prior selection instead of replacing it"),
    )
    select_p.add_argument(
        "--prior",
        nargs="*",
        default=[],
        metavar="ID",
        help=_("Item ids already selected"),
    )
    select_p.add_argument(
        "--selection-mode",
        action="store_true",
        help=_("Start in selection mode (single-cell drags commit)"),
    )

    # --- info ---
    info_p = sub.add_parser("info", help=_("Show map information"))
    info_p.add_argument("input", type=Path, help=_("Placement map (JSON)"))

    return p


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _make_engine(
    placement_map: PlacementMap, cell_size: int, args, selection: set[str]
) -> SelectionEngine:
    """Engine over a fixed, non-scrolling viewport tall enough for the whole map."""

    def apply(new_selection: set) -> None:
        selection.clear()
        selection.update(new_selection)

    engine = SelectionEngine(
        rows=placement_map.rows,
        cols=placement_map.cols,
        cell_size=cell_size,
        lookup=placement_map.item_at,
        get_selection=lambda: selection,
        on_selection_change=apply,
        scheduler=ManualFrameScheduler(),
        viewport=WindowViewport(get_height=lambda: float("inf"), scroll_by=lambda _d: None),
        selection_mode=args.selection_mode,
    )
    return engine


def _print_result(result: CommitResult | None, selection: set[str]) -> None:
    payload = {
        "committed": bool(result and result.committed),
        "selection": sorted(selection),
    }
    if result is not None:
        rect = result.rect
        payload["rect"] = (
            f"{position_label(rect.start_row, rect.start_col)}:"
            f"{position_label(rect.end_row, rect.end_col)}"
        )
        payload["candidates"] = sorted(result.candidates)
    print(json.dumps(payload, indent=2))


def _cmd_select(args, logger) -> int:
    """Handle the 'select' command."""
    placement_map = PlacementMap.load(str(args.input))
    selection: set[str] = set(args.prior)
    modifiers = ModifierFlags(ctrl=args.additive)

    if args.pixels:
        (x1, y1), (x2, y2) = _parse_pixel_drag(args.pixels)
        cell_size = args.cell_size or default_cell_size(placement_map.cols)
        engine = _make_engine(placement_map, cell_size, args, selection)
        engine.pointer_down(PointerSample(x1, y1, modifiers))
        engine.pointer_move(PointerSample(x2, y2, modifiers))
        result = engine.pointer_up(PointerSample(x2, y2, modifiers))
    elif args.start:
        start = parse_position(args.start)
        end = parse_position(args.end) if args.end else start
        cell_size = args.cell_size or default_cell_size(placement_map.cols)
        engine = _make_engine(placement_map, cell_size, args, selection)
        engine.start(start.row, start.col, modifiers)
        engine.extend(end.row, end.col)
        result = engine.end()
    else:
        print("Error: give either --from/--to or --pixels", file=sys.stderr)
        return 2

    engine.dispose()
    if result is None:
        logger.info("Gesture ended without a selection drag")
    _print_result(result, selection)
    return 0


def _cmd_info(args, _logger) -> int:
    """Handle the 'info' command."""
    placement_map = PlacementMap.load(str(args.input))
    print(f"Map:        {placement_map.map_id}")
    if placement_map.name:
        print(f"Name:       {placement_map.name}")
    print(f"Size:       {placement_map.rows} rows x {placement_map.cols} columns")
    print(f"Items:      {len(placement_map.items)}")
    print(f"Cell size:  {default_cell_size(placement_map.cols)} px (default)")
    return 0


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("cultimap.cli")
    set_log_level(level)

    if hasattr(args, "input") and args.input and not args.input.exists():
        print(f"Error: {args.input} not found", file=sys.stderr)
        return 1

    handlers = {
        "select": _cmd_select,
        "info": _cmd_info,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args, logger)
    except (CultiMapError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
