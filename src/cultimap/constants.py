"""
CultiMap - Numeric Constants

Simple numeric constants with ZERO internal imports to avoid circular dependencies.
For application-level constants (strings, paths), use config.py.
"""

from typing import Final

# ============================================================================
# Grid Layout (pixels)
# ============================================================================

HEADER_SIZE_PX: Final[int] = 40
CONTAINER_PADDING_PX: Final[int] = 16
CONTAINER_BORDER_PX: Final[int] = 1

# Cells smaller than this use the compact gap
GAP_SIZE_THRESHOLD_PX: Final[int] = 40
SMALL_GAP_PX: Final[int] = 1
LARGE_GAP_PX: Final[int] = 4

# ============================================================================
# Auto-Scroll
# ============================================================================

EDGE_SCROLL_THRESHOLD_PX: Final[float] = 100.0
MAX_SCROLL_SPEED_PX: Final[float] = 30.0  # per frame
EDGE_SCROLL_OUTSIDE_SLACK_PX: Final[float] = 50.0

# Frame interval used when no frame clock is available (~60 Hz)
FRAME_INTERVAL_MS: Final[int] = 16

# ============================================================================
# Gesture Promotion
# ============================================================================

PROMOTION_DISTANCE_PX: Final[float] = 5.0

# ============================================================================
# Zoom
# ============================================================================

ZOOM_STEP_PX: Final[int] = 10
MIN_CELL_SIZE_PX: Final[int] = 15
MAX_CELL_SIZE_PX: Final[int] = 120

DENSE_GRID_COLUMNS: Final[int] = 25
MEDIUM_GRID_COLUMNS: Final[int] = 15
DENSE_GRID_CELL_SIZE_PX: Final[int] = 20
MEDIUM_GRID_CELL_SIZE_PX: Final[int] = 50
STANDARD_CELL_SIZE_PX: Final[int] = 80
