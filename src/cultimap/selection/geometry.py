"""
CultiMap - Grid Geometry

Maps between pixel offsets inside the scrolled grid content and logical
(row, column) cells. The grid is drawn as a header row and a header column
of fixed size, followed by square cells separated by a gap that depends on
the current zoom (cell size).

All functions here are pure: no scroll state is cached, callers pass
content-relative coordinates that already include the current scroll offset.
"""

import math
from dataclasses import dataclass

from cultimap.constants import (
    CONTAINER_BORDER_PX,
    CONTAINER_PADDING_PX,
    GAP_SIZE_THRESHOLD_PX,
    HEADER_SIZE_PX,
    LARGE_GAP_PX,
    SMALL_GAP_PX,
)
from cultimap.utils.exceptions import ValidationError


@dataclass(frozen=True)
class GridPoint:
    """A logical cell address. Rows and columns are zero-based."""

    row: int
    col: int

    def __post_init__(self) -> None:
        if self.row < 0:
            raise ValidationError("row", self.row, "must be zero or greater")
        if self.col < 0:
            raise ValidationError("col", self.col, "must be zero or greater")


def gap_for_cell_size(
    cell_size: float,
    threshold: float = GAP_SIZE_THRESHOLD_PX,
    small_gap: int = SMALL_GAP_PX,
    large_gap: int = LARGE_GAP_PX,
) -> int:
    """Return the inter-cell gap used at the given zoom level.

    Args:
        cell_size: Current cell edge length in pixels
        threshold: Cells below this size use the small gap
        small_gap: Gap for compact (zoomed-out) grids
        large_gap: Gap for regular grids

    Returns:
        Gap in pixels
    """
    return small_gap if cell_size < threshold else large_gap


def clamp_int(value: int, lo: int, hi: int) -> int:
    """Clamp an integer value to the inclusive range [lo, hi]."""
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class GridLayout:
    """Pixel layout of a grid at one zoom level.

    Attributes:
        cell_size: Edge length of a cell in pixels
        header_size: Width of the row header column and height of the column header row
        padding: Inner padding of the scrollable container
        border: Border width of the scrollable container
        gap_threshold: Cell size below which ``small_gap`` applies
        small_gap: Gap between cells when zoomed out
        large_gap: Gap between cells otherwise
    """

    cell_size: float
    header_size: float = HEADER_SIZE_PX
    padding: float = CONTAINER_PADDING_PX
    border: float = CONTAINER_BORDER_PX
    gap_threshold: float = GAP_SIZE_THRESHOLD_PX
    small_gap: int = SMALL_GAP_PX
    large_gap: int = LARGE_GAP_PX

    def __post_init__(self) -> None:
        if self.cell_size <= 0:
            raise ValidationError("cell_size", self.cell_size, "must be positive")

    @property
    def gap(self) -> int:
        return gap_for_cell_size(
            self.cell_size, self.gap_threshold, self.small_gap, self.large_gap
        )

    @property
    def offset(self) -> float:
        """Distance from the content origin to the first cell."""
        return self.header_size + self.padding + self.border + self.gap

    @property
    def stride(self) -> float:
        """Distance between the origins of two neighbouring cells."""
        return self.cell_size + self.gap

    def raw_cell_at(self, x: float, y: float) -> tuple[int, int]:
        """Map a content pixel to an unclamped (row, col) pair.

        Points over the headers, padding or anything left of/above the
        first cell give negative indices; points past the last cell give
        indices beyond the grid. Used for hit-testing headers and gutters.
        """
        col = math.floor((x - self.offset) / self.stride)
        row = math.floor((y - self.offset) / self.stride)
        return row, col

    def cell_at(self, x: float, y: float, rows: int, cols: int) -> GridPoint:
        """Map a content pixel to the nearest valid cell of a rows x cols grid."""
        row, col = self.raw_cell_at(x, y)
        return GridPoint(
            clamp_int(row, 0, max(0, rows - 1)),
            clamp_int(col, 0, max(0, cols - 1)),
        )

    def is_inside(self, x: float, y: float, rows: int, cols: int) -> bool:
        """Return True when the pixel lies within the cell area (gaps included)."""
        row, col = self.raw_cell_at(x, y)
        return 0 <= row < rows and 0 <= col < cols

    def cell_origin(self, row: int, col: int) -> tuple[float, float]:
        """Top-left content pixel of a cell as (x, y)."""
        return self.offset + col * self.stride, self.offset + row * self.stride

    def cell_center(self, row: int, col: int) -> tuple[float, float]:
        x, y = self.cell_origin(row, col)
        half = self.cell_size / 2
        return x + half, y + half

    def cell_rect(self, row: int, col: int) -> tuple[float, float, float, float]:
        """Content rectangle (x, y, width, height) of a cell."""
        x, y = self.cell_origin(row, col)
        return x, y, self.cell_size, self.cell_size

    def content_size(self, rows: int, cols: int) -> tuple[float, float]:
        """Total (width, height) of the grid content including headers and padding."""
        width = self.offset + cols * self.stride + self.padding + self.border
        height = self.offset + rows * self.stride + self.padding + self.border
        return width, height

    def with_cell_size(self, cell_size: float) -> "GridLayout":
        """Return a copy of this layout at a different zoom level."""
        return GridLayout(
            cell_size=cell_size,
            header_size=self.header_size,
            padding=self.padding,
            border=self.border,
            gap_threshold=self.gap_threshold,
            small_gap=self.small_gap,
            large_gap=self.large_gap,
        )
