"""
CultiMap - Selection Rectangle

Normalized cell rectangle derived from the two drag endpoints.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from cultimap.selection.geometry import GridPoint


@dataclass(frozen=True)
class SelectionRect:
    """Inclusive cell rectangle. Always start_row <= end_row and start_col <= end_col."""

    start_row: int
    end_row: int
    start_col: int
    end_col: int

    @classmethod
    def from_points(cls, a: GridPoint, b: GridPoint) -> "SelectionRect":
        return cls(
            start_row=min(a.row, b.row),
            end_row=max(a.row, b.row),
            start_col=min(a.col, b.col),
            end_col=max(a.col, b.col),
        )

    @property
    def is_single_cell(self) -> bool:
        return self.start_row == self.end_row and self.start_col == self.end_col

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def col_count(self) -> int:
        return self.end_col - self.start_col + 1

    def contains(self, row: int, col: int) -> bool:
        return self.start_row <= row <= self.end_row and self.start_col <= col <= self.end_col

    def cells(self) -> Iterator[tuple[int, int]]:
        """Iterate (row, col) pairs row by row."""
        for row in range(self.start_row, self.end_row + 1):
            for col in range(self.start_col, self.end_col + 1):
                yield row, col


def resolve_rect(start: GridPoint | None, end: GridPoint | None) -> SelectionRect | None:
    """Normalize two drag endpoints into a rectangle.

    Returns None when either endpoint is missing, so "no gesture yet" is
    distinguishable from a 1x1 rectangle.
    """
    if start is None or end is None:
        return None
    return SelectionRect.from_points(start, end)
