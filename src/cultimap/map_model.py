"""
CultiMap - Placement Map Model

Data models for a placement map: a rows x cols grid with items (plants,
clone batches) placed at logical positions such as "A1" or "AB12".
Rows are labelled with letters (A..Z, AA..AZ, BA..), columns are 1-based.
"""

import json
import os
from dataclasses import dataclass, field

from cultimap.selection.geometry import GridPoint
from cultimap.utils.exceptions import InvalidMapError, MapFileNotFoundError, ValidationError
from cultimap.utils.logger import logger


def row_label(index: int) -> str:
    """Letter label of a zero-based row: 0 -> A, 25 -> Z, 26 -> AA, 27 -> AB."""
    if index < 0:
        raise ValidationError("row", index, "must be zero or greater")
    label = ""
    i = index
    while i >= 0:
        label = chr(ord("A") + i % 26) + label
        i = i // 26 - 1
    return label


def row_index(label: str) -> int:
    """Inverse of row_label(): A -> 0, AA -> 26."""
    if not label or not label.isalpha() or not label.isascii():
        raise ValidationError("row_label", label, "must be letters A-Z")
    index = 0
    for ch in label.upper():
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def position_label(row: int, col: int) -> str:
    """Position string of a cell, e.g. (1, 0) -> "B1"."""
    return f"{row_label(row)}{col + 1}"


def parse_position(text: str) -> GridPoint:
    """Parse a position string such as "a1" or " AB12 " into a cell.

    Raises:
        ValidationError: If the text is not letters followed by a column number >= 1
    """
    cleaned = text.strip().upper()
    split = 0
    while split < len(cleaned) and cleaned[split].isalpha():
        split += 1
    letters, digits = cleaned[:split], cleaned[split:]
    if not letters or not digits.isdigit():
        raise ValidationError("position", text, "expected letters followed by a number")
    col = int(digits)
    if col < 1:
        raise ValidationError("position", text, "column numbers start at 1")
    return GridPoint(row_index(letters), col - 1)


@dataclass
class PlacedItem:
    """An item placed in a map cell.

    Attributes:
        item_id: Unique identifier of the item
        position: Position string ("A1")
        label: Optional display text (genetic name, tracking code)
    """

    item_id: str
    position: str
    label: str = ""

    @property
    def point(self) -> GridPoint:
        return parse_position(self.position)

    def to_dict(self) -> dict:
        return {"id": self.item_id, "position": self.position, "label": self.label}

    @classmethod
    def from_dict(cls, data: dict) -> "PlacedItem":
        return cls(
            item_id=str(data["id"]),
            position=str(data["position"]),
            label=str(data.get("label", "")),
        )


@dataclass
class PlacementMap:
    """A grid of placed items with a position -> item index.

    Attributes:
        map_id: Identifier used to remember per-map settings (zoom)
        name: Display name
        rows: Number of rows
        cols: Number of columns
        items: Items placed in the grid
    """

    map_id: str
    rows: int
    cols: int
    name: str = ""
    items: list[PlacedItem] = field(default_factory=list)
    _index: dict[tuple[int, int], PlacedItem] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.rows < 0 or self.cols < 0:
            raise InvalidMapError(self.map_id, f"negative size {self.rows}x{self.cols}")
        self.rebuild_index()

    def rebuild_index(self) -> None:
        """Rebuild the position index after ``items`` changed."""
        index: dict[tuple[int, int], PlacedItem] = {}
        for item in self.items:
            try:
                point = item.point
            except ValidationError as e:
                raise InvalidMapError(self.map_id, f"item {item.item_id}: {e}") from e
            if point.row >= self.rows or point.col >= self.cols:
                raise InvalidMapError(
                    self.map_id,
                    f"item {item.item_id} at {item.position} is outside the "
                    f"{self.rows}x{self.cols} grid",
                )
            key = (point.row, point.col)
            if key in index:
                raise InvalidMapError(
                    self.map_id,
                    f"items {index[key].item_id} and {item.item_id} share {item.position}",
                )
            index[key] = item
        self._index = index

    def item_at(self, row: int, col: int) -> str | None:
        """Item id at a cell, or None for an empty cell."""
        item = self._index.get((row, col))
        return item.item_id if item else None

    def get_item(self, row: int, col: int) -> PlacedItem | None:
        return self._index.get((row, col))

    def all_item_ids(self) -> set[str]:
        return {item.item_id for item in self.items}

    def to_dict(self) -> dict:
        return {
            "id": self.map_id,
            "name": self.name,
            "rows": self.rows,
            "cols": self.cols,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict, source: str = "<data>") -> "PlacementMap":
        """Create a map from its JSON representation.

        Raises:
            InvalidMapError: If required fields are missing or inconsistent
        """
        try:
            items = [PlacedItem.from_dict(entry) for entry in data.get("items", [])]
            return cls(
                map_id=str(data.get("id") or os.path.splitext(os.path.basename(source))[0]),
                name=str(data.get("name", "")),
                rows=int(data["rows"]),
                cols=int(data["cols"]),
                items=items,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidMapError(source, f"missing or malformed field: {e}") from e

    @classmethod
    def load(cls, path: str) -> "PlacementMap":
        """Load a map from a JSON file.

        Raises:
            MapFileNotFoundError: If the file does not exist
            InvalidMapError: If the file cannot be parsed
        """
        if not os.path.exists(path):
            raise MapFileNotFoundError(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidMapError(path, f"not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise InvalidMapError(path, "top-level value must be an object")

        placement_map = cls.from_dict(data, source=path)
        logger.info(
            f"Loaded map {placement_map.map_id}: {placement_map.rows}x{placement_map.cols}, "
            f"{len(placement_map.items)} items"
        )
        return placement_map
