"""
CultiMap - Zoom Model

Cell size handling for the grid views: stepping, clamping, a density-based
default and per-map persistence.
"""

from cultimap.constants import (
    DENSE_GRID_CELL_SIZE_PX,
    DENSE_GRID_COLUMNS,
    MAX_CELL_SIZE_PX,
    MEDIUM_GRID_CELL_SIZE_PX,
    MEDIUM_GRID_COLUMNS,
    MIN_CELL_SIZE_PX,
    STANDARD_CELL_SIZE_PX,
    ZOOM_STEP_PX,
)
from cultimap.utils.config_manager import ConfigManager
from cultimap.utils.logger import logger


def default_cell_size(cols: int) -> int:
    """Starting cell size for a grid: denser grids start zoomed out."""
    if cols > DENSE_GRID_COLUMNS:
        return DENSE_GRID_CELL_SIZE_PX
    if cols > MEDIUM_GRID_COLUMNS:
        return MEDIUM_GRID_CELL_SIZE_PX
    return STANDARD_CELL_SIZE_PX


class ZoomModel:
    """Current cell size of one map view."""

    def __init__(
        self,
        cell_size: int = STANDARD_CELL_SIZE_PX,
        min_size: int = MIN_CELL_SIZE_PX,
        max_size: int = MAX_CELL_SIZE_PX,
        step: int = ZOOM_STEP_PX,
    ) -> None:
        self.min_size = min_size
        self.max_size = max_size
        self.step = step
        self._cell_size = self.clamp(cell_size)

    @property
    def cell_size(self) -> int:
        return self._cell_size

    def clamp(self, size: int) -> int:
        return max(self.min_size, min(self.max_size, int(size)))

    def set_cell_size(self, size: int) -> bool:
        """Set the cell size, clamped to range.

        Returns:
            True if the size changed
        """
        size = self.clamp(size)
        if size == self._cell_size:
            return False
        self._cell_size = size
        logger.info(f"Cell size set to {size}px")
        return True

    def zoom_in(self) -> bool:
        return self.set_cell_size(self._cell_size + self.step)

    def zoom_out(self) -> bool:
        return self.set_cell_size(self._cell_size - self.step)

    @classmethod
    def for_map(
        cls, map_id: str, cols: int, config_manager: ConfigManager | None = None
    ) -> "ZoomModel":
        """Restore the saved zoom of a map, or start from the density default."""
        saved = config_manager.get_zoom(map_id) if config_manager else None
        if saved is not None:
            logger.debug(f"Restored zoom for map {map_id}: {saved}px")
            return cls(saved)
        return cls(default_cell_size(cols))

    def save(self, map_id: str, config_manager: ConfigManager) -> None:
        config_manager.set_zoom(map_id, self._cell_size)
