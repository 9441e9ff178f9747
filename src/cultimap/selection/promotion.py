"""
CultiMap - Click-Drag Promotion

A press on a grid that is not in selection mode may turn into a selection
drag: once the pointer travels further than a small distance from where it
was pressed, the press is promoted and the drag is started at the pressed
point as if selection mode had been active all along. A release before the
threshold is an ordinary click.
"""

import math
from dataclasses import dataclass

from cultimap.constants import PROMOTION_DISTANCE_PX
from cultimap.selection.drag_state import ModifierFlags
from cultimap.utils.logger import logger


@dataclass(frozen=True)
class PotentialDrag:
    """A press that may still become a selection drag.

    Attributes:
        content_x: Press position in grid content coordinates (scroll included)
        content_y: Press position in grid content coordinates (scroll included)
        client_x: Raw pointer position, used to measure travel independent of scrolling
        client_y: Raw pointer position, used to measure travel independent of scrolling
        modifiers: Modifier keys held at press time
    """

    content_x: float
    content_y: float
    client_x: float
    client_y: float
    modifiers: ModifierFlags = ModifierFlags()


class GesturePromotion:
    """Tracks at most one pending press and promotes it once."""

    def __init__(self, threshold: float = PROMOTION_DISTANCE_PX) -> None:
        self.threshold = threshold
        self._pending: PotentialDrag | None = None

    @property
    def pending(self) -> PotentialDrag | None:
        return self._pending

    @property
    def is_armed(self) -> bool:
        return self._pending is not None

    def arm(
        self,
        content_x: float,
        content_y: float,
        client_x: float,
        client_y: float,
        modifiers: ModifierFlags = ModifierFlags(),
    ) -> PotentialDrag:
        """Record a press outside selection mode."""
        self._pending = PotentialDrag(content_x, content_y, client_x, client_y, modifiers)
        return self._pending

    def distance_to(self, client_x: float, client_y: float) -> float:
        """Euclidean travel from the recorded press, or 0.0 when nothing is armed."""
        if self._pending is None:
            return 0.0
        return math.hypot(client_x - self._pending.client_x, client_y - self._pending.client_y)

    def observe(self, client_x: float, client_y: float) -> PotentialDrag | None:
        """Feed a pointer move.

        Returns:
            The recorded press the first time travel exceeds the threshold,
            None otherwise. The press is cleared when returned, so a gesture
            is promoted at most once.
        """
        pending = self._pending
        if pending is None:
            return None
        if self.distance_to(client_x, client_y) <= self.threshold:
            return None
        self._pending = None
        logger.debug(
            f"Press at ({pending.client_x:.0f}, {pending.client_y:.0f}) promoted to selection drag"
        )
        return pending

    def cancel(self) -> bool:
        """Discard the pending press (release before the threshold).

        Returns:
            True if a press was pending
        """
        had_pending = self._pending is not None
        self._pending = None
        return had_pending
