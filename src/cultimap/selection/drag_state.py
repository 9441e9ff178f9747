"""
CultiMap - Drag State Machine

Owns the live selection gesture: where it started, where it currently
ends and whether it adds to the existing selection.

Transitions arriving in the wrong state are ignored rather than raised:
pointer listeners stay registered for the length of a drag and the host
may deliver one more move/release after the gesture has been reset.
"""

from collections.abc import Callable
from dataclasses import dataclass

from cultimap.selection.geometry import GridPoint
from cultimap.selection.rect import SelectionRect, resolve_rect
from cultimap.utils.logger import logger


@dataclass(frozen=True)
class ModifierFlags:
    """Modifier keys held when a pointer event was produced."""

    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    @property
    def additive(self) -> bool:
        """Any of ctrl/meta/shift makes a gesture additive."""
        return self.ctrl or self.meta or self.shift


@dataclass(frozen=True)
class DragState:
    """Immutable snapshot of the gesture.

    Attributes:
        is_dragging: True between start() and end()
        drag_start: Cell where the gesture began (None when idle)
        drag_end: Cell currently under the pointer (None when idle)
        is_additive: Whether the committed cells are added to the prior selection
    """

    is_dragging: bool = False
    drag_start: GridPoint | None = None
    drag_end: GridPoint | None = None
    is_additive: bool = False

    @property
    def selection_rect(self) -> SelectionRect | None:
        return resolve_rect(self.drag_start, self.drag_end)


IDLE = DragState()


class DragStateMachine:
    """Idle -> Dragging -> (released) -> Idle gesture tracker.

    The state is replaced as a whole on every transition so that
    drag_start and drag_end are always set or cleared together.
    """

    def __init__(self) -> None:
        self._state: DragState = IDLE
        self.on_changed: Callable[[DragState], None] | None = None

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return self._state.is_dragging

    @property
    def drag_start(self) -> GridPoint | None:
        return self._state.drag_start

    @property
    def drag_end(self) -> GridPoint | None:
        return self._state.drag_end

    @property
    def is_additive(self) -> bool:
        return self._state.is_additive

    def _set_state(self, state: DragState) -> None:
        if state == self._state:
            return
        self._state = state
        if self.on_changed:
            self.on_changed(state)

    def start(self, row: int, col: int, modifiers: ModifierFlags | bool = False) -> bool:
        """Begin a gesture at a cell.

        Args:
            row: Zero-based row of the pressed cell
            col: Zero-based column of the pressed cell
            modifiers: Modifier keys of the triggering event, or an explicit additive flag

        Returns:
            True if a gesture was started, False if one is already in progress
        """
        if self._state.is_dragging:
            logger.warning("Ignoring drag start while a drag is already in progress")
            return False

        additive = modifiers.additive if isinstance(modifiers, ModifierFlags) else bool(modifiers)
        point = GridPoint(row, col)
        self._set_state(
            DragState(is_dragging=True, drag_start=point, drag_end=point, is_additive=additive)
        )
        logger.debug(f"Drag started at ({row}, {col}) additive={additive}")
        return True

    def extend(self, row: int, col: int) -> bool:
        """Move the gesture's end to a cell. No-op unless dragging."""
        if not self._state.is_dragging:
            return False
        point = GridPoint(row, col)
        if point != self._state.drag_end:
            self._set_state(
                DragState(
                    is_dragging=True,
                    drag_start=self._state.drag_start,
                    drag_end=point,
                    is_additive=self._state.is_additive,
                )
            )
        return True

    def end(self) -> bool:
        """Release the gesture, keeping both endpoints for the committer.

        Returns:
            True if a drag was in progress
        """
        if not self._state.is_dragging:
            return False
        self._set_state(
            DragState(
                is_dragging=False,
                drag_start=self._state.drag_start,
                drag_end=self._state.drag_end,
                is_additive=self._state.is_additive,
            )
        )
        logger.debug(f"Drag ended at {self._state.drag_end}")
        return True

    def reset(self) -> None:
        """Return to Idle from any state."""
        self._set_state(IDLE)

    def get_selection_rect(self) -> SelectionRect | None:
        """Current normalized rectangle, or None when no endpoints are set."""
        return self._state.selection_rect

    def is_in_drag_box(self, row: int, col: int) -> bool:
        """True while dragging if the cell lies inside the current rectangle."""
        if not self._state.is_dragging:
            return False
        rect = self._state.selection_rect
        return rect is not None and rect.contains(row, col)
