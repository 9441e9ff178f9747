"""
CultiMap - Selection Committer

Turns a released drag rectangle into item ids and merges them into the
host's selection: additive drags add to the prior selection, every other
drag replaces it (a drag over empty cells therefore clears the selection).
"""

from collections.abc import Callable, Hashable, Iterable, Set
from dataclasses import dataclass, field

from cultimap.selection.drag_state import DragStateMachine
from cultimap.selection.rect import SelectionRect
from cultimap.utils.logger import logger

ItemId = Hashable
ItemLookup = Callable[[int, int], ItemId | None]


@dataclass(frozen=True)
class CommitResult:
    """Outcome of one released gesture.

    Attributes:
        rect: Rectangle covered by the gesture
        candidates: Items found inside the rectangle
        selection: Proposed next selection (equals the prior one when not committed)
        committed: Whether the proposal was passed to the host
        is_additive: Whether the gesture was additive
        is_single_cell: Whether the rectangle covers exactly one cell
        was_selection_mode_active: Selection mode state when the gesture ended
        moved: Whether the pointer moved between press and release
    """

    rect: SelectionRect
    candidates: frozenset = field(default_factory=frozenset)
    selection: frozenset = field(default_factory=frozenset)
    committed: bool = False
    is_additive: bool = False
    is_single_cell: bool = False
    was_selection_mode_active: bool = False
    moved: bool = False


def collect_items(rect: SelectionRect, lookup: ItemLookup) -> set:
    """Look up every cell of the rectangle and gather the item ids found."""
    found = set()
    for row, col in rect.cells():
        item_id = lookup(row, col)
        if item_id is not None:
            found.add(item_id)
    return found


def merge_selection(prior: Iterable, candidates: Iterable, additive: bool) -> set:
    """Union with the prior selection when additive, otherwise replace it."""
    if additive:
        return set(prior) | set(candidates)
    return set(candidates)


def should_commit(
    is_single_cell: bool,
    was_selection_mode_active: bool,
    is_additive: bool,
) -> bool:
    """Default commit policy.

    A plain single-cell press outside selection mode is a click, not a
    selection. Everything else is committed.
    """
    return was_selection_mode_active or is_additive or not is_single_cell


CommitPolicy = Callable[[bool, bool, bool], bool]


class SelectionCommitter:
    """Applies released gestures to the host's selection.

    Args:
        lookup: (row, col) -> item id or None; only called at commit time
        on_selection_change: Receives the proposed next selection
        policy: Decides whether a gesture is committed; see should_commit()
    """

    def __init__(
        self,
        lookup: ItemLookup,
        on_selection_change: Callable[[set], None] | None = None,
        policy: CommitPolicy = should_commit,
    ) -> None:
        self.lookup = lookup
        self.on_selection_change = on_selection_change
        self.policy = policy

    def commit(
        self,
        machine: DragStateMachine,
        prior_selection: Set,
        selection_mode_active: bool,
        moved: bool = True,
    ) -> CommitResult | None:
        """Commit the machine's released gesture and reset it.

        Args:
            machine: State machine after end() was called
            prior_selection: The host's current selection
            selection_mode_active: Whether the host was in selection mode
            moved: Whether the pointer moved during the gesture

        Returns:
            The commit outcome, or None when there was nothing to commit
        """
        state = machine.state
        if state.is_dragging:
            logger.debug("Commit requested while still dragging, ignored")
            return None

        rect = state.selection_rect
        if rect is None:
            machine.reset()
            return None

        is_single = rect.is_single_cell
        committed = self.policy(is_single, selection_mode_active, state.is_additive)

        candidates: set = set()
        selection = frozenset(prior_selection)
        try:
            if committed:
                candidates = collect_items(rect, self.lookup)
                selection = frozenset(
                    merge_selection(prior_selection, candidates, state.is_additive)
                )
                if self.on_selection_change:
                    self.on_selection_change(set(selection))
                logger.info(
                    f"Committed {len(candidates)} items from rows {rect.start_row}-{rect.end_row}, "
                    f"cols {rect.start_col}-{rect.end_col} (additive={state.is_additive})"
                )
        finally:
            # The released gesture is consumed even if the host callback fails
            machine.reset()

        return CommitResult(
            rect=rect,
            candidates=frozenset(candidates),
            selection=selection,
            committed=committed,
            is_additive=state.is_additive,
            is_single_cell=is_single,
            was_selection_mode_active=selection_mode_active,
            moved=moved,
        )
