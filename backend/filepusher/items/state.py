"""
Status transition validation for tracked items.

Item lifecycle: WATCHING -> READY_TO_SEND -> SENT | ERROR
An ERROR item may be put back under observation (ERROR -> WATCHING).
SENT is terminal.
"""

from typing import FrozenSet, Set, Tuple

from .errors import InvalidStatusTransitionError
from .models import ItemStatus, TrackedItem


TERMINAL_ITEM_STATES: FrozenSet[ItemStatus] = frozenset({ItemStatus.SENT})


_ITEM_TRANSITIONS: Set[Tuple[ItemStatus, ItemStatus]] = {
    # Stability reached
    (ItemStatus.WATCHING, ItemStatus.READY_TO_SEND),
    # Delivery outcome
    (ItemStatus.READY_TO_SEND, ItemStatus.SENT),
    (ItemStatus.READY_TO_SEND, ItemStatus.ERROR),
    # Manual recovery
    (ItemStatus.ERROR, ItemStatus.WATCHING),
}


def is_item_terminal(status: ItemStatus) -> bool:
    """Check if an item status is terminal (immutable)."""
    return status in TERMINAL_ITEM_STATES


def can_transition_item(from_status: ItemStatus, to_status: ItemStatus) -> bool:
    """
    Check if an item status transition is legal.

    Staying in the same state is always allowed (idempotent operations).
    """
    if from_status == to_status:
        return True

    if is_item_terminal(from_status):
        return False

    return (from_status, to_status) in _ITEM_TRANSITIONS


def transition_item(item: TrackedItem, to_status: ItemStatus) -> None:
    """
    Apply a status transition to an item.

    Raises:
        InvalidStatusTransitionError: If the transition is not legal
    """
    if not can_transition_item(item.status, to_status):
        raise InvalidStatusTransitionError(
            item.source_path, item.status.value, to_status.value
        )
    item.status = to_status
