"""
Tracked items.

Public API:
    TrackedItem — One watched-folder child and its lifecycle state
    ItemStatus — WATCHING / READY_TO_SEND / SENT / ERROR
    ItemService — Creates items and refreshes their structural snapshot
    transition_item — Validated status change
"""

from .errors import ItemError, InvalidStatusTransitionError
from .models import ItemStatus, TrackedItem
from .service import ItemService, snapshot_files
from .state import can_transition_item, is_item_terminal, transition_item

__all__ = [
    # Errors
    "ItemError",
    "InvalidStatusTransitionError",
    # Models
    "ItemStatus",
    "TrackedItem",
    # Service
    "ItemService",
    "snapshot_files",
    # State
    "can_transition_item",
    "is_item_terminal",
    "transition_item",
]
