"""
Item catalog.

Durable store of tracked items, keyed by item ID and indexed by source URI.

The catalog hands out copies: callers read an item, modify their copy and
write it back with update(). Modified items are only marked dirty; nothing is
written to disk until save() is called, which persists every dirty item in a
single transaction. The stability tracker issues one save() per scan cycle.
"""

import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional, Set

from ..items.models import ItemStatus, TrackedItem
from .errors import DuplicateItemError, ItemNotFoundError

logger = logging.getLogger(__name__)


class ItemCatalog:
    """
    In-memory catalog of tracked items with explicit persistence.

    Thread-safety: all operations take an internal lock. Checksum workers
    write results back from their own threads.
    """

    def __init__(self, persistence_manager=None):
        """
        Initialize catalog.

        Args:
            persistence_manager: Optional PersistenceManager used by save()/load()
        """
        # item_id -> TrackedItem
        self._items: Dict[str, TrackedItem] = {}
        # source_uri -> item ids
        self._by_uri: Dict[str, List[str]] = {}
        self._dirty: Set[str] = set()
        self._lock = threading.RLock()
        self._persistence = persistence_manager

    def find_by_source_uri(self, uri: str) -> List[TrackedItem]:
        """
        Find all items recorded for a source URI.

        Returns:
            Copies of the matching items (empty list if none)
        """
        with self._lock:
            return [
                self._items[item_id].model_copy(deep=True)
                for item_id in self._by_uri.get(uri, [])
            ]

    def add(self, item: TrackedItem) -> None:
        """
        Add a new item. The item is marked dirty.

        Raises:
            DuplicateItemError: If an item with the same ID exists
        """
        with self._lock:
            if item.id in self._items:
                raise DuplicateItemError(item.id)
            self._items[item.id] = item.model_copy(deep=True)
            self._by_uri.setdefault(item.source_uri, []).append(item.id)
            self._dirty.add(item.id)

    def update(self, item: TrackedItem) -> None:
        """
        Replace the stored state of an existing item. The item is marked dirty.

        Raises:
            ItemNotFoundError: If the item is not in the catalog
        """
        with self._lock:
            if item.id not in self._items:
                raise ItemNotFoundError(item.id)
            stored = item.model_copy(deep=True)
            stored.updated_at = datetime.now()
            self._items[item.id] = stored
            self._dirty.add(item.id)

    def get(self, item_id: str) -> Optional[TrackedItem]:
        """Retrieve a copy of an item by ID, or None."""
        with self._lock:
            item = self._items.get(item_id)
            return item.model_copy(deep=True) if item else None

    def get_or_raise(self, item_id: str) -> TrackedItem:
        """
        Retrieve a copy of an item by ID.

        Raises:
            ItemNotFoundError: If the item does not exist
        """
        item = self.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def list_items(
        self,
        status: Optional[ItemStatus] = None,
        watched_folder: Optional[str] = None,
    ) -> List[TrackedItem]:
        """
        List items, optionally filtered by status and watched folder.

        Returns:
            Copies ordered by creation time (oldest first)
        """
        with self._lock:
            items = [
                item.model_copy(deep=True)
                for item in self._items.values()
                if (status is None or item.status == status)
                and (watched_folder is None or item.watched_folder == watched_folder)
            ]
        items.sort(key=lambda i: i.created_at)
        return items

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def has_unsaved_changes(self) -> bool:
        with self._lock:
            return bool(self._dirty)

    def save(self) -> int:
        """
        Persist every dirty item in one batch.

        Without a persistence manager the dirty set is simply cleared.

        Returns:
            Number of items written

        Raises:
            SaveError: If the batch could not be written (items stay dirty)
        """
        with self._lock:
            if not self._dirty:
                return 0

            dirty_items = [self._items[item_id] for item_id in sorted(self._dirty)]

            if self._persistence:
                self._persistence.save_items([_serialize(item) for item in dirty_items])

            self._dirty.clear()

        logger.debug(f"Saved {len(dirty_items)} item(s)")
        return len(dirty_items)

    def load(self) -> int:
        """
        Load all items from persistent storage, replacing in-memory state.

        Called explicitly at startup to restore state.

        Returns:
            Number of items loaded

        Raises:
            ValueError: If persistence_manager is not configured
        """
        if not self._persistence:
            raise ValueError("No persistence_manager configured for ItemCatalog")

        item_datas = self._persistence.load_all_items()

        with self._lock:
            self._items.clear()
            self._by_uri.clear()
            self._dirty.clear()
            for item_data in item_datas:
                item = _deserialize(item_data)
                self._items[item.id] = item
                self._by_uri.setdefault(item.source_uri, []).append(item.id)

        logger.info(f"Loaded {len(item_datas)} item(s) from storage")
        return len(item_datas)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _serialize(item: TrackedItem) -> Dict:
    return {
        "id": item.id,
        "source_path": item.source_path,
        "source_uri": item.source_uri,
        "watched_folder": item.watched_folder,
        "status": item.status.value,
        "last_checksum": item.last_checksum,
        "checksum_computed_at": _iso(item.checksum_computed_at),
        "last_checksum_stable_since": _iso(item.last_checksum_stable_since),
        "files": item.files,
        "created_at": item.created_at.isoformat(),
        "updated_at": item.updated_at.isoformat(),
    }


def _deserialize(data: Dict) -> TrackedItem:
    return TrackedItem(
        id=data["id"],
        source_path=data["source_path"],
        watched_folder=data["watched_folder"],
        status=ItemStatus(data["status"]),
        last_checksum=data["last_checksum"],
        checksum_computed_at=_parse(data["checksum_computed_at"]),
        last_checksum_stable_since=_parse(data["last_checksum_stable_since"]),
        files=data["files"],
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )
