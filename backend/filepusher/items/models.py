"""
Tracked item data models.

A tracked item is one immediate child of a watched folder (a file or a
directory subtree) followed through stability detection and delivery.

All models use Pydantic for validation.
State transitions are validated externally (see state.py).
"""

import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ItemStatus(str, Enum):
    """
    Item lifecycle status.

    The stability tracker only moves WATCHING -> READY_TO_SEND.
    The remaining states belong to delivery.
    """

    WATCHING = "watching"  # Still being observed for changes
    READY_TO_SEND = "ready_to_send"  # Unchanged for the full cooldown
    SENT = "sent"  # Delivered downstream
    ERROR = "error"  # Delivery failed, needs attention


class TrackedItem(BaseModel):
    """
    A file-system entry under a watched folder with persisted lifecycle state.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    # Identity
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    source_path: str  # Absolute path of the child entry
    watched_folder: str  # Absolute path of the watched root

    # State
    status: ItemStatus = ItemStatus.WATCHING

    # Checksum tracking
    last_checksum: Optional[int] = None
    checksum_pending: bool = False  # An asynchronous checksum is outstanding
    checksum_computed_at: Optional[datetime] = None
    last_checksum_stable_since: Optional[datetime] = None

    # Structural snapshot: relative path -> size in bytes
    files: Dict[str, int] = Field(default_factory=dict)

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def path(self) -> Path:
        return Path(self.source_path)

    @property
    def source_uri(self) -> str:
        """Catalog key: the ``file://`` URI of the source path."""
        return Path(self.source_path).as_uri()

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def total_size(self) -> int:
        return sum(self.files.values())

    def __str__(self) -> str:
        return f"TrackedItem({self.source_path}, {self.status.value})"
