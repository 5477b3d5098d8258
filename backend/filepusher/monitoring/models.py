"""
Response models for monitoring API.

All responses are read-only views of tracked items and archive jobs.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from ..archive.models import ArchiveJobState
from ..items.models import ItemStatus


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    model_config = ConfigDict(extra="forbid")

    status: str = "ok"
    scheduler_running: bool = False


class ItemSummary(BaseModel):
    """
    Summary view of a tracked item for list endpoints.
    """

    model_config = ConfigDict(extra="forbid")

    id: str
    source_path: str
    watched_folder: str
    status: ItemStatus
    checksum_pending: bool
    last_checksum_stable_since: Optional[datetime] = None
    file_count: int
    total_size: int
    created_at: datetime
    updated_at: datetime


class ItemDetail(ItemSummary):
    """
    Detailed view of a tracked item, including its structural snapshot.
    """

    last_checksum: Optional[int] = None
    checksum_computed_at: Optional[datetime] = None
    files: dict


class ItemListResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    items: List[ItemSummary]
    total_count: int


class ArchiveJobView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    source_path: str
    target_archive_path: str
    state: ArchiveJobState
    submitted_at: datetime
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    entry_count: int = 0
    error: Optional[str] = None


class ArchiveStatusResponse(BaseModel):
    """In-flight and recently finished archive jobs."""

    model_config = ConfigDict(extra="forbid")

    in_flight: List[ArchiveJobView]
    recent: List[ArchiveJobView]
    max_workers: int
