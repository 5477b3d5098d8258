"""
Archive job model.

An ArchiveJob is ephemeral and owned by the ArchiveEngine. It exists from
submission until its work finishes; finished jobs are only kept in a short
history for monitoring.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ArchiveJobState(str, Enum):
    QUEUED = "queued"  # Accepted, waiting for a worker
    RUNNING = "running"  # Walking and writing
    DONE = "done"  # Archive written, source deleted
    FAILED = "failed"  # Source kept, archive possibly partial


class ArchiveJob(BaseModel):
    """One walk -> filter -> compress -> write -> delete run for a source path."""

    model_config = ConfigDict(extra="forbid")

    source_path: str
    target_archive_path: str
    state: ArchiveJobState = ArchiveJobState.QUEUED

    submitted_at: datetime = Field(default_factory=datetime.now)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    entry_count: int = 0
    error: Optional[str] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()
