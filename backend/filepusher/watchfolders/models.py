"""
Watch folder data models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WatchFolder(BaseModel):
    """
    A watched root directory.

    Only immediate children of the root are tracked; each child (file or
    directory subtree) becomes one tracked item.
    """

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., description="Absolute path to monitored directory")
    enabled: bool = Field(default=True, description="Whether this folder is scanned")

    @field_validator("path")
    @classmethod
    def validate_absolute_path(cls, v: str) -> str:
        """Ensure path is absolute."""
        p = Path(v)
        if not p.is_absolute():
            raise ValueError(f"Watch folder path must be absolute: {v}")
        return v


@dataclass
class ScanCycleResult:
    """Outcome of one stability scan over one watched folder."""

    watched_folder: str
    """Root that was scanned."""

    started_at: datetime
    """Cycle timestamp used for every cooldown comparison."""

    changed: bool = False
    """Whether any item was created or modified (a catalog save was issued)."""

    created: List[str] = field(default_factory=list)
    """Source paths seen for the first time."""

    ready: List[str] = field(default_factory=list)
    """Source paths moved to READY_TO_SEND."""

    pending: List[str] = field(default_factory=list)
    """Source paths skipped because a checksum is still outstanding."""

    errors: List[str] = field(default_factory=list)
    """Per-child failures as "path: reason"."""

    submitted: List[str] = field(default_factory=list)
    """Source paths handed to the archive engine after the scan."""
