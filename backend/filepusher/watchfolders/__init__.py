"""
Watch folders — polling-based stability detection.

Public API:
    WatchFolder — Watched root configuration model
    FolderScanner — Lists the immediate children of a watched root
    StabilityTracker — Per-cycle new / changed / stable classification
    WatchFolderEngine — Orchestration: scan -> stability -> archive dispatch
    ScanScheduler — Periodic driver for the engine
"""

from .errors import (
    InvalidWatchFolderPathError,
    WatchFolderError,
    WatchFolderNotFoundError,
)
from .models import ScanCycleResult, WatchFolder
from .scanner import FolderScanner
from .stability import StabilityTracker
from .engine import WatchFolderEngine
from .scheduler import ScanScheduler

__all__ = [
    # Errors
    "WatchFolderError",
    "WatchFolderNotFoundError",
    "InvalidWatchFolderPathError",
    # Models
    "WatchFolder",
    "ScanCycleResult",
    # Core
    "FolderScanner",
    "StabilityTracker",
    "WatchFolderEngine",
    "ScanScheduler",
]
