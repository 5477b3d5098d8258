"""
Watch folder engine — orchestration for one scheduler tick.

Coordinates stability scanning and archive dispatch.

This is the main entry point for watch folder processing.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..archive.engine import ArchiveEngine
from ..archive.errors import ArchiveError
from ..archive.naming import is_archive_path
from ..items.models import ItemStatus
from .errors import WatchFolderError
from .models import ScanCycleResult, WatchFolder
from .stability import StabilityTracker

logger = logging.getLogger(__name__)


class WatchFolderEngine:
    """
    Watch folder orchestration engine.

    Coordinates:
    1. Stability scanning of every enabled folder (via StabilityTracker)
    2. Archive dispatch of READY_TO_SEND directories (via ArchiveEngine)

    Ready directories are submitted on every tick while they still exist.
    Submission is idempotent, so a job already running or an archive already
    written makes the call a no-op, and a failed job is retried on the next
    tick. Ready single files are already deliverable and are left as they are.
    """

    def __init__(
        self,
        watch_folders: List[WatchFolder],
        tracker: StabilityTracker,
        archive_engine: Optional[ArchiveEngine] = None,
    ):
        """
        Initialize watch folder engine.

        Args:
            watch_folders: Folders to scan, in scan order
            tracker: Stability tracker (owns catalog access)
            archive_engine: Optional archive engine for ready directories
        """
        self.watch_folders = list(watch_folders)
        self.tracker = tracker
        self.archive_engine = archive_engine

    @property
    def catalog(self):
        return self.tracker.catalog

    def scan_all_folders(self) -> List[ScanCycleResult]:
        """
        Scan all enabled watch folders and dispatch ready directories.

        Call this method periodically (see ScanScheduler).

        Returns:
            One ScanCycleResult per successfully scanned folder

        Warn-and-continue semantics: Individual folder failures do not
        block processing of other folders.
        """
        results = []

        for watch_folder in self.watch_folders:
            if not watch_folder.enabled:
                continue
            try:
                results.append(self.scan_folder(watch_folder))
            except WatchFolderError as e:
                logger.warning(f"Watch folder scan failed for '{watch_folder.path}': {e}")
                continue
            except Exception as e:
                logger.error(
                    f"Unexpected error scanning watch folder '{watch_folder.path}': {e}"
                )
                continue

        return results

    def scan_folder(self, watch_folder: WatchFolder) -> ScanCycleResult:
        """
        Scan a single watch folder, then dispatch its ready directories.

        Raises:
            WatchFolderError: If watch folder path is inaccessible
        """
        result = self.tracker.scan(watch_folder.path)

        if self.archive_engine is not None:
            result.submitted = self.dispatch_ready(result.watched_folder)

        return result

    def dispatch_ready(self, watched_folder: str) -> List[str]:
        """
        Submit every READY_TO_SEND directory of a folder for archiving.

        Returns:
            Source paths for which a new archive job was scheduled
        """
        submitted = []
        ready_items = self.catalog.list_items(
            status=ItemStatus.READY_TO_SEND, watched_folder=watched_folder
        )

        for item in ready_items:
            source = Path(item.source_path)
            if not source.is_dir() or is_archive_path(source):
                continue
            try:
                if self.archive_engine.submit(source):
                    submitted.append(item.source_path)
                    logger.info(f"Submitted for archiving: {item.source_path}")
            except ArchiveError as e:
                logger.warning(f"Cannot archive {item.source_path}: {e}")
            except Exception as e:
                logger.error(f"Failed to submit {item.source_path} for archiving: {e}")

        return submitted
