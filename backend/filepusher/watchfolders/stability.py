"""
Stability tracking for watched folder children.

Decides when a file or directory tree has stopped changing. A single
unchanged snapshot is not enough: checksums are sampled once per cycle, so a
slow writer can look stable at one instant. An item only becomes
READY_TO_SEND after its structure and checksum have stayed the same for the
whole cooldown.

Per child, per cycle:
1. Unknown path: create a WATCHING item, catalog it, request its first
   checksum asynchronously. The result lands on a later cycle.
2. WATCHING item with a checksum still pending: skipped this cycle.
3. WATCHING item: refresh the structural snapshot and recompute the checksum.
   - Something changed: the stability clock is cleared.
   - Nothing changed, clock not running: the clock starts now.
   - Nothing changed, clock running for >= cooldown: READY_TO_SEND.
4. Any other status: untouched.

Items are read from the catalog as copies and only written back when the
child was processed without error, so a failing child keeps its previous
state and is retried next cycle. One catalog save is issued per cycle, and
only when something changed.
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional, Union

from ..items.models import ItemStatus, TrackedItem
from ..items.state import transition_item
from .models import ScanCycleResult
from .scanner import FolderScanner

logger = logging.getLogger(__name__)


class StabilityTracker:
    """
    Classifies watched folder children as new, changed or stable.

    Args:
        catalog: ItemCatalog holding tracked items
        item_service: ItemService for structural snapshots
        checksum_service: ChecksumService (the checksum oracle)
        cooldown_seconds: How long an item must stay unchanged
        scanner: FolderScanner listing children (default: skips hidden names)
        clock: Returns the current time (injectable for tests)
    """

    def __init__(
        self,
        catalog,
        item_service,
        checksum_service,
        cooldown_seconds: int = 60,
        scanner: Optional[FolderScanner] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.catalog = catalog
        self.item_service = item_service
        self.checksum_service = checksum_service
        self.cooldown = timedelta(seconds=cooldown_seconds)
        self.scanner = scanner or FolderScanner()
        self.clock = clock

    def scan(self, root: Union[str, Path]) -> ScanCycleResult:
        """
        Run one scan cycle over a watched folder.

        Returns:
            ScanCycleResult describing what happened

        Raises:
            WatchFolderError: If the watched folder itself is missing or invalid
        """
        root_path = Path(root).absolute()
        children = self.scanner.list_children(root_path)
        now = self.clock()
        result = ScanCycleResult(watched_folder=str(root_path), started_at=now)

        for child in children:
            try:
                if self._process_child(child, root_path, now, result):
                    result.changed = True
            except Exception as e:
                # Entry left untouched, retried next cycle
                result.errors.append(f"{child}: {e}")
                logger.error(f"Failed to check {child}: {e}")

        if result.changed or self.catalog.has_unsaved_changes:
            self.catalog.save()

        logger.debug(
            f"Scanned {root_path}: {len(children)} child(ren), "
            f"{len(result.created)} new, {len(result.ready)} ready, "
            f"{len(result.pending)} pending, {len(result.errors)} error(s)"
        )
        return result

    def _process_child(
        self, child: Path, root: Path, now: datetime, result: ScanCycleResult
    ) -> bool:
        """Process one child. Returns True if the catalog was modified."""
        existing = self.catalog.find_by_source_uri(child.as_uri())

        if not existing:
            item = self.item_service.create(child, root)
            item.checksum_pending = True
            self.catalog.add(item)
            try:
                self.checksum_service.request_checksum(item.id)
            except Exception:
                # No worker will clear the flag; the next cycle observes the item directly
                item.checksum_pending = False
                self.catalog.update(item)
                raise
            result.created.append(item.source_path)
            return True

        modified = False
        for item in existing:
            if item.status != ItemStatus.WATCHING:
                continue

            if item.checksum_pending:
                logger.debug(f"Checksum still pending, skipping: {item.source_path}")
                result.pending.append(item.source_path)
                continue

            if self._observe(item, now):
                self.catalog.update(item)
                modified = True
                if item.status == ItemStatus.READY_TO_SEND:
                    result.ready.append(item.source_path)

        return modified

    def _observe(self, item: TrackedItem, now: datetime) -> bool:
        """
        Apply one observation to a WATCHING item.

        Returns:
            True if the item's persisted state changed
        """
        files_changed = self.item_service.update(item)
        checksum_changed = self.checksum_service.compute_checksum(item)

        if files_changed or checksum_changed:
            item.last_checksum_stable_since = None
            return True

        if item.last_checksum_stable_since is None:
            # First unchanged observation starts the stability clock
            item.last_checksum_stable_since = now
            return True

        stable_for = now - item.last_checksum_stable_since
        if stable_for >= self.cooldown:
            transition_item(item, ItemStatus.READY_TO_SEND)
            logger.info(
                f"Change status of {item.source_path} to READY_TO_SEND. "
                f"Checksum unchanged for {int(stable_for.total_seconds())} sec."
            )
            return True

        return False
