"""
Content checksums for tracked items.

An item's fingerprint is an Adler-32 over the relative name and the full
content of every file it contains, in sorted order. Adler-32 is cheap enough
to run over large trees every scan cycle; it only needs to detect change, not
resist tampering.

Two entry points:
- compute_checksum(item): synchronous, updates the given item and reports
  whether the fingerprint changed.
- request_checksum(item_id): asynchronous, runs on a small worker pool and
  writes the result back to the catalog. While it is outstanding the item is
  flagged ``checksum_pending`` and the stability tracker leaves it alone.
"""

import logging
import zlib
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, Optional, Tuple

from ..items.models import TrackedItem
from ..walk import walk_following_links
from .errors import ChecksumError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def _iter_files(root: Path) -> Iterator[Tuple[str, Path]]:
    """Yield (relative name, path) for every file under root, sorted."""
    if not root.is_dir():
        yield root.name, root
        return

    for current, _, filenames in walk_following_links(root):
        for name in filenames:
            path = current / name
            yield path.relative_to(root).as_posix(), path


def adler32_of_path(path: Path) -> int:
    """
    Compute the Adler-32 fingerprint of a file or directory tree.

    Raises:
        OSError: If the path or one of its files cannot be read
    """
    checksum = zlib.adler32(b"")
    for relative, file_path in _iter_files(path):
        checksum = zlib.adler32(relative.encode("utf-8", "surrogateescape"), checksum)
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                checksum = zlib.adler32(chunk, checksum)
    return checksum


class ChecksumService:
    """
    Computes and tracks item fingerprints.

    Args:
        catalog: ItemCatalog that asynchronous results are written back to
        max_workers: Size of the asynchronous worker pool
        clock: Returns the current time (injectable for tests)
    """

    def __init__(
        self,
        catalog=None,
        max_workers: int = 1,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.catalog = catalog
        self.clock = clock
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="checksum"
        )

    def compute_checksum(self, item: TrackedItem) -> bool:
        """
        Recompute the fingerprint of an item and store it on the item.

        Returns:
            True if the fingerprint differs from the previous one (or none
            was recorded yet)

        Raises:
            ChecksumError: If the item cannot be read
        """
        try:
            checksum = adler32_of_path(item.path)
        except OSError as e:
            raise ChecksumError(item.source_path, str(e)) from e

        previous = item.last_checksum
        item.last_checksum = checksum
        item.checksum_computed_at = self.clock()

        changed = previous != checksum
        if changed:
            logger.debug(f"Checksum changed for {item.source_path}: {previous} -> {checksum}")
        return changed

    def request_checksum(self, item_id: str) -> Future:
        """
        Schedule an asynchronous checksum for a cataloged item.

        The caller marks the item ``checksum_pending`` before cataloging it;
        the worker clears the flag when it finishes, whether it succeeded or not.

        Returns:
            Future resolving to True if the fingerprint changed, False if it
            did not, None if the item could not be checksummed
        """
        if self.catalog is None:
            raise ValueError("No catalog configured for ChecksumService")
        return self._executor.submit(self._run_request, item_id)

    def _run_request(self, item_id: str) -> Optional[bool]:
        item = self.catalog.get(item_id)
        if item is None:
            logger.warning(f"Checksum requested for unknown item {item_id}")
            return None

        changed: Optional[bool] = None
        try:
            changed = self.compute_checksum(item)
        except ChecksumError as e:
            logger.error(f"Checksum failed, will retry next cycle: {e}")
        except Exception as e:
            logger.error(f"Unexpected checksum failure for {item.source_path}: {e}")
        finally:
            item.checksum_pending = False
            self.catalog.update(item)

        return changed

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
