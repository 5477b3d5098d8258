"""
Structural facts for tracked items.

The item service records which files make up an item and how large each one
is. A change in this snapshot (file added, removed, resized) counts as a change
of the item, independently of its checksum.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Union

from ..walk import walk_following_links
from .models import TrackedItem

logger = logging.getLogger(__name__)


def snapshot_files(path: Path) -> Dict[str, int]:
    """
    Build the structural snapshot of a path.

    Directories are walked recursively (following symbolic links, each
    directory once); every file is recorded by its POSIX-style path relative
    to ``path`` with its size.
    Empty directories are recorded with size -1 so that creating or removing
    them is noticed. A single file is recorded under its own name.

    Raises:
        OSError: If the path or one of its files cannot be read
    """
    if not path.is_dir():
        return {path.name: path.stat().st_size}

    snapshot: Dict[str, int] = {}

    for current, dirnames, filenames in walk_following_links(path):
        if current != path and not dirnames and not filenames:
            snapshot[current.relative_to(path).as_posix()] = -1
        for name in filenames:
            file_path = current / name
            snapshot[file_path.relative_to(path).as_posix()] = file_path.stat().st_size

    return snapshot


class ItemService:
    """Creates tracked items and refreshes their structural snapshot."""

    def create(self, path: Union[str, Path], watched_folder: Union[str, Path]) -> TrackedItem:
        """
        Create a new WATCHING item for a path.

        The structural snapshot is taken immediately; the checksum is left
        unset and requested separately.
        """
        item = TrackedItem(
            source_path=str(Path(path).absolute()),
            watched_folder=str(Path(watched_folder).absolute()),
            files=snapshot_files(Path(path)),
        )
        logger.info(f"Tracking new item: {item.source_path} ({item.file_count} file(s))")
        return item

    def update(self, item: TrackedItem) -> bool:
        """
        Refresh the structural snapshot of an item.

        Returns:
            True if files were added, removed or resized since the last update
        """
        current = snapshot_files(item.path)
        if current == item.files:
            return False

        added = len(current.keys() - item.files.keys())
        removed = len(item.files.keys() - current.keys())
        logger.debug(
            f"Files changed for {item.source_path}: +{added} -{removed}, "
            f"{item.total_size} -> {sum(current.values())} bytes"
        )
        item.files = current
        item.updated_at = datetime.now()
        return True
