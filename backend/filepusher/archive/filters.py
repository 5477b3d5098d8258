"""
Archive member selection.

Two stages, kept separate from the archive writer:

1. is_excluded() — a pure predicate on a name and its kind. No I/O.
2. ArchiveMemberWalk — a restartable, lazy sequence of (absolute path,
   relative name) pairs for everything under a source that survives the
   predicate. Iterating it again walks the tree again.

Rules:
- The source root itself is never a member; every name is relative to it.
- Directories are always members (so empty directories survive).
- Files whose extension is in the excluded set are skipped.
- Symbolic links are followed; a directory reached twice through links is
  only descended once.
"""

import logging
from pathlib import Path, PurePath
from typing import AbstractSet, Iterator, Tuple, Union

from ..walk import walk_following_links

logger = logging.getLogger(__name__)


def extension_of(name: str) -> str:
    """
    Return the lower-cased extension of a file name, including the dot.

    Everything from the last dot is the extension, so ``.nfo`` has the
    extension ``.nfo`` and ``archive.tar.gz`` has ``.gz``. Names without a dot
    have no extension.
    """
    index = name.rfind(".")
    if index == -1:
        return ""
    return name[index:].lower()


def is_excluded(relative: Union[str, PurePath], is_dir: bool, excluded: AbstractSet[str]) -> bool:
    """
    Decide whether an entry is left out of the archive.

    Args:
        relative: Entry path relative to the archive root ("" or "." is the root)
        is_dir: Whether the entry is a directory
        excluded: Lower-cased extensions with leading dot

    Returns:
        True if the entry must not be archived
    """
    rel = PurePath(relative)
    if str(rel) in ("", "."):
        return True
    if is_dir:
        return False
    return extension_of(rel.name) in excluded


class ArchiveMemberWalk:
    """
    Lazy sequence of archive members under a source path.

    A single-file source yields just that file, stored under its own name;
    the extension filter only applies to the contents of directories.

    Walk errors (vanished paths, permission problems) propagate to the
    consumer so that the archive job fails instead of producing a partial
    archive.
    """

    def __init__(self, root: Union[str, Path], excluded: AbstractSet[str]):
        self.root = Path(root)
        self.excluded = frozenset(excluded)

    def __iter__(self) -> Iterator[Tuple[Path, str]]:
        if not self.root.is_dir():
            yield self.root, self.root.name
            return

        for current, _, filenames in walk_following_links(self.root):
            relative_dir = current.relative_to(self.root)
            if not is_excluded(relative_dir, True, self.excluded):
                yield current, relative_dir.as_posix()

            for name in filenames:
                relative = relative_dir / name
                if is_excluded(relative, False, self.excluded):
                    logger.debug(f"Excluded from archive: {relative}")
                    continue
                yield current / name, relative.as_posix()
