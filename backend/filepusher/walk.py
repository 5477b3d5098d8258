"""
Directory walking shared by snapshots, checksums and archiving.

Symbolic links are followed. A directory reached a second time (through a
link back up the tree or a second link to the same place) is not descended
again, so link loops end instead of failing with ELOOP.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Set, Tuple, Union

logger = logging.getLogger(__name__)


def _raise(error: OSError) -> None:
    raise error


def walk_following_links(root: Union[str, Path]) -> Iterator[Tuple[Path, List[str], List[str]]]:
    """
    Walk a directory tree top-down, following symbolic links.

    Yields:
        (directory, sorted subdirectory names, sorted file names)

    Raises:
        OSError: If a directory cannot be listed
    """
    visited: Set[str] = set()
    for dirpath, dirnames, filenames in os.walk(root, followlinks=True, onerror=_raise):
        current = Path(dirpath)
        real = os.path.realpath(current)
        if real in visited:
            logger.warning(f"Skipping directory loop at {current}")
            dirnames[:] = []
            continue
        visited.add(real)
        dirnames.sort()
        yield current, dirnames, sorted(filenames)
