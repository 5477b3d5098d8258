"""
Archive naming.

The archive of ``/watch/Show.S01`` is always ``/watch/Show.S01.tbz2``.
The name is deterministic so that an existing archive can be detected before
any work is scheduled.
"""

from pathlib import Path
from typing import Union

# tar + bzip2
ARCHIVE_SUFFIX = ".tbz2"


def archive_path_for(source: Union[str, Path]) -> Path:
    """Return the sibling archive path for a source file or directory."""
    source_path = Path(source)
    return source_path.parent / (source_path.name + ARCHIVE_SUFFIX)


def is_archive_path(path: Union[str, Path]) -> bool:
    return Path(path).name.endswith(ARCHIVE_SUFFIX)
