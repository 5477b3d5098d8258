"""
Archive engine — packages stable paths into .tbz2 archives.

Public API:
    ArchiveEngine — De-duplicated, bounded archive job dispatch
    ArchiveJob / ArchiveJobState — Ephemeral job model
    ArchiveMemberWalk — Filtered, restartable member sequence
    is_excluded — Pure member exclusion predicate
    write_archive — Pax tar writer with optional bzip2
    archive_path_for — Deterministic archive name
"""

from .engine import ArchiveEngine, delete_source
from .errors import ArchiveError, ArchiveSourceNotFoundError, ArchiveWriteError
from .filters import ArchiveMemberWalk, extension_of, is_excluded
from .models import ArchiveJob, ArchiveJobState
from .naming import ARCHIVE_SUFFIX, archive_path_for, is_archive_path
from .writer import COMPRESS_LEVEL, write_archive

__all__ = [
    # Errors
    "ArchiveError",
    "ArchiveSourceNotFoundError",
    "ArchiveWriteError",
    # Models
    "ArchiveJob",
    "ArchiveJobState",
    # Core
    "ArchiveEngine",
    "ArchiveMemberWalk",
    "delete_source",
    "extension_of",
    "is_excluded",
    "write_archive",
    "ARCHIVE_SUFFIX",
    "COMPRESS_LEVEL",
    "archive_path_for",
    "is_archive_path",
]
