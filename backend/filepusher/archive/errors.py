"""
Archive error hierarchy.

Archive errors never escape a worker: a failed job is logged, the source is
kept and the path may be submitted again.
"""


class ArchiveError(Exception):
    """Base exception for archive failures."""

    pass


class ArchiveSourceNotFoundError(ArchiveError):
    """The path submitted for archiving does not exist."""

    def __init__(self, source_path: str):
        self.source_path = source_path
        super().__init__(f"Archive source does not exist: {source_path}")


class ArchiveWriteError(ArchiveError):
    """Writing the archive stream failed part way through."""

    def __init__(self, target_path: str, reason: str):
        self.target_path = target_path
        self.reason = reason
        super().__init__(f"Failed to write archive {target_path}: {reason}")
