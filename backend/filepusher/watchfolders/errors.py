"""
Watch folder error hierarchy.

All errors are non-fatal to the application. They indicate that one folder
could not be scanned this cycle; the scheduler keeps running.
"""


class WatchFolderError(Exception):
    """Base exception for watch folder failures."""

    pass


class WatchFolderNotFoundError(WatchFolderError):
    """Watch folder path does not exist or is not accessible."""

    pass


class InvalidWatchFolderPathError(WatchFolderError):
    """Watch folder path is not a directory."""

    pass
