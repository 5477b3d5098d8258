"""
Filesystem scanner for watch folders.

Lists the immediate children of a watched root. Each child is tracked as a
whole; nothing below the first level is enumerated here.
"""

from pathlib import Path
from typing import List, Union

from .errors import InvalidWatchFolderPathError, WatchFolderNotFoundError


class FolderScanner:
    """
    Lists candidate children of a watched folder.

    Children are returned in deterministic order (sorted by name).
    """

    def __init__(self, skip_hidden: bool = True):
        """
        Initialize folder scanner.

        Args:
            skip_hidden: Skip children whose name starts with '.' (default: True)
        """
        self.skip_hidden = skip_hidden

    def list_children(self, root: Union[str, Path]) -> List[Path]:
        """
        List the immediate children of a watched folder.

        Returns:
            Absolute child paths, sorted

        Raises:
            WatchFolderNotFoundError: If root does not exist
            InvalidWatchFolderPathError: If root is not a directory
            OSError: If root cannot be listed
        """
        folder_path = Path(root).absolute()

        if not folder_path.exists():
            raise WatchFolderNotFoundError(f"Watch folder path does not exist: {folder_path}")

        if not folder_path.is_dir():
            raise InvalidWatchFolderPathError(
                f"Watch folder path is not a directory: {folder_path}"
            )

        children = [
            child
            for child in folder_path.iterdir()
            if not (self.skip_hidden and child.name.startswith("."))
        ]
        return sorted(children)
