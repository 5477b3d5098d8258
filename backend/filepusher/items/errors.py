"""
Tracked item error types.
"""


class ItemError(Exception):
    """Base exception for tracked item failures."""

    pass


class InvalidStatusTransitionError(ItemError):
    """Raised when attempting an illegal status transition."""

    def __init__(self, source_path: str, current_status: str, target_status: str):
        self.source_path = source_path
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Invalid status transition for {source_path}: "
            f"{current_status} -> {target_status}"
        )
