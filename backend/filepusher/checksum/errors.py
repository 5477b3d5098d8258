"""
Checksum error types.
"""


class ChecksumError(Exception):
    """Raised when a checksum cannot be computed for an item."""

    def __init__(self, source_path: str, reason: str):
        self.source_path = source_path
        self.reason = reason
        super().__init__(f"Cannot compute checksum of {source_path}: {reason}")
