"""
Test helpers shared across modules.
"""

from concurrent.futures import Future
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict

from filepusher.checksum.service import ChecksumService


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class InlineChecksumService(ChecksumService):
    """Runs asynchronous checksum requests in the calling thread."""

    def request_checksum(self, item_id: str) -> Future:
        future: Future = Future()
        future.set_result(self._run_request(item_id))
        return future


def make_tree(root: Path, files: Dict[str, str]) -> Path:
    """Create files (relative path -> text content) under root."""
    root.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root
