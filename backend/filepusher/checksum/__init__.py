"""
Content checksums for tracked items.
"""

from .errors import ChecksumError
from .service import ChecksumService, adler32_of_path

__all__ = ["ChecksumError", "ChecksumService", "adler32_of_path"]
