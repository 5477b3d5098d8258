"""
Read-only monitoring API.
"""

from .errors import ItemNotFoundError, MonitoringError
from .server import router

__all__ = ["router", "MonitoringError", "ItemNotFoundError"]
