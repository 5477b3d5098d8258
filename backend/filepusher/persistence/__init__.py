"""
Persistence layer for tracked items.

SQLite-backed storage with explicit batch saves.
"""

from .manager import PersistenceManager
from .errors import LoadError, PersistenceError, SaveError, SchemaError

__all__ = ["PersistenceManager", "PersistenceError", "SchemaError", "LoadError", "SaveError"]
