"""
Item catalog — durable store of tracked items.
"""

from .catalog import ItemCatalog
from .errors import CatalogError, DuplicateItemError, ItemNotFoundError

__all__ = ["ItemCatalog", "CatalogError", "DuplicateItemError", "ItemNotFoundError"]
