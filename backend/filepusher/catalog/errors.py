"""
Catalog error types.
"""


class CatalogError(Exception):
    """Base exception for item catalog failures."""

    pass


class ItemNotFoundError(CatalogError):
    """Raised when an item cannot be found in the catalog."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item not found: {item_id}")


class DuplicateItemError(CatalogError):
    """Raised when adding an item whose ID is already cataloged."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item with ID '{item_id}' already exists")
