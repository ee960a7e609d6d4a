"""SQLAlchemy models for ShelfMatch."""

from .base import Base
from .inventory_item import InventoryItem, ItemBarcode
from .item_alias import ItemAlias

__all__ = ["Base", "InventoryItem", "ItemBarcode", "ItemAlias"]
