"""Domain entities."""

from stockledger.core.entities.catalog import Product, Warehouse
from stockledger.core.entities.inventory import (
    MAX_ID,
    MAX_QTY,
    InventoryRecord,
    InventoryView,
    MovementType,
    StockMovement,
)

__all__ = [
    "MAX_ID",
    "MAX_QTY",
    "InventoryRecord",
    "InventoryView",
    "MovementType",
    "Product",
    "StockMovement",
    "Warehouse",
]
