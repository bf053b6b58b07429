"""Abstract store interfaces."""

from stockledger.core.interfaces.catalog_store import IProductStore, IWarehouseStore
from stockledger.core.interfaces.inventory_store import (
    IInventoryLedger,
    IInventoryStore,
    IMovementLog,
)

__all__ = [
    "IInventoryLedger",
    "IInventoryStore",
    "IMovementLog",
    "IProductStore",
    "IWarehouseStore",
]
