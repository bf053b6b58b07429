"""SQLite storage implementations."""

from stockledger.infrastructure.storage.sqlite.catalog_store import (
    SQLiteProductStore,
    SQLiteWarehouseStore,
)
from stockledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)
from stockledger.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from stockledger.infrastructure.storage.sqlite.ledger import SQLiteInventoryLedger
from stockledger.infrastructure.storage.sqlite.movement_log import SQLiteMovementLog
from stockledger.infrastructure.storage.sqlite.unit_of_work import (
    TransactionCoordinator,
    UnitOfWork,
)

# Singleton instances
_warehouse_store: SQLiteWarehouseStore | None = None
_product_store: SQLiteProductStore | None = None
_inventory_store: SQLiteInventoryStore | None = None
_coordinator: TransactionCoordinator | None = None


async def get_warehouse_store() -> SQLiteWarehouseStore:
    """Get singleton warehouse store instance."""
    global _warehouse_store
    if _warehouse_store is None:
        _warehouse_store = SQLiteWarehouseStore(await get_pool())
    return _warehouse_store


async def get_product_store() -> SQLiteProductStore:
    """Get singleton product store instance."""
    global _product_store
    if _product_store is None:
        _product_store = SQLiteProductStore(await get_pool())
    return _product_store


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory query store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore(await get_pool())
    return _inventory_store


async def get_transaction_coordinator() -> TransactionCoordinator:
    """Get singleton transaction coordinator instance."""
    global _coordinator
    if _coordinator is None:
        _coordinator = TransactionCoordinator(await get_pool())
    return _coordinator


async def close_storage() -> None:
    """Close the global pool and drop store singletons bound to it."""
    global _warehouse_store, _product_store, _inventory_store, _coordinator
    await close_pool()
    _warehouse_store = None
    _product_store = None
    _inventory_store = None
    _coordinator = None


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "close_storage",
    # Store classes
    "SQLiteInventoryLedger",
    "SQLiteInventoryStore",
    "SQLiteMovementLog",
    "SQLiteProductStore",
    "SQLiteWarehouseStore",
    "TransactionCoordinator",
    "UnitOfWork",
    # Factory functions
    "get_inventory_store",
    "get_product_store",
    "get_transaction_coordinator",
    "get_warehouse_store",
]
