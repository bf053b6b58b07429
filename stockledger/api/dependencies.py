"""
Dependency injection container for FastAPI.

Provides store and use case instances to route handlers.
"""

from stockledger.application.use_cases import RecordMovementUseCase
from stockledger.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLiteProductStore,
    SQLiteWarehouseStore,
    get_inventory_store,
    get_product_store,
    get_warehouse_store,
)


# Catalog dependencies
async def get_wh_store() -> SQLiteWarehouseStore:
    """Get warehouse store."""
    return await get_warehouse_store()


async def get_prod_store() -> SQLiteProductStore:
    """Get product store."""
    return await get_product_store()


# Inventory dependencies
async def get_inv_store() -> SQLiteInventoryStore:
    """Get inventory query store."""
    return await get_inventory_store()


def get_record_movement_use_case() -> RecordMovementUseCase:
    """Get record movement use case."""
    return RecordMovementUseCase()
