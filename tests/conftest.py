"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from stockledger.api.dependencies import (
    get_inv_store,
    get_prod_store,
    get_record_movement_use_case,
    get_wh_store,
)
from stockledger.api.main import app
from stockledger.application.dto.requests import StockMovementRequest
from stockledger.application.use_cases.record_movement import RecordMovementUseCase
from stockledger.core.entities import MovementType, Product, Warehouse
from stockledger.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteInventoryStore,
    SQLiteProductStore,
    SQLiteWarehouseStore,
    TransactionCoordinator,
)
from stockledger.infrastructure.storage.sqlite.migrations import run_migrations


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "ledger.db"


@pytest.fixture
async def initialized_db(temp_db_path: Path) -> Path:
    """Temporary database with the full schema applied."""
    results = await run_migrations(temp_db_path)
    assert all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def pool(initialized_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Connection pool over the temporary database."""
    pool = ConnectionPool(initialized_db, pool_size=4, busy_timeout=5000, acquire_timeout=5.0)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def warehouse_store(pool: ConnectionPool) -> SQLiteWarehouseStore:
    return SQLiteWarehouseStore(pool)


@pytest.fixture
def product_store(pool: ConnectionPool) -> SQLiteProductStore:
    return SQLiteProductStore(pool)


@pytest.fixture
def inventory_store(pool: ConnectionPool) -> SQLiteInventoryStore:
    return SQLiteInventoryStore(pool)


@pytest.fixture
def coordinator(pool: ConnectionPool) -> TransactionCoordinator:
    return TransactionCoordinator(pool)


@pytest.fixture
def processor(
    coordinator: TransactionCoordinator,
    warehouse_store: SQLiteWarehouseStore,
    product_store: SQLiteProductStore,
) -> RecordMovementUseCase:
    return RecordMovementUseCase(
        coordinator=coordinator,
        warehouse_store=warehouse_store,
        product_store=product_store,
    )


@pytest.fixture
async def catalog(
    warehouse_store: SQLiteWarehouseStore,
    product_store: SQLiteProductStore,
) -> dict[str, int]:
    """Two warehouses and one product."""
    w1 = await warehouse_store.create(Warehouse(name="Main", code="W1"))
    w2 = await warehouse_store.create(Warehouse(name="Overflow", code="W2"))
    p = await product_store.create(Product(sku="SKU-P", name="Pallet jack"))
    return {"w1": w1.id, "w2": w2.id, "p": p.id}


@pytest.fixture
def movement():
    """Build a StockMovementRequest with keyword shortcuts."""

    def _build(
        movement_type: MovementType | str,
        warehouse_id: int,
        product_id: int,
        qty: int,
        warehouse_to_id: int | None = None,
        **extra,
    ) -> StockMovementRequest:
        return StockMovementRequest(
            movement_type=MovementType(movement_type),
            warehouse_id=warehouse_id,
            warehouse_to_id=warehouse_to_id,
            product_id=product_id,
            qty=qty,
            **extra,
        )

    return _build


@pytest.fixture
async def api_client(
    warehouse_store: SQLiteWarehouseStore,
    product_store: SQLiteProductStore,
    inventory_store: SQLiteInventoryStore,
    processor: RecordMovementUseCase,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with every store bound to the temporary database."""
    app.dependency_overrides[get_wh_store] = lambda: warehouse_store
    app.dependency_overrides[get_prod_store] = lambda: product_store
    app.dependency_overrides[get_inv_store] = lambda: inventory_store
    app.dependency_overrides[get_record_movement_use_case] = lambda: processor
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
