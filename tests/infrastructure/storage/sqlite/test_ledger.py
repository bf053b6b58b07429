"""Tests for the inventory ledger and movement log inside a unit of work."""

import aiosqlite
import pytest

from stockledger.core.entities import MAX_QTY, MovementType, StockMovement
from stockledger.core.exceptions import InsufficientStockError, QuantityLimitError
from stockledger.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteInventoryLedger,
    SQLiteInventoryStore,
    SQLiteMovementLog,
    TransactionCoordinator,
)


class TestInventoryLedger:
    async def test_missing_row_reads_zero(self, coordinator: TransactionCoordinator, catalog):
        async with coordinator.unit_of_work() as uow:
            assert await uow.ledger.get(catalog["w1"], catalog["p"]) == 0

    async def test_adjust_creates_row(
        self,
        coordinator: TransactionCoordinator,
        inventory_store: SQLiteInventoryStore,
        catalog,
    ):
        async with coordinator.unit_of_work() as uow:
            assert await uow.ledger.adjust(catalog["w1"], catalog["p"], 25) == 25
            assert await uow.ledger.adjust(catalog["w1"], catalog["p"], 5) == 30

        assert await inventory_store.get_quantity(catalog["w1"], catalog["p"]) == 30

    async def test_debit_to_zero_allowed(self, coordinator: TransactionCoordinator, catalog):
        async with coordinator.unit_of_work() as uow:
            await uow.ledger.adjust(catalog["w1"], catalog["p"], 10)
            assert await uow.ledger.adjust(catalog["w1"], catalog["p"], -10) == 0

    async def test_negative_result_raises_and_rolls_back(
        self,
        coordinator: TransactionCoordinator,
        inventory_store: SQLiteInventoryStore,
        catalog,
    ):
        async with coordinator.unit_of_work() as uow:
            await uow.ledger.adjust(catalog["w1"], catalog["p"], 40)

        with pytest.raises(InsufficientStockError) as exc_info:
            async with coordinator.unit_of_work() as uow:
                await uow.ledger.adjust(catalog["w1"], catalog["p"], -60)

        assert exc_info.value.details["requested"] == 60
        assert exc_info.value.details["available"] == 40
        assert await inventory_store.get_quantity(catalog["w1"], catalog["p"]) == 40

    async def test_credit_past_ceiling_raises_and_rolls_back(
        self,
        coordinator: TransactionCoordinator,
        inventory_store: SQLiteInventoryStore,
        catalog,
    ):
        async with coordinator.unit_of_work() as uow:
            assert await uow.ledger.adjust(catalog["w1"], catalog["p"], MAX_QTY) == MAX_QTY

        with pytest.raises(QuantityLimitError) as exc_info:
            async with coordinator.unit_of_work() as uow:
                await uow.ledger.adjust(catalog["w1"], catalog["p"], MAX_QTY)

        assert exc_info.value.details["limit"] == MAX_QTY
        assert await inventory_store.get_quantity(catalog["w1"], catalog["p"]) == MAX_QTY

    async def test_debit_on_unstocked_pair_leaves_no_row(
        self,
        coordinator: TransactionCoordinator,
        inventory_store: SQLiteInventoryStore,
        catalog,
    ):
        with pytest.raises(InsufficientStockError):
            async with coordinator.unit_of_work() as uow:
                await uow.ledger.adjust(catalog["w1"], catalog["p"], -1)

        total, items = await inventory_store.list_inventory()
        assert total == 0
        assert items == []

    async def test_adjust_requires_transaction(self, pool: ConnectionPool, catalog):
        async with pool.acquire() as conn:
            ledger = SQLiteInventoryLedger(conn)
            with pytest.raises(RuntimeError):
                await ledger.adjust(catalog["w1"], catalog["p"], 1)


class TestMovementLog:
    def _movement(self, catalog, **overrides) -> StockMovement:
        values = {
            "movement_type": MovementType.IN,
            "warehouse_id": catalog["w1"],
            "product_id": catalog["p"],
            "qty": 5,
        }
        values.update(overrides)
        return StockMovement(**values)

    async def test_append_assigns_id_and_timestamp(self, coordinator: TransactionCoordinator, catalog):
        async with coordinator.unit_of_work() as uow:
            first = await uow.movements.append(self._movement(catalog))
            second = await uow.movements.append(self._movement(catalog, ref_no="PO-2"))

        assert first.id is not None
        assert second.id > first.id
        assert first.created_at is not None

    async def test_append_requires_transaction(self, pool: ConnectionPool, catalog):
        async with pool.acquire() as conn:
            with pytest.raises(RuntimeError):
                await SQLiteMovementLog(conn).append(self._movement(catalog))

    async def test_rows_cannot_be_updated_or_deleted(
        self,
        pool: ConnectionPool,
        coordinator: TransactionCoordinator,
        catalog,
    ):
        async with coordinator.unit_of_work() as uow:
            movement = await uow.movements.append(self._movement(catalog))

        with pytest.raises(aiosqlite.IntegrityError, match="append-only"):
            async with pool.transaction() as conn:
                await conn.execute("UPDATE stock_movements SET qty = 1 WHERE id = ?", (movement.id,))

        with pytest.raises(aiosqlite.IntegrityError, match="append-only"):
            async with pool.transaction() as conn:
                await conn.execute("DELETE FROM stock_movements WHERE id = ?", (movement.id,))

    async def test_destination_only_for_transfer_rows(self, coordinator: TransactionCoordinator, catalog):
        with pytest.raises(aiosqlite.IntegrityError):
            async with coordinator.unit_of_work() as uow:
                await uow.movements.append(self._movement(catalog, movement_type=MovementType.TRANSFER))
