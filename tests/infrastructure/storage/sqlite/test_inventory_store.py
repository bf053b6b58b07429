"""Tests for inventory and movement history queries."""

from stockledger.application.use_cases.record_movement import RecordMovementUseCase
from stockledger.core.entities import MovementType, Product
from stockledger.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLiteProductStore,
    SQLiteWarehouseStore,
)


class TestInventoryQueries:
    async def test_unstocked_pair_reads_zero(self, inventory_store: SQLiteInventoryStore, catalog):
        assert await inventory_store.get_quantity(catalog["w1"], catalog["p"]) == 0

    async def test_list_joins_catalog(
        self,
        inventory_store: SQLiteInventoryStore,
        processor: RecordMovementUseCase,
        movement,
        catalog,
    ):
        await processor.execute(movement("IN", catalog["w1"], catalog["p"], 10))
        await processor.execute(movement("IN", catalog["w2"], catalog["p"], 4))

        total, items = await inventory_store.list_inventory()
        assert total == 2
        assert [(i.warehouse_name, i.qty) for i in items] == [("Main", 10), ("Overflow", 4)]
        assert items[0].sku == "SKU-P"
        assert items[0].product_name == "Pallet jack"
        assert items[0].unit == "pcs"

        total, items = await inventory_store.list_inventory(warehouse_id=catalog["w2"])
        assert total == 1
        assert items[0].qty == 4

    async def test_list_hides_deleted_catalog_rows(
        self,
        inventory_store: SQLiteInventoryStore,
        warehouse_store: SQLiteWarehouseStore,
        processor: RecordMovementUseCase,
        movement,
        catalog,
    ):
        await processor.execute(movement("IN", catalog["w1"], catalog["p"], 10))
        await processor.execute(movement("IN", catalog["w2"], catalog["p"], 4))
        await warehouse_store.delete(catalog["w2"])

        total, items = await inventory_store.list_inventory()
        assert total == 1
        assert items[0].warehouse_id == catalog["w1"]

    async def test_list_search_by_sku(
        self,
        inventory_store: SQLiteInventoryStore,
        product_store: SQLiteProductStore,
        processor: RecordMovementUseCase,
        movement,
        catalog,
    ):
        other = await product_store.create(Product(sku="ZZ-9", name="Shrink wrap"))
        await processor.execute(movement("IN", catalog["w1"], catalog["p"], 1))
        await processor.execute(movement("IN", catalog["w1"], other.id, 2))

        total, items = await inventory_store.list_inventory(q="wrap")
        assert total == 1
        assert items[0].product_id == other.id


class TestMovementHistory:
    async def test_newest_first_and_filters(
        self,
        inventory_store: SQLiteInventoryStore,
        processor: RecordMovementUseCase,
        movement,
        catalog,
    ):
        await processor.execute(movement("IN", catalog["w1"], catalog["p"], 50, ref_no="PO-100"))
        await processor.execute(movement("OUT", catalog["w1"], catalog["p"], 5, ref_no="SO-7"))
        await processor.execute(
            movement("TRANSFER", catalog["w1"], catalog["p"], 10, warehouse_to_id=catalog["w2"])
        )

        total, items = await inventory_store.list_movements()
        assert total == 3
        assert [m.movement_type for m in items] == [
            MovementType.TRANSFER,
            MovementType.OUT,
            MovementType.IN,
        ]

        total, items = await inventory_store.list_movements(movement_type=MovementType.OUT)
        assert total == 1
        assert items[0].ref_no == "SO-7"

        total, items = await inventory_store.list_movements(ref="PO-")
        assert total == 1
        assert items[0].qty == 50

    async def test_warehouse_filter_matches_destination(
        self,
        inventory_store: SQLiteInventoryStore,
        processor: RecordMovementUseCase,
        movement,
        catalog,
    ):
        await processor.execute(movement("IN", catalog["w1"], catalog["p"], 20))
        await processor.execute(
            movement("TRANSFER", catalog["w1"], catalog["p"], 8, warehouse_to_id=catalog["w2"])
        )

        total, items = await inventory_store.list_movements(warehouse_id=catalog["w2"])
        assert total == 1
        assert items[0].warehouse_to_id == catalog["w2"]
        assert items[0].dst_qty_before == 0
        assert items[0].dst_qty_after == 8

    async def test_paging(
        self,
        inventory_store: SQLiteInventoryStore,
        processor: RecordMovementUseCase,
        movement,
        catalog,
    ):
        for qty in range(1, 6):
            await processor.execute(movement("IN", catalog["w1"], catalog["p"], qty))

        total, items = await inventory_store.list_movements(limit=2, offset=2)
        assert total == 5
        assert [m.qty for m in items] == [3, 2]


class TestLogQuantity:
    async def test_matches_ledger(
        self,
        inventory_store: SQLiteInventoryStore,
        processor: RecordMovementUseCase,
        movement,
        catalog,
    ):
        w1, w2, p = catalog["w1"], catalog["w2"], catalog["p"]
        await processor.execute(movement("IN", w1, p, 100))
        await processor.execute(movement("OUT", w1, p, 15))
        await processor.execute(movement("TRANSFER", w1, p, 30, warehouse_to_id=w2))
        await processor.execute(movement("ADJUST", w2, p, 2))

        assert await inventory_store.log_quantity(w1, p) == 55
        assert await inventory_store.log_quantity(w2, p) == 32
        assert await inventory_store.get_quantity(w1, p) == 55
        assert await inventory_store.get_quantity(w2, p) == 32

    async def test_no_history_is_zero(self, inventory_store: SQLiteInventoryStore, catalog):
        assert await inventory_store.log_quantity(catalog["w1"], catalog["p"]) == 0
