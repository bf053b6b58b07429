"""API tests for stock movements and inventory queries."""

from unittest.mock import AsyncMock, patch

from httpx import AsyncClient

from stockledger.application.use_cases.record_movement import RecordMovementUseCase
from stockledger.core.entities import MAX_QTY
from stockledger.core.exceptions import BusyError


async def _move(client: AsyncClient, movement_type: str, warehouse_id: int, product_id: int, qty, **extra):
    body = {
        "movement_type": movement_type,
        "warehouse_id": warehouse_id,
        "product_id": product_id,
        "qty": qty,
    }
    body.update(extra)
    return await client.post("/stock-movements", json=body)


class TestRecordMovement:
    async def test_in_returns_after_quantity(self, api_client: AsyncClient, catalog):
        response = await _move(api_client, "IN", catalog["w1"], catalog["p"], 100, ref_no="PO-1")
        assert response.status_code == 200
        data = response.json()
        assert data["movement_type"] == "IN"
        assert data["after_qty_src"] == 100
        assert data["after_qty_dst"] is None
        assert data["ref_no"] == "PO-1"
        assert data["id"] >= 1

    async def test_transfer_reports_both_sides(self, api_client: AsyncClient, catalog):
        await _move(api_client, "IN", catalog["w1"], catalog["p"], 70)
        response = await _move(
            api_client, "TRANSFER", catalog["w1"], catalog["p"], 40, warehouse_to_id=catalog["w2"]
        )
        assert response.status_code == 200
        data = response.json()
        assert data["after_qty_src"] == 30
        assert data["after_qty_dst"] == 40
        assert data["warehouse_to_id"] == catalog["w2"]

    async def test_insufficient_stock_is_400(self, api_client: AsyncClient, catalog):
        await _move(api_client, "IN", catalog["w1"], catalog["p"], 70)
        response = await _move(api_client, "OUT", catalog["w1"], catalog["p"], 100)
        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "INSUFFICIENT_STOCK"
        assert "available 70" in data["message"]

        qty = await api_client.get(f"/inventory/{catalog['w1']}/{catalog['p']}")
        assert qty.json()["qty"] == 70

    async def test_transfer_without_destination_is_400(self, api_client: AsyncClient, catalog):
        response = await _move(api_client, "TRANSFER", catalog["w1"], catalog["p"], 5)
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_MOVEMENT"

    async def test_transfer_to_same_warehouse_is_400(self, api_client: AsyncClient, catalog):
        response = await _move(
            api_client, "TRANSFER", catalog["w1"], catalog["p"], 5, warehouse_to_id=catalog["w1"]
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_MOVEMENT"

    async def test_destination_on_in_is_400(self, api_client: AsyncClient, catalog):
        response = await _move(api_client, "IN", catalog["w1"], catalog["p"], 5, warehouse_to_id=catalog["w2"])
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_MOVEMENT"

    async def test_bad_quantities_are_400(self, api_client: AsyncClient, catalog):
        for qty in (0, -3, 1.5, "4"):
            response = await _move(api_client, "IN", catalog["w1"], catalog["p"], qty)
            assert response.status_code == 400, qty
            assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_oversized_numbers_are_400(self, api_client: AsyncClient, catalog):
        response = await _move(api_client, "IN", catalog["w1"], catalog["p"], 2**63)
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

        response = await _move(api_client, "IN", 2**70, catalog["p"], 1)
        assert response.status_code == 400

        response = await api_client.get(f"/inventory/{2**64}/{catalog['p']}")
        assert response.status_code == 400

    async def test_credit_past_ceiling_is_400(self, api_client: AsyncClient, catalog):
        first = await _move(api_client, "IN", catalog["w1"], catalog["p"], MAX_QTY)
        assert first.status_code == 200

        response = await _move(api_client, "IN", catalog["w1"], catalog["p"], 1)
        assert response.status_code == 400
        assert response.json()["error_code"] == "QUANTITY_LIMIT"

        qty = await api_client.get(f"/inventory/{catalog['w1']}/{catalog['p']}")
        assert qty.json()["qty"] == MAX_QTY

    async def test_busy_store_is_409_with_retry_after(
        self, api_client: AsyncClient, processor: RecordMovementUseCase, catalog
    ):
        busy = AsyncMock(side_effect=BusyError("begin_transaction", 5.0))
        with patch.object(processor, "execute", busy):
            response = await _move(api_client, "IN", catalog["w1"], catalog["p"], 1)

        assert response.status_code == 409
        assert response.headers["Retry-After"] == "1"
        assert response.json()["error_code"] == "BUSY"

    async def test_unknown_type_is_400(self, api_client: AsyncClient, catalog):
        response = await _move(api_client, "RETURN", catalog["w1"], catalog["p"], 1)
        assert response.status_code == 400

    async def test_unknown_product_is_404(self, api_client: AsyncClient, catalog):
        response = await _move(api_client, "IN", catalog["w1"], 999, 1)
        assert response.status_code == 404
        assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"

    async def test_deleted_warehouse_is_404(self, api_client: AsyncClient, catalog):
        await api_client.delete(f"/warehouses/{catalog['w2']}")
        response = await _move(api_client, "IN", catalog["w2"], catalog["p"], 1)
        assert response.status_code == 404
        assert response.json()["error_code"] == "WAREHOUSE_NOT_FOUND"


class TestMovementHistory:
    async def test_list_filters(self, api_client: AsyncClient, catalog):
        await _move(api_client, "IN", catalog["w1"], catalog["p"], 50, ref_no="PO-9")
        await _move(api_client, "OUT", catalog["w1"], catalog["p"], 5)
        await _move(api_client, "TRANSFER", catalog["w1"], catalog["p"], 10, warehouse_to_id=catalog["w2"])

        data = (await api_client.get("/stock-movements")).json()
        assert data["total"] == 3
        assert [m["movement_type"] for m in data["items"]] == ["TRANSFER", "OUT", "IN"]

        data = (await api_client.get("/stock-movements", params={"type": "IN"})).json()
        assert data["total"] == 1

        data = (await api_client.get("/stock-movements", params={"warehouseId": catalog["w2"]})).json()
        assert data["total"] == 1
        assert data["items"][0]["movement_type"] == "TRANSFER"

        data = (await api_client.get("/stock-movements", params={"ref": "PO"})).json()
        assert data["items"][0]["ref_no"] == "PO-9"

    async def test_history_survives_soft_delete(self, api_client: AsyncClient, catalog):
        await _move(api_client, "IN", catalog["w1"], catalog["p"], 5)
        await api_client.delete(f"/products/{catalog['p']}")

        data = (await api_client.get("/stock-movements", params={"productId": catalog["p"]})).json()
        assert data["total"] == 1


class TestInventoryQueries:
    async def test_quantity_uses_camel_case_keys(self, api_client: AsyncClient, catalog):
        await _move(api_client, "IN", catalog["w1"], catalog["p"], 12)
        response = await api_client.get(f"/inventory/{catalog['w1']}/{catalog['p']}")
        assert response.status_code == 200
        assert response.json() == {"warehouseId": catalog["w1"], "productId": catalog["p"], "qty": 12}

    async def test_unstocked_pair_is_zero(self, api_client: AsyncClient, catalog):
        response = await api_client.get(f"/inventory/{catalog['w2']}/{catalog['p']}")
        assert response.json()["qty"] == 0

    async def test_list_joined_rows(self, api_client: AsyncClient, catalog):
        await _move(api_client, "IN", catalog["w1"], catalog["p"], 12)
        await _move(api_client, "IN", catalog["w2"], catalog["p"], 3)

        data = (await api_client.get("/inventory", params={"warehouseId": catalog["w1"]})).json()
        assert data["total"] == 1
        item = data["items"][0]
        assert item["warehouse_name"] == "Main"
        assert item["sku"] == "SKU-P"
        assert item["qty"] == 12

    async def test_reconcile(self, api_client: AsyncClient, catalog):
        await _move(api_client, "IN", catalog["w1"], catalog["p"], 20)
        await _move(api_client, "TRANSFER", catalog["w1"], catalog["p"], 8, warehouse_to_id=catalog["w2"])

        data = (await api_client.get(f"/inventory/{catalog['w1']}/{catalog['p']}/reconcile")).json()
        assert data == {
            "warehouseId": catalog["w1"],
            "productId": catalog["p"],
            "qty": 12,
            "log_qty": 12,
            "consistent": True,
        }
