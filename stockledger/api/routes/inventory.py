"""Inventory query endpoints."""

from fastapi import APIRouter, Depends, Path, Query

from stockledger.api.dependencies import get_inv_store
from stockledger.application.dto.responses import (
    InventoryItemResponse,
    InventoryListResponse,
    InventoryQuantityResponse,
    InventoryReconcileResponse,
)
from stockledger.config import get_logger
from stockledger.core.entities.inventory import MAX_ID
from stockledger.infrastructure.storage.sqlite import SQLiteInventoryStore

logger = get_logger(__name__)

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("", response_model=InventoryListResponse)
async def list_inventory(
    warehouse_id: int | None = Query(None, alias="warehouseId", ge=1, le=MAX_ID),
    product_id: int | None = Query(None, alias="productId", ge=1, le=MAX_ID),
    q: str = Query("", description="Substring match on SKU or product name"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0, le=MAX_ID),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> InventoryListResponse:
    """List inventory rows for live warehouses and products."""
    total, items = await store.list_inventory(
        warehouse_id=warehouse_id,
        product_id=product_id,
        q=q,
        limit=limit,
        offset=offset,
    )
    return InventoryListResponse(
        total=total,
        limit=limit,
        offset=offset,
        items=[InventoryItemResponse(**item.model_dump()) for item in items],
    )


@router.get("/{warehouse_id}/{product_id}", response_model=InventoryQuantityResponse)
async def get_quantity(
    warehouse_id: int = Path(..., ge=1, le=MAX_ID),
    product_id: int = Path(..., ge=1, le=MAX_ID),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> InventoryQuantityResponse:
    """Current quantity. A pair that was never stocked reports 0."""
    qty = await store.get_quantity(warehouse_id, product_id)
    return InventoryQuantityResponse(warehouse_id=warehouse_id, product_id=product_id, qty=qty)


@router.get("/{warehouse_id}/{product_id}/reconcile", response_model=InventoryReconcileResponse)
async def reconcile_quantity(
    warehouse_id: int = Path(..., ge=1, le=MAX_ID),
    product_id: int = Path(..., ge=1, le=MAX_ID),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> InventoryReconcileResponse:
    """Compare the ledger quantity with the sum of the movement log."""
    qty = await store.get_quantity(warehouse_id, product_id)
    log_qty = await store.log_quantity(warehouse_id, product_id)
    if qty != log_qty:
        logger.error(
            "ledger_log_mismatch",
            warehouse_id=warehouse_id,
            product_id=product_id,
            qty=qty,
            log_qty=log_qty,
        )
    return InventoryReconcileResponse(
        warehouse_id=warehouse_id,
        product_id=product_id,
        qty=qty,
        log_qty=log_qty,
        consistent=qty == log_qty,
    )
