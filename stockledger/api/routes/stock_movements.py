"""Stock movement endpoints."""

from fastapi import APIRouter, Depends, Query

from stockledger.api.dependencies import get_inv_store, get_record_movement_use_case
from stockledger.application.dto.requests import StockMovementRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    RecordMovementResponse,
    StockMovementListResponse,
    StockMovementResponse,
)
from stockledger.application.use_cases.record_movement import RecordMovementUseCase
from stockledger.core.entities.inventory import MAX_ID, MovementType
from stockledger.infrastructure.storage.sqlite import SQLiteInventoryStore

router = APIRouter(prefix="/stock-movements", tags=["stock-movements"])


@router.post(
    "",
    response_model=RecordMovementResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_movement(
    request: StockMovementRequest,
    use_case: RecordMovementUseCase = Depends(get_record_movement_use_case),
) -> RecordMovementResponse:
    """Record a movement and return the quantities after commit."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=StockMovementListResponse)
async def list_movements(
    warehouse_id: int | None = Query(None, alias="warehouseId", ge=1, le=MAX_ID),
    product_id: int | None = Query(None, alias="productId", ge=1, le=MAX_ID),
    movement_type: MovementType | None = Query(None, alias="type"),
    ref: str | None = Query(None, description="Substring match on ref_no"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0, le=MAX_ID),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> StockMovementListResponse:
    """Movement history, newest first."""
    total, movements = await store.list_movements(
        warehouse_id=warehouse_id,
        product_id=product_id,
        movement_type=movement_type,
        ref=ref,
        limit=limit,
        offset=offset,
    )
    return StockMovementListResponse(
        total=total,
        limit=limit,
        offset=offset,
        items=[
            StockMovementResponse(
                **m.model_dump(exclude={"movement_type"}),
                movement_type=m.movement_type.value,
            )
            for m in movements
        ],
    )
