"""Warehouse catalog endpoints."""

from fastapi import APIRouter, Depends, Path, Query, Response, status

from stockledger.api.dependencies import get_wh_store
from stockledger.application.dto.requests import WarehouseCreateRequest, WarehousePatchRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    WarehouseListResponse,
    WarehouseResponse,
)
from stockledger.core.entities.catalog import Warehouse
from stockledger.core.entities.inventory import MAX_ID
from stockledger.core.exceptions import WarehouseNotFoundError
from stockledger.infrastructure.storage.sqlite import SQLiteWarehouseStore

router = APIRouter(prefix="/warehouses", tags=["warehouses"])


def _to_response(warehouse: Warehouse) -> WarehouseResponse:
    return WarehouseResponse(**warehouse.model_dump())


@router.post(
    "",
    response_model=WarehouseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_warehouse(
    request: WarehouseCreateRequest,
    response: Response,
    store: SQLiteWarehouseStore = Depends(get_wh_store),
) -> WarehouseResponse:
    """Create a warehouse. The code must be unique among live warehouses."""
    warehouse = await store.create(Warehouse(**request.model_dump()))
    response.headers["Location"] = f"/warehouses/{warehouse.id}"
    return _to_response(warehouse)


@router.get("", response_model=WarehouseListResponse)
async def list_warehouses(
    q: str = Query("", description="Substring match on name or code"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0, le=MAX_ID),
    include_deleted: bool = Query(False, alias="includeDeleted"),
    store: SQLiteWarehouseStore = Depends(get_wh_store),
) -> WarehouseListResponse:
    """List warehouses, newest first."""
    total, items = await store.list(q=q, limit=limit, offset=offset, include_deleted=include_deleted)
    return WarehouseListResponse(
        total=total,
        limit=limit,
        offset=offset,
        items=[_to_response(w) for w in items],
    )


@router.get(
    "/{warehouse_id}",
    response_model=WarehouseResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_warehouse(
    warehouse_id: int = Path(..., ge=1, le=MAX_ID),
    include_deleted: bool = Query(False, alias="includeDeleted"),
    store: SQLiteWarehouseStore = Depends(get_wh_store),
) -> WarehouseResponse:
    """Get a warehouse by ID."""
    warehouse = await store.get(warehouse_id, include_deleted=include_deleted)
    if warehouse is None:
        raise WarehouseNotFoundError(warehouse_id)
    return _to_response(warehouse)


@router.put(
    "/{warehouse_id}",
    response_model=WarehouseResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def replace_warehouse(
    request: WarehouseCreateRequest,
    warehouse_id: int = Path(..., ge=1, le=MAX_ID),
    store: SQLiteWarehouseStore = Depends(get_wh_store),
) -> WarehouseResponse:
    """Replace every editable field of a live warehouse."""
    warehouse = await store.update(warehouse_id, request.model_dump())
    return _to_response(warehouse)


@router.patch(
    "/{warehouse_id}",
    response_model=WarehouseResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def patch_warehouse(
    request: WarehousePatchRequest,
    warehouse_id: int = Path(..., ge=1, le=MAX_ID),
    store: SQLiteWarehouseStore = Depends(get_wh_store),
) -> WarehouseResponse:
    """Update only the fields present in the body."""
    warehouse = await store.update(warehouse_id, request.model_dump(exclude_unset=True))
    return _to_response(warehouse)


@router.delete(
    "/{warehouse_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_warehouse(
    warehouse_id: int = Path(..., ge=1, le=MAX_ID),
    hard: bool = Query(False, description="Physically remove the row. Refused if it has stock history."),
    store: SQLiteWarehouseStore = Depends(get_wh_store),
) -> Response:
    """Soft delete a warehouse (or hard delete with ``hard=true``)."""
    await store.delete(warehouse_id, hard=hard)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
