"""Product catalog endpoints."""

from fastapi import APIRouter, Depends, Path, Query, Response, status

from stockledger.api.dependencies import get_prod_store
from stockledger.application.dto.requests import ProductCreateRequest, ProductPatchRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
)
from stockledger.core.entities.catalog import Product
from stockledger.core.entities.inventory import MAX_ID
from stockledger.core.exceptions import ProductNotFoundError
from stockledger.infrastructure.storage.sqlite import SQLiteProductStore

router = APIRouter(prefix="/products", tags=["products"])


def _to_response(product: Product) -> ProductResponse:
    return ProductResponse(**product.model_dump())


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_product(
    request: ProductCreateRequest,
    response: Response,
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ProductResponse:
    """Create a product. The SKU must be unique among live products."""
    product = await store.create(Product(**request.model_dump()))
    response.headers["Location"] = f"/products/{product.id}"
    return _to_response(product)


@router.get("", response_model=ProductListResponse)
async def list_products(
    q: str = Query("", description="Substring match on name or SKU"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0, le=MAX_ID),
    include_deleted: bool = Query(False, alias="includeDeleted"),
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ProductListResponse:
    """List products, newest first."""
    total, items = await store.list(q=q, limit=limit, offset=offset, include_deleted=include_deleted)
    return ProductListResponse(
        total=total,
        limit=limit,
        offset=offset,
        items=[_to_response(p) for p in items],
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: int = Path(..., ge=1, le=MAX_ID),
    include_deleted: bool = Query(False, alias="includeDeleted"),
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ProductResponse:
    """Get a product by ID."""
    product = await store.get(product_id, include_deleted=include_deleted)
    if product is None:
        raise ProductNotFoundError(product_id)
    return _to_response(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def replace_product(
    request: ProductCreateRequest,
    product_id: int = Path(..., ge=1, le=MAX_ID),
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ProductResponse:
    """Replace every editable field of a live product."""
    product = await store.update(product_id, request.model_dump())
    return _to_response(product)


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def patch_product(
    request: ProductPatchRequest,
    product_id: int = Path(..., ge=1, le=MAX_ID),
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ProductResponse:
    """Update only the fields present in the body."""
    product = await store.update(product_id, request.model_dump(exclude_unset=True))
    return _to_response(product)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: int = Path(..., ge=1, le=MAX_ID),
    hard: bool = Query(False, description="Physically remove the row. Refused if it has stock history."),
    store: SQLiteProductStore = Depends(get_prod_store),
) -> Response:
    """Soft delete a product (or hard delete with ``hard=true``)."""
    await store.delete(product_id, hard=hard)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
