"""Response DTOs for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class ProviderHealthResponse(BaseModel):
    """Health status of a backing component."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None
    schema_version: str | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")


# --- Catalog ---


class WarehouseResponse(BaseModel):
    """Warehouse response DTO."""

    id: int
    name: str
    code: str
    address: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


class WarehouseListResponse(BaseModel):
    """Paginated warehouse list."""

    total: int
    limit: int
    offset: int
    items: list[WarehouseResponse]


class ProductResponse(BaseModel):
    """Product response DTO."""

    id: int
    sku: str
    name: str
    unit: str
    price: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


class ProductListResponse(BaseModel):
    """Paginated product list."""

    total: int
    limit: int
    offset: int
    items: list[ProductResponse]


# --- Inventory ---


class InventoryItemResponse(BaseModel):
    """Inventory row joined with catalog names."""

    warehouse_id: int
    warehouse_name: str
    product_id: int
    sku: str
    product_name: str
    unit: str | None = None
    qty: int
    updated_at: datetime | None = None


class InventoryListResponse(BaseModel):
    """Paginated inventory list."""

    total: int
    limit: int
    offset: int
    items: list[InventoryItemResponse]


class InventoryQuantityResponse(BaseModel):
    """Quantity of one product in one warehouse."""

    warehouse_id: int = Field(..., serialization_alias="warehouseId")
    product_id: int = Field(..., serialization_alias="productId")
    qty: int


class InventoryReconcileResponse(BaseModel):
    """Ledger quantity compared with the quantity rebuilt from the movement log."""

    warehouse_id: int = Field(..., serialization_alias="warehouseId")
    product_id: int = Field(..., serialization_alias="productId")
    qty: int
    log_qty: int
    consistent: bool


# --- Stock movements ---


class StockMovementResponse(BaseModel):
    """Stock movement response DTO."""

    id: int
    movement_type: str
    warehouse_id: int
    warehouse_to_id: int | None = None
    product_id: int
    qty: int
    reason: str | None = None
    ref_no: str | None = None
    src_qty_before: int | None = None
    src_qty_after: int | None = None
    dst_qty_before: int | None = None
    dst_qty_after: int | None = None
    created_at: datetime | None = None


class StockMovementListResponse(BaseModel):
    """Paginated movement history."""

    total: int
    limit: int
    offset: int
    items: list[StockMovementResponse]


class RecordMovementResponse(BaseModel):
    """Committed movement with the resulting quantities."""

    id: int
    movement_type: str
    warehouse_id: int
    warehouse_to_id: int | None = None
    product_id: int
    qty: int
    reason: str | None = None
    ref_no: str | None = None
    created_at: datetime | None = None
    after_qty_src: int
    after_qty_dst: int | None = None
