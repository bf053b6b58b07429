"""
Request DTOs for API endpoints.

Bodies reject unknown fields and strip surrounding whitespace from strings.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from stockledger.core.entities.inventory import MAX_ID, MAX_QTY, MovementType


class _RequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


def _require_changes(values: Any, non_nullable: tuple[str, ...]) -> Any:
    """PATCH bodies need at least one field, and some fields cannot be cleared."""
    if isinstance(values, dict):
        if not values:
            raise ValueError("at least one field is required")
        for field in non_nullable:
            if field in values and values[field] is None:
                raise ValueError(f"{field} cannot be null")
    return values


# --- Warehouses ---


class WarehouseCreateRequest(_RequestModel):
    """Request to create, or fully replace, a warehouse."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    code: str = Field(..., min_length=1, max_length=50, description="Unique business code")
    address: str | None = Field(default=None, max_length=255)


class WarehousePatchRequest(_RequestModel):
    """Partial warehouse update. Explicit null clears the address."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    code: str | None = Field(default=None, min_length=1, max_length=50)
    address: str | None = Field(default=None, max_length=255)

    @model_validator(mode="before")
    @classmethod
    def check_fields(cls, values: Any) -> Any:
        return _require_changes(values, ("name", "code"))


# --- Products ---


class ProductCreateRequest(_RequestModel):
    """Request to create, or fully replace, a product."""

    sku: str = Field(..., min_length=1, max_length=100, description="Unique stock keeping unit")
    name: str = Field(..., min_length=1, max_length=200)
    unit: str = Field(default="pcs", min_length=1, max_length=20, description="Unit of measure")
    price: float | None = Field(default=None, ge=0)


class ProductPatchRequest(_RequestModel):
    """Partial product update. Explicit null clears the price."""

    sku: str | None = Field(default=None, min_length=1, max_length=100)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    unit: str | None = Field(default=None, min_length=1, max_length=20)
    price: float | None = Field(default=None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def check_fields(cls, values: Any) -> Any:
        return _require_changes(values, ("sku", "name", "unit"))


# --- Stock movements ---


class StockMovementRequest(_RequestModel):
    """Request to record an IN, OUT, TRANSFER or ADJUST movement."""

    movement_type: MovementType
    warehouse_id: int = Field(..., ge=1, le=MAX_ID, strict=True, description="Source warehouse")
    warehouse_to_id: int | None = Field(
        default=None, ge=1, le=MAX_ID, strict=True, description="Destination warehouse, TRANSFER only"
    )
    product_id: int = Field(..., ge=1, le=MAX_ID, strict=True)
    qty: int = Field(..., gt=0, le=MAX_QTY, strict=True, description="Positive whole quantity")
    reason: str | None = Field(default=None, max_length=255)
    ref_no: str | None = Field(default=None, max_length=100, description="External reference")
