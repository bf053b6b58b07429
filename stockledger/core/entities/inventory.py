"""Inventory domain entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

# Largest value SQLite stores in an INTEGER column
MAX_ID = 2**63 - 1

# Ceiling for one movement and for any single ledger quantity
MAX_QTY = 2**31 - 1


class MovementType(str, Enum):
    """Types of stock movements."""

    IN = "IN"
    OUT = "OUT"
    TRANSFER = "TRANSFER"
    ADJUST = "ADJUST"  # increase-only, decreases are recorded as OUT


class InventoryRecord(BaseModel):
    """Current quantity of one product in one warehouse."""

    warehouse_id: int
    product_id: int
    qty: int = Field(default=0, ge=0)
    updated_at: datetime | None = None


class InventoryView(BaseModel):
    """Inventory record joined with its catalog names."""

    warehouse_id: int
    warehouse_name: str
    product_id: int
    sku: str
    product_name: str
    unit: str | None = None
    qty: int
    updated_at: datetime | None = None


class StockMovement(BaseModel):
    """Append-only record of a single stock-changing event."""

    id: int | None = None
    movement_type: MovementType
    warehouse_id: int
    warehouse_to_id: int | None = None  # TRANSFER only
    product_id: int
    qty: int = Field(..., gt=0)
    reason: str | None = None
    ref_no: str | None = None

    # Quantities read inside the unit of work that recorded the movement
    src_qty_before: int | None = None
    src_qty_after: int | None = None
    dst_qty_before: int | None = None
    dst_qty_after: int | None = None

    created_at: datetime | None = None
