"""Catalog domain entities: warehouses and products."""

from datetime import datetime

from pydantic import BaseModel


class Warehouse(BaseModel):
    """A stocking location, identified by its business code."""

    id: int | None = None
    name: str
    code: str
    address: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None  # soft-delete stamp

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class Product(BaseModel):
    """A stocked article, identified by its SKU."""

    id: int | None = None
    sku: str
    name: str
    unit: str = "pcs"
    price: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
