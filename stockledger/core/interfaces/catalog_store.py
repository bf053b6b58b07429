"""Abstract interfaces for catalog storage."""

from abc import ABC, abstractmethod
from typing import Any

from stockledger.core.entities.catalog import Product, Warehouse


class IWarehouseStore(ABC):
    """Interface for warehouse persistence with soft delete."""

    @abstractmethod
    async def create(self, warehouse: Warehouse) -> Warehouse:
        """Create a warehouse. Raises DuplicateKeyError on a live code collision."""
        pass

    @abstractmethod
    async def get(self, warehouse_id: int, include_deleted: bool = False) -> Warehouse | None:
        """Get warehouse by ID."""
        pass

    @abstractmethod
    async def list(
        self,
        q: str = "",
        limit: int = 20,
        offset: int = 0,
        include_deleted: bool = False,
    ) -> tuple[int, list[Warehouse]]:
        """List warehouses, newest first. Returns (total, page)."""
        pass

    @abstractmethod
    async def update(self, warehouse_id: int, changes: dict[str, Any]) -> Warehouse:
        """Apply field changes to a live warehouse."""
        pass

    @abstractmethod
    async def delete(self, warehouse_id: int, hard: bool = False) -> None:
        """Soft delete by default; hard delete physically removes the row."""
        pass


class IProductStore(ABC):
    """Interface for product persistence with soft delete."""

    @abstractmethod
    async def create(self, product: Product) -> Product:
        """Create a product. Raises DuplicateKeyError on a live SKU collision."""
        pass

    @abstractmethod
    async def get(self, product_id: int, include_deleted: bool = False) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def list(
        self,
        q: str = "",
        limit: int = 20,
        offset: int = 0,
        include_deleted: bool = False,
    ) -> tuple[int, list[Product]]:
        """List products, newest first. Returns (total, page)."""
        pass

    @abstractmethod
    async def update(self, product_id: int, changes: dict[str, Any]) -> Product:
        """Apply field changes to a live product."""
        pass

    @abstractmethod
    async def delete(self, product_id: int, hard: bool = False) -> None:
        """Soft delete by default; hard delete physically removes the row."""
        pass
