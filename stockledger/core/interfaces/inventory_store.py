"""Abstract interfaces for the inventory ledger and movement log."""

from abc import ABC, abstractmethod

from stockledger.core.entities.inventory import InventoryView, MovementType, StockMovement


class IInventoryLedger(ABC):
    """Current-quantity table. Mutations only inside a unit of work."""

    @abstractmethod
    async def get(self, warehouse_id: int, product_id: int) -> int:
        """Current quantity, 0 when the pair was never recorded."""
        pass

    @abstractmethod
    async def adjust(self, warehouse_id: int, product_id: int, delta: int) -> int:
        """Apply a signed delta and return the new quantity.

        Raises InsufficientStockError if the result would be negative.
        """
        pass


class IMovementLog(ABC):
    """Append-only movement history. Appends only inside a unit of work."""

    @abstractmethod
    async def append(self, movement: StockMovement) -> StockMovement:
        """Record a movement and return it with id and timestamp."""
        pass


class IInventoryStore(ABC):
    """Read-side queries over the ledger and the movement log."""

    @abstractmethod
    async def get_quantity(self, warehouse_id: int, product_id: int) -> int:
        """Current quantity, 0 when the pair was never recorded."""
        pass

    @abstractmethod
    async def list_inventory(
        self,
        warehouse_id: int | None = None,
        product_id: int | None = None,
        q: str = "",
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[int, list[InventoryView]]:
        """List inventory joined with live catalog rows."""
        pass

    @abstractmethod
    async def list_movements(
        self,
        warehouse_id: int | None = None,
        product_id: int | None = None,
        movement_type: MovementType | None = None,
        ref: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[int, list[StockMovement]]:
        """List movement history, newest first."""
        pass

    @abstractmethod
    async def log_quantity(self, warehouse_id: int, product_id: int) -> int:
        """Quantity rebuilt by summing the movement log for the pair."""
        pass
