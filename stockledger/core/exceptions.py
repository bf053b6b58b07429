"""
Domain exceptions for the stock ledger.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(LedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidMovementError(ValidationError):
    """Movement request breaks a type-specific rule."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(field, message, value)
        self.code = "INVALID_MOVEMENT"


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class NotFoundError(StorageError):
    """Id does not resolve to a live row."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(
            f"{entity.capitalize()} not found: {entity_id}",
            code=f"{entity.upper()}_NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )


class WarehouseNotFoundError(NotFoundError):
    """Warehouse is absent or soft-deleted."""

    def __init__(self, warehouse_id: int):
        super().__init__("warehouse", warehouse_id)


class ProductNotFoundError(NotFoundError):
    """Product is absent or soft-deleted."""

    def __init__(self, product_id: int):
        super().__init__("product", product_id)


class DuplicateKeyError(StorageError):
    """Business key collides with a non-deleted row."""

    def __init__(self, entity: str, field: str, value: str):
        super().__init__(
            f"{entity.capitalize()} {field} already exists: {value}",
            code="DUPLICATE_KEY",
            details={"entity": entity, "field": field, "value": value},
        )


class ReferencedRowError(StorageError):
    """Hard delete refused because other rows still reference the target."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(
            f"{entity.capitalize()} {entity_id} is referenced by inventory or movement history",
            code="ROW_REFERENCED",
            details={"entity": entity, "id": entity_id},
        )


class BusyError(StorageError):
    """Lock or connection could not be obtained in time. Safe to retry."""

    def __init__(self, operation: str, timeout: float):
        super().__init__(
            f"Store busy during {operation}, gave up after {timeout}",
            code="BUSY",
            details={"operation": operation, "timeout": timeout, "retryable": True},
        )


class StaleReferenceError(StorageError):
    """A referenced catalog row vanished between the existence check and the write."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Referenced row disappeared during {operation}: {error}",
            code="STALE_REFERENCE",
            details={"operation": operation, "error": error, "retryable": True},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Inventory Exceptions
class InsufficientStockError(LedgerError):
    """Debit would drive an inventory quantity negative."""

    def __init__(
        self,
        warehouse_id: int,
        product_id: int,
        requested: int,
        available: int,
    ):
        super().__init__(
            f"Insufficient stock for product {product_id} in warehouse {warehouse_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "warehouse_id": warehouse_id,
                "product_id": product_id,
                "requested": requested,
                "available": available,
            },
        )


class QuantityLimitError(LedgerError):
    """Credit would push an inventory quantity past the ledger ceiling."""

    def __init__(self, warehouse_id: int, product_id: int, limit: int):
        super().__init__(
            f"Quantity for product {product_id} in warehouse {warehouse_id} would exceed {limit}",
            code="QUANTITY_LIMIT",
            details={"warehouse_id": warehouse_id, "product_id": product_id, "limit": limit},
        )
