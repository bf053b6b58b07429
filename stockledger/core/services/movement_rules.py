"""
Type-specific movement rules.

Validation runs before any transaction opens, so a rejected request never
touches the store. ``ledger_deltas`` is the single place that decides which
inventory keys a movement debits or credits.
"""

from stockledger.core.entities.inventory import MAX_ID, MAX_QTY, MovementType
from stockledger.core.exceptions import InvalidMovementError, ValidationError


def validate_movement(
    movement_type: MovementType,
    warehouse_id: int,
    product_id: int,
    qty: int,
    warehouse_to_id: int | None = None,
) -> None:
    """Reject malformed movements. Raises ValidationError / InvalidMovementError."""
    if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
        raise ValidationError("qty", "must be a positive integer", qty)
    if qty > MAX_QTY:
        raise ValidationError("qty", f"must not exceed {MAX_QTY}", qty)
    for field, value in (
        ("warehouse_id", warehouse_id),
        ("product_id", product_id),
        ("warehouse_to_id", warehouse_to_id),
    ):
        if value is not None and not 0 < value <= MAX_ID:
            raise ValidationError(field, "must be a positive id", value)

    if movement_type == MovementType.TRANSFER:
        if warehouse_to_id is None:
            raise InvalidMovementError(
                "warehouse_to_id", "required for TRANSFER", warehouse_to_id
            )
        if warehouse_to_id == warehouse_id:
            raise InvalidMovementError(
                "warehouse_to_id", "cannot transfer to the same warehouse", warehouse_to_id
            )
    elif warehouse_to_id is not None:
        raise InvalidMovementError(
            "warehouse_to_id", f"only allowed for TRANSFER, not {movement_type.value}", warehouse_to_id
        )


def ledger_deltas(
    movement_type: MovementType,
    warehouse_id: int,
    qty: int,
    warehouse_to_id: int | None = None,
) -> list[tuple[int, int]]:
    """Ordered (warehouse_id, signed delta) pairs a movement applies.

    For TRANSFER the debit comes first, so a failing debit stops the
    credit from ever being attempted.
    """
    if movement_type == MovementType.IN:
        return [(warehouse_id, qty)]
    if movement_type == MovementType.OUT:
        return [(warehouse_id, -qty)]
    if movement_type == MovementType.TRANSFER:
        assert warehouse_to_id is not None
        return [(warehouse_id, -qty), (warehouse_to_id, qty)]
    # ADJUST only increases
    return [(warehouse_id, qty)]
