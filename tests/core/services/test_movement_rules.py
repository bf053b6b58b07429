"""Tests for movement validation and ledger deltas."""

import pytest

from stockledger.core.entities import MAX_ID, MAX_QTY, MovementType
from stockledger.core.exceptions import InvalidMovementError, ValidationError
from stockledger.core.services import ledger_deltas, validate_movement


class TestValidateMovement:
    @pytest.mark.parametrize("movement_type", [MovementType.IN, MovementType.OUT, MovementType.ADJUST])
    def test_single_warehouse_types_accepted(self, movement_type):
        validate_movement(movement_type, 1, 1, 10)

    def test_transfer_accepted(self):
        validate_movement(MovementType.TRANSFER, 1, 1, 10, warehouse_to_id=2)

    @pytest.mark.parametrize("qty", [0, -1, 1.5, "3", True])
    def test_quantity_must_be_positive_integer(self, qty):
        with pytest.raises(ValidationError) as exc_info:
            validate_movement(MovementType.IN, 1, 1, qty)
        assert exc_info.value.details["field"] == "qty"
        assert not isinstance(exc_info.value, InvalidMovementError)

    def test_warehouse_id_must_be_positive(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_movement(MovementType.IN, 0, 1, 5)
        assert exc_info.value.details["field"] == "warehouse_id"

    def test_product_id_must_be_positive(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_movement(MovementType.IN, 1, -2, 5)
        assert exc_info.value.details["field"] == "product_id"

    def test_quantity_ceiling(self):
        validate_movement(MovementType.IN, 1, 1, MAX_QTY)
        with pytest.raises(ValidationError, match="must not exceed"):
            validate_movement(MovementType.IN, 1, 1, MAX_QTY + 1)

    def test_ids_beyond_integer_column_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_movement(MovementType.TRANSFER, 1, 1, 5, warehouse_to_id=MAX_ID + 1)
        assert exc_info.value.details["field"] == "warehouse_to_id"

    def test_transfer_requires_destination(self):
        with pytest.raises(InvalidMovementError, match="required for TRANSFER"):
            validate_movement(MovementType.TRANSFER, 1, 1, 5)

    def test_transfer_to_same_warehouse_rejected(self):
        with pytest.raises(InvalidMovementError, match="same warehouse"):
            validate_movement(MovementType.TRANSFER, 1, 1, 5, warehouse_to_id=1)

    @pytest.mark.parametrize("movement_type", [MovementType.IN, MovementType.OUT, MovementType.ADJUST])
    def test_destination_only_for_transfer(self, movement_type):
        with pytest.raises(InvalidMovementError) as exc_info:
            validate_movement(movement_type, 1, 1, 5, warehouse_to_id=2)
        assert movement_type.value in exc_info.value.details["message"]


class TestLedgerDeltas:
    def test_in_credits_source(self):
        assert ledger_deltas(MovementType.IN, 1, 10) == [(1, 10)]

    def test_out_debits_source(self):
        assert ledger_deltas(MovementType.OUT, 1, 10) == [(1, -10)]

    def test_adjust_increases(self):
        assert ledger_deltas(MovementType.ADJUST, 3, 7) == [(3, 7)]

    def test_transfer_debits_before_credit(self):
        assert ledger_deltas(MovementType.TRANSFER, 1, 30, warehouse_to_id=2) == [(1, -30), (2, 30)]
