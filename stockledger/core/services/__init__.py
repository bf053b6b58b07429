"""Pure domain services."""

from stockledger.core.services.movement_rules import ledger_deltas, validate_movement

__all__ = ["ledger_deltas", "validate_movement"]
