"""Application use cases."""

from stockledger.application.use_cases.record_movement import (
    MovementResult,
    RecordMovementUseCase,
)

__all__ = ["MovementResult", "RecordMovementUseCase"]
