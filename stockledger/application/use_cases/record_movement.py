"""Record Movement Use Case: validate, then apply ledger and log atomically."""

from dataclasses import dataclass

from stockledger.application.dto.requests import StockMovementRequest
from stockledger.application.dto.responses import RecordMovementResponse
from stockledger.config import get_logger
from stockledger.core.entities.inventory import MovementType, StockMovement
from stockledger.core.exceptions import (
    ProductNotFoundError,
    StaleReferenceError,
    WarehouseNotFoundError,
)
from stockledger.core.interfaces.catalog_store import IProductStore, IWarehouseStore
from stockledger.core.services.movement_rules import ledger_deltas, validate_movement
from stockledger.infrastructure.storage.sqlite.unit_of_work import (
    TransactionCoordinator,
    UnitOfWork,
)

logger = get_logger(__name__)


@dataclass
class MovementResult:
    """Result of recording a movement."""

    movement: StockMovement
    after_qty_src: int
    after_qty_dst: int | None = None  # TRANSFER only


class RecordMovementUseCase:
    """Movement processor.

    A movement either commits completely (ledger rows and one log row) or
    leaves nothing behind. There is no pending state.
    """

    def __init__(
        self,
        coordinator: TransactionCoordinator | None = None,
        warehouse_store: IWarehouseStore | None = None,
        product_store: IProductStore | None = None,
    ):
        self._coordinator = coordinator
        self._warehouse_store = warehouse_store
        self._product_store = product_store

    async def _get_coordinator(self) -> TransactionCoordinator:
        if self._coordinator is None:
            from stockledger.infrastructure.storage.sqlite import get_transaction_coordinator

            self._coordinator = await get_transaction_coordinator()
        return self._coordinator

    async def _get_warehouse_store(self) -> IWarehouseStore:
        if self._warehouse_store is None:
            from stockledger.infrastructure.storage.sqlite import get_warehouse_store

            self._warehouse_store = await get_warehouse_store()
        return self._warehouse_store

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from stockledger.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def _check_catalog(self, request: StockMovementRequest) -> None:
        """Read-only existence checks, done before the unit of work opens."""
        wh_store = await self._get_warehouse_store()
        for warehouse_id in (request.warehouse_id, request.warehouse_to_id):
            if warehouse_id is not None and await wh_store.get(warehouse_id) is None:
                raise WarehouseNotFoundError(warehouse_id)

        prod_store = await self._get_product_store()
        if await prod_store.get(request.product_id) is None:
            raise ProductNotFoundError(request.product_id)

    async def execute(self, request: StockMovementRequest) -> MovementResult:
        """Execute record movement use case."""
        logger.info(
            "record_movement_started",
            type=request.movement_type.value,
            warehouse_id=request.warehouse_id,
            warehouse_to_id=request.warehouse_to_id,
            product_id=request.product_id,
            qty=request.qty,
        )

        # 1. Type-specific rules, nothing touched yet
        validate_movement(
            request.movement_type,
            request.warehouse_id,
            request.product_id,
            request.qty,
            request.warehouse_to_id,
        )

        # 2. Catalog lookups
        await self._check_catalog(request)

        # 3. Ledger + log in one unit of work
        deltas = ledger_deltas(
            request.movement_type,
            request.warehouse_id,
            request.qty,
            request.warehouse_to_id,
        )

        async def apply(uow: UnitOfWork) -> MovementResult:
            quantities: list[tuple[int, int]] = []
            for warehouse_id, delta in deltas:
                after = await uow.ledger.adjust(warehouse_id, request.product_id, delta)
                quantities.append((after - delta, after))

            src_before, src_after = quantities[0]
            dst_before, dst_after = quantities[1] if len(quantities) > 1 else (None, None)

            movement = await uow.movements.append(
                StockMovement(
                    movement_type=request.movement_type,
                    warehouse_id=request.warehouse_id,
                    warehouse_to_id=request.warehouse_to_id,
                    product_id=request.product_id,
                    qty=request.qty,
                    reason=request.reason,
                    ref_no=request.ref_no,
                    src_qty_before=src_before,
                    src_qty_after=src_after,
                    dst_qty_before=dst_before,
                    dst_qty_after=dst_after,
                )
            )
            return MovementResult(
                movement=movement,
                after_qty_src=src_after,
                after_qty_dst=dst_after,
            )

        coordinator = await self._get_coordinator()
        try:
            result = await coordinator.run_atomic(apply)
        except StaleReferenceError:
            # A hard delete won the race; report which row is gone
            await self._check_catalog(request)
            raise

        logger.info(
            "movement_recorded",
            movement_id=result.movement.id,
            type=request.movement_type.value,
            after_qty_src=result.after_qty_src,
            after_qty_dst=result.after_qty_dst,
        )
        return result

    def to_response(self, result: MovementResult) -> RecordMovementResponse:
        """Convert result to API response."""
        mvmt = result.movement
        return RecordMovementResponse(
            id=mvmt.id,  # type: ignore[arg-type]
            movement_type=mvmt.movement_type.value,
            warehouse_id=mvmt.warehouse_id,
            warehouse_to_id=mvmt.warehouse_to_id,
            product_id=mvmt.product_id,
            qty=mvmt.qty,
            reason=mvmt.reason,
            ref_no=mvmt.ref_no,
            created_at=mvmt.created_at,
            after_qty_src=result.after_qty_src,
            after_qty_dst=result.after_qty_dst if mvmt.movement_type == MovementType.TRANSFER else None,
        )
