"""SQLite append-only movement log bound to an open write transaction."""

from datetime import UTC, datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.inventory import StockMovement
from stockledger.core.interfaces.inventory_store import IMovementLog

logger = get_logger(__name__)


class SQLiteMovementLog(IMovementLog):
    """Appends rows to ``stock_movements``. Rows are never updated or deleted."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def append(self, movement: StockMovement) -> StockMovement:
        if not self._conn.in_transaction:
            raise RuntimeError("Movement log appends require an open unit of work")

        movement.created_at = datetime.now(UTC)
        cursor = await self._conn.execute(
            """
            INSERT INTO stock_movements (
                movement_type, warehouse_id, warehouse_to_id, product_id, qty,
                reason, ref_no, src_qty_before, src_qty_after,
                dst_qty_before, dst_qty_after, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                movement.movement_type.value,
                movement.warehouse_id,
                movement.warehouse_to_id,
                movement.product_id,
                movement.qty,
                movement.reason,
                movement.ref_no,
                movement.src_qty_before,
                movement.src_qty_after,
                movement.dst_qty_before,
                movement.dst_qty_after,
                movement.created_at.isoformat(),
            ),
        )
        movement.id = cursor.lastrowid
        logger.debug(
            "stock_movement_appended",
            movement_id=movement.id,
            type=movement.movement_type.value,
            qty=movement.qty,
        )
        return movement
