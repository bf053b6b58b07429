"""SQLite inventory ledger bound to an open write transaction."""

from datetime import UTC, datetime

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.inventory import MAX_QTY
from stockledger.core.exceptions import InsufficientStockError, QuantityLimitError
from stockledger.core.interfaces.inventory_store import IInventoryLedger

logger = get_logger(__name__)


class SQLiteInventoryLedger(IInventoryLedger):
    """Read-modify-write access to the ``inventory`` table.

    Instances are created by the transaction coordinator and only live for
    one unit of work.
    """

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def get(self, warehouse_id: int, product_id: int) -> int:
        cursor = await self._conn.execute(
            "SELECT qty FROM inventory WHERE warehouse_id = ? AND product_id = ?",
            (warehouse_id, product_id),
        )
        row = await cursor.fetchone()
        return int(row["qty"]) if row is not None else 0

    async def adjust(self, warehouse_id: int, product_id: int, delta: int) -> int:
        """Ensure the row, apply the delta, then re-check the result.

        The three steps share the caller's transaction, so no other writer
        sees the intermediate state and a result outside 0..MAX_QTY is rolled back
        together with everything else in the unit of work.
        """
        if not self._conn.in_transaction:
            raise RuntimeError("Ledger mutations require an open unit of work")

        now = datetime.now(UTC).isoformat()
        await self._conn.execute(
            """
            INSERT INTO inventory (warehouse_id, product_id, qty, created_at, updated_at)
            VALUES (?, ?, 0, ?, ?)
            ON CONFLICT (warehouse_id, product_id) DO NOTHING
            """,
            (warehouse_id, product_id, now, now),
        )
        await self._conn.execute(
            """
            UPDATE inventory SET qty = qty + ?, updated_at = ?
            WHERE warehouse_id = ? AND product_id = ?
            """,
            (delta, now, warehouse_id, product_id),
        )

        new_qty = await self.get(warehouse_id, product_id)
        if new_qty < 0:
            logger.info(
                "insufficient_stock",
                warehouse_id=warehouse_id,
                product_id=product_id,
                requested=-delta,
                available=new_qty - delta,
            )
            raise InsufficientStockError(
                warehouse_id=warehouse_id,
                product_id=product_id,
                requested=-delta,
                available=new_qty - delta,
            )
        if new_qty > MAX_QTY:
            logger.info(
                "quantity_limit_exceeded",
                warehouse_id=warehouse_id,
                product_id=product_id,
                delta=delta,
            )
            raise QuantityLimitError(warehouse_id, product_id, MAX_QTY)
        return new_qty
