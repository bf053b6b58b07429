"""SQLite read-side queries over inventory and movement history."""

from typing import Any

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.inventory import InventoryView, MovementType, StockMovement
from stockledger.core.interfaces.inventory_store import IInventoryStore
from stockledger.infrastructure.storage.sqlite.catalog_store import parse_timestamp
from stockledger.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


class SQLiteInventoryStore(IInventoryStore):
    """Read-only queries; these never open a write transaction."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def get_quantity(self, warehouse_id: int, product_id: int) -> int:
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT qty FROM inventory WHERE warehouse_id = ? AND product_id = ?",
                (warehouse_id, product_id),
            )
            row = await cursor.fetchone()
        return int(row["qty"]) if row is not None else 0

    async def list_inventory(
        self,
        warehouse_id: int | None = None,
        product_id: int | None = None,
        q: str = "",
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[int, list[InventoryView]]:
        """List inventory rows whose warehouse and product are both live."""
        where = ["w.deleted_at IS NULL", "p.deleted_at IS NULL"]
        params: list[Any] = []
        if warehouse_id is not None:
            where.append("i.warehouse_id = ?")
            params.append(warehouse_id)
        if product_id is not None:
            where.append("i.product_id = ?")
            params.append(product_id)
        if q:
            where.append("(p.sku LIKE ? OR p.name LIKE ?)")
            params.extend([f"%{q}%", f"%{q}%"])
        where_sql = " AND ".join(where)

        from_sql = """
            FROM inventory i
            JOIN warehouses w ON w.id = i.warehouse_id
            JOIN products p ON p.id = i.product_id
        """
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                f"""
                SELECT i.warehouse_id, w.name AS warehouse_name, i.product_id, p.sku,
                       p.name AS product_name, p.unit, i.qty, i.updated_at
                {from_sql}
                WHERE {where_sql}
                ORDER BY i.warehouse_id, i.product_id
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            cursor = await conn.execute(
                f"SELECT COUNT(*) AS total {from_sql} WHERE {where_sql}",
                params,
            )
            total = (await cursor.fetchone())["total"]

        return total, [
            InventoryView(
                warehouse_id=row["warehouse_id"],
                warehouse_name=row["warehouse_name"],
                product_id=row["product_id"],
                sku=row["sku"],
                product_name=row["product_name"],
                unit=row["unit"],
                qty=row["qty"],
                updated_at=parse_timestamp(row["updated_at"]),
            )
            for row in rows
        ]

    async def list_movements(
        self,
        warehouse_id: int | None = None,
        product_id: int | None = None,
        movement_type: MovementType | None = None,
        ref: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[int, list[StockMovement]]:
        """List movements, newest first.

        ``warehouse_id`` matches both the source and the TRANSFER destination.
        """
        where: list[str] = []
        params: list[Any] = []
        if warehouse_id is not None:
            where.append("(warehouse_id = ? OR warehouse_to_id = ?)")
            params.extend([warehouse_id, warehouse_id])
        if product_id is not None:
            where.append("product_id = ?")
            params.append(product_id)
        if movement_type is not None:
            where.append("movement_type = ?")
            params.append(movement_type.value)
        if ref:
            where.append("ref_no LIKE ?")
            params.append(f"%{ref}%")
        where_sql = f"WHERE {' AND '.join(where)}" if where else ""

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM stock_movements {where_sql} ORDER BY id DESC LIMIT ? OFFSET ?",
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            cursor = await conn.execute(
                f"SELECT COUNT(*) AS total FROM stock_movements {where_sql}",
                params,
            )
            total = (await cursor.fetchone())["total"]

        return total, [self._row_to_movement(row) for row in rows]

    async def log_quantity(self, warehouse_id: int, product_id: int) -> int:
        """Rebuild a quantity from the movement log alone."""
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT COALESCE(SUM(
                    CASE
                        WHEN movement_type IN ('IN', 'ADJUST') THEN qty
                        WHEN movement_type = 'OUT' THEN -qty
                        WHEN movement_type = 'TRANSFER' AND warehouse_id = :w THEN -qty
                        WHEN movement_type = 'TRANSFER' AND warehouse_to_id = :w THEN qty
                        ELSE 0
                    END
                ), 0) AS qty
                FROM stock_movements
                WHERE product_id = :p AND (warehouse_id = :w OR warehouse_to_id = :w)
                """,
                {"w": warehouse_id, "p": product_id},
            )
            row = await cursor.fetchone()
        return int(row["qty"])

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        return StockMovement(
            id=row["id"],
            movement_type=MovementType(row["movement_type"]),
            warehouse_id=row["warehouse_id"],
            warehouse_to_id=row["warehouse_to_id"],
            product_id=row["product_id"],
            qty=row["qty"],
            reason=row["reason"],
            ref_no=row["ref_no"],
            src_qty_before=row["src_qty_before"],
            src_qty_after=row["src_qty_after"],
            dst_qty_before=row["dst_qty_before"],
            dst_qty_after=row["dst_qty_after"],
            created_at=parse_timestamp(row["created_at"]),
        )
