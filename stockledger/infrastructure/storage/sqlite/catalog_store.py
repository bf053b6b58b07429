"""SQLite implementation of the warehouse and product catalog."""

from datetime import UTC, datetime
from typing import Any, ClassVar

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.catalog import Product, Warehouse
from stockledger.core.exceptions import (
    DuplicateKeyError,
    NotFoundError,
    ProductNotFoundError,
    ReferencedRowError,
    WarehouseNotFoundError,
)
from stockledger.core.interfaces.catalog_store import IProductStore, IWarehouseStore
from stockledger.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO timestamp column, tolerating legacy SQLite formats."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


class _SQLiteCatalogStore:
    """Shared CRUD with soft delete for catalog tables."""

    table: ClassVar[str]
    entity: ClassVar[str]
    key_field: ClassVar[str]
    columns: ClassVar[tuple[str, ...]]
    search_columns: ClassVar[tuple[str, ...]]

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    def _not_found(self, entity_id: int) -> NotFoundError:
        return NotFoundError(self.entity, entity_id)

    def _translate_integrity(
        self, e: aiosqlite.IntegrityError, values: dict[str, Any]
    ) -> DuplicateKeyError | None:
        """Domain error for a key collision, None for any other constraint."""
        if "UNIQUE" in str(e):
            return DuplicateKeyError(self.entity, self.key_field, str(values.get(self.key_field)))
        return None

    async def _insert(self, values: dict[str, Any]) -> aiosqlite.Row:
        now = datetime.now(UTC).isoformat()
        names = [*values.keys(), "created_at", "updated_at"]
        placeholders = ", ".join("?" for _ in names)
        try:
            async with self._pool.transaction() as conn:
                cursor = await conn.execute(
                    f"INSERT INTO {self.table} ({', '.join(names)}) VALUES ({placeholders})",
                    (*values.values(), now, now),
                )
                row_id = cursor.lastrowid
                cursor = await conn.execute(f"SELECT * FROM {self.table} WHERE id = ?", (row_id,))
                row = await cursor.fetchone()
        except aiosqlite.IntegrityError as e:
            translated = self._translate_integrity(e, values)
            if translated is None:
                raise
            raise translated from e

        logger.info(f"{self.entity}_created", id=row_id, **{self.key_field: values[self.key_field]})
        return row

    async def _get_row(self, entity_id: int, include_deleted: bool = False) -> aiosqlite.Row | None:
        sql = f"SELECT * FROM {self.table} WHERE id = ?"
        if not include_deleted:
            sql += " AND deleted_at IS NULL"
        async with self._pool.acquire() as conn:
            cursor = await conn.execute(sql, (entity_id,))
            return await cursor.fetchone()

    async def _list_rows(
        self,
        q: str = "",
        limit: int = 20,
        offset: int = 0,
        include_deleted: bool = False,
    ) -> tuple[int, list[aiosqlite.Row]]:
        where: list[str] = []
        params: list[Any] = []
        if not include_deleted:
            where.append("deleted_at IS NULL")
        if q:
            where.append("(" + " OR ".join(f"{col} LIKE ?" for col in self.search_columns) + ")")
            params.extend(f"%{q}%" for _ in self.search_columns)
        where_sql = f"WHERE {' AND '.join(where)}" if where else ""

        async with self._pool.acquire() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM {self.table} {where_sql} ORDER BY id DESC LIMIT ? OFFSET ?",
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            cursor = await conn.execute(
                f"SELECT COUNT(*) AS total FROM {self.table} {where_sql}",
                params,
            )
            total = (await cursor.fetchone())["total"]
        return total, list(rows)

    async def _update_row(self, entity_id: int, changes: dict[str, Any]) -> aiosqlite.Row:
        unknown = set(changes) - set(self.columns)
        if unknown:
            raise ValueError(f"Unknown {self.entity} fields: {', '.join(sorted(unknown))}")

        try:
            async with self._pool.transaction() as conn:
                if changes:
                    assignments = ", ".join(f"{col} = ?" for col in changes)
                    cursor = await conn.execute(
                        f"""
                        UPDATE {self.table} SET {assignments}, updated_at = ?
                        WHERE id = ? AND deleted_at IS NULL
                        """,
                        (*changes.values(), datetime.now(UTC).isoformat(), entity_id),
                    )
                    if cursor.rowcount == 0:
                        raise self._not_found(entity_id)
                cursor = await conn.execute(
                    f"SELECT * FROM {self.table} WHERE id = ? AND deleted_at IS NULL",
                    (entity_id,),
                )
                row = await cursor.fetchone()
                if row is None:
                    raise self._not_found(entity_id)
        except aiosqlite.IntegrityError as e:
            translated = self._translate_integrity(e, changes)
            if translated is None:
                raise
            raise translated from e

        logger.info(f"{self.entity}_updated", id=entity_id, fields=sorted(changes))
        return row

    async def delete(self, entity_id: int, hard: bool = False) -> None:
        """Soft delete by default.

        ``hard=True`` physically removes the row. Rows still referenced by
        inventory or movement history are refused with ReferencedRowError,
        since removing them would orphan the audit trail.
        """
        try:
            async with self._pool.transaction() as conn:
                if hard:
                    cursor = await conn.execute(
                        f"DELETE FROM {self.table} WHERE id = ?", (entity_id,)
                    )
                else:
                    cursor = await conn.execute(
                        f"""
                        UPDATE {self.table} SET deleted_at = ?
                        WHERE id = ? AND deleted_at IS NULL
                        """,
                        (datetime.now(UTC).isoformat(), entity_id),
                    )
                if cursor.rowcount == 0:
                    raise self._not_found(entity_id)
        except aiosqlite.IntegrityError as e:
            if "FOREIGN KEY" in str(e):
                raise ReferencedRowError(self.entity, entity_id) from e
            raise

        if hard:
            logger.warning(f"{self.entity}_hard_deleted", id=entity_id)
        else:
            logger.info(f"{self.entity}_deleted", id=entity_id)


class SQLiteWarehouseStore(_SQLiteCatalogStore, IWarehouseStore):
    """SQLite warehouse catalog."""

    table = "warehouses"
    entity = "warehouse"
    key_field = "code"
    columns = ("name", "code", "address")
    search_columns = ("name", "code")

    def _not_found(self, entity_id: int) -> NotFoundError:
        return WarehouseNotFoundError(entity_id)

    async def create(self, warehouse: Warehouse) -> Warehouse:
        row = await self._insert(
            {"name": warehouse.name, "code": warehouse.code, "address": warehouse.address}
        )
        return self._row_to_warehouse(row)

    async def get(self, warehouse_id: int, include_deleted: bool = False) -> Warehouse | None:
        row = await self._get_row(warehouse_id, include_deleted)
        return self._row_to_warehouse(row) if row is not None else None

    async def list(
        self,
        q: str = "",
        limit: int = 20,
        offset: int = 0,
        include_deleted: bool = False,
    ) -> tuple[int, list[Warehouse]]:
        total, rows = await self._list_rows(q, limit, offset, include_deleted)
        return total, [self._row_to_warehouse(row) for row in rows]

    async def update(self, warehouse_id: int, changes: dict[str, Any]) -> Warehouse:
        row = await self._update_row(warehouse_id, changes)
        return self._row_to_warehouse(row)

    @staticmethod
    def _row_to_warehouse(row: aiosqlite.Row) -> Warehouse:
        return Warehouse(
            id=row["id"],
            name=row["name"],
            code=row["code"],
            address=row["address"],
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
            deleted_at=parse_timestamp(row["deleted_at"]),
        )


class SQLiteProductStore(_SQLiteCatalogStore, IProductStore):
    """SQLite product catalog."""

    table = "products"
    entity = "product"
    key_field = "sku"
    columns = ("sku", "name", "unit", "price")
    search_columns = ("name", "sku")

    def _not_found(self, entity_id: int) -> NotFoundError:
        return ProductNotFoundError(entity_id)

    async def create(self, product: Product) -> Product:
        row = await self._insert(
            {
                "sku": product.sku,
                "name": product.name,
                "unit": product.unit,
                "price": product.price,
            }
        )
        return self._row_to_product(row)

    async def get(self, product_id: int, include_deleted: bool = False) -> Product | None:
        row = await self._get_row(product_id, include_deleted)
        return self._row_to_product(row) if row is not None else None

    async def list(
        self,
        q: str = "",
        limit: int = 20,
        offset: int = 0,
        include_deleted: bool = False,
    ) -> tuple[int, list[Product]]:
        total, rows = await self._list_rows(q, limit, offset, include_deleted)
        return total, [self._row_to_product(row) for row in rows]

    async def update(self, product_id: int, changes: dict[str, Any]) -> Product:
        row = await self._update_row(product_id, changes)
        return self._row_to_product(row)

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        return Product(
            id=row["id"],
            sku=row["sku"],
            name=row["name"],
            unit=row["unit"],
            price=float(row["price"]) if row["price"] is not None else None,
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
            deleted_at=parse_timestamp(row["deleted_at"]),
        )
