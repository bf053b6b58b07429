"""
Versioned schema migrations.

Migration files live next to this module and are named ``vNNN_name.sql``.
Each one runs in its own transaction together with its ``schema_migrations``
row, so a failing script leaves neither half-built tables nor a record
claiming it was applied.
"""

import hashlib
import re
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
_FILENAME = re.compile(r"^v(\d+)_(\w+)\.sql$")


@dataclass(frozen=True)
class MigrationInfo:
    """A migration script on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.match(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=digest)

    def read_sql(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass
class MigrationResult:
    """Outcome of one attempted migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration scripts in version order. Misnamed files are skipped with a warning."""
    found: list[MigrationInfo] = []
    for path in directory.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


@asynccontextmanager
async def _connect(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                version TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                checksum TEXT NOT NULL,
                applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
                execution_time_ms INTEGER
            )
            """
        )
        await conn.commit()
        yield conn


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied version -> recorded checksum. Empty if nothing was ever applied."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    """Highest applied version, or None for an empty database."""
    applied = await get_applied_migrations(conn)
    if not applied:
        return None
    return max(applied, key=int)


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    """Run one script and record it, atomically."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.perf_counter()

    try:
        # The script leaves the transaction open so the bookkeeping row
        # commits together with the DDL
        await conn.executescript("BEGIN;\n" + migration.read_sql())
        elapsed = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.perf_counter() - started) * 1000),
            error=str(e),
        )

    logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed)
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed,
    )


async def run_migrations(db_path: Path | None = None) -> list[MigrationResult]:
    """Apply every pending migration in order, stopping at the first failure.

    Returns the results for the migrations attempted in this call; an
    up-to-date database yields an empty list.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    results: list[MigrationResult] = []
    async with _connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
        for migration in discover_migrations():
            recorded = applied.get(migration.version)
            if recorded is not None:
                if recorded != migration.checksum:
                    logger.warning("migration_checksum_changed", version=migration.version)
                continue

            result = await apply_migration(conn, migration)
            results.append(result)
            if not result.success:
                break

    if results:
        logger.info("migrations_finished", db_path=str(db_path), attempted=len(results))
    return results


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Applied, pending and modified versions, without touching the schema."""
    db_path = db_path or get_settings().storage.db_path
    available = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied": [],
            "pending": [m.version for m in available],
            "modified": [],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return {
        "exists": True,
        "current_version": max(applied, key=int) if applied else None,
        "applied": sorted(applied, key=int),
        "pending": [m.version for m in available if m.version not in applied],
        "modified": [
            m.version for m in available if m.version in applied and applied[m.version] != m.checksum
        ],
    }
