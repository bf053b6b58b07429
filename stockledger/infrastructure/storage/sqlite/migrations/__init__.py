"""Versioned SQL schema for the ledger database."""

from stockledger.infrastructure.storage.sqlite.migrations.migrator import (
    MIGRATIONS_DIR,
    MigrationInfo,
    MigrationResult,
    apply_migration,
    discover_migrations,
    get_applied_migrations,
    get_current_version,
    get_migration_status,
    run_migrations,
)

__all__ = [
    "MIGRATIONS_DIR",
    "MigrationInfo",
    "MigrationResult",
    "apply_migration",
    "discover_migrations",
    "get_applied_migrations",
    "get_current_version",
    "get_migration_status",
    "run_migrations",
]
