#!/usr/bin/env python3
"""
Stock Ledger management CLI.

Usage:
    python manage.py migrate [--db PATH]     Apply pending schema migrations
    python manage.py serve [--host --port]   Run the API server in the foreground
    python manage.py status [--db PATH]      Show applied, pending and modified migrations
"""

import argparse
import asyncio
import sys
from pathlib import Path


def _db_path(args: argparse.Namespace) -> Path | None:
    return Path(args.db).expanduser() if args.db else None


def cmd_migrate(args: argparse.Namespace) -> int:
    """Apply pending migrations. Exit status 1 if any failed."""
    from stockledger.config import configure_logging
    from stockledger.infrastructure.storage.sqlite.migrations import run_migrations

    configure_logging(level="WARNING")
    results = asyncio.run(run_migrations(_db_path(args)))
    if not results:
        print("Schema is up to date.")
        return 0

    for result in results:
        state = "ok" if result.success else f"FAILED: {result.error}"
        print(f"  v{result.version} {result.name:<30} {result.execution_time_ms:>5} ms  {state}")
    return 0 if all(r.success for r in results) else 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Run uvicorn in the foreground. Migrations run in the app's startup."""
    import uvicorn

    from stockledger.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "stockledger.api.main:app",
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload,
        log_config=None,
    )
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Print migration state. Exit status 1 if a migration file changed after it was applied."""
    from stockledger.infrastructure.storage.sqlite.migrations import get_migration_status

    status = asyncio.run(get_migration_status(_db_path(args)))
    if not status["exists"]:
        print("Database: not created yet")
    else:
        print(f"Database: schema v{status['current_version'] or '-'}")
        print(f"Applied:  {', '.join(status['applied']) or '-'}")
    print(f"Pending:  {', '.join(status['pending']) or '-'}")
    if status["modified"]:
        print(f"Modified: {', '.join(status['modified'])} (file changed after it was applied)")
        return 1
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Stock Ledger management CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    p_migrate = sub.add_parser("migrate", help="Apply pending schema migrations")
    p_migrate.add_argument("--db", help="Database path (default from STORAGE_* settings)")
    p_migrate.set_defaults(func=cmd_migrate)

    p_serve = sub.add_parser("serve", help="Run the API server")
    p_serve.add_argument("--host", help="Bind address (default API_HOST)")
    p_serve.add_argument("--port", type=int, help="Port (default API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Restart on code changes")
    p_serve.set_defaults(func=cmd_serve)

    p_status = sub.add_parser("status", help="Show migration status")
    p_status.add_argument("--db", help="Database path (default from STORAGE_* settings)")
    p_status.set_defaults(func=cmd_status)

    args = parser.parse_args()
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
