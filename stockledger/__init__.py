"""Stock Ledger: per-warehouse inventory with an auditable movement log."""

__version__ = "1.0.0"
