"""Settings and structured logging."""

from stockledger.config.logging import configure_logging, get_logger
from stockledger.config.settings import (
    APISettings,
    Settings,
    StorageSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "APISettings",
    "Settings",
    "StorageSettings",
    "configure_logging",
    "get_logger",
    "get_settings",
    "reset_settings",
]
