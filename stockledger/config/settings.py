"""
Service settings.

Each group reads its own environment prefix; the top-level model also reads
an optional ``.env`` file. Values are validated once, at first access.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """SQLite file location and lock behaviour (``STORAGE_*``)."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "stock_ledger.db"

    pool_size: int = Field(default=5, ge=1, le=64)
    # How long a writer waits on another writer's lock before BUSY (ms)
    busy_timeout: int = Field(default=5000, ge=0)
    # How long a request waits for a free pooled connection (s)
    acquire_timeout: float = Field(default=10.0, gt=0)

    @field_validator("data_dir")
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        return v.expanduser()

    @field_validator("db_name")
    @classmethod
    def check_db_name(cls, v: str) -> str:
        if not v or Path(v).name != v:
            raise ValueError("db_name must be a bare file name, use data_dir for the directory")
        return v

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """HTTP server (``API_*``)."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    debug: bool = False  # also exposes /docs and /redoc
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Root settings object."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Stock Ledger"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["auto", "console", "json"] = "auto"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, built on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None
