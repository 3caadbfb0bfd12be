"""
Configuration settings for BiasLab.

Uses Pydantic Settings for environment variable management with .env file support.
Every variable is prefixed with BIASLAB_ (e.g. BIASLAB_STORAGE_BACKEND=sql).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BIASLAB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Persistence
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".biaslab",
        description="Directory for persisted progress state",
    )
    storage_backend: Literal["file", "sql", "memory"] = Field(
        default="file",
        description="Where progress state is persisted",
    )
    storage_key: str = Field(
        default="biaslab:v1",
        description="Fixed key the progress record is stored under",
    )
    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL for the sql backend (None for <data_dir>/state.db)",
    )

    # ========================================
    # Catalog
    # ========================================
    catalog_source: str | None = Field(
        default=None,
        description="URL or directory holding fallacies.json and scenarios.json",
    )
    catalog_timeout_seconds: float = Field(
        default=5.0,
        description="HTTP timeout when fetching a remote catalog",
    )

    # ========================================
    # Practice
    # ========================================
    drill_size: int = Field(
        default=5,
        ge=1,
        description="Maximum scenarios in a single-concept drill",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def resolved_database_url(self) -> str:
        """Return the configured database URL, defaulting to SQLite in data_dir."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_dir.expanduser() / 'state.db'}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
