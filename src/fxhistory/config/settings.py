# src/fxhistory/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables and an optional .env file.

Files that USE this module:
- fxhistory.app (loads settings for directories and logging)
- fxhistory.adapters.providers.openexchange (app id, URL, timeout and retry policy)
- fxhistory.application.* (default directories, fallback base, read workers)

Files that this module USES:
- fxhistory.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from fxhistory.shared.validators import (
    validate_app_id,  # Validate provider app id format
    validate_currency_code,  # Validate 3-letter currency codes
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Storage layout ---
    data_dir: Path = Field(default=Path("./data"), alias="DATA_DIR")
    history_dir: Path = Field(default=Path("./history"), alias="HISTORY_DIR")
    latest_dir: Path = Field(default=Path("./latest"), alias="LATEST_DIR")
    currencies_dir: Path = Field(default=Path("./currencies"), alias="CURRENCIES_DIR")

    # --- Open Exchange Rates (daily snapshot collection only) ---
    oxr_app_id: str = Field(default="", alias="OXR_APP_ID")
    oxr_base_url: str = Field(default="https://openexchangerates.org/api", alias="OXR_BASE_URL")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)
    fetch_retries: int = Field(default=3, alias="FETCH_RETRIES", ge=1, le=10)
    fetch_backoff_seconds: float = Field(default=1.0, alias="FETCH_BACKOFF_SECONDS", ge=0.0)

    # --- History generation ---
    default_base: str = Field(default="USD", alias="DEFAULT_BASE")
    read_workers: int = Field(default=1, alias="READ_WORKERS", ge=1, le=32)

    # --- Logging ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="FXHISTORY_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def latest_file(self) -> Path:
        """Path of the most recent snapshot copy."""
        return self.latest_dir / "data.json"

    @property
    def currencies_file(self) -> Path:
        """Path of the currency name list."""
        return self.currencies_dir / "currencies.json"

    @field_validator("oxr_app_id")
    @classmethod
    def validate_app_id(cls, v: str) -> str:
        """Validate app id format (empty is allowed; fetching checks for it)."""
        if v and not validate_app_id(v):
            raise ValueError("Invalid OXR_APP_ID format")
        return v

    @field_validator("default_base")
    @classmethod
    def validate_default_base(cls, v: str) -> str:
        """Validate fallback base currency code."""
        v = v.upper()
        if not validate_currency_code(v):
            raise ValueError("DEFAULT_BASE must be a 3-letter currency code")
        return v


# Global settings instance
settings = Settings()
