"""
Ledger settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "batchledger.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms, also bounds the wait for the write lock

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class LedgerSettings(BaseSettings):
    """FIFO ledger behaviour."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    # Rounding
    quantity_places: int = Field(default=3, ge=0, le=9)
    cost_places: int = Field(default=4, ge=0, le=9)

    # Conflict retry settings
    conflict_retries: int = Field(default=3, ge=1)
    retry_delay: float = 0.05
    retry_multiplier: float = 2.0

    # Whole-operation deadline in seconds
    operation_timeout: float = 30.0

    # Fall back to all locations when none of the material's active batches
    # sit at the requested location (legacy un-located stock).
    location_fallback: bool = False

    movement_page_size: int = 50


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Batch Ledger"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
