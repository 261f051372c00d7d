"""
Configuration Management for Shopbook

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every filesystem location the app touches (the data snapshot and the
backup directory) is derived from a single data directory, so moving the
app's data means changing one variable.
"""

from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHOPBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for the local structured log"
    )

    # Storage locations
    data_dir: Path = Field(
        default=Path.home() / ".shopbook",
        description="Application user data directory"
    )
    data_file_name: str = Field(
        default="shop-data.json",
        description="Name of the JSON snapshot holding all collections"
    )
    backup_dir_name: str = Field(
        default="backups",
        description="Subdirectory of data_dir that receives backup copies"
    )

    # Backups
    backups_enabled: bool = Field(
        default=True,
        description="Start the periodic backup timer with the app"
    )
    backup_interval_days: int = Field(
        default=7,
        ge=1,
        le=365,
        description="Days between automatic backups"
    )

    # Inventory
    low_stock_threshold: int = Field(
        default=5,
        ge=0,
        description="Products with stock below this are flagged as low"
    )

    @field_validator('data_dir')
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        """Allow '~' in SHOPBOOK_DATA_DIR."""
        return v.expanduser()

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def data_file_path(self) -> Path:
        """Path of the JSON snapshot file (the key-value store)."""
        return self.data_dir / "data" / self.data_file_name

    @property
    def backup_dir_path(self) -> Path:
        """Directory where backup copies are written."""
        return self.data_dir / self.backup_dir_name

    @property
    def backup_interval(self) -> timedelta:
        return timedelta(days=self.backup_interval_days)


@lru_cache()
def get_settings() -> AppSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return AppSettings()
