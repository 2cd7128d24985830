"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Defaults reproduce the browser app's behaviour, so an unconfigured
tracker behaves exactly like the original single-page app.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value storage backend configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_TRACKER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["memory", "file"] = Field(
        default="file",
        description="Which key-value backend to use"
    )
    data_dir: Path = Field(
        default=Path.home() / ".finance-tracker",
        description="Directory holding one JSON file per storage key"
    )
    key_prefix: str = Field(
        default="financeTracker",
        min_length=1,
        description="Prefix shared by all storage keys"
    )

    @field_validator('key_prefix')
    @classmethod
    def validate_key_prefix(cls, v: str) -> str:
        """Keys become file names, so the prefix must be path-safe."""
        if any(sep in v for sep in ("/", "\\", "..")):
            raise ValueError(f"Storage key prefix must not contain path separators: {v}")
        return v

    @property
    def transactions_key(self) -> str:
        return f"{self.key_prefix}_transactions"

    @property
    def settings_key(self) -> str:
        return f"{self.key_prefix}_settings"

    @property
    def theme_key(self) -> str:
        return f"{self.key_prefix}_theme"


class TrackerSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug-level logging"
    )

    # User-facing defaults
    default_currency: str = Field(
        default="₹",
        min_length=1,
        max_length=5,
        description="Currency symbol used until the user saves their own"
    )

    # Dashboard windows
    monthly_series_months: int = Field(
        default=6,
        ge=1,
        le=120,
        description="How many months the income/expense trend covers"
    )
    recent_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="How many transactions the dashboard lists as recent"
    )

    # Budget thresholds (percent of budget spent)
    budget_warning_percent: float = Field(
        default=70.0,
        ge=0.0,
        le=100.0,
    )
    budget_critical_percent: float = Field(
        default=90.0,
        ge=0.0,
        le=100.0,
    )

    @model_validator(mode='after')
    def validate_budget_thresholds(self) -> 'TrackerSettings':
        """The warning level must come before the critical level."""
        if self.budget_warning_percent > self.budget_critical_percent:
            raise ValueError(
                f"budget_warning_percent ({self.budget_warning_percent}) must not exceed "
                f"budget_critical_percent ({self.budget_critical_percent})"
            )
        return self

    # Export
    export_filename_prefix: str = Field(
        default="finance-tracker",
        min_length=1,
        description="Prefix of exported CSV file names"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def tracker(self) -> TrackerSettings:
        return TrackerSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except ValueError as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.tracker
        results["tracker"] = True
    except ValueError as e:
        results["tracker"] = False
        results["tracker_error"] = str(e)

    return results
