"""
Configuration Management for the Offering Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The engine itself takes no configuration; these settings only shape the
store, the lookup defaults and logging around it.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Entity store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="json",
        pattern="^(memory|json)$",
        description="Which entity store to use"
    )
    data_path: Path = Field(
        default=Path("data/ledger.json"),
        description="Path of the JSON ledger file"
    )
    access_code_path: Path = Field(
        default=Path("data/access_code.json"),
        description="Where the hashed access code is kept"
    )
    default_expense_categories: str = Field(
        default="operations,missions support,relief",
        description="Comma-separated expense categories for a fresh ledger"
    )
    save_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed file write is attempted"
    )

    @field_validator('default_expense_categories')
    @classmethod
    def validate_expense_categories(cls, v: str) -> str:
        """At least one category, no exact duplicates."""
        names = [name.strip() for name in v.split(",") if name.strip()]
        if not names:
            raise ValueError("At least one default expense category is required")
        if len(names) != len(set(names)):
            raise ValueError("Default expense categories must be unique")
        return v

    @property
    def expense_categories_list(self) -> list[str]:
        """Get default expense categories as a list."""
        return [name.strip() for name in self.default_expense_categories.split(",") if name.strip()]


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )

    # Lookup defaults
    search_lookback_days: int = Field(
        default=365,
        ge=1,
        le=3660,
        description="How far back the lookup view searches by default"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


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
    def app(self) -> AppSettings:
        return AppSettings()


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
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
