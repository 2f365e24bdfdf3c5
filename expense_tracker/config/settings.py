"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Slot names, the storage backend and auth thresholds are all validated
at startup rather than scattered through the stores.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_STORAGE_",
        extra="ignore"
    )

    backend: str = Field(
        default="memory",
        pattern="^(memory|file)$",
        description="Key-value backend to use"
    )
    file_path: str = Field(
        default="expense_tracker.json",
        description="Path of the JSON file used by the 'file' backend"
    )

    # Slot names within the store
    users_slot: str = Field(
        default="expense_tracker_users",
        min_length=1,
        description="Slot holding the users collection"
    )
    session_slot: str = Field(
        default="expense_tracker_session",
        min_length=1,
        description="Slot holding the current session record"
    )
    expenses_slot: str = Field(
        default="expense_tracker_expenses",
        min_length=1,
        description="Slot holding the expenses collection"
    )

    @field_validator('file_path')
    @classmethod
    def validate_file_path(cls, v: str) -> str:
        """Warn if the parent directory doesn't exist (but don't fail - might be created later)."""
        parent = Path(v).expanduser().parent
        if not parent.exists():
            import warnings
            warnings.warn(
                f"Storage directory not found at {parent}. "
                "Make sure it exists before running the application."
            )
        return v


class AuthSettings(BaseSettings):
    """Registration and session gating configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_AUTH_",
        extra="ignore"
    )

    min_password_length: int = Field(
        default=6,
        ge=1,
        le=128,
        description="Minimum password length accepted at registration"
    )
    login_entry_point: str = Field(
        default="login.html",
        description="Where unauthenticated users are sent"
    )
    dashboard_entry_point: str = Field(
        default="dashboard.html",
        description="Where users land after logging in"
    )


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

    # Display
    currency: str = Field(
        default="INR",
        min_length=3,
        max_length=3,
        description="ISO 4217 currency code used for amounts"
    )
    locale: str = Field(
        default="en_IN",
        description="Locale used for currency formatting"
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
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

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

    for name in ("storage", "auth", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
