"""
Configuration Management for Expense Tracker

Settings come from environment variables (and .env), grouped by concern:
STORAGE_* for the data directory, AUTH_* for token signing and password
hashing, and unprefixed app settings for the HTTP server and validation.

AUTH_JWT_SECRET has no default; the service refuses to start without it.
"""

import warnings
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


MIN_SECRET_LENGTH = 32


class StorageSettings(BaseSettings):
    """JSON file storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the JSON collections"
    )
    users_filename: str = Field(
        default="users.json",
        description="File name of the users collection"
    )
    expenses_filename: str = Field(
        default="expenses.json",
        description="File name of the expenses collection"
    )

    @property
    def users_path(self) -> Path:
        return self.data_dir / self.users_filename

    @property
    def expenses_path(self) -> Path:
        return self.data_dir / self.expenses_filename


class AuthSettings(BaseSettings):
    """Password hashing and bearer token configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    jwt_secret: str = Field(
        ...,
        min_length=1,
        description="Server-held secret used to sign tokens"
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    token_expire_hours: int = Field(
        default=24,
        ge=1,
        le=24 * 30,
        description="How long an issued token stays valid"
    )
    password_hash_method: str = Field(
        default="scrypt",
        description="werkzeug hash method, e.g. 'scrypt' or 'pbkdf2:sha256'"
    )

    @field_validator('jwt_secret')
    @classmethod
    def warn_short_secret(cls, v: str) -> str:
        """Warn on weak secrets (but don't fail - local development uses them)."""
        if len(v) < MIN_SECRET_LENGTH:
            warnings.warn(
                f"AUTH_JWT_SECRET is shorter than {MIN_SECRET_LENGTH} characters. "
                "Use a long random value in production."
            )
        return v


class AppSettings(BaseSettings):
    """
    HTTP server, logging and expense validation settings.

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
        description="Root log level"
    )

    # Server
    host: str = Field(
        default="127.0.0.1",
        description="Interface the HTTP server binds to"
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port the HTTP server listens on"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # Expense policy
    allow_negative_amounts: bool = Field(
        default=False,
        description="Accept negative amounts (refunds, credits)"
    )
    suggested_categories: str = Field(
        default="Food,Transportation,Entertainment,Shopping,Bills,Healthcare,Other",
        description="Comma-separated categories offered to clients (advisory only)"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def suggested_categories_list(self) -> list[str]:
        """Get suggested categories as a list."""
        return [cat.strip() for cat in self.suggested_categories.split(",") if cat.strip()]


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

    # Note: These are loaded lazily to allow partial configuration

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

    for name in ("storage", "auth", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
