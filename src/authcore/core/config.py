"""Configuration management for authcore.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at process
startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AUTHCORE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "authcore"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/authcore.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False

    # Cache Settings
    redis_url: str | None = Field(
        default=None,
        description="Redis URL for the session/throttle cache. In-memory cache when unset.",
    )
    redis_socket_timeout: float = 5.0

    # Token Signing Secrets
    jwt_secret_access: str = Field(
        default="change-me-access-secret",
        description="Secret key for access token signing",
    )
    jwt_secret_refresh: str = Field(
        default="change-me-refresh-secret",
        description="Secret key for refresh token signing",
    )
    session_secret: str = Field(
        default="change-me-session-secret",
        description="Secret key for session token signing",
    )

    # Token Lifetimes
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 30
    session_expire_days: int = 30

    # Password Hashing (Argon2)
    password_hash_type: Literal["argon2id", "argon2i", "argon2d"] = "argon2id"
    password_hash_length: int = 64
    password_time_cost: int = 5
    password_memory_cost: int = 65536  # KiB
    password_parallelism: int = 4
    password_salt_length: int = 16

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def session_ttl_seconds(self) -> int:
        """Validity window of a session, shared by the row expiry and its cache mirror."""
        return self.session_expire_days * 86400

    @model_validator(mode="after")
    def validate_distinct_secrets(self) -> "Settings":
        """Each token type must be signed with its own secret."""
        secrets = {
            "jwt_secret_access": self.jwt_secret_access,
            "jwt_secret_refresh": self.jwt_secret_refresh,
            "session_secret": self.session_secret,
        }
        if len(set(secrets.values())) != len(secrets):
            raise ValueError(
                "jwt_secret_access, jwt_secret_refresh and session_secret must all differ"
            )
        return self

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.database_url.startswith("sqlite"):
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
