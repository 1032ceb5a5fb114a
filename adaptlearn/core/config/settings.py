# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Engine configuration settings using Pydantic Settings.

Settings are loaded from environment variables with sensible defaults.
The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from adaptlearn.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.adaptive.session_window
    30
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """History database configuration.

    The history database holds practice sessions, AI interactions, progress
    rows, progress snapshots and user facts written by the rest of the
    platform. The engine only reads from it.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
        url_override: Full async URL; takes precedence over the components
            (used for SQLite in tests and local runs).
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "adaptlearn"
    password: SecretStr = SecretStr("adaptlearn_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "adaptlearn"
    pool_size: int = 10
    max_overflow: int = 20
    url_override: str | None = None

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        if self.url_override:
            return self.url_override
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class RedisSettings(BaseSettings):
    """Redis configuration for the learning pattern cache.

    Attributes:
        host: Redis server host.
        port: Redis server port.
        password: Redis password.
        database: Redis database number.
        max_connections: Maximum connection pool size.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 6379
    password: SecretStr = SecretStr("")
    database: int = 0
    max_connections: int = 50

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        pwd = self.password.get_secret_value()
        if pwd:
            return f"redis://:{pwd}@{self.host}:{self.port}/{self.database}"
        return f"redis://{self.host}:{self.port}/{self.database}"


class AdaptiveSettings(BaseSettings):
    """History windows and cache policy for the adaptive engine.

    Attributes:
        session_window: Sessions fetched for pattern analysis.
        interaction_window: Interactions fetched for pattern analysis.
        snapshot_window: Progress snapshots fetched for trend detection.
        difficulty_window: Sessions fetched for a difficulty adjustment.
        profile_session_window: Sessions fetched for profile building.
        insight_session_window: Sessions fetched for learning insights.
        pattern_ttl_seconds: Lifetime of a cached learning pattern.
        pattern_key_prefix: Prefix for pattern cache keys.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADAPTIVE_",
        extra="ignore",
    )

    session_window: int = Field(default=30, ge=1)
    interaction_window: int = Field(default=100, ge=1)
    snapshot_window: int = Field(default=10, ge=1)
    difficulty_window: int = Field(default=5, ge=1)
    profile_session_window: int = Field(default=20, ge=1)
    insight_session_window: int = Field(default=10, ge=1)
    pattern_ttl_seconds: int = Field(default=3600, ge=1)
    pattern_key_prefix: str = "adaptlearn"


class Settings(BaseSettings):
    """Main settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        database: History database settings.
        redis: Pattern cache settings.
        adaptive: Engine window and cache policy settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    adaptive: AdaptiveSettings = Field(default_factory=AdaptiveSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with debug enabled.
        """
        if self.environment == "production" and self.debug:
            raise ValueError(
                "Debug mode must be disabled in production. Set DEBUG=false."
            )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
