# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

Settings are loaded from environment variables with sensible defaults.
The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from eduforge.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.proactive.cooldown
    datetime.timedelta(seconds=300)
"""

from datetime import timedelta
from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProactiveSettings(BaseSettings):
    """Proactive intervention engine configuration.

    Attributes:
        buffer_capacity: Maximum number of signals kept per session.
        lookback_minutes: Trailing window of signals considered per evaluation.
        cooldown_minutes: Minimum gap between two emitted nudges.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROACTIVE_",
        extra="ignore",
    )

    buffer_capacity: int = Field(default=100, ge=1)
    lookback_minutes: float = Field(default=10.0, gt=0)
    cooldown_minutes: float = Field(default=5.0, ge=0)

    @property
    def lookback(self) -> timedelta:
        """Lookback window as a timedelta."""
        return timedelta(minutes=self.lookback_minutes)

    @property
    def cooldown(self) -> timedelta:
        """Cooldown interval as a timedelta."""
        return timedelta(minutes=self.cooldown_minutes)


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        proactive: Proactive engine settings.
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

    proactive: ProactiveSettings = Field(default_factory=ProactiveSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with debug enabled.
        """
        if self.environment == "production" and self.debug:
            raise ValueError(
                "Debug mode must be disabled in production. "
                "Set DEBUG=false environment variable."
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
