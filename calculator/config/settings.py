"""
Configuration Management for the Keypad Calculator

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All timing and precision knobs live here.
The calculator core takes these values as inputs instead of hard-coding
them, so tests can run with a zero settle delay.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CalculatorSettings(BaseSettings):
    """Calculator timing and formatting configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CALCULATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Artificial "computing" latency between "=" and the shown result
    settle_delay_ms: int = Field(
        default=150,
        ge=0,
        le=5000,
        description="Delay before an evaluation settles, in milliseconds"
    )
    shake_duration_ms: int = Field(
        default=500,
        ge=0,
        le=10000,
        description="How long the error shake indicator stays on"
    )
    copy_confirmation_ms: int = Field(
        default=2000,
        ge=0,
        le=60000,
        description="How long the 'copied' confirmation stays visible"
    )
    result_decimal_places: int = Field(
        default=6,
        ge=0,
        le=12,
        description="Decimal places kept when formatting a result"
    )

    @property
    def settle_delay_seconds(self) -> float:
        """Settle delay as seconds (for asyncio.sleep)."""
        return self.settle_delay_ms / 1000

    @property
    def shake_duration_seconds(self) -> float:
        return self.shake_duration_ms / 1000

    @property
    def copy_confirmation_seconds(self) -> float:
        return self.copy_confirmation_ms / 1000


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
        description="Standard library log level name"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept level names the logging module knows."""
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def log_level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]

    @property
    def effective_log_level(self) -> int:
        """Debug mode forces DEBUG regardless of log_level."""
        return logging.DEBUG if self.debug_mode else self.log_level_number


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
    def calculator(self) -> CalculatorSettings:
        return CalculatorSettings()

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


def validate_all_settings() -> dict:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.calculator
        results["calculator"] = True
    except Exception as e:
        results["calculator"] = False
        results["calculator_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
