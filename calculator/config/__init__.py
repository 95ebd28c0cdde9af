"""Configuration package."""

from calculator.config.settings import (
    AppSettings,
    CalculatorSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "CalculatorSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
