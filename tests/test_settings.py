"""Tests for configuration loading."""

import logging

import pytest
from pydantic import ValidationError

from calculator.config import AppSettings, CalculatorSettings, get_settings, validate_all_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestCalculatorSettings:
    """Tests for timing and precision knobs."""

    def test_defaults(self, monkeypatch):
        for name in ("SETTLE_DELAY_MS", "SHAKE_DURATION_MS", "COPY_CONFIRMATION_MS", "RESULT_DECIMAL_PLACES"):
            monkeypatch.delenv(f"CALCULATOR_{name}", raising=False)
        settings = CalculatorSettings()
        assert settings.settle_delay_ms == 150
        assert settings.shake_duration_ms == 500
        assert settings.copy_confirmation_ms == 2000
        assert settings.result_decimal_places == 6

    def test_seconds(self):
        settings = CalculatorSettings(settle_delay_ms=150, shake_duration_ms=500, copy_confirmation_ms=2000)
        assert settings.settle_delay_seconds == 0.15
        assert settings.shake_duration_seconds == 0.5
        assert settings.copy_confirmation_seconds == 2.0

    def test_bounds(self):
        with pytest.raises(ValidationError):
            CalculatorSettings(settle_delay_ms=-1)
        with pytest.raises(ValidationError):
            CalculatorSettings(result_decimal_places=13)

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("CALCULATOR_SETTLE_DELAY_MS", "0")
        assert get_settings().calculator.settle_delay_ms == 0


class TestAppSettings:
    """Tests for application settings."""

    def test_log_level_normalized(self):
        settings = AppSettings(log_level=" debug ")
        assert settings.log_level == "DEBUG"
        assert settings.log_level_number == logging.DEBUG

    def test_debug_mode_forces_debug_level(self):
        assert AppSettings(debug_mode=True, log_level="WARNING").effective_log_level == logging.DEBUG
        assert AppSettings(debug_mode=False, log_level="WARNING").effective_log_level == logging.WARNING

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            AppSettings(log_level="LOUD")


class TestValidateAllSettings:
    """Tests for the startup check."""

    def test_all_valid(self, monkeypatch):
        monkeypatch.delenv("CALCULATOR_SETTLE_DELAY_MS", raising=False)
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        results = validate_all_settings()
        assert results["calculator"] is True
        assert results["app"] is True

    def test_invalid_value_reported(self, monkeypatch):
        monkeypatch.setenv("CALCULATOR_SETTLE_DELAY_MS", "-5")
        results = validate_all_settings()
        assert results["calculator"] is False
        assert "calculator_error" in results


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
