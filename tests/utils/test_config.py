"""
Tests for centralized configuration system.
Verifies environment variable loading and default values.
"""
import pytest
from pydantic import ValidationError
from redrive.config import Settings, get_settings


class TestConfigurationSystem:
    """Test suite for configuration management."""

    def test_default_values(self, monkeypatch):
        """Verify all configuration fields have sensible defaults."""
        for name in ("REDRIVE_LOG_LEVEL", "REDRIVE_ENVIRONMENT", "REDRIVE_CONFIG_FILE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.config_file == "config.json"
        assert settings.stop_grace_seconds == 30.0
        assert settings.sqs_wait_time_seconds == 20
        assert settings.sqs_visibility_timeout is None
        assert settings.log_level == "INFO"
        assert settings.enable_structured_logging is False
        assert settings.environment == "development"

    def test_environment_variable_override(self, monkeypatch):
        """Verify environment variables override defaults."""
        monkeypatch.setenv("REDRIVE_CONFIG_FILE", "/etc/redrive/queues.json")
        monkeypatch.setenv("REDRIVE_STOP_GRACE_SECONDS", "5")
        monkeypatch.setenv("REDRIVE_LOG_LEVEL", "TRACE")
        monkeypatch.setenv("REDRIVE_ENVIRONMENT", "production")

        settings = get_settings()

        assert settings.config_file == "/etc/redrive/queues.json"
        assert settings.stop_grace_seconds == 5.0
        assert settings.log_level == "TRACE"
        assert settings.environment == "production"

    def test_boolean_environment_variables(self, monkeypatch):
        """Verify boolean environment variables parse correctly."""
        monkeypatch.setenv("REDRIVE_ENABLE_STRUCTURED_LOGGING", "true")

        settings = get_settings()

        assert settings.enable_structured_logging is True

    def test_singleton_pattern(self):
        """Verify get_settings() returns same instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_sqs_wait_time_bounds(self, monkeypatch):
        """SQS long polls are limited to 20 seconds."""
        monkeypatch.setenv("REDRIVE_SQS_WAIT_TIME_SECONDS", "21")

        with pytest.raises(ValidationError):
            get_settings()

    def test_grace_period_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("REDRIVE_STOP_GRACE_SECONDS", "0")

        with pytest.raises(ValidationError):
            get_settings()

    def test_unknown_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("REDRIVE_LOG_LEVEL", "VERBOSE")

        with pytest.raises(ValidationError):
            get_settings()
