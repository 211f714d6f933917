"""
Tests for environment configuration
"""

import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings

pytestmark = pytest.mark.unit


class TestSettings:
    """Test environment variable configuration and validation"""

    def test_default_settings(self, monkeypatch):
        """Test default settings initialization"""
        for name in ("ENVIRONMENT", "DATABASE_URL", "LOG_LEVEL", "FAKER_SEED"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.environment == "test"
        assert settings.database_url == "sqlite://"
        assert settings.log_format == "text"
        assert settings.faker_locale == "en_US"
        assert settings.faker_seed is None
        assert settings.default_primary_key == "id"

    def test_environment_variables(self, monkeypatch):
        """Test settings load from environment"""
        monkeypatch.setenv("DATABASE_URL", "sqlite:///tmp/factories.db")
        monkeypatch.setenv("FAKER_SEED", "99")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite:///tmp/factories.db"
        assert settings.faker_seed == 99
        assert settings.log_level == "DEBUG"

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="qa")

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_format="xml")

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="chatty")

    def test_primary_key_must_be_identifier(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_primary_key="user id")

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
