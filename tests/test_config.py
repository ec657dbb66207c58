"""Tests for environment-driven configuration."""

import pytest

from awards.config import DEFAULT_BASE_URL, Settings, load_settings
from awards.errors import ConfigError

_ENV_VARS = [
    "SEATS_AERO_API_KEY",
    "SEATS_AERO_BASE_URL",
    "SEATS_AERO_TIMEOUT",
    "SEATS_AERO_MAX_RETRIES",
    "SEATS_AERO_RATE_LIMIT_RETRIES",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the caller's environment and any .env in the repo."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.api_key == ""
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.timeout == 30.0
        assert settings.max_retries == 3
        assert settings.rate_limit_retries == 1

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("SEATS_AERO_API_KEY", "pro_abc")
        monkeypatch.setenv("SEATS_AERO_TIMEOUT", "12.5")
        monkeypatch.setenv("SEATS_AERO_RATE_LIMIT_RETRIES", "2")
        settings = Settings()
        assert settings.api_key == "pro_abc"
        assert settings.timeout == 12.5
        assert settings.rate_limit_retries == 2

    def test_from_dotenv(self, clean_env):
        (clean_env / ".env").write_text("SEATS_AERO_API_KEY=from_file\n")
        assert Settings().api_key == "from_file"

    def test_environment_beats_dotenv(self, clean_env, monkeypatch):
        (clean_env / ".env").write_text("SEATS_AERO_API_KEY=from_file\n")
        monkeypatch.setenv("SEATS_AERO_API_KEY", "from_env")
        assert Settings().api_key == "from_env"


class TestLoadSettings:
    def test_missing_key(self):
        with pytest.raises(ConfigError) as exc_info:
            load_settings()
        message = str(exc_info.value)
        assert "SEATS_AERO_API_KEY" in message
        assert "https://seats.aero/apikey" in message

    def test_blank_key(self, monkeypatch):
        monkeypatch.setenv("SEATS_AERO_API_KEY", "   ")
        with pytest.raises(ConfigError):
            load_settings()

    def test_override(self):
        assert load_settings(api_key="k").api_key == "k"

    def test_rate_limit_retries_over_limit(self, monkeypatch):
        monkeypatch.setenv("SEATS_AERO_API_KEY", "k")
        monkeypatch.setenv("SEATS_AERO_MAX_RETRIES", "2")
        monkeypatch.setenv("SEATS_AERO_RATE_LIMIT_RETRIES", "3")
        with pytest.raises(ConfigError) as exc_info:
            load_settings()
        assert "Invalid configuration" in str(exc_info.value)

    def test_non_numeric_timeout(self, monkeypatch):
        monkeypatch.setenv("SEATS_AERO_API_KEY", "k")
        monkeypatch.setenv("SEATS_AERO_TIMEOUT", "soon")
        with pytest.raises(ConfigError) as exc_info:
            load_settings()
        assert "timeout" in str(exc_info.value)
