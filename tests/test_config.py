"""Tests for settings loading and logging setup."""

import logging

import pytest
import structlog

from marketgate.config import AuthMode, Settings, load_settings
from marketgate.log import configure_logging, get_log_level

ENV_VARS = (
    "MARKETGATE_API_URL",
    "MARKETGATE_API_PREFIX",
    "MARKETGATE_AUTH_MODE",
    "MARKETGATE_IDENTITY_HEADER",
    "MARKETGATE_REQUEST_TIMEOUT",
    "MARKETGATE_STORAGE_URL",
    "MARKETGATE_INIT_DATA",
    "ENVIRONMENT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.request_timeout == 15.0
        assert settings.auth_mode is AuthMode.BEARER
        assert settings.identity_header == "X-Telegram-Init-Data"
        assert settings.keys.cart == "buildgo_cart"

    def test_base_url_joins_prefix(self):
        assert Settings(api_url="https://api.example.uz/", api_prefix="/api/").base_url == (
            "https://api.example.uz/api"
        )

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(request_timeout=0)


class TestLoadSettings:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MARKETGATE_API_URL", "https://api.example.uz")
        monkeypatch.setenv("MARKETGATE_AUTH_MODE", "INIT_DATA")
        monkeypatch.setenv("MARKETGATE_REQUEST_TIMEOUT", "7.5")
        monkeypatch.setenv("MARKETGATE_INIT_DATA", "proof")

        settings = load_settings()

        assert settings.api_url == "https://api.example.uz"
        assert settings.auth_mode is AuthMode.INIT_DATA
        assert settings.request_timeout == 7.5
        assert settings.init_data == "proof"

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text("MARKETGATE_API_URL=http://from-file\nMARKETGATE_IDENTITY_HEADER=X-Init\n")

        settings = load_settings(str(env_file))

        assert settings.api_url == "http://from-file"
        assert settings.identity_header == "X-Init"

    def test_invalid_auth_mode(self, monkeypatch):
        monkeypatch.setenv("MARKETGATE_AUTH_MODE", "cookie")
        with pytest.raises(ValueError, match="MARKETGATE_AUTH_MODE"):
            load_settings()

    def test_invalid_timeout(self, monkeypatch):
        monkeypatch.setenv("MARKETGATE_REQUEST_TIMEOUT", "fast")
        with pytest.raises(ValueError, match="MARKETGATE_REQUEST_TIMEOUT"):
            load_settings()


class TestLogging:
    def test_level_per_environment(self):
        assert get_log_level("production") == "INFO"
        assert get_log_level("development") == "DEBUG"
        assert get_log_level("test") == "WARNING"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")
        assert get_log_level("development") == "ERROR"

    def test_configure(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        configure_logging("production")

        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("httpx").level == logging.WARNING
        structlog.get_logger("marketgate.test").info("config.checked", ok=True)
        structlog.reset_defaults()
        root.handlers, root.level = handlers, level

    def test_public_surface(self):
        import marketgate.log as log

        assert all(hasattr(log, name) for name in log.__all__)
        assert not hasattr(log, "add_context")
