"""
Unit tests for dispatcher settings.
"""

import logging
import pytest

from proxyhandler.config import DispatcherSettings, configure_logging


class TestDispatcherSettings:
    """Tests for DispatcherSettings."""

    def test_defaults(self):
        settings = DispatcherSettings()
        assert settings.cors_support is False
        assert settings.log_level == "INFO"
        assert settings.log_format == "text"
        assert settings.access_log is True
        settings.validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PROXY_CORS_SUPPORT", "true")
        monkeypatch.setenv("PROXY_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PROXY_LOG_FORMAT", "json")
        monkeypatch.setenv("PROXY_ACCESS_LOG", "0")

        settings = DispatcherSettings.from_env()

        assert settings.cors_support is True
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"
        assert settings.access_log is False

    def test_from_env_defaults(self, monkeypatch):
        for name in ("PROXY_CORS_SUPPORT", "PROXY_LOG_LEVEL",
                     "PROXY_LOG_FORMAT", "PROXY_ACCESS_LOG"):
            monkeypatch.delenv(name, raising=False)

        assert DispatcherSettings.from_env() == DispatcherSettings()

    def test_from_env_bad_flag(self, monkeypatch):
        monkeypatch.setenv("PROXY_CORS_SUPPORT", "maybe")
        with pytest.raises(ValueError, match="PROXY_CORS_SUPPORT"):
            DispatcherSettings.from_env()

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="log_level"):
            DispatcherSettings(log_level="LOUD").validate()

    def test_invalid_log_format(self):
        with pytest.raises(ValueError, match="log_format"):
            DispatcherSettings(log_format="xml").validate()

    def test_level(self):
        assert DispatcherSettings(log_level="debug").level == logging.DEBUG
        assert DispatcherSettings(log_level="ERROR").level == logging.ERROR


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_sets_package_level(self):
        package_logger = logging.getLogger("proxyhandler")
        previous = package_logger.level
        try:
            configure_logging(DispatcherSettings(log_level="WARNING"))
            assert package_logger.level == logging.WARNING
        finally:
            package_logger.setLevel(previous)
