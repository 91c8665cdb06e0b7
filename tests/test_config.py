"""
Tests for configuration module.
"""

from pathlib import Path

import pytest

from gleaner.config import DEFAULT_USER_AGENT, Settings, get_settings, reset_settings
from gleaner.utils.errors import ConfigurationError


class TestSettings:
    """Test the Settings configuration class."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        """Start every test without GLEANER_* variables."""
        for name in (
            "GLEANER_LOG_LEVEL",
            "GLEANER_DEV_MODE",
            "GLEANER_LOG_FILE",
            "GLEANER_DOCUMENT_TYPE",
            "GLEANER_HTML_PARSER",
            "GLEANER_REQUEST_TIMEOUT",
            "GLEANER_USER_AGENT",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_default_settings(self):
        """Test default settings initialization."""
        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.dev_mode is False
        assert settings.log_file is None
        assert settings.default_document_type == "dom"
        assert settings.html_parser == "html.parser"
        assert settings.request_timeout == 30.0
        assert settings.user_agent == DEFAULT_USER_AGENT

    def test_settings_from_env(self, monkeypatch):
        """Test loading settings from environment variables."""
        monkeypatch.setenv("GLEANER_LOG_LEVEL", "debug")
        monkeypatch.setenv("GLEANER_DEV_MODE", "yes")
        monkeypatch.setenv("GLEANER_DOCUMENT_TYPE", "json")
        monkeypatch.setenv("GLEANER_REQUEST_TIMEOUT", "5")
        monkeypatch.setenv("GLEANER_USER_AGENT", "gleaner-tests")

        settings = Settings()

        assert settings.log_level == "DEBUG"
        assert settings.dev_mode is True
        assert settings.default_document_type == "json"
        assert settings.request_timeout == 5.0
        assert settings.user_agent == "gleaner-tests"

    @pytest.mark.parametrize("raw", ["soon", "0", "-1"])
    def test_invalid_timeout(self, monkeypatch, raw):
        """Test that the request timeout must be a positive number."""
        monkeypatch.setenv("GLEANER_REQUEST_TIMEOUT", raw)

        with pytest.raises(ConfigurationError) as exc_info:
            Settings()

        assert exc_info.value.details["name"] == "GLEANER_REQUEST_TIMEOUT"

    def test_log_file_path(self, monkeypatch, tmp_path):
        """Test the log file helper."""
        assert Settings().get_log_file_path() is None

        monkeypatch.setenv("GLEANER_LOG_FILE", str(tmp_path / "gleaner.log"))
        assert Settings().get_log_file_path() == Path(tmp_path / "gleaner.log")


class TestGetSettings:
    """Test the settings singleton."""

    def test_singleton(self):
        """Test that get_settings returns the same instance."""
        assert get_settings() is get_settings()

    def test_reset(self, monkeypatch):
        """Test that reset_settings re-reads the environment."""
        monkeypatch.setenv("GLEANER_HTML_PARSER", "html.parser")
        first = get_settings()

        monkeypatch.setenv("GLEANER_HTML_PARSER", "lxml")
        assert get_settings().html_parser == "html.parser"

        reset_settings()
        second = get_settings()

        assert second is not first
        assert second.html_parser == "lxml"
