# Config
"""
Configuration for the gleaner extraction engine.
Every setting can be overridden through a GLEANER_* environment variable.
"""

import os
from pathlib import Path
from typing import Optional

from gleaner.utils.errors import ConfigurationError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(name, raw, "expected a number")
    if value <= 0:
        raise ConfigurationError(name, raw, "must be positive")
    return value


class Settings:
    def __init__(self) -> None:
        # Logging
        self.log_level = os.getenv("GLEANER_LOG_LEVEL", "INFO").upper()
        self.dev_mode = _env_bool("GLEANER_DEV_MODE", False)
        self.log_file = os.getenv("GLEANER_LOG_FILE")

        # Documents
        self.default_document_type = os.getenv("GLEANER_DOCUMENT_TYPE", "dom")
        self.html_parser = os.getenv("GLEANER_HTML_PARSER", "html.parser")

        # Retrieval
        self.request_timeout = _env_float("GLEANER_REQUEST_TIMEOUT", 30.0)
        self.user_agent = os.getenv("GLEANER_USER_AGENT", DEFAULT_USER_AGENT)

    def get_log_file_path(self) -> Optional[Path]:
        return Path(self.log_file) if self.log_file else None


# Singleton instance
_settings = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
