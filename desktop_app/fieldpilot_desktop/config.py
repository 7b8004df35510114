"""Configuration utilities for the desktop client."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_WEB_APP_URL = "http://localhost:3000"
DEFAULT_REQUEST_TIMEOUT = 15
DEFAULT_SEARCH_DEBOUNCE_MS = 500
DEFAULT_PAGE_SIZE = 10
DEFAULT_TOKEN_CHECK_INTERVAL = 60
DEFAULT_TOKEN_FILE = Path.home() / ".fieldpilot" / "session.json"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE = "fieldpilot-desktop.log"

PAGE_SIZE_OPTIONS = (10, 20, 50, 100)


@dataclass(slots=True)
class AppConfig:
    """Configuration values for the application."""

    api_base_url: str = DEFAULT_API_BASE_URL
    web_app_url: str = DEFAULT_WEB_APP_URL
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    search_debounce_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS
    page_size: int = DEFAULT_PAGE_SIZE
    token_file: Path = DEFAULT_TOKEN_FILE
    token_check_interval_seconds: int = DEFAULT_TOKEN_CHECK_INTERVAL
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[Path] = None

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000.0


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_config() -> AppConfig:
    """Load the configuration from an optional `.env` file and the environment."""

    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    page_size = _int_env("FIELDPILOT_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    if page_size not in PAGE_SIZE_OPTIONS:
        page_size = DEFAULT_PAGE_SIZE

    log_file = os.getenv("FIELDPILOT_LOG_FILE")

    return AppConfig(
        api_base_url=os.getenv("FIELDPILOT_API_BASE_URL", DEFAULT_API_BASE_URL),
        web_app_url=os.getenv("FIELDPILOT_WEB_APP_URL", DEFAULT_WEB_APP_URL),
        request_timeout=_int_env("FIELDPILOT_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        search_debounce_ms=max(0, _int_env("FIELDPILOT_SEARCH_DEBOUNCE_MS", DEFAULT_SEARCH_DEBOUNCE_MS)),
        page_size=page_size,
        token_file=Path(os.getenv("FIELDPILOT_TOKEN_FILE", str(DEFAULT_TOKEN_FILE))).expanduser(),
        token_check_interval_seconds=max(
            5, _int_env("FIELDPILOT_TOKEN_CHECK_INTERVAL", DEFAULT_TOKEN_CHECK_INTERVAL)
        ),
        log_level=os.getenv("FIELDPILOT_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        log_file=Path(log_file).expanduser() if log_file else None,
    )


__all__ = ["AppConfig", "PAGE_SIZE_OPTIONS", "load_config"]
