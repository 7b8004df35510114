from __future__ import annotations

import logging
from pathlib import Path

from fieldpilot_desktop import config as config_module
from fieldpilot_desktop.config import AppConfig, load_config
from fieldpilot_desktop.controllers.notifications import ERROR, INFO, Notifier
from fieldpilot_desktop.logging_config import setup_logging

ENV_VARS = (
    "FIELDPILOT_API_BASE_URL",
    "FIELDPILOT_WEB_APP_URL",
    "FIELDPILOT_REQUEST_TIMEOUT",
    "FIELDPILOT_SEARCH_DEBOUNCE_MS",
    "FIELDPILOT_PAGE_SIZE",
    "FIELDPILOT_TOKEN_FILE",
    "FIELDPILOT_TOKEN_CHECK_INTERVAL",
    "FIELDPILOT_LOG_LEVEL",
    "FIELDPILOT_LOG_FILE",
)


def _clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "load_dotenv", lambda *args, **kwargs: False)


def test_defaults(monkeypatch):
    _clean_env(monkeypatch)

    config = load_config()

    assert config.api_base_url == "http://localhost:8000"
    assert config.page_size == 10
    assert config.search_debounce_seconds == 0.5


def test_environment_overrides(monkeypatch, tmp_path):
    _clean_env(monkeypatch)
    monkeypatch.setenv("FIELDPILOT_API_BASE_URL", "https://api.fieldpilot.test")
    monkeypatch.setenv("FIELDPILOT_PAGE_SIZE", "50")
    monkeypatch.setenv("FIELDPILOT_SEARCH_DEBOUNCE_MS", "250")
    monkeypatch.setenv("FIELDPILOT_TOKEN_FILE", str(tmp_path / "tokens.json"))

    config = load_config()

    assert config.api_base_url == "https://api.fieldpilot.test"
    assert config.page_size == 50
    assert config.search_debounce_seconds == 0.25
    assert config.token_file == tmp_path / "tokens.json"


def test_invalid_values_fall_back(monkeypatch):
    _clean_env(monkeypatch)
    monkeypatch.setenv("FIELDPILOT_PAGE_SIZE", "25")
    monkeypatch.setenv("FIELDPILOT_REQUEST_TIMEOUT", "soon")
    monkeypatch.setenv("FIELDPILOT_TOKEN_CHECK_INTERVAL", "1")

    config = load_config()

    assert config.page_size == 10
    assert config.request_timeout == 15
    assert config.token_check_interval_seconds == 5


def test_setup_logging_writes_next_to_session_store(tmp_path):
    root_logger = logging.getLogger()
    previous_handlers, previous_level = root_logger.handlers[:], root_logger.level
    config = AppConfig(token_file=tmp_path / "session.json", log_level="debug")
    try:
        setup_logging(config)
        logging.getLogger("fieldpilot_desktop.test").debug("hello")
        for handler in root_logger.handlers:
            handler.flush()

        assert root_logger.level == logging.DEBUG
        assert "hello" in Path(tmp_path / "fieldpilot-desktop.log").read_text(encoding="utf-8")
    finally:
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers = previous_handlers
        root_logger.setLevel(previous_level)


def test_notifier_keeps_history():
    notifier = Notifier()

    notifier.info("Saved")
    notifier.error("Failed")

    assert notifier.messages() == ["Saved", "Failed"]
    assert notifier.messages(ERROR) == ["Failed"]
    assert notifier.history[0].level == INFO
