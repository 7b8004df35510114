"""Application-wide logging setup."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from .config import DEFAULT_LOG_FILE, AppConfig

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(config: AppConfig) -> logging.Logger:
    """Configure console output and a rotating log file next to the session store."""

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    log_path = config.log_file or Path(config.token_file).parent / DEFAULT_LOG_FILE
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)

    root_logger.info("Logging initialized at %s level", logging.getLevelName(log_level))
    root_logger.info("Log file: %s", log_path)
    return root_logger


__all__ = ["setup_logging"]
