"""Toast notifications shown by the UI after user actions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"
INFO = "info"


@dataclass(slots=True)
class Notification:
    """One toast as it was shown."""

    level: str
    message: str
    created_at: datetime = field(default_factory=datetime.now)


class Notifier:
    """Collects toasts; widgets subclass it to actually display them."""

    def __init__(self) -> None:
        self.history: List[Notification] = []

    def success(self, message: str) -> None:
        self.notify(SUCCESS, message)

    def error(self, message: str) -> None:
        self.notify(ERROR, message)

    def info(self, message: str) -> None:
        self.notify(INFO, message)

    def notify(self, level: str, message: str) -> None:
        """Record the toast and log it; subclasses display it."""

        notification = Notification(level, message)
        self.history.append(notification)
        if level == ERROR:
            logger.warning("Toast (%s): %s", level, message)
        else:
            logger.info("Toast (%s): %s", level, message)
        self.show(notification)

    def show(self, notification: Notification) -> None:
        """Display hook for subclasses."""

    @property
    def last(self) -> Notification | None:
        return self.history[-1] if self.history else None

    def messages(self, level: str | None = None) -> list[str]:
        return [item.message for item in self.history if level is None or item.level == level]


__all__ = ["ERROR", "INFO", "Notification", "Notifier", "SUCCESS"]
