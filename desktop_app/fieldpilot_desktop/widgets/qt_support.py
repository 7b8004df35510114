"""Qt adapters for the UI-independent controllers."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer
from PySide6.QtWidgets import QMainWindow, QMessageBox

from ..controllers.debounce import TimerFactory
from ..controllers.notifications import ERROR, Notification, Notifier

TOAST_TIMEOUT_MS = 4000


class SingleShotTimer:
    """Debounce timer running on the Qt event loop instead of a thread."""

    def __init__(self, delay: float, callback: Callable[[], None], parent: Optional[QObject] = None) -> None:
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.setInterval(int(delay * 1000))
        self._timer.timeout.connect(callback)
        self._timer.timeout.connect(self._timer.deleteLater)

    def start(self) -> None:
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()
        self._timer.deleteLater()


def qt_timer_factory(parent: Optional[QObject] = None) -> TimerFactory:
    return lambda delay, callback: SingleShotTimer(delay, callback, parent)


class QtNotifier(Notifier):
    """Shows toasts in the window status bar; errors additionally in a message box."""

    def __init__(self, window: QMainWindow) -> None:
        super().__init__()
        self.window = window

    def show(self, notification: Notification) -> None:
        self.window.statusBar().showMessage(notification.message, TOAST_TIMEOUT_MS)
        if notification.level == ERROR:
            QMessageBox.warning(self.window, "Error", notification.message)


__all__ = ["QtNotifier", "SingleShotTimer", "qt_timer_factory"]
