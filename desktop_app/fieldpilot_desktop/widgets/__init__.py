"""PySide6 widgets of the FieldPilot desktop client."""

from .login import LoginDialog
from .main_window import MainWindow
from .qt_support import QtNotifier

__all__ = ["LoginDialog", "MainWindow", "QtNotifier"]
