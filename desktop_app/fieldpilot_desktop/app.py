"""Entry point of the desktop application."""

from __future__ import annotations

import logging
import sys

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication

from .api import ApiClient, FieldPilotApi
from .config import load_config
from .logging_config import setup_logging
from .state import AuthState, BillingState, OnboardingState
from .token_store import TokenStore
from .widgets import LoginDialog, MainWindow

logger = logging.getLogger(__name__)


def main() -> None:
    """Start the Qt application."""

    app = QApplication(sys.argv)
    app.setApplicationName("FieldPilot Desktop")
    app.setOrganizationName("FieldPilot")
    config = load_config()
    setup_logging(config)

    token_store = TokenStore(config.token_file)
    api_client = ApiClient(config.api_base_url, token_store, timeout=config.request_timeout)
    api = FieldPilotApi(api_client)

    auth = AuthState(api.auth, token_store)
    billing = BillingState(api.billing, token_store)
    onboarding = OnboardingState(api.onboarding, token_store)

    window = MainWindow(api, auth, billing, onboarding, config)
    api_client.on_unauthorized = lambda: QTimer.singleShot(0, window.session_expired)

    def handle_logout() -> None:
        window.hide()
        billing.reset()
        onboarding.reset()
        if LoginDialog(auth).exec():
            window.start()
            window.show()
        else:
            app.quit()

    auth.initialize()
    auth.on_logout = handle_logout
    if not auth.is_authenticated and not LoginDialog(auth).exec():
        logger.info("Sign-in cancelled")
        return

    window.start()
    window.show()
    sys.exit(app.exec())


__all__ = ["main"]
