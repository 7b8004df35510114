"""Main window with one navigation entry per page route."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from PySide6.QtCore import Qt, QTimer, QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import (QHBoxLayout, QLabel, QListWidget,
                               QListWidgetItem, QMainWindow, QPushButton,
                               QStackedWidget, QVBoxLayout, QWidget)

from ..api import FieldPilotApi
from ..config import AppConfig
from ..state import AuthState, BillingState, OnboardingState
from .billing import BillingDashboard
from .entities import ENTITY_VIEWS
from .entity_list import EntityListPanel
from .facility_contents import FacilityContentsDialog
from .onboarding import OnboardingWizard
from .qt_support import QtNotifier
from .reports import WorkHoursReportPage
from .task_detail import TaskDetailDialog
from .team_members import TeamMembersDialog

LOGIN_ROUTE = "/login"
BILLING_ROUTE = "/billing/dashboard"
ONBOARDING_ROUTE = "/onboarding/start"
REPORTS_ROUTE = "/organization/reports/work-hours"


class MainWindow(QMainWindow):
    """Navigation list on the left, the selected page on the right."""

    def __init__(self, api: FieldPilotApi, auth: AuthState, billing: BillingState,
                 onboarding: OnboardingState, config: AppConfig, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.api = api
        self.auth = auth
        self.billing = billing
        self.onboarding = onboarding
        self.config = config
        self.notifier = QtNotifier(self)
        self.setWindowTitle("FieldPilot")
        self.resize(1280, 800)

        self.user_label = QLabel()
        self.web_button = QPushButton("Open web app")
        self.logout_button = QPushButton("Sign out")
        self.web_button.clicked.connect(self._open_web_app)
        self.logout_button.clicked.connect(self.auth.logout)

        self.navigation = QListWidget()
        self.navigation.setFixedWidth(200)
        self.pages = QStackedWidget()
        self._page_index: Dict[str, int] = {}
        self._refreshers: Dict[str, Callable[[], None]] = {}

        for view in ENTITY_VIEWS:
            panel = EntityListPanel(
                view,
                getattr(api, view.resource),
                self.notifier,
                page_size=config.page_size,
                debounce_seconds=config.search_debounce_seconds,
            )
            if view.opens_detail:
                panel.item_opened.connect(self.open_task)
            if view.resource == "teams":
                panel.secondary_requested.connect(self.open_team_members)
            elif view.resource == "facilities":
                panel.secondary_requested.connect(self.open_facility_contents)
            self._add_page(view.route, view.title, panel, panel.ensure_loaded)

        self.reports_page = WorkHoursReportPage(api.tasks, api.teams, self.notifier)
        self._add_page(REPORTS_ROUTE, "Work Hours", self.reports_page, self.reports_page.ensure_loaded)
        self.billing_page = BillingDashboard(billing, self.notifier, web_app_url=config.web_app_url)
        self._add_page(BILLING_ROUTE, "Billing", self.billing_page, self.billing_page.refresh)
        self.onboarding_page = OnboardingWizard(onboarding, billing, auth, self.notifier)
        self._add_page(ONBOARDING_ROUTE, "Company Setup", self.onboarding_page, self.onboarding_page.refresh)

        self.navigation.currentItemChanged.connect(self._handle_navigation)
        self._build_ui()

        self.token_timer = QTimer(self)
        self.token_timer.timeout.connect(self.auth.ensure_fresh_token)
        self.token_timer.start(max(config.token_check_interval_seconds, 10) * 1000)

    def _add_page(self, route: str, title: str, widget: QWidget, refresher: Callable[[], None]) -> None:
        self._page_index[route] = self.pages.addWidget(widget)
        self._refreshers[route] = refresher
        item = QListWidgetItem(title)
        item.setData(Qt.UserRole, route)
        self.navigation.addItem(item)

    def _build_ui(self) -> None:
        header = QHBoxLayout()
        header.addWidget(self.user_label)
        header.addStretch(1)
        header.addWidget(self.web_button)
        header.addWidget(self.logout_button)

        body = QHBoxLayout()
        body.addWidget(self.navigation)
        body.addWidget(self.pages, stretch=1)

        central_widget = QWidget()
        layout = QVBoxLayout(central_widget)
        layout.addLayout(header)
        layout.addLayout(body, stretch=1)
        self.setCentralWidget(central_widget)

    # ------------------------------------------------------------------
    def start(self) -> None:
        """Show the landing page for the signed-in user."""

        user = self.auth.user
        self.user_label.setText(f"{user.full_name or user.email} ({user.role})" if user else "")
        tenant = self.onboarding.load_tenant()
        if tenant is None or not tenant.onboarding_completed:
            self.navigate(ONBOARDING_ROUTE)
        else:
            self.navigate(ENTITY_VIEWS[0].route)

    def navigate(self, route: str) -> None:
        if route == LOGIN_ROUTE:
            self.auth.logout()
            return
        for index in range(self.navigation.count()):
            item = self.navigation.item(index)
            if item.data(Qt.UserRole) == route:
                if self.navigation.currentItem() is item:
                    self._refreshers[route]()
                else:
                    self.navigation.setCurrentItem(item)
                return

    def _handle_navigation(self, current: Optional[QListWidgetItem], _previous) -> None:
        if current is None:
            return
        route = current.data(Qt.UserRole)
        self.pages.setCurrentIndex(self._page_index[route])
        self._refreshers[route]()

    def open_task(self, task_id: str) -> None:
        dialog = TaskDetailDialog(self.api.tasks, task_id, self.notifier, teams_api=self.api.teams, parent=self)
        dialog.refresh()
        dialog.exec()

    def open_team_members(self, team_id: str) -> None:
        dialog = TeamMembersDialog(self.api.teams, team_id, self.notifier, parent=self)
        dialog.refresh()
        dialog.exec()

    def open_facility_contents(self, facility_id: str) -> None:
        dialog = FacilityContentsDialog(self.api.facilities, facility_id, self.notifier, parent=self)
        dialog.refresh()
        dialog.exec()

    def session_expired(self) -> None:
        if self.auth.is_authenticated:
            self.notifier.info("Your session has expired. Please sign in again.")
            self.auth.logout()

    def _open_web_app(self) -> None:
        QDesktopServices.openUrl(QUrl(self.config.web_app_url))


__all__ = ["BILLING_ROUTE", "LOGIN_ROUTE", "MainWindow", "ONBOARDING_ROUTE", "REPORTS_ROUTE"]
