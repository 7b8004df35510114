"""Billing dashboard: subscription, usage, plans, invoices and payments."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import (QDialog, QGroupBox, QHBoxLayout, QInputDialog, QLabel,
                               QListWidget, QListWidgetItem, QMessageBox,
                               QPushButton, QTableWidget, QTableWidgetItem,
                               QTabWidget, QVBoxLayout, QWidget)

from ..controllers.notifications import Notifier
from ..errors import ApiError
from ..state.billing import BILLING_CYCLES, BillingState, describe_payment_method


def _date(value) -> str:
    return value.strftime("%d.%m.%Y") if value else "-"


def _money(amount: float, currency: str = "usd") -> str:
    return f"{amount:,.2f} {currency.upper()}"


class PaymentMethodsDialog(QDialog):
    """Saved cards with default/remove actions.

    New cards are entered on the payment provider's hosted form in the web
    app; the resulting payment method id is then attached here.
    """

    def __init__(self, billing: BillingState, notifier: Notifier, *, web_app_url: str,
                 parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.billing = billing
        self.notifier = notifier
        self.web_app_url = web_app_url
        self.setWindowTitle("Payment methods")
        self.resize(460, 320)

        self.method_list = QListWidget()
        self.add_button = QPushButton("Add card...")
        self.default_button = QPushButton("Set as default")
        self.remove_button = QPushButton("Remove")
        self.add_button.clicked.connect(self._handle_add)
        self.default_button.clicked.connect(self._handle_set_default)
        self.remove_button.clicked.connect(self._handle_remove)

        buttons = QHBoxLayout()
        buttons.addWidget(self.add_button)
        buttons.addStretch(1)
        buttons.addWidget(self.default_button)
        buttons.addWidget(self.remove_button)

        layout = QVBoxLayout(self)
        layout.addWidget(self.method_list, stretch=1)
        layout.addLayout(buttons)

    def refresh(self) -> None:
        self.billing.list_payment_methods()
        if self.billing.error:
            self.notifier.error(self.billing.error)
        self._render()

    def _render(self) -> None:
        self.method_list.clear()
        for method in self.billing.payment_methods:
            item = QListWidgetItem(describe_payment_method(method))
            item.setData(Qt.UserRole, method.get("id"))
            self.method_list.addItem(item)
        has_methods = bool(self.billing.payment_methods)
        self.default_button.setEnabled(has_methods)
        self.remove_button.setEnabled(has_methods)

    def _selected_id(self) -> Optional[str]:
        item = self.method_list.currentItem()
        return item.data(Qt.UserRole) if item else None

    def _handle_add(self) -> None:
        try:
            intent = self.billing.setup_payment_method()
        except ApiError:
            self.notifier.error(self.billing.error or "Failed to start card setup")
            return
        QDesktopServices.openUrl(QUrl(
            f"{self.web_app_url.rstrip('/')}/billing/payment-methods?setup_intent={intent.client_secret}"))
        payment_method_id, ok = QInputDialog.getText(
            self, "Add card", "Paste the payment method id shown after saving the card (pm_...)")
        if not ok or not payment_method_id.strip():
            return
        try:
            self.billing.save_payment_method(payment_method_id.strip())
        except ApiError:
            self.notifier.error(self.billing.error or "Failed to add payment method")
            return
        self.notifier.success("Payment method added")
        self._render()

    def _handle_set_default(self) -> None:
        payment_method_id = self._selected_id()
        if not payment_method_id:
            return
        try:
            self.billing.set_default_payment_method(payment_method_id)
        except ApiError:
            self.notifier.error(self.billing.error or "Failed to update default payment method")
            return
        self.notifier.success("Default payment method updated")
        self._render()

    def _handle_remove(self) -> None:
        payment_method_id = self._selected_id()
        if not payment_method_id:
            return
        if QMessageBox.question(self, "Remove card", "Remove this payment method?") != QMessageBox.Yes:
            return
        try:
            self.billing.remove_payment_method(payment_method_id)
        except ApiError:
            self.notifier.error(self.billing.error or "Failed to remove payment method")
            return
        self.notifier.success("Payment method removed")
        self._render()


class BillingDashboard(QWidget):
    """Subscription, usage, plans and invoice history."""

    def __init__(self, billing: BillingState, notifier: Notifier, *, web_app_url: str,
                 parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.billing = billing
        self.notifier = notifier
        self.web_app_url = web_app_url

        self.plan_label = QLabel("-")
        self.plan_label.setStyleSheet("font-size: 16px; font-weight: bold;")
        self.status_label = QLabel("-")
        self.renewal_label = QLabel("-")
        self.usage_label = QLabel("-")
        self.usage_label.setWordWrap(True)
        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #db4437;")
        self.error_label.hide()

        self.plan_list = QListWidget()
        self.cycle_button = QPushButton()
        self.change_plan_button = QPushButton("Switch to selected plan")
        self.cancel_button = QPushButton("Cancel subscription...")
        self.reactivate_button = QPushButton("Reactivate")
        self.payment_button = QPushButton("Manage payment methods")
        self.refresh_button = QPushButton("Refresh")

        self.cycle_button.clicked.connect(self._toggle_cycle)
        self.change_plan_button.clicked.connect(self._handle_change_plan)
        self.cancel_button.clicked.connect(self._handle_cancel)
        self.reactivate_button.clicked.connect(self._handle_reactivate)
        self.payment_button.clicked.connect(self._open_payment_methods)
        self.refresh_button.clicked.connect(self.refresh)

        self.invoice_table = QTableWidget(0, 5)
        self.invoice_table.setHorizontalHeaderLabels(["Invoice", "Issued", "Due", "Total", "Status"])
        self.invoice_table.horizontalHeader().setStretchLastSection(True)
        self.payment_table = QTableWidget(0, 4)
        self.payment_table.setHorizontalHeaderLabels(["Date", "Amount", "Method", "Status"])
        self.payment_table.horizontalHeader().setStretchLastSection(True)

        self._build_ui()

    def _build_ui(self) -> None:
        summary = QGroupBox("Subscription")
        summary_layout = QVBoxLayout(summary)
        summary_layout.addWidget(self.plan_label)
        summary_layout.addWidget(self.status_label)
        summary_layout.addWidget(self.renewal_label)
        summary_layout.addWidget(self.usage_label)
        actions = QHBoxLayout()
        actions.addWidget(self.cancel_button)
        actions.addWidget(self.reactivate_button)
        actions.addWidget(self.payment_button)
        actions.addStretch(1)
        actions.addWidget(self.refresh_button)
        summary_layout.addLayout(actions)

        plans = QWidget()
        plans_layout = QVBoxLayout(plans)
        plan_actions = QHBoxLayout()
        plan_actions.addWidget(self.cycle_button)
        plan_actions.addStretch(1)
        plan_actions.addWidget(self.change_plan_button)
        plans_layout.addWidget(self.plan_list, stretch=1)
        plans_layout.addLayout(plan_actions)

        tabs = QTabWidget()
        tabs.addTab(plans, "Plans")
        tabs.addTab(self.invoice_table, "Invoices")
        tabs.addTab(self.payment_table, "Payments")

        layout = QVBoxLayout(self)
        layout.addWidget(self.error_label)
        layout.addWidget(summary)
        layout.addWidget(tabs, stretch=1)

    # ------------------------------------------------------------------
    def refresh(self) -> None:
        self.billing.refresh()
        self.billing.load_plans()
        self.billing.load_invoices()
        self.billing.load_payments()
        self._render()

    def _render(self) -> None:
        if self.billing.error:
            self.error_label.setText(self.billing.error)
            self.error_label.show()
        else:
            self.error_label.hide()

        subscription = self.billing.subscription
        if subscription is None:
            self.plan_label.setText("No active subscription")
            self.status_label.setText("-")
            self.renewal_label.setText("-")
        else:
            plan_name = subscription.plan.name if subscription.plan else "-"
            self.plan_label.setText(f"{plan_name} ({subscription.billing_cycle})")
            status = subscription.status.replace("_", " ")
            if subscription.cancel_at_period_end:
                status += ", cancels at period end"
            self.status_label.setText(f"Status: {status}")
            if subscription.is_trial and subscription.trial_end:
                self.renewal_label.setText(f"Trial ends {_date(subscription.trial_end)}")
            else:
                self.renewal_label.setText(
                    f"Renews {_date(subscription.next_renewal_date or subscription.current_period_end)}"
                    f" ({subscription.days_until_renewal} days)")
        self.cancel_button.setEnabled(subscription is not None and not subscription.cancel_at_period_end)
        self.reactivate_button.setEnabled(subscription is not None and subscription.cancel_at_period_end)

        overview = self.billing.overview
        if overview and overview.usage:
            parts = []
            for name, metric in overview.usage.items():
                limit = "unlimited" if metric.limit is None else f"{metric.limit:g}"
                parts.append(f"{name.replace('_', ' ')}: {metric.current:g} / {limit}")
            self.usage_label.setText("   ".join(parts))
        else:
            self.usage_label.setText("")

        cycle = self.billing.selected_billing_cycle
        self.cycle_button.setText(f"Billing: {cycle.title()}")
        self.plan_list.clear()
        for plan in self.billing.plans:
            suffix = "/year" if cycle == "yearly" else "/month"
            item = QListWidgetItem(f"{plan.name}  ${plan.price_for(cycle):.2f}{suffix}  {plan.description}")
            item.setData(Qt.UserRole, plan.slug)
            self.plan_list.addItem(item)

        self.invoice_table.setRowCount(len(self.billing.invoices))
        for row, invoice in enumerate(self.billing.invoices):
            values = [invoice.invoice_number, _date(invoice.issue_date), _date(invoice.due_date),
                      _money(invoice.total, invoice.currency), invoice.status]
            for column, value in enumerate(values):
                self.invoice_table.setItem(row, column, QTableWidgetItem(value))

        self.payment_table.setRowCount(len(self.billing.payments))
        for row, payment in enumerate(self.billing.payments):
            values = [_date(payment.processed_at or payment.created_at), _money(payment.amount, payment.currency),
                      payment.payment_method, payment.status]
            for column, value in enumerate(values):
                self.payment_table.setItem(row, column, QTableWidgetItem(value))

    # ------------------------------------------------------------------
    def _toggle_cycle(self) -> None:
        current = BILLING_CYCLES.index(self.billing.selected_billing_cycle)
        self.billing.set_billing_cycle(BILLING_CYCLES[(current + 1) % len(BILLING_CYCLES)])
        self._render()

    def _handle_change_plan(self) -> None:
        item = self.plan_list.currentItem()
        if item is None:
            return
        plan_slug = item.data(Qt.UserRole)
        cycle = self.billing.selected_billing_cycle
        try:
            if self.billing.subscription is None:
                self.billing.create_subscription(plan_slug, cycle)
            else:
                self.billing.change_plan(plan_slug, cycle)
        except ApiError:
            self.notifier.error(self.billing.error or "Failed to change plan")
        else:
            self.notifier.success("Subscription updated")
        self._render()

    def _handle_cancel(self) -> None:
        reason, ok = QInputDialog.getText(self, "Cancel subscription", "Reason (optional)")
        if not ok:
            return
        box = QMessageBox(self)
        box.setWindowTitle("Cancel subscription")
        box.setText("Cancel at the end of the current billing period, or immediately?")
        period_end = box.addButton("At period end", QMessageBox.AcceptRole)
        immediately = box.addButton("Immediately", QMessageBox.DestructiveRole)
        box.addButton(QMessageBox.Cancel)
        box.exec()
        if box.clickedButton() not in (period_end, immediately):
            return
        try:
            self.billing.cancel_subscription(box.clickedButton() is immediately, reason.strip() or None)
        except ApiError:
            self.notifier.error(self.billing.error or "Failed to cancel subscription")
        else:
            self.notifier.success("Subscription canceled")
        self._render()

    def _handle_reactivate(self) -> None:
        try:
            self.billing.reactivate_subscription()
        except ApiError:
            self.notifier.error(self.billing.error or "Failed to reactivate subscription")
        else:
            self.notifier.success("Subscription reactivated")
        self._render()

    def _open_payment_methods(self) -> None:
        dialog = PaymentMethodsDialog(self.billing, self.notifier, web_app_url=self.web_app_url, parent=self)
        dialog.refresh()
        dialog.exec()


__all__ = ["BillingDashboard", "PaymentMethodsDialog"]
