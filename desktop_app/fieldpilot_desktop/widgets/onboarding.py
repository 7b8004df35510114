"""Five-step company setup wizard and member management."""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError
from PySide6.QtCore import Qt
from PySide6.QtWidgets import (QButtonGroup, QComboBox, QHBoxLayout, QInputDialog,
                               QLabel, QLineEdit, QListWidget, QListWidgetItem,
                               QMessageBox, QPushButton, QRadioButton,
                               QStackedWidget, QVBoxLayout, QWidget)

from ..controllers.notifications import Notifier
from ..errors import ApiError, field_errors
from ..permissions import assignable_roles, can_modify_member, is_admin_role, role_label
from ..schemas import CreateCompanyRequest, InviteMemberRequest, UpdateCompanyRequest
from ..state.auth import AuthState
from ..state.billing import BillingState
from ..state.onboarding import LAST_STEP, OnboardingState
from ..validation import error_message, map_api_errors_to_fields
from .forms import CHOICE, EntityFormDialog, FormField

STEP_TITLES = ("Company Information", "Choose a Plan", "Payment Setup", "Invite Your Team", "All Set")

COMPANY_FIELDS = (
    FormField("name", "Company name"),
    FormField("company_email", "Company e-mail"),
    FormField("company_phone", "Phone"),
    FormField("company_size", "Company size", CHOICE, ("1-10", "11-50", "51-200", "201-500", "500+")),
    FormField("industry", "Industry"),
    FormField("website", "Website"),
    FormField("address", "Address"),
    FormField("city", "City"),
    FormField("state", "State"),
    FormField("zip_code", "Zip code"),
    FormField("country", "Country"),
)


class MembersPanel(QWidget):
    """Members with their roles plus the pending invitations."""

    def __init__(self, onboarding: OnboardingState, auth: AuthState, notifier: Notifier,
                 parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.onboarding = onboarding
        self.auth = auth
        self.notifier = notifier

        self.member_list = QListWidget()
        self.invitation_list = QListWidget()
        self.email_input = QLineEdit()
        self.email_input.setPlaceholderText("colleague@company.com")
        self.role_input = QComboBox()
        self.invite_button = QPushButton("Send invitation")
        self.role_button = QPushButton("Change role...")
        self.remove_button = QPushButton("Remove member")
        self.resend_button = QPushButton("Resend")
        self.revoke_button = QPushButton("Revoke")

        self.invite_button.clicked.connect(self._handle_invite)
        self.role_button.clicked.connect(self._handle_change_role)
        self.remove_button.clicked.connect(self._handle_remove)
        self.resend_button.clicked.connect(lambda: self._invitation_action(self.onboarding.resend_invitation,
                                                                           "Invitation resent"))
        self.revoke_button.clicked.connect(lambda: self._invitation_action(self.onboarding.revoke_invitation,
                                                                           "Invitation revoked"))

        invite_row = QHBoxLayout()
        invite_row.addWidget(self.email_input, stretch=1)
        invite_row.addWidget(self.role_input)
        invite_row.addWidget(self.invite_button)

        member_row = QHBoxLayout()
        member_row.addStretch(1)
        member_row.addWidget(self.role_button)
        member_row.addWidget(self.remove_button)

        invitation_row = QHBoxLayout()
        invitation_row.addStretch(1)
        invitation_row.addWidget(self.resend_button)
        invitation_row.addWidget(self.revoke_button)

        layout = QVBoxLayout(self)
        layout.addLayout(invite_row)
        layout.addWidget(QLabel("Members"))
        layout.addWidget(self.member_list, stretch=1)
        layout.addLayout(member_row)
        layout.addWidget(QLabel("Pending invitations"))
        layout.addWidget(self.invitation_list, stretch=1)
        layout.addLayout(invitation_row)

    @property
    def actor_role(self) -> Optional[str]:
        return self.auth.user.role if self.auth.user else None

    def refresh(self, force: bool = False) -> None:
        try:
            self.onboarding.load_members(force=force)
            if is_admin_role(self.actor_role):
                self.onboarding.load_pending_invitations(force=force)
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to load team members")
        self._render()

    def _render(self) -> None:
        self.role_input.clear()
        for role in assignable_roles(self.actor_role):
            self.role_input.addItem(role_label(role), role)
        self.role_input.setCurrentIndex(max(0, self.role_input.findData("employee")))
        can_invite = is_admin_role(self.actor_role)
        for widget in (self.email_input, self.role_input, self.invite_button,
                       self.resend_button, self.revoke_button):
            widget.setEnabled(can_invite)

        self.member_list.clear()
        for member in self.onboarding.members:
            item = QListWidgetItem(f"{member.full_name or member.email}  <{member.email}>  {role_label(member.role)}")
            item.setData(Qt.UserRole, member.id)
            self.member_list.addItem(item)

        self.invitation_list.clear()
        for invitation in self.onboarding.pending_invitations:
            expires = invitation.expires_at.strftime("%d.%m.%Y") if invitation.expires_at else "-"
            item = QListWidgetItem(f"{invitation.email}  {role_label(invitation.role)}  (expires {expires})")
            item.setData(Qt.UserRole, invitation.id)
            self.invitation_list.addItem(item)

    # ------------------------------------------------------------------
    def _handle_invite(self) -> None:
        try:
            request = InviteMemberRequest(email=self.email_input.text(), role=self.role_input.currentData())
            self.onboarding.invite_member(request)
        except ValidationError as exc:
            self.notifier.error(next(iter(field_errors(exc).values()), "Invalid input"))
            return
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to send invitation")
            return
        self.email_input.clear()
        self.notifier.success("Invitation sent")
        self._render()

    def _selected_member(self):
        item = self.member_list.currentItem()
        member_id = item.data(Qt.UserRole) if item else None
        return next((member for member in self.onboarding.members if member.id == member_id), None)

    def _handle_change_role(self) -> None:
        member = self._selected_member()
        if member is None:
            return
        is_self = self.auth.user is not None and member.email == self.auth.user.email
        if not can_modify_member(self.actor_role, member.role, is_self=is_self):
            self.notifier.error("You do not have permission to change this member's role")
            return
        roles = list(assignable_roles(self.actor_role))
        labels = [role_label(role) for role in roles]
        current = roles.index(member.role) if member.role in roles else 0
        label, ok = QInputDialog.getItem(self, "Change role", "Role", labels, current, False)
        if not ok:
            return
        try:
            self.onboarding.update_member_role(member.id, roles[labels.index(label)])
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to update role")
            return
        self.notifier.success("Role updated")
        self._render()

    def _handle_remove(self) -> None:
        member = self._selected_member()
        if member is None:
            return
        is_self = self.auth.user is not None and member.email == self.auth.user.email
        if not can_modify_member(self.actor_role, member.role, is_self=is_self):
            self.notifier.error("You do not have permission to remove this member")
            return
        if QMessageBox.question(self, "Remove member", f"Remove {member.email}?") != QMessageBox.Yes:
            return
        try:
            self.onboarding.remove_member(member.id)
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to remove member")
            return
        self.notifier.success("Member removed")
        self._render()

    def _invitation_action(self, action, success: str) -> None:
        item = self.invitation_list.currentItem()
        if item is None:
            return
        try:
            action(item.data(Qt.UserRole))
        except ApiError as exc:
            self.notifier.error(exc.message or "Invitation update failed")
            return
        self.notifier.success(success)
        self._render()


class OnboardingWizard(QWidget):
    """Five onboarding steps shown one at a time."""

    def __init__(self, onboarding: OnboardingState, billing: BillingState, auth: AuthState,
                 notifier: Notifier, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.onboarding = onboarding
        self.billing = billing
        self.auth = auth
        self.notifier = notifier

        self.step_label = QLabel()
        self.step_label.setStyleSheet("font-size: 18px; font-weight: bold;")
        self.company_label = QLabel()
        self.company_label.setWordWrap(True)
        self.company_button = QPushButton("Enter company details...")
        self.company_button.clicked.connect(self._handle_company)

        self.plan_list = QListWidget()
        self.monthly_button = QRadioButton("Monthly")
        self.yearly_button = QRadioButton("Yearly")
        cycle_group = QButtonGroup(self)
        cycle_group.addButton(self.monthly_button)
        cycle_group.addButton(self.yearly_button)
        self.monthly_button.toggled.connect(self._render_plans)

        self.members_panel = MembersPanel(onboarding, auth, notifier)
        self.done_label = QLabel("Your workspace is ready. Head over to Tasks to get started.")

        self.pages = QStackedWidget()
        self.pages.addWidget(self._company_page())
        self.pages.addWidget(self._plan_page())
        self.pages.addWidget(QLabel("Payment processing will be available soon. "
                                    "Skip this step to continue with your trial."))
        self.pages.addWidget(self.members_panel)
        self.pages.addWidget(self.done_label)

        self.back_button = QPushButton("← Back")
        self.skip_button = QPushButton("Skip")
        self.continue_button = QPushButton("Continue")
        self.back_button.clicked.connect(self._handle_back)
        self.skip_button.clicked.connect(self._handle_skip)
        self.continue_button.clicked.connect(self._handle_continue)

        navigation = QHBoxLayout()
        navigation.addWidget(self.back_button)
        navigation.addStretch(1)
        navigation.addWidget(self.skip_button)
        navigation.addWidget(self.continue_button)

        layout = QVBoxLayout(self)
        layout.addWidget(self.step_label)
        layout.addWidget(self.pages, stretch=1)
        layout.addLayout(navigation)

    def _company_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.addWidget(self.company_label)
        layout.addWidget(self.company_button)
        layout.addStretch(1)
        return page

    def _plan_page(self) -> QWidget:
        page = QWidget()
        cycle_row = QHBoxLayout()
        cycle_row.addWidget(self.monthly_button)
        cycle_row.addWidget(self.yearly_button)
        cycle_row.addStretch(1)
        layout = QVBoxLayout(page)
        layout.addLayout(cycle_row)
        layout.addWidget(self.plan_list, stretch=1)
        return page

    # ------------------------------------------------------------------
    def refresh(self) -> None:
        self.onboarding.load_tenant()
        if self.billing.selected_billing_cycle == "yearly":
            self.yearly_button.setChecked(True)
        else:
            self.monthly_button.setChecked(True)
        self._render()

    def _render(self) -> None:
        step = self.onboarding.current_step
        self.step_label.setText(f"Step {step} of {LAST_STEP}: {STEP_TITLES[step - 1]}")
        self.pages.setCurrentIndex(step - 1)
        self.back_button.setVisible(1 < step < LAST_STEP)
        self.skip_button.setVisible(step in (3, 4))
        self.continue_button.setVisible(step < LAST_STEP)

        tenant = self.onboarding.tenant
        if tenant is None:
            self.company_label.setText("Tell us about your company to create your workspace.")
            self.company_button.setText("Create company...")
        else:
            self.company_label.setText(f"{tenant.name}\n{tenant.company_email}\nWorkspace: {tenant.slug}")
            self.company_button.setText("Edit company details...")

        if step == 2:
            if not self.billing.plans:
                self.billing.load_plans()
            self._render_plans()
        elif step == 4:
            self.members_panel.refresh()

    def _render_plans(self) -> None:
        cycle = "yearly" if self.yearly_button.isChecked() else "monthly"
        selected = self.plan_list.currentItem().data(Qt.UserRole) if self.plan_list.currentItem() else None
        self.plan_list.clear()
        for plan in self.billing.plans:
            suffix = "/year" if cycle == "yearly" else "/month"
            item = QListWidgetItem(f"{plan.name}  ${plan.price_for(cycle):.2f}{suffix}  {plan.description}")
            item.setData(Qt.UserRole, plan.id)
            self.plan_list.addItem(item)
            if plan.id == selected:
                self.plan_list.setCurrentItem(item)

    # ------------------------------------------------------------------
    def _handle_company(self) -> None:
        tenant = self.onboarding.tenant
        if tenant is None:
            dialog = EntityFormDialog("Company Information", COMPANY_FIELDS, CreateCompanyRequest, parent=self)
        else:
            initial = {form_field.name: getattr(tenant, form_field.name, None) for form_field in COMPANY_FIELDS}
            dialog = EntityFormDialog("Company Information", COMPANY_FIELDS, UpdateCompanyRequest,
                                      initial=initial, parent=self)
        while dialog.exec():
            try:
                if tenant is None:
                    created = self.onboarding.create_company(dialog.request)
                    self.auth.update_user(tenant_slug=created.slug)
                else:
                    self.onboarding.update_company(dialog.request)
            except ApiError as exc:
                dialog.show_errors(_api_field_errors(exc))
                continue
            self.notifier.success("Company information saved")
            break
        self._render()

    def _complete(self, step: int, data: Optional[dict] = None) -> None:
        try:
            self.onboarding.complete_step(step, data)
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to save progress. Please try again.")
            return
        self._render()

    def _handle_continue(self) -> None:
        step = self.onboarding.current_step
        if step == 1:
            if self.onboarding.tenant is None:
                self.notifier.error("Please create your company first")
                return
            self._complete(1)
        elif step == 2:
            item = self.plan_list.currentItem()
            if item is None:
                self.notifier.error("Please select a plan to continue")
                return
            cycle = "yearly" if self.yearly_button.isChecked() else "monthly"
            self.billing.set_billing_cycle(cycle)
            self._complete(2, {"plan_id": item.data(Qt.UserRole), "billing_cycle": cycle})
        elif step == 3:
            self._complete(3, {"skipped": True})
        elif step == 4:
            self._complete(4, {"invited_count": len(self.onboarding.pending_invitations)})

    def _handle_skip(self) -> None:
        self._complete(self.onboarding.current_step, {"skipped": True})

    def _handle_back(self) -> None:
        self.onboarding.go_to_step(self.onboarding.current_step - 1)
        self._render()


def _api_field_errors(exc: ApiError) -> dict[str, str]:
    errors = map_api_errors_to_fields(exc)
    if not errors:
        errors["__all__"] = error_message(exc)
    return errors


__all__ = ["MembersPanel", "OnboardingWizard"]
