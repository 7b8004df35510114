"""Sign-in, registration and e-mail verification dialogs."""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError
from PySide6.QtWidgets import (QCheckBox, QDialog, QFormLayout, QHBoxLayout,
                               QInputDialog, QLabel, QLineEdit, QMessageBox,
                               QPushButton, QVBoxLayout, QWidget)

from ..errors import ApiError, field_errors
from ..schemas import RegisterRequest
from ..state.auth import AuthState
from ..validation import (error_message, map_api_errors_to_fields,
                          password_strength, validate_email)
from .forms import PASSWORD, EntityFormDialog, FormField

REGISTER_FIELDS = (
    FormField("first_name", "First name"),
    FormField("last_name", "Last name"),
    FormField("email", "E-mail"),
    FormField("phone", "Phone"),
    FormField("password", "Password", PASSWORD),
    FormField("password_confirm", "Confirm password", PASSWORD),
)


class LoginDialog(QDialog):
    """Modal sign-in; accepted once :class:`AuthState` holds a user."""

    def __init__(self, auth: AuthState, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.auth = auth
        self.setWindowTitle("Sign in to FieldPilot")
        self.setMinimumWidth(380)

        self.email_input = QLineEdit(auth.token_store.remembered_email or "")
        self.email_input.editingFinished.connect(self._check_email)
        self.password_input = QLineEdit()
        self.password_input.setEchoMode(QLineEdit.Password)
        self.remember_input = QCheckBox("Remember me")
        self.remember_input.setChecked(bool(auth.token_store.remembered_email))

        self.email_error = QLabel()
        self.error_label = QLabel()
        for label in (self.email_error, self.error_label):
            label.setStyleSheet("color: #db4437;")
            label.setWordWrap(True)
            label.hide()

        self.login_button = QPushButton("Sign in")
        self.login_button.setDefault(True)
        self.register_button = QPushButton("Create account...")
        self.verify_button = QPushButton("Verify e-mail...")
        self.login_button.clicked.connect(self._handle_login)
        self.register_button.clicked.connect(self._handle_register)
        self.verify_button.clicked.connect(lambda: self._verify(self.email_input.text().strip()))

        form = QFormLayout()
        form.addRow("E-mail", self.email_input)
        form.addRow("", self.email_error)
        form.addRow("Password", self.password_input)
        form.addRow("", self.remember_input)

        buttons = QHBoxLayout()
        buttons.addWidget(self.register_button)
        buttons.addWidget(self.verify_button)
        buttons.addStretch(1)
        buttons.addWidget(self.login_button)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(self.error_label)
        layout.addLayout(buttons)

    def _check_email(self) -> None:
        message = validate_email(self.email_input.text().strip())
        self.email_error.setText(message or "")
        self.email_error.setVisible(bool(message))

    def _handle_login(self) -> None:
        self.error_label.hide()
        try:
            self.auth.login(self.email_input.text().strip(), self.password_input.text(),
                            self.remember_input.isChecked())
        except ValidationError as exc:
            self._show_error(next(iter(field_errors(exc).values()), "Invalid input"))
            return
        except ApiError as exc:
            self._show_error(error_message(exc))
            if exc.code == "EMAIL_NOT_VERIFIED":
                self._verify(self.email_input.text().strip())
            return
        self.accept()

    def _show_error(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.show()

    # ------------------------------------------------------------------
    def _handle_register(self) -> None:
        dialog = EntityFormDialog("Create account", REGISTER_FIELDS, RegisterRequest, parent=self)
        while dialog.exec():
            strength = password_strength(dialog.values().get("password", ""))
            try:
                user = self.auth.register(dialog.request)
            except ApiError as exc:
                errors = map_api_errors_to_fields(exc) or {"__all__": error_message(exc)}
                dialog.show_errors(errors)
                continue
            QMessageBox.information(
                self, "Account created",
                f"Password strength: {strength.label}.\nWe sent a verification code to {user.email or 'your e-mail'}.")
            self.email_input.setText(dialog.request.email)
            self._verify(dialog.request.email)
            return

    def _verify(self, email: str) -> None:
        if validate_email(email):
            self._show_error("Enter your e-mail address first")
            return
        while True:
            code, ok = QInputDialog.getText(self, "Verify e-mail",
                                            f"Enter the 6-digit code sent to {email}.\n"
                                            "Leave empty to receive a new code.")
            if not ok:
                return
            try:
                if not code.strip():
                    self.auth.resend_otp(email)
                    QMessageBox.information(self, "Verify e-mail", "A new code is on its way.")
                    continue
                self.auth.verify_email(email, code.strip())
            except ValidationError as exc:
                QMessageBox.warning(self, "Verify e-mail", next(iter(field_errors(exc).values()), "Invalid code"))
                continue
            except ApiError as exc:
                QMessageBox.warning(self, "Verify e-mail", error_message(exc))
                continue
            QMessageBox.information(self, "Verify e-mail", "E-mail verified. You can sign in now.")
            return


__all__ = ["LoginDialog"]
