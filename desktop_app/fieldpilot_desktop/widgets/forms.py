"""Generic create/edit dialog driven by pydantic request schemas."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Type

from pydantic import ValidationError
from PySide6.QtCore import QDate, QEvent, QObject
from PySide6.QtWidgets import (QComboBox, QDateEdit, QDialog, QDialogButtonBox,
                               QFormLayout, QLabel, QLineEdit, QTextEdit,
                               QVBoxLayout, QWidget)

from ..errors import field_errors
from ..schemas import RequestModel
from ..validation import field_error

TEXT = "text"
MULTILINE = "multiline"
CHOICE = "choice"
DATE = "date"
NUMBER = "number"
PASSWORD = "password"


@dataclass(slots=True, frozen=True)
class FormField:
    """One input of an ``EntityFormDialog``."""

    name: str
    label: str
    kind: str = TEXT
    choices: Sequence[str] = ()


class EntityFormDialog(QDialog):
    """Collects field values and validates them against ``request_cls``.

    Errors are shown below the offending field; the dialog stays open until
    the values validate. A field is also checked on its own when it loses
    focus.
    """

    def __init__(self, title: str, fields: Sequence[FormField], request_cls: Type[RequestModel],
                 initial: Optional[Dict[str, Any]] = None, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(title)
        self.fields = list(fields)
        self.request_cls = request_cls
        self.request: Optional[RequestModel] = None
        self._inputs: Dict[str, QWidget] = {}
        self._error_labels: Dict[str, QLabel] = {}
        self._field_names: Dict[QWidget, str] = {}

        form = QFormLayout()
        for form_field in self.fields:
            widget = self._create_input(form_field, (initial or {}).get(form_field.name))
            error_label = QLabel()
            error_label.setStyleSheet("color: #db4437;")
            error_label.hide()
            column = QVBoxLayout()
            column.addWidget(widget)
            column.addWidget(error_label)
            form.addRow(form_field.label, column)
            self._inputs[form_field.name] = widget
            self._field_names[widget] = form_field.name
            widget.installEventFilter(self)
            if isinstance(widget, QComboBox):
                widget.currentIndexChanged.connect(lambda _index, name=form_field.name: self._validate_field(name))
            self._error_labels[form_field.name] = error_label

        self.general_error = QLabel()
        self.general_error.setStyleSheet("color: #db4437;")
        self.general_error.hide()

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._handle_accept)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(self.general_error)
        layout.addWidget(buttons)

    # ------------------------------------------------------------------
    def _create_input(self, form_field: FormField, value: Any) -> QWidget:
        if form_field.kind == CHOICE:
            combo = QComboBox()
            combo.addItem("", None)
            for choice in form_field.choices:
                combo.addItem(choice.replace("_", " ").title(), choice)
            if value is not None:
                combo.setCurrentIndex(max(0, combo.findData(value)))
            return combo
        if form_field.kind == MULTILINE:
            text_edit = QTextEdit()
            text_edit.setFixedHeight(80)
            text_edit.setPlainText("" if value is None else str(value))
            return text_edit
        if form_field.kind == DATE:
            date_edit = QDateEdit()
            date_edit.setCalendarPopup(True)
            date_edit.setSpecialValueText(" ")
            date_edit.setMinimumDate(QDate(1900, 1, 1))
            if isinstance(value, dt.date):
                date_edit.setDate(QDate(value.year, value.month, value.day))
            else:
                date_edit.setDate(date_edit.minimumDate())
            return date_edit
        line_edit = QLineEdit()
        if form_field.kind == PASSWORD:
            line_edit.setEchoMode(QLineEdit.Password)
        line_edit.setText("" if value is None else str(value))
        return line_edit

    def values(self) -> Dict[str, Any]:
        """Entered values; empty inputs are left out."""

        values: Dict[str, Any] = {}
        for form_field in self.fields:
            widget = self._inputs[form_field.name]
            if isinstance(widget, QComboBox):
                value = widget.currentData()
            elif isinstance(widget, QTextEdit):
                value = widget.toPlainText().strip()
            elif isinstance(widget, QDateEdit):
                value = None if widget.date() == widget.minimumDate() else widget.date().toPython()
            else:
                value = widget.text().strip()
            if value not in (None, ""):
                values[form_field.name] = value
        return values

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if event.type() == QEvent.FocusOut and watched in self._field_names:
            self._validate_field(self._field_names[watched])
        return super().eventFilter(watched, event)

    def _validate_field(self, field_name: str) -> None:
        label = self._error_labels[field_name]
        message = field_error(self.request_cls, self.values(), field_name)
        if message:
            label.setText(message)
            label.show()
        else:
            label.hide()

    def _handle_accept(self) -> None:
        for label in self._error_labels.values():
            label.hide()
        self.general_error.hide()
        try:
            self.request = self.request_cls(**self.values())
        except ValidationError as exc:
            self.show_errors(field_errors(exc))
            return
        self.accept()

    def show_errors(self, errors: Dict[str, str]) -> None:
        for field_name, message in errors.items():
            label = self._error_labels.get(field_name)
            if label is None:
                self.general_error.setText(message)
                self.general_error.show()
                continue
            label.setText(message)
            label.show()


__all__ = ["CHOICE", "DATE", "EntityFormDialog", "FormField", "MULTILINE", "NUMBER", "PASSWORD", "TEXT"]
