"""Travel / arrival / lunch / departure controls of a task."""

from __future__ import annotations

from typing import Optional

from PySide6.QtGui import QFont
from PySide6.QtWidgets import (QButtonGroup, QDialog, QDialogButtonBox,
                               QGridLayout, QGroupBox, QHBoxLayout, QLabel,
                               QPushButton, QRadioButton, QTableWidget,
                               QTableWidgetItem, QVBoxLayout, QWidget)

from ..api.tasks import TasksApi
from ..controllers.notifications import Notifier
from ..controllers.time_tracking import (ARRIVAL, DEPARTURE, LUNCH_END,
                                         LUNCH_START, NOT_STARTED, ON_LUNCH,
                                         ON_SITE, TRAVEL, TRAVELING,
                                         TimeTrackingController, format_hours)

STATUS_COLORS = {
    NOT_STARTED: "#5f6368",
    TRAVELING: "#1a73e8",
    ON_SITE: "#0f9d58",
    ON_LUNCH: "#f4b400",
}


def _time(value) -> str:
    return value.strftime("%H:%M") if value else "-"


class DepartureDialog(QDialog):
    """Asks for the equipment status left behind."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Log Departure")
        self.functional_button = QRadioButton("Functional - equipment is working")
        self.shutdown_button = QRadioButton("Shutdown - equipment is not working")
        self.functional_button.setChecked(True)
        group = QButtonGroup(self)
        group.addButton(self.functional_button)
        group.addButton(self.shutdown_button)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("What is the status of the equipment?"))
        layout.addWidget(self.functional_button)
        layout.addWidget(self.shutdown_button)
        layout.addWidget(buttons)

    def equipment_status(self) -> str:
        return "shutdown" if self.shutdown_button.isChecked() else "functional"


class TimeTrackingPanel(QWidget):
    """Travel, arrival, lunch and departure buttons for one task."""

    def __init__(self, tasks_api: TasksApi, task_id: str, notifier: Notifier,
                 parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = TimeTrackingController(tasks_api, task_id, notifier, on_change=self._render)

        self.status_label = QLabel("Not Started")
        font = QFont()
        font.setPointSize(16)
        font.setBold(True)
        self.status_label.setFont(font)
        self.totals_label = QLabel("-")

        self.buttons = {
            TRAVEL: QPushButton("Start Travel"),
            ARRIVAL: QPushButton("Log Arrival"),
            LUNCH_START: QPushButton("Start Lunch"),
            LUNCH_END: QPushButton("End Lunch"),
            DEPARTURE: QPushButton("Log Departure"),
        }
        self.buttons[TRAVEL].clicked.connect(self.controller.start_travel)
        self.buttons[ARRIVAL].clicked.connect(self.controller.log_arrival)
        self.buttons[LUNCH_START].clicked.connect(self.controller.start_lunch)
        self.buttons[LUNCH_END].clicked.connect(self.controller.end_lunch)
        self.buttons[DEPARTURE].clicked.connect(self._handle_departure)

        self.log_table = QTableWidget(0, 7)
        self.log_table.setHorizontalHeaderLabels(
            ["Technician", "Travel", "Arrived", "Lunch", "Departed", "Hours", "Equipment"])
        self.log_table.horizontalHeader().setStretchLastSection(True)

        status_group = QGroupBox("Time Tracking")
        grid = QGridLayout(status_group)
        grid.addWidget(QLabel("Status:"), 0, 0)
        grid.addWidget(self.status_label, 0, 1)
        grid.addWidget(QLabel("Totals:"), 1, 0)
        grid.addWidget(self.totals_label, 1, 1)

        button_row = QHBoxLayout()
        for button in self.buttons.values():
            button_row.addWidget(button)
        button_row.addStretch(1)

        layout = QVBoxLayout(self)
        layout.addWidget(status_group)
        layout.addLayout(button_row)
        layout.addWidget(self.log_table, stretch=1)

    def refresh(self) -> None:
        self.controller.load()

    # ------------------------------------------------------------------
    def _render(self) -> None:
        status = self.controller.status
        self.status_label.setText(self.controller.status_label)
        self.status_label.setStyleSheet(f"color: {STATUS_COLORS[status]};")
        for action, button in self.buttons.items():
            button.setVisible(action in self.controller.allowed_actions)
            button.setEnabled(self.controller.can(action))
        if self.controller.busy_action in self.buttons:
            self.buttons[self.controller.busy_action].setText("Working...")
        else:
            self._reset_button_labels()

        totals = self.controller.totals
        self.totals_label.setText(
            f"{format_hours(totals.total_work_hours)} total, "
            f"{format_hours(totals.normal_hours)} normal, "
            f"{format_hours(totals.overtime_hours)} overtime")

        logs = self.controller.logs
        self.log_table.setRowCount(len(logs))
        for row, log in enumerate(logs):
            lunch = f"{_time(log.lunch_started_at)} - {_time(log.lunch_ended_at)}" if log.lunch_started_at else "-"
            values = [
                log.technician_name or "-",
                _time(log.travel_started_at),
                _time(log.arrived_at),
                lunch,
                _time(log.departed_at),
                format_hours(log.total_work_hours),
                log.equipment_status_at_departure or "-",
            ]
            for column, value in enumerate(values):
                self.log_table.setItem(row, column, QTableWidgetItem(value))

    def _reset_button_labels(self) -> None:
        labels = {
            TRAVEL: "Start Travel",
            ARRIVAL: "Log Arrival",
            LUNCH_START: "Start Lunch",
            LUNCH_END: "End Lunch",
            DEPARTURE: "Log Departure",
        }
        for action, label in labels.items():
            self.buttons[action].setText(label)

    def _handle_departure(self) -> None:
        if not self.controller.can(DEPARTURE):
            return
        dialog = DepartureDialog(self)
        if dialog.exec():
            self.controller.log_departure(dialog.equipment_status())


__all__ = ["DepartureDialog", "TimeTrackingPanel"]
