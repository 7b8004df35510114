"""Work-hours report page."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QDate
from PySide6.QtWidgets import (QComboBox, QDateEdit, QHBoxLayout, QLabel,
                               QPushButton, QTableWidget, QTableWidgetItem,
                               QVBoxLayout, QWidget)

from ..api.tasks import TasksApi
from ..api.teams import TeamsApi
from ..controllers.notifications import Notifier
from ..controllers.reports import WorkHoursReportController
from ..controllers.time_tracking import format_hours


def _time(value) -> str:
    return value.strftime("%H:%M") if value else "-"


class WorkHoursReportPage(QWidget):
    """Technician picker, date range, summary line and one row per time log."""

    def __init__(self, tasks_api: TasksApi, teams_api: TeamsApi, notifier: Notifier,
                 parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = WorkHoursReportController(tasks_api, teams_api, notifier, on_change=self._render)
        self._loaded = False

        self.technician_input = QComboBox()
        self.start_input = QDateEdit()
        self.end_input = QDateEdit()
        for date_input, value in ((self.start_input, self.controller.start_date),
                                  (self.end_input, self.controller.end_date)):
            date_input.setCalendarPopup(True)
            date_input.setDisplayFormat("dd.MM.yyyy")
            date_input.setDate(QDate(value.year, value.month, value.day))
        self.generate_button = QPushButton("Generate report")
        self.generate_button.clicked.connect(self._handle_generate)

        self.summary_label = QLabel("Select a technician and a date range.")
        self.summary_label.setWordWrap(True)
        self.log_table = QTableWidget(0, 5)
        self.log_table.setHorizontalHeaderLabels(["Date", "Arrived", "Departed", "Hours", "Overtime"])
        self.log_table.horizontalHeader().setStretchLastSection(True)

        controls = QHBoxLayout()
        controls.addWidget(QLabel("Technician"))
        controls.addWidget(self.technician_input, stretch=1)
        controls.addWidget(QLabel("From"))
        controls.addWidget(self.start_input)
        controls.addWidget(QLabel("To"))
        controls.addWidget(self.end_input)
        controls.addWidget(self.generate_button)

        title = QLabel("Work Hours Report")
        title.setStyleSheet("font-size: 18px; font-weight: bold;")

        layout = QVBoxLayout(self)
        layout.addWidget(title)
        layout.addLayout(controls)
        layout.addWidget(self.summary_label)
        layout.addWidget(self.log_table, stretch=1)

    def ensure_loaded(self) -> None:
        if not self._loaded:
            self._loaded = True
            self.controller.load_technicians()

    def _render(self) -> None:
        selected = self.technician_input.currentData()
        self.technician_input.blockSignals(True)
        self.technician_input.clear()
        self.technician_input.addItem("Select a technician", None)
        for technician in self.controller.technicians:
            self.technician_input.addItem(technician.full_name or technician.email, technician.id)
        self.technician_input.setCurrentIndex(max(0, self.technician_input.findData(selected)))
        self.technician_input.blockSignals(False)
        self.generate_button.setEnabled(not self.controller.loading)

        report = self.controller.report
        if report is None:
            self.log_table.setRowCount(0)
            return
        self.summary_label.setText(
            f"{report.technician_name}: {format_hours(report.total_work_hours)} total, "
            f"{format_hours(report.normal_hours)} normal, {format_hours(report.overtime_hours)} overtime "
            f"across {report.total_tasks} task(s)")
        self.log_table.setRowCount(len(report.time_logs))
        for row, log in enumerate(report.time_logs):
            day = log.arrived_at or log.travel_started_at
            values = [day.strftime("%d.%m.%Y") if day else "-", _time(log.arrived_at), _time(log.departed_at),
                      format_hours(log.total_work_hours), format_hours(log.overtime_hours)]
            for column, value in enumerate(values):
                self.log_table.setItem(row, column, QTableWidgetItem(value))

    def _handle_generate(self) -> None:
        self.controller.technician_id = self.technician_input.currentData()
        self.controller.set_range(self.start_input.date().toPython(), self.end_input.date().toPython())
        self.controller.generate()


__all__ = ["WorkHoursReportPage"]
