"""Task detail window: overview, comments, attachments, materials, history and time."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (QComboBox, QDialog, QDialogButtonBox,
                               QDoubleSpinBox, QFileDialog, QFormLayout,
                               QHBoxLayout, QInputDialog, QLabel, QLineEdit,
                               QListWidget, QListWidgetItem, QMessageBox,
                               QPushButton, QTabWidget, QTextEdit, QVBoxLayout,
                               QWidget)

from ..api.tasks import MATERIAL_LOG_TYPES, TASK_STATUSES, WORK_STATUSES, TasksApi
from ..api.teams import TeamsApi
from ..controllers.notifications import Notifier
from ..controllers.task_detail import TaskDetailController
from ..errors import ApiError
from .time_tracking import TimeTrackingPanel


def _stamp(value) -> str:
    return value.strftime("%d.%m.%Y %H:%M") if value else ""


def _size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


class AssignDialog(QDialog):
    """Pick technicians and teams for a task."""

    def __init__(self, technicians, teams, assigned: set, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Assign Task")
        self.technician_list = self._checklist(technicians, assigned)
        self.team_list = self._checklist(teams, assigned)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Technicians"))
        layout.addWidget(self.technician_list)
        layout.addWidget(QLabel("Teams"))
        layout.addWidget(self.team_list)
        layout.addWidget(buttons)

    @staticmethod
    def _checklist(options, assigned: set) -> QListWidget:
        list_widget = QListWidget()
        for identifier, name in options:
            item = QListWidgetItem(name)
            item.setData(Qt.UserRole, identifier)
            item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
            item.setCheckState(Qt.Checked if identifier in assigned else Qt.Unchecked)
            list_widget.addItem(item)
        return list_widget

    @staticmethod
    def checked(list_widget: QListWidget) -> list[str]:
        return [
            list_widget.item(index).data(Qt.UserRole)
            for index in range(list_widget.count())
            if list_widget.item(index).checkState() == Qt.Checked
        ]


class TaskDetailDialog(QDialog):
    """Task details with comments, attachments, materials and history tabs."""

    def __init__(self, tasks_api: TasksApi, task_id: str, notifier: Notifier,
                 teams_api: Optional[TeamsApi] = None, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.teams_api = teams_api
        self.setWindowTitle("Task")
        self.resize(960, 640)
        self.controller = TaskDetailController(tasks_api, task_id, notifier, on_change=self._render)

        self.title_label = QLabel()
        self.title_label.setStyleSheet("font-size: 18px; font-weight: bold;")
        self.meta_label = QLabel()
        self.description_label = QLabel()
        self.description_label.setWordWrap(True)

        self.status_input = QComboBox()
        for status in TASK_STATUSES:
            self.status_input.addItem(status.title(), status)
        self.work_status_input = QComboBox()
        for status in WORK_STATUSES:
            self.work_status_input.addItem(status.replace("_", " ").title(), status)
        self.status_button = QPushButton("Update status")
        self.work_status_button = QPushButton("Update work status")
        self.assign_button = QPushButton("Assign...")
        self.status_button.clicked.connect(
            lambda: self.controller.set_status(self.status_input.currentData()))
        self.work_status_button.clicked.connect(
            lambda: self.controller.set_work_status(self.work_status_input.currentData()))
        self.assign_button.clicked.connect(self._handle_assign)

        # Comments
        self.comment_list = QListWidget()
        self.comment_input = QTextEdit()
        self.comment_input.setFixedHeight(70)
        self.comment_input.setPlaceholderText("Add a comment...")
        self.comment_button = QPushButton("Post comment")
        self.comment_edit_button = QPushButton("Edit")
        self.comment_delete_button = QPushButton("Delete")
        self.comment_button.clicked.connect(self._handle_add_comment)
        self.comment_edit_button.clicked.connect(self._handle_edit_comment)
        self.comment_delete_button.clicked.connect(self._handle_delete_comment)

        # Attachments
        self.attachment_list = QListWidget()
        self.upload_button = QPushButton("Upload file...")
        self.download_button = QPushButton("Download...")
        self.attachment_delete_button = QPushButton("Delete")
        self.upload_button.clicked.connect(self._handle_upload)
        self.download_button.clicked.connect(self._handle_download)
        self.attachment_delete_button.clicked.connect(self._handle_delete_attachment)

        # Materials
        self.material_list = QListWidget()
        self.material_filter = QComboBox()
        self.material_filter.addItem("All", None)
        for log_type in MATERIAL_LOG_TYPES:
            self.material_filter.addItem(log_type.title(), log_type)
        self.material_filter.currentIndexChanged.connect(
            lambda _: self.controller.load_materials(self.material_filter.currentData()))
        self.material_type = QComboBox()
        for log_type in MATERIAL_LOG_TYPES:
            self.material_type.addItem(log_type.title(), log_type)
        self.material_name = QLineEdit()
        self.material_quantity = QDoubleSpinBox()
        self.material_quantity.setDecimals(2)
        self.material_quantity.setMaximum(1_000_000)
        self.material_unit = QLineEdit()
        self.material_notes = QLineEdit()
        self.material_button = QPushButton("Log material")
        self.material_button.clicked.connect(self._handle_log_material)

        self.history_list = QListWidget()
        self.time_tracking = TimeTrackingPanel(tasks_api, task_id, notifier)

        self._build_ui()

    def _build_ui(self) -> None:
        overview = QWidget()
        overview_layout = QVBoxLayout(overview)
        overview_layout.addWidget(self.meta_label)
        overview_layout.addWidget(self.description_label)
        status_row = QHBoxLayout()
        status_row.addWidget(self.status_input)
        status_row.addWidget(self.status_button)
        status_row.addWidget(self.work_status_input)
        status_row.addWidget(self.work_status_button)
        status_row.addStretch(1)
        status_row.addWidget(self.assign_button)
        overview_layout.addLayout(status_row)
        overview_layout.addStretch(1)

        comments = QWidget()
        comments_layout = QVBoxLayout(comments)
        comments_layout.addWidget(self.comment_list, stretch=1)
        comments_layout.addWidget(self.comment_input)
        comment_row = QHBoxLayout()
        comment_row.addWidget(self.comment_button)
        comment_row.addStretch(1)
        comment_row.addWidget(self.comment_edit_button)
        comment_row.addWidget(self.comment_delete_button)
        comments_layout.addLayout(comment_row)

        attachments = QWidget()
        attachments_layout = QVBoxLayout(attachments)
        attachments_layout.addWidget(self.attachment_list, stretch=1)
        attachment_row = QHBoxLayout()
        attachment_row.addWidget(self.upload_button)
        attachment_row.addWidget(self.download_button)
        attachment_row.addStretch(1)
        attachment_row.addWidget(self.attachment_delete_button)
        attachments_layout.addLayout(attachment_row)

        materials = QWidget()
        materials_layout = QVBoxLayout(materials)
        materials_layout.addWidget(self.material_filter)
        materials_layout.addWidget(self.material_list, stretch=1)
        form = QFormLayout()
        form.addRow("Type", self.material_type)
        form.addRow("Material", self.material_name)
        form.addRow("Quantity", self.material_quantity)
        form.addRow("Unit", self.material_unit)
        form.addRow("Notes", self.material_notes)
        form.addRow(self.material_button)
        materials_layout.addLayout(form)

        tabs = QTabWidget()
        tabs.addTab(overview, "Overview")
        tabs.addTab(comments, "Comments")
        tabs.addTab(attachments, "Attachments")
        tabs.addTab(materials, "Materials")
        tabs.addTab(self.time_tracking, "Time Tracking")
        tabs.addTab(self.history_list, "History")

        layout = QVBoxLayout(self)
        layout.addWidget(self.title_label)
        layout.addWidget(tabs, stretch=1)

    # ------------------------------------------------------------------
    def refresh(self) -> None:
        if self.controller.load() is not None:
            self.time_tracking.refresh()

    def _render(self) -> None:
        task = self.controller.task
        if task is None:
            self.title_label.setText("Task not found")
            return
        self.setWindowTitle(f"{task.task_number} {task.title}")
        self.title_label.setText(f"{task.task_number}  {task.title}")
        assignees = ", ".join(assignment.name for assignment in task.assignments) or "Unassigned"
        self.meta_label.setText(
            f"Status: {task.status}   Priority: {task.priority}   Equipment: {task.equipment_name or '-'}\n"
            f"Assigned: {assignees}\n"
            f"Comments: {task.comments_count}   Attachments: {task.attachments_count}")
        self.description_label.setText(task.description or "No description")
        self.status_input.setCurrentIndex(max(0, self.status_input.findData(task.status)))

        self.comment_list.clear()
        for comment in self.controller.comments:
            item = QListWidgetItem(f"{comment.author_name} ({_stamp(comment.created_at)}): {comment.comment}")
            item.setData(Qt.UserRole, comment.id)
            self.comment_list.addItem(item)

        self.attachment_list.clear()
        for attachment in self.controller.attachments:
            item = QListWidgetItem(f"{attachment.filename}  ({_size(attachment.file_size)})")
            item.setData(Qt.UserRole, attachment.id)
            self.attachment_list.addItem(item)

        self.material_list.clear()
        for material in self.controller.materials:
            text = f"[{material.log_type}] {material.material_name}: {material.quantity:g} {material.unit}"
            if material.notes:
                text += f" - {material.notes}"
            self.material_list.addItem(text)

        self.history_list.clear()
        for entry in self.controller.history:
            text = f"{_stamp(entry.created_at)}  {entry.user_name}: {entry.action.replace('_', ' ')}"
            if entry.field_name:
                text += f" ({entry.field_name}: {entry.old_value or '-'} → {entry.new_value or '-'})"
            self.history_list.addItem(text)

    @staticmethod
    def _selected(list_widget: QListWidget) -> Optional[str]:
        item = list_widget.currentItem()
        return item.data(Qt.UserRole) if item else None

    # ------------------------------------------------------------------
    def _handle_add_comment(self) -> None:
        if self.controller.add_comment(self.comment_input.toPlainText()) is not None:
            self.comment_input.clear()

    def _handle_edit_comment(self) -> None:
        comment_id = self._selected(self.comment_list)
        comment = next((c for c in self.controller.comments if c.id == comment_id), None)
        if comment is None:
            return
        text, ok = QInputDialog.getMultiLineText(self, "Edit comment", "Comment", comment.comment)
        if ok:
            self.controller.edit_comment(comment.id, text)

    def _handle_delete_comment(self) -> None:
        comment_id = self._selected(self.comment_list)
        if comment_id and QMessageBox.question(self, "Delete comment", "Delete this comment?") == QMessageBox.Yes:
            self.controller.delete_comment(comment_id)

    def _handle_upload(self) -> None:
        file_name, _ = QFileDialog.getOpenFileName(self, "Upload attachment")
        if file_name:
            self.controller.upload_attachment(Path(file_name))

    def _handle_download(self) -> None:
        attachment_id = self._selected(self.attachment_list)
        attachment = next((a for a in self.controller.attachments if a.id == attachment_id), None)
        if attachment is None:
            return
        file_name, _ = QFileDialog.getSaveFileName(self, "Save attachment", attachment.filename)
        if file_name:
            self.controller.download_attachment(attachment.id, Path(file_name))

    def _handle_delete_attachment(self) -> None:
        attachment_id = self._selected(self.attachment_list)
        if attachment_id and QMessageBox.question(
                self, "Delete attachment", "Delete this attachment?") == QMessageBox.Yes:
            self.controller.delete_attachment(attachment_id)

    def _handle_log_material(self) -> None:
        material = self.controller.log_material(
            self.material_type.currentData(),
            self.material_name.text(),
            self.material_quantity.value(),
            self.material_unit.text(),
            self.material_notes.text().strip() or None,
        )
        if material is not None:
            self.material_name.clear()
            self.material_quantity.setValue(0)
            self.material_unit.clear()
            self.material_notes.clear()

    def _handle_assign(self) -> None:
        if self.teams_api is None:
            return
        try:
            technicians = self.teams_api.list_technicians(page_size=100).items
            teams = self.teams_api.list(page_size=100).items
        except ApiError as exc:
            QMessageBox.warning(self, "API Error", str(exc))
            return
        task = self.controller.task
        assigned = {assignment.target_id for assignment in task.assignments} if task else set()
        dialog = AssignDialog(
            [(technician.id, technician.full_name or technician.email) for technician in technicians],
            [(team.id, team.name) for team in teams],
            assigned,
            self,
        )
        if dialog.exec():
            self.controller.assign(dialog.checked(dialog.technician_list), dialog.checked(dialog.team_list))


__all__ = ["AssignDialog", "TaskDetailDialog"]
