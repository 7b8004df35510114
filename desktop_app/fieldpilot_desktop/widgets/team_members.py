"""Dialog for adding technicians to a team and removing members."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (QAbstractItemView, QDialog, QHBoxLayout, QLabel,
                               QLineEdit, QListWidget, QListWidgetItem,
                               QMessageBox, QPushButton, QVBoxLayout, QWidget)

from ..api.teams import TeamsApi
from ..controllers.notifications import Notifier
from ..controllers.team_members import TeamMembersController


class TeamMembersDialog(QDialog):
    """Current members on the left, technicians that can be added on the right."""

    def __init__(self, teams_api: TeamsApi, team_id: str, notifier: Notifier,
                 parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = TeamMembersController(teams_api, team_id, notifier, on_change=self._render)
        self.setWindowTitle("Team members")
        self.resize(640, 420)

        self.member_list = QListWidget()
        self.remove_button = QPushButton("Remove from team")
        self.remove_button.clicked.connect(self._handle_remove)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search technicians...")
        self.search_input.returnPressed.connect(
            lambda: self.controller.load_technicians(self.search_input.text()))
        self.available_list = QListWidget()
        self.available_list.setSelectionMode(QAbstractItemView.MultiSelection)
        self.add_button = QPushButton("Add selected")
        self.add_button.clicked.connect(self._handle_add)

        members = QVBoxLayout()
        members.addWidget(QLabel("Current members"))
        members.addWidget(self.member_list, stretch=1)
        members.addWidget(self.remove_button)

        available = QVBoxLayout()
        available.addWidget(QLabel("Available technicians"))
        available.addWidget(self.search_input)
        available.addWidget(self.available_list, stretch=1)
        available.addWidget(self.add_button)

        layout = QHBoxLayout(self)
        layout.addLayout(members, stretch=1)
        layout.addLayout(available, stretch=1)

    def refresh(self) -> None:
        self.controller.load()
        self._render()

    def _render(self) -> None:
        team = self.controller.team
        self.setWindowTitle(f"Team members: {team.name}" if team else "Team members")
        self.member_list.clear()
        for member in self.controller.members:
            item = QListWidgetItem(f"{member.full_name or member.email}  <{member.email}>")
            item.setData(Qt.UserRole, member.id)
            self.member_list.addItem(item)
        self.available_list.clear()
        for technician in self.controller.available:
            item = QListWidgetItem(f"{technician.full_name or technician.email}  <{technician.email}>")
            item.setData(Qt.UserRole, technician.id)
            self.available_list.addItem(item)
        self.remove_button.setEnabled(bool(self.controller.members))

    def _handle_add(self) -> None:
        self.controller.add_members(item.data(Qt.UserRole) for item in self.available_list.selectedItems())

    def _handle_remove(self) -> None:
        item = self.member_list.currentItem()
        if item is None:
            return
        if QMessageBox.question(self, "Remove member", f"Remove {item.text().split('  ')[0]} from this team?") \
                != QMessageBox.Yes:
            return
        self.controller.remove_member(item.data(Qt.UserRole))


__all__ = ["TeamMembersDialog"]
