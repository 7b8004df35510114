"""Searchable, paginated table of one entity collection."""

from __future__ import annotations

from typing import Any, Callable, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (QAbstractItemView, QComboBox, QHBoxLayout,
                               QLabel, QLineEdit, QMessageBox, QPushButton,
                               QTableWidget, QTableWidgetItem, QVBoxLayout,
                               QWidget)

from ..config import PAGE_SIZE_OPTIONS
from ..controllers.listing import EntityListController
from ..controllers.notifications import Notifier
from .entities import EntityView
from .forms import EntityFormDialog
from .qt_support import qt_timer_factory


def _cell_text(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, str):
        return value.replace("_", " ") if value else "-"
    return str(value)


class EntityListPanel(QWidget):
    """Table plus search, filters, paging and create/edit/delete buttons."""

    item_opened = Signal(str)
    secondary_requested = Signal(str)

    def __init__(self, view: EntityView, resource, notifier: Notifier, *, page_size: int = 10,
                 debounce_seconds: float = 0.5, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.view = view
        self.controller = EntityListController(
            resource,
            notifier,
            entity_name=view.entity_name,
            page_size=page_size,
            debounce_delay=debounce_seconds,
            timer_factory=qt_timer_factory(self),
            on_change=self._render,
        )
        self._loaded = False

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText(f"Search {view.title.lower()}...")
        self.search_input.textChanged.connect(self.controller.set_search)

        self.filter_inputs: dict[str, QComboBox] = {}
        for list_filter in view.filters:
            combo = QComboBox()
            combo.addItem(f"All {list_filter.label.lower()}", None)
            for choice in list_filter.choices:
                combo.addItem(choice.replace("_", " ").title(), choice)
            combo.currentIndexChanged.connect(self._make_filter_handler(list_filter.key, combo))
            self.filter_inputs[list_filter.key] = combo

        self.table = QTableWidget(0, len(view.columns))
        self.table.setHorizontalHeaderLabels([header for header, _ in view.columns])
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.cellDoubleClicked.connect(self._handle_double_click)

        self.add_button = QPushButton(f"Add {view.entity_name}")
        self.edit_button = QPushButton("Edit")
        self.delete_button = QPushButton("Delete")
        self.refresh_button = QPushButton("Refresh")
        self.add_button.clicked.connect(self._handle_add)
        self.edit_button.clicked.connect(self._handle_edit)
        self.delete_button.clicked.connect(self._handle_delete)
        self.refresh_button.clicked.connect(self.controller.load)
        self.secondary_button: Optional[QPushButton] = None
        if view.secondary_action:
            self.secondary_button = QPushButton(view.secondary_action)
            self.secondary_button.clicked.connect(self._handle_secondary)

        self.summary_label = QLabel()
        self.previous_button = QPushButton("‹")
        self.next_button = QPushButton("›")
        self.page_label = QLabel()
        self.page_size_input = QComboBox()
        for size in PAGE_SIZE_OPTIONS:
            self.page_size_input.addItem(str(size), size)
        self.page_size_input.setCurrentIndex(self.page_size_input.findData(page_size))
        self.previous_button.clicked.connect(
            lambda: self.controller.go_to_page(self.controller.pagination.current_page - 1))
        self.next_button.clicked.connect(
            lambda: self.controller.go_to_page(self.controller.pagination.current_page + 1))
        self.page_size_input.currentIndexChanged.connect(
            lambda _: self.controller.set_page_size(self.page_size_input.currentData()))

        self._build_ui()

    def _build_ui(self) -> None:
        toolbar = QHBoxLayout()
        toolbar.addWidget(self.search_input, stretch=1)
        for combo in self.filter_inputs.values():
            toolbar.addWidget(combo)
        toolbar.addWidget(self.refresh_button)

        actions = QHBoxLayout()
        actions.addWidget(self.add_button)
        actions.addWidget(self.edit_button)
        actions.addWidget(self.delete_button)
        if self.secondary_button is not None:
            actions.addWidget(self.secondary_button)
        actions.addStretch(1)

        pager = QHBoxLayout()
        pager.addWidget(self.summary_label)
        pager.addStretch(1)
        pager.addWidget(QLabel("Items per page:"))
        pager.addWidget(self.page_size_input)
        pager.addWidget(self.previous_button)
        pager.addWidget(self.page_label)
        pager.addWidget(self.next_button)

        title = QLabel(self.view.title)
        title.setStyleSheet("font-size: 18px; font-weight: bold;")

        layout = QVBoxLayout(self)
        layout.addWidget(title)
        layout.addLayout(toolbar)
        layout.addLayout(actions)
        layout.addWidget(self.table, stretch=1)
        layout.addLayout(pager)

    # ------------------------------------------------------------------
    def ensure_loaded(self) -> None:
        """Fetch on first display only."""

        if not self._loaded:
            self._loaded = True
            self.controller.load()

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt API
        self.controller.close()
        super().closeEvent(event)

    def _make_filter_handler(self, key: str, combo: QComboBox) -> Callable[[int], None]:
        return lambda _: self.controller.set_filter(key, combo.currentData())

    # ------------------------------------------------------------------
    def _render(self) -> None:
        items = self.controller.items
        self.table.setRowCount(len(items))
        for row, item in enumerate(items):
            for column, (_, attribute) in enumerate(self.view.columns):
                cell = QTableWidgetItem(_cell_text(getattr(item, attribute, None)))
                cell.setData(Qt.UserRole, item.id)
                self.table.setItem(row, column, cell)

        pagination = self.controller.pagination
        self.summary_label.setText(pagination.summary())
        pages = [str(page) if page is not None else "…" for page in pagination.visible_pages()]
        self.page_label.setText(
            " ".join(f"[{page}]" if page == str(pagination.current_page) else page for page in pages))
        self.previous_button.setEnabled(pagination.has_previous)
        self.next_button.setEnabled(pagination.has_next)
        has_selection = bool(items)
        self.edit_button.setEnabled(has_selection)
        self.delete_button.setEnabled(has_selection)
        if self.secondary_button is not None:
            self.secondary_button.setEnabled(has_selection)

    def current_identifier(self) -> Optional[str]:
        current_item = self.table.currentItem()
        if not current_item:
            return None
        return current_item.data(Qt.UserRole)

    # ------------------------------------------------------------------
    def _handle_double_click(self, row: int, _column: int) -> None:
        cell = self.table.item(row, 0)
        if cell is None:
            return
        identifier = cell.data(Qt.UserRole)
        if self.view.opens_detail:
            self.item_opened.emit(identifier)
        else:
            self._edit(identifier)

    def _handle_secondary(self) -> None:
        identifier = self.current_identifier()
        if identifier:
            self.secondary_requested.emit(identifier)

    def _handle_add(self) -> None:
        dialog = EntityFormDialog(f"New {self.view.entity_name}", self.view.fields,
                                  self.view.create_request, parent=self)
        if dialog.exec() and dialog.request is not None:
            self.controller.create(dialog.request)

    def _handle_edit(self) -> None:
        identifier = self.current_identifier()
        if identifier:
            self._edit(identifier)

    def _edit(self, identifier: str) -> None:
        item = self.controller.find(identifier)
        if item is None:
            return
        initial = {form_field.name: getattr(item, form_field.name, None) for form_field in self.view.fields}
        dialog = EntityFormDialog(f"Edit {self.view.entity_name}", self.view.fields,
                                  self.view.update_request, initial=initial, parent=self)
        if dialog.exec() and dialog.request is not None:
            self.controller.update(identifier, dialog.request)

    def _handle_delete(self) -> None:
        identifier = self.current_identifier()
        if not identifier:
            return
        answer = QMessageBox.question(
            self, f"Delete {self.view.entity_name}",
            f"Are you sure you want to delete this {self.view.entity_name.lower()}? "
            "This action cannot be undone.")
        if answer == QMessageBox.Yes:
            self.controller.delete(identifier)


__all__ = ["EntityListPanel"]
