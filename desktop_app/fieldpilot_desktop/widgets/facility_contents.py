"""Read-only view of the buildings and equipment of one facility."""

from __future__ import annotations

from typing import Optional

from PySide6.QtWidgets import QDialog, QListWidget, QTabWidget, QVBoxLayout, QWidget

from ..api.facilities import FacilitiesApi
from ..controllers.facility_contents import FacilityContentsController
from ..controllers.notifications import Notifier


class FacilityContentsDialog(QDialog):
    """Buildings and equipment of one facility on two tabs."""

    def __init__(self, facilities_api: FacilitiesApi, facility_id: str, notifier: Notifier,
                 title: str = "Facility", parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = FacilityContentsController(facilities_api, facility_id, notifier)
        self.setWindowTitle(title)
        self.resize(560, 380)

        self.building_list = QListWidget()
        self.equipment_list = QListWidget()
        self.tabs = QTabWidget()
        self.tabs.addTab(self.building_list, "Buildings")
        self.tabs.addTab(self.equipment_list, "Equipment")

        layout = QVBoxLayout(self)
        layout.addWidget(self.tabs)

    def refresh(self) -> None:
        self.controller.load()
        self.building_list.clear()
        for building in self.controller.buildings:
            self.building_list.addItem(
                f"{building.name}  {building.code or '-'}  {building.operational_status.replace('_', ' ')}")
        self.equipment_list.clear()
        for equipment in self.controller.equipment:
            self.equipment_list.addItem(
                f"{equipment.equipment_number or '-'}  {equipment.name}  {equipment.manufacturer or ''}".rstrip())
        self.tabs.setTabText(0, f"Buildings ({len(self.controller.buildings)})")
        self.tabs.setTabText(1, f"Equipment ({len(self.controller.equipment)})")


__all__ = ["FacilityContentsDialog"]
