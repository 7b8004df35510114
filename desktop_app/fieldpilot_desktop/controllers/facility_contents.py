"""Buildings and equipment that belong to one facility."""

from __future__ import annotations

import logging
from typing import List

from ..api.facilities import FacilitiesApi
from ..errors import ApiError
from ..models import Building, Equipment
from .notifications import Notifier

logger = logging.getLogger(__name__)


class FacilityContentsController:
    """Buildings and equipment lists of one facility."""

    def __init__(self, facilities_api: FacilitiesApi, facility_id: str, notifier: Notifier) -> None:
        self.facilities_api = facilities_api
        self.facility_id = facility_id
        self.notifier = notifier
        self.buildings: List[Building] = []
        self.equipment: List[Equipment] = []

    def load(self) -> None:
        """Fetch both lists; a failed list stays empty and is reported once."""

        failed = False
        try:
            self.buildings = self.facilities_api.list_buildings(self.facility_id)
        except ApiError as exc:
            logger.error("Failed to load buildings of facility %s: %s", self.facility_id, exc)
            self.buildings = []
            failed = True
        try:
            self.equipment = self.facilities_api.list_equipment(self.facility_id)
        except ApiError as exc:
            logger.error("Failed to load equipment of facility %s: %s", self.facility_id, exc)
            self.equipment = []
            failed = True
        if failed:
            self.notifier.error("Failed to load facility details")


__all__ = ["FacilityContentsController"]
