"""Facilities endpoints."""

from __future__ import annotations

from ..models import Building, Equipment, Facility
from .resources import ResourceApi


class FacilitiesApi(ResourceApi[Facility]):
    """Facility CRUD plus the buildings and equipment of one facility."""

    path = "/facilities/"
    factory = staticmethod(Facility.from_api)
    filter_keys = ("search", "status", "type", "customer", "page", "page_size")

    def list_buildings(self, facility_id: str) -> list[Building]:
        body = self.client.get(f"{self.path}{facility_id}/buildings/")
        return [Building.from_api(item) for item in self.client.unwrap(body) or []]

    def list_equipment(self, facility_id: str) -> list[Equipment]:
        body = self.client.get(f"{self.path}{facility_id}/equipment/")
        return [Equipment.from_api(item) for item in self.client.unwrap(body) or []]


__all__ = ["FacilitiesApi"]
