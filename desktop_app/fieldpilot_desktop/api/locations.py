"""Locations endpoints."""

from __future__ import annotations

from typing import Any

from ..models import Location, Page
from .resources import ResourceApi


class LocationsApi(ResourceApi[Location]):
    """Location CRUD."""

    path = "/locations/"
    factory = staticmethod(Location.from_api)
    filter_keys = ("entity_type", "entity_id", "search", "page", "page_size")

    def list(self, **filters: Any) -> Page[Location]:
        # Unpaginated: the count is the number of returned rows.
        page = super().list(**filters)
        page.count = len(page.items)
        return page


__all__ = ["LocationsApi"]
