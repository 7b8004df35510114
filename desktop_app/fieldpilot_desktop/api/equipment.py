"""Equipment endpoints."""

from __future__ import annotations

from ..models import Equipment
from .resources import ResourceApi


class EquipmentApi(ResourceApi[Equipment]):
    """Equipment CRUD."""

    path = "/equipment/"
    factory = staticmethod(Equipment.from_api)
    filter_keys = (
        "building",
        "facility",
        "status",
        "type",
        "manufacturer",
        "customer",
        "search",
        "page",
        "page_size",
    )


__all__ = ["EquipmentApi"]
