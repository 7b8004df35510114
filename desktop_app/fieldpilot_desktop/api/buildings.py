"""Buildings endpoints."""

from __future__ import annotations

from ..models import Building
from .resources import ResourceApi


class BuildingsApi(ResourceApi[Building]):
    """Building CRUD."""

    path = "/buildings/"
    factory = staticmethod(Building.from_api)
    filter_keys = ("search", "status", "type", "facility", "page", "page_size")


__all__ = ["BuildingsApi"]
