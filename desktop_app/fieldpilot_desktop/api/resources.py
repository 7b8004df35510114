"""Generic CRUD access to one REST collection."""

from __future__ import annotations

from typing import Any, Callable, Dict, Generic, Mapping, Optional, TypeVar, Union

from ..models import Page
from ..schemas import RequestModel
from .client import ApiClient

T = TypeVar("T")

Payload = Union[RequestModel, Mapping[str, Any]]


def to_payload(data: Payload) -> Dict[str, Any]:
    if isinstance(data, RequestModel):
        return data.payload()
    return dict(data)


class ResourceApi(Generic[T]):
    """List/get/create/update/delete for a collection such as ``/facilities/``."""

    path: str = ""
    factory: Callable[[Dict[str, Any]], T]
    filter_keys: tuple[str, ...] = ("search", "status", "type", "page", "page_size")

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def _item_path(self, identifier: str) -> str:
        return f"{self.path}{identifier}/"

    def build_params(self, filters: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        return {key: value for key, value in (filters or {}).items() if key in self.filter_keys}

    def list(self, **filters: Any) -> Page[T]:
        """One page of the collection; filters outside ``filter_keys`` are dropped."""

        body = self.client.get(self.path, params=self.build_params(filters))
        return self.client.unwrap_page(body, self.factory)

    def get(self, identifier: str) -> T:
        body = self.client.get(self._item_path(identifier))
        return self.factory(self.client.unwrap(body) or {})

    def create(self, data: Payload) -> T:
        body = self.client.post(self.path, json=to_payload(data))
        return self.factory(self.client.unwrap(body) or {})

    def update(self, identifier: str, data: Payload) -> T:
        """PATCH only the fields present in ``data``."""

        body = self.client.patch(self._item_path(identifier), json=to_payload(data))
        return self.factory(self.client.unwrap(body) or {})

    def delete(self, identifier: str) -> None:
        """Delete one item; the server answers 204 without a body."""

        self.client.delete(self._item_path(identifier))


__all__ = ["Payload", "ResourceApi", "to_payload"]
