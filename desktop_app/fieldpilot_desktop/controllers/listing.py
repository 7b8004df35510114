"""Fetch, search, page and mutate one entity collection."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from ..api.resources import Payload, ResourceApi
from ..errors import ApiError
from .debounce import DEFAULT_DELAY_SECONDS, Debouncer, TimerFactory
from .notifications import Notifier
from .pagination import Pagination

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityListController(Generic[T]):
    """State behind a list screen such as Facilities or Tasks.

    The list is fetched once on mount with :meth:`load`. Search text is
    debounced; filters and paging reload right away. Successful mutations are
    applied to the local list instead of re-fetching.
    """

    def __init__(self, resource: ResourceApi[T], notifier: Notifier, *, entity_name: str = "Item",
                 page_size: int = 10, debounce_delay: float = DEFAULT_DELAY_SECONDS,
                 timer_factory: Optional[TimerFactory] = None,
                 on_change: Optional[Callable[[], None]] = None) -> None:
        self.resource = resource
        self.notifier = notifier
        self.entity_name = entity_name
        self.pagination = Pagination(page_size=page_size)
        self.items: List[T] = []
        self.search = ""
        self.filters: Dict[str, Any] = {}
        self.loading = False
        self.on_change = on_change
        self._search_debouncer = Debouncer(self._apply_search, debounce_delay, timer_factory)

    @property
    def count(self) -> int:
        return self.pagination.total_count

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def query(self) -> Dict[str, Any]:
        """Query parameters for the current filters, search text and page."""

        params: Dict[str, Any] = dict(self.filters)
        params["page"] = self.pagination.current_page
        params["page_size"] = self.pagination.page_size
        if self.search.strip():
            params["search"] = self.search.strip()
        return params

    def load(self) -> List[T]:
        """Fetch the current page. A failure shows an empty list and a toast."""

        self.loading = True
        try:
            page = self.resource.list(**self.query())
        except ApiError as exc:
            logger.error("Failed to load %s list: %s", self.entity_name.lower(), exc)
            self.notifier.error(exc.message or f"Failed to load {self.entity_name.lower()}s")
            self.items = []
            self.pagination.set_total(0)
        else:
            self.items = list(page.items)
            self.pagination.set_total(page.count)
        finally:
            self.loading = False
        self._changed()
        return self.items

    def set_search(self, text: str) -> None:
        """Remember the search text; the fetch happens after the quiet period."""

        self._search_debouncer.trigger(text)

    def _apply_search(self, text: str) -> None:
        self.search = text
        self.pagination.reset()
        self.load()

    def set_filter(self, key: str, value: Any) -> None:
        """Set one filter, or clear it with an empty value, and reload from page 1."""

        if value in (None, ""):
            self.filters.pop(key, None)
        else:
            self.filters[key] = value
        self.pagination.reset()
        self.load()

    def clear_filters(self) -> None:
        self.filters.clear()
        self.search = ""
        self._search_debouncer.cancel()
        self.pagination.reset()
        self.load()

    def go_to_page(self, page: int) -> None:
        """Move to ``page``; a move that would not change the page does nothing."""

        if self.pagination.clamp(page) == self.pagination.current_page:
            return
        self.pagination.go_to(page)
        self.load()

    def set_page_size(self, page_size: int) -> None:
        self.pagination.set_page_size(page_size)
        self.load()

    def close(self) -> None:
        self._search_debouncer.cancel()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create(self, data: Payload) -> Optional[T]:
        """Create an item and put it at the top of the current page."""

        try:
            item = self.resource.create(data)
        except ApiError as exc:
            self.notifier.error(exc.message or f"Failed to create {self.entity_name.lower()}")
            return None
        self.items.insert(0, item)
        self.pagination.set_total(self.pagination.total_count + 1)
        self.notifier.success(f"{self.entity_name} created successfully")
        self._changed()
        return item

    def update(self, identifier: str, data: Payload) -> Optional[T]:
        try:
            item = self.resource.update(identifier, data)
        except ApiError as exc:
            self.notifier.error(exc.message or f"Failed to update {self.entity_name.lower()}")
            return None
        self.items = [item if _identifier_of(existing) == identifier else existing for existing in self.items]
        self.notifier.success(f"{self.entity_name} updated successfully")
        self._changed()
        return item

    def delete(self, identifier: str) -> bool:
        """Delete a row and keep the page consistent with the new total.

        When the deletion empties the current page, or the page count shrinks
        below the current page, the page now shown is fetched again.
        """

        try:
            self.resource.delete(identifier)
        except ApiError as exc:
            self.notifier.error(exc.message or f"Failed to delete {self.entity_name.lower()}")
            return False
        self.items = [item for item in self.items if _identifier_of(item) != identifier]
        page_before = self.pagination.current_page
        self.pagination.set_total(self.pagination.total_count - 1)
        self.notifier.success(f"{self.entity_name} deleted successfully")
        # An emptied page or a page step back needs the rows of the page now shown.
        if self.pagination.current_page != page_before or (not self.items and self.pagination.total_count):
            self.load()
        else:
            self._changed()
        return True

    def find(self, identifier: str) -> Optional[T]:
        return next((item for item in self.items if _identifier_of(item) == identifier), None)

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()


def _identifier_of(item: Any) -> str:
    return getattr(item, "id", "")


__all__ = ["EntityListController"]
