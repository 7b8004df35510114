"""Page arithmetic for paginated lists."""

from __future__ import annotations

import math
from typing import List, Optional

from ..config import PAGE_SIZE_OPTIONS

MAX_PAGES_WITHOUT_ELLIPSIS = 7


class Pagination:
    """Current page, page size and total row count of one list.

    Pages are 1-based. Moves outside ``1..total_pages`` are clamped, and an
    empty list still reports page 1.
    """

    def __init__(self, page_size: int = 10, total_count: int = 0, current_page: int = 1) -> None:
        if page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"Page size must be one of {PAGE_SIZE_OPTIONS}")
        self.page_size = page_size
        self.total_count = max(0, total_count)
        self.current_page = max(1, current_page)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.total_count else 0

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def first_index(self) -> int:
        """1-based index of the first row on the current page (0 when empty)."""

        if not self.total_count:
            return 0
        return (self.current_page - 1) * self.page_size + 1

    @property
    def last_index(self) -> int:
        return min(self.current_page * self.page_size, self.total_count)

    def clamp(self, page: int) -> int:
        """Nearest valid page number to ``page``."""

        return min(max(1, page), max(1, self.total_pages))

    def go_to(self, page: int) -> int:
        self.current_page = self.clamp(page)
        return self.current_page

    def next_page(self) -> int:
        return self.go_to(self.current_page + 1)

    def previous_page(self) -> int:
        return self.go_to(self.current_page - 1)

    def set_page_size(self, page_size: int) -> None:
        """Change the page size and jump back to the first page."""

        if page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"Page size must be one of {PAGE_SIZE_OPTIONS}")
        self.page_size = page_size
        self.current_page = 1

    def set_total(self, total_count: int) -> None:
        """Record a new total; a page past the end moves to the last page."""

        self.total_count = max(0, total_count)
        if self.total_pages and self.current_page > self.total_pages:
            self.current_page = self.total_pages

    def reset(self) -> None:
        self.current_page = 1

    def visible_pages(self) -> List[Optional[int]]:
        """Page buttons to render; ``None`` stands for an ellipsis."""

        total = self.total_pages
        if total <= MAX_PAGES_WITHOUT_ELLIPSIS:
            return list(range(1, total + 1))

        current = self.current_page
        pages: List[Optional[int]] = [1]
        if current > 3:
            pages.append(None)
        for page in range(max(2, current - 1), min(total - 1, current + 1) + 1):
            pages.append(page)
        if current < total - 2:
            pages.append(None)
        pages.append(total)
        return pages

    def summary(self) -> str:
        """Text such as "Showing 11 to 20 of 42 results"."""

        if not self.total_count:
            return "No results"
        return f"Showing {self.first_index} to {self.last_index} of {self.total_count} results"


__all__ = ["MAX_PAGES_WITHOUT_ELLIPSIS", "Pagination"]
