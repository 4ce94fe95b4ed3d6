"""Page bookkeeping for the people and project collections."""

from __future__ import annotations

import math
from dataclasses import dataclass

from lookbook.models.entities import EntityMode


@dataclass
class PaginationController:
    """Zero-based page index over a server-side collection.

    ``total`` is whatever the data source last reported; the controller
    never offers a page past ``max_page``.
    """

    page_size: int
    page: int = 0
    total: int = 0

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    @property
    def offset(self) -> int:
        return self.page * self.page_size

    @property
    def page_count(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total > 0 else 0

    @property
    def max_page(self) -> int:
        return max(self.page_count - 1, 0)

    @property
    def can_previous(self) -> bool:
        return self.page > 0

    @property
    def can_next(self) -> bool:
        return self.page < self.max_page

    @property
    def is_paged(self) -> bool:
        """More than one page exists, so paging controls are worth showing."""
        return self.page_count > 1

    def clamp(self, page: int) -> int:
        return min(max(page, 0), self.max_page)

    def go_to(self, page: int) -> bool:
        """Move to ``page`` clamped into range. Returns True if the page changed."""
        target = self.clamp(page)
        changed = target != self.page
        self.page = target
        return changed

    def next(self) -> bool:
        return self.can_next and self.go_to(self.page + 1)

    def previous(self) -> bool:
        return self.can_previous and self.go_to(self.page - 1)

    def reset(self) -> None:
        self.page = 0

    def resize(self, page_size: int) -> None:
        """Switch page size (grid vs list); position restarts at page 0."""
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        if page_size != self.page_size:
            self.page_size = page_size
            self.page = 0

    def reconcile(self, total: int) -> None:
        """Adopt the authoritative total and pull the page back into range."""
        self.total = max(total, 0)
        self.page = self.clamp(self.page)

    def window(self, shown: int) -> tuple[int, int]:
        """1-based (first, last) item numbers for a page showing ``shown`` items."""
        if shown <= 0:
            return (0, 0)
        return (self.offset + 1, self.offset + shown)


def per_mode_pagination(page_size: int) -> dict[EntityMode, PaginationController]:
    """One independent controller per entity mode."""
    return {mode: PaginationController(page_size=page_size) for mode in EntityMode}
