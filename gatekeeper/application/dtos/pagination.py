"""Pagination DTOs for role listing."""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from gatekeeper.domain.enums import Space

T = TypeVar("T")


@dataclass(frozen=True)
class PageParams:
    """Page request. page is 1-based; limit is clamped by the service."""

    page: int = 1
    limit: int | None = None
    space: Space | None = None
    include_inactive: bool = True


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results with totals."""

    items: tuple[T, ...]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.pages
