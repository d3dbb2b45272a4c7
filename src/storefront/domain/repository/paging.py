"""Page-at-a-time access to repository listings."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from storefront.domain.exceptions import ValidationError

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class PageRequest:
    """1-based page number and page size."""

    page: int = 1
    size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError("Page number must be 1 or greater")
        if self.size < 1:
            raise ValidationError("Page size must be 1 or greater")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.size) if self.total_items else 0

    @property
    def is_empty(self) -> bool:
        return not self.items

    @staticmethod
    def of(items: Sequence[T], request: PageRequest) -> Page[T]:
        """Cut the requested page out of an already ordered sequence."""
        window = list(items[request.offset:request.offset + request.size])
        return Page(
            items=window,
            page=request.page,
            size=request.size,
            total_items=len(items),
        )
