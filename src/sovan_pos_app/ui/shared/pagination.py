from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, TypeVar

T = TypeVar("T")


def total_pages(length: int, page_size: int) -> int:
    if length <= 0 or page_size <= 0:
        return 0
    return math.ceil(length / page_size)


@dataclass
class PaginationState:
    page: int = 1
    page_size: int = 20
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_items, self.page_size)

    def slice(self, items: Sequence[T]) -> list[T]:
        start = (self.page - 1) * self.page_size
        return list(items[start : start + self.page_size])

    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def render(self) -> dict[str, int | bool]:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total_items": self.total_items,
            "total_pages": self.total_pages,
            "has_prev": self.page > 1,
            "has_next": self.page < self.total_pages,
        }


def update_total(state: PaginationState, total_items: int, *, reset: bool = False) -> PaginationState:
    state.total_items = max(0, total_items)
    if reset:
        state.page = 1
    return goto_page(state, state.page)


def next_page(state: PaginationState) -> PaginationState:
    return goto_page(state, state.page + 1)


def prev_page(state: PaginationState) -> PaginationState:
    return goto_page(state, state.page - 1)


def goto_page(state: PaginationState, page: int) -> PaginationState:
    state.page = min(max(1, page), max(1, state.total_pages))
    return state
