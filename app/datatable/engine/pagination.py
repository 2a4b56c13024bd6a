from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar, Union

from app.datatable.engine.models import TableConfigError

ELLIPSIS = "..."
PAGE_WINDOW = 2

PageItem = Union[int, str]
T = TypeVar("T")


@dataclass
class PaginationState:
    page_size: int = 15
    page: int = 1

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise TableConfigError("page_size must be a positive integer")


def total_pages(row_count: int, page_size: int) -> int:
    if row_count <= 0:
        return 0
    return -(-row_count // page_size)


def clamp_page(page: int, pages: int) -> int:
    return min(max(1, page), max(1, pages))


def page_slice(rows: Sequence[T], page: int, page_size: int) -> list[T]:
    start = (page - 1) * page_size
    return list(rows[start:start + page_size])


def page_range(row_count: int, page: int, page_size: int) -> tuple[int, int]:
    """1-based (first, last) row numbers shown on ``page``; ``(0, 0)`` when empty."""

    start = (page - 1) * page_size
    end = min(start + page_size, row_count)
    if start >= end:
        return 0, 0
    return start + 1, end


def visible_pages(current: int, pages: int, window: int = PAGE_WINDOW) -> list[PageItem]:
    """Page links for navigation: first, last, ``current`` +/- ``window``.

    A single ``ELLIPSIS`` stands in for each run of skipped pages.
    """

    if pages <= 1:
        return [1]
    start = max(2, current - window)
    end = min(pages - 1, current + window)
    items: list[PageItem] = [1]
    if start > 2:
        items.append(ELLIPSIS)
    items.extend(range(start, end + 1))
    if end < pages - 1:
        items.append(ELLIPSIS)
    items.append(pages)
    return items


def goto_page(state: PaginationState, page: int, pages: int) -> bool:
    if page < 1 or page > pages:
        return False
    state.page = page
    return True


def next_page(state: PaginationState, pages: int) -> bool:
    return goto_page(state, state.page + 1, pages)


def prev_page(state: PaginationState, pages: int) -> bool:
    return goto_page(state, state.page - 1, pages)
