"""
Offset pagination driver.

Collection endpoints page by integer offset (`cursor`) and a fixed `limit`. The
driver calls a page fetcher with an advancing `PageCursor` and stops at the
first page that comes back shorter than the page size.

When the total is an exact multiple of the page size this costs one extra
request that returns no items. That request is kept: the backend does not
reliably report a total, and stopping early on a full page could drop data.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class PageCursor:
    """Position of one page request within a pagination run."""

    offset: int = 0
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError("offset must be >= 0")
        if self.page_size <= 0:
            raise ValueError("page_size must be > 0")

    def advance(self) -> PageCursor:
        return PageCursor(offset=self.offset + self.page_size, page_size=self.page_size)


PageFetcher = Callable[[PageCursor], Awaitable[Sequence[T]]]


async def iter_pages(
    page_fetcher: PageFetcher[T],
    page_size: int = DEFAULT_PAGE_SIZE,
    *,
    max_pages: int | None = None,
) -> AsyncIterator[list[T]]:
    """
    Yield each page's items in order until a short page signals the end.

    Every page is awaited, so cancelling the consuming task stops further
    requests at the next page boundary.

    Args:
        page_fetcher: Async callable returning the items at a cursor.
        page_size: Fixed page size for the whole run.
        max_pages: Optional guard; exceeding it raises `ValueError` (protects
            against a backend that ignores the cursor).
    """
    cursor = PageCursor(offset=0, page_size=page_size)
    pages = 0
    while True:
        if max_pages is not None and pages >= max_pages:
            raise ValueError(f"Pagination exceeded max_pages={max_pages}")
        items = list(await page_fetcher(cursor))
        pages += 1
        logger.debug(
            "Fetched page %d (offset=%d, size=%d): %d items",
            pages,
            cursor.offset,
            cursor.page_size,
            len(items),
        )
        yield items
        if len(items) < cursor.page_size:
            return
        cursor = cursor.advance()


async def fetch_all(
    page_fetcher: PageFetcher[T],
    page_size: int = DEFAULT_PAGE_SIZE,
    *,
    max_pages: int | None = None,
) -> list[T]:
    """Fetch every page and return all items in their original order."""
    results: list[T] = []
    async for items in iter_pages(page_fetcher, page_size, max_pages=max_pages):
        results.extend(items)
    return results


__all__ = ["DEFAULT_PAGE_SIZE", "PageCursor", "PageFetcher", "fetch_all", "iter_pages"]
