"""Cursor pagination over Notion list endpoints.

Every list-style endpoint answers with ``{"results": [...], "has_more":
bool, "next_cursor": str | null}``.  The helpers here walk such an
endpoint through a *fetch* callable::

    fetch(cursor: str | None, page_size: int | None) -> PaginatedList | dict

starting with ``cursor=None`` and feeding each ``next_cursor`` into the
following call until ``has_more`` is false or no cursor is returned.

* :func:`collect_all` / :func:`acollect_all` accumulate every item and
  return one list.  An error from *fetch* propagates and the partial
  list is discarded.
* :func:`iterate` / :func:`aiterate` yield items lazily.  Items already
  yielded before an error are not retracted.  Each call starts a fresh
  cursor walk; an exhausted iterator cannot be restarted.
* :func:`iterate_pages` / :func:`aiterate_pages` yield whole pages.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from typing import Any, TypeVar, Union

from notionkit.models.objects import PaginatedList
from notionkit.validation import validate_page_size

T = TypeVar("T")

PageResult = Union[PaginatedList[T], dict[str, Any]]
PageFetch = Callable[[Union[str, None], Union[int, None]], PageResult]
AsyncPageFetch = Callable[[Union[str, None], Union[int, None]], Awaitable[PageResult]]


def _as_page(result: PageResult) -> PaginatedList:
    if isinstance(result, PaginatedList):
        return result
    return PaginatedList.from_dict(result)


def _next_cursor(page: PaginatedList) -> str | None:
    if not page.has_more:
        return None
    return page.next_cursor or None


# ---------------------------------------------------------------------------
# Sync
# ---------------------------------------------------------------------------

def iterate_pages(fetch: PageFetch, page_size: int | None = None) -> Iterator[PaginatedList]:
    """Yield each page returned by *fetch* in server order."""
    if page_size is not None:
        validate_page_size(page_size)
    cursor: str | None = None
    while True:
        page = _as_page(fetch(cursor, page_size))
        yield page
        cursor = _next_cursor(page)
        if cursor is None:
            return


def iterate(fetch: PageFetch, page_size: int | None = None) -> Iterator[Any]:
    """Lazily yield every item across all pages."""
    for page in iterate_pages(fetch, page_size):
        yield from page.results


def collect_all(fetch: PageFetch, page_size: int | None = None) -> list[Any]:
    """Fetch every page and return the concatenated results."""
    items: list[Any] = []
    for page in iterate_pages(fetch, page_size):
        items.extend(page.results)
    return items


# ---------------------------------------------------------------------------
# Async
# ---------------------------------------------------------------------------

async def aiterate_pages(
    fetch: AsyncPageFetch,
    page_size: int | None = None,
) -> AsyncIterator[PaginatedList]:
    """Async equivalent of :func:`iterate_pages`."""
    if page_size is not None:
        validate_page_size(page_size)
    cursor: str | None = None
    while True:
        page = _as_page(await fetch(cursor, page_size))
        yield page
        cursor = _next_cursor(page)
        if cursor is None:
            return


async def aiterate(fetch: AsyncPageFetch, page_size: int | None = None) -> AsyncIterator[Any]:
    """Async equivalent of :func:`iterate`."""
    async for page in aiterate_pages(fetch, page_size):
        for item in page.results:
            yield item


async def acollect_all(fetch: AsyncPageFetch, page_size: int | None = None) -> list[Any]:
    """Async equivalent of :func:`collect_all`."""
    items: list[Any] = []
    async for page in aiterate_pages(fetch, page_size):
        items.extend(page.results)
    return items
