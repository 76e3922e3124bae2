"""Search API wrapper for the Notion API.

``POST /search`` matches page and data source titles shared with the
integration.  Results are decoded by their ``object`` tag.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from notionkit.dsl.requests import SearchRequest
from notionkit.models.objects import PaginatedList, object_from_dict

from .pagination import acollect_all, collect_all
from .transport import AsyncNotionTransport, NotionTransport

_EMPTY_SEARCH = SearchRequest()


class SearchAPI:
    """Synchronous wrapper for the Notion Search API."""

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def search(self, request: SearchRequest | None = None) -> PaginatedList[Any]:
        """Fetch one page of search results."""
        request = request or _EMPTY_SEARCH
        request.validate()
        data = self._transport.request("POST", "/search", json=request.to_dict())
        return PaginatedList.from_dict(data, object_from_dict)

    def search_all(self, request: SearchRequest | None = None) -> list[Any]:
        """Return every search result, following pagination cursors."""
        request = request or _EMPTY_SEARCH
        return collect_all(
            lambda cursor, size: self.search(
                replace(request, start_cursor=cursor, page_size=size)
            ),
            request.page_size,
        )


class AsyncSearchAPI:
    """Asynchronous wrapper for the Notion Search API."""

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def search(self, request: SearchRequest | None = None) -> PaginatedList[Any]:
        request = request or _EMPTY_SEARCH
        request.validate()
        data = await self._transport.request("POST", "/search", json=request.to_dict())
        return PaginatedList.from_dict(data, object_from_dict)

    async def search_all(self, request: SearchRequest | None = None) -> list[Any]:
        query = request or _EMPTY_SEARCH

        async def fetch(cursor: str | None, size: int | None) -> PaginatedList[Any]:
            return await self.search(replace(query, start_cursor=cursor, page_size=size))

        return await acollect_all(fetch, query.page_size)
