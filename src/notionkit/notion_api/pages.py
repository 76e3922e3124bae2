"""Page API wrappers for the Notion API.

Provides :class:`PageAPI` (sync) and :class:`AsyncPageAPI` (async) thin
wrappers around the Notion ``/pages`` endpoints.  Requests are validated
before any I/O; all HTTP concerns (auth, retries, rate limiting) are
delegated to the underlying transport.
"""

from __future__ import annotations

from typing import Any

from notionkit.dsl.requests import CreatePageRequest, UpdatePageRequest
from notionkit.models.objects import Page
from notionkit.models.properties import PropertyValue, value_from_dict

from .pagination import aiterate_pages, iterate_pages
from .transport import AsyncNotionTransport, NotionTransport

# Property types whose values are returned item by item.
_LISTED_TYPES = ("title", "rich_text", "relation", "people")


def _property_params(filter_properties: list[str] | None) -> list[tuple[str, str]] | None:
    if not filter_properties:
        return None
    return [("filter_properties", prop) for prop in filter_properties]


def _cursor_params(cursor: str | None) -> dict[str, str] | None:
    return {"start_cursor": cursor} if cursor else None


def merge_property_items(pages: list[dict[str, Any]]) -> PropertyValue:
    """Fold the responses of ``GET /pages/{id}/properties/{prop}`` into one value.

    Simple properties come back as a single ``property_item``.  Title,
    rich text, relation, people and rollup properties come back as a
    paginated ``list`` whose items each hold one element; those are
    concatenated.  Rollups are reported through the list's
    ``property_item`` summary.
    """
    first = pages[0]
    if first.get("object") != "list":
        return value_from_dict(first)

    summary = first.get("property_item") or {}
    items = [item for page in pages for item in page.get("results") or []]
    kind = summary.get("type") or (items[0].get("type") if items else "")
    if kind in _LISTED_TYPES:
        return value_from_dict({"type": kind, kind: [item.get(kind) for item in items]})
    return value_from_dict(summary)


class PageAPI:
    """Synchronous wrapper for the Notion Pages API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def create(self, request: CreatePageRequest) -> Page:
        """Create a new page.

        Parameters
        ----------
        request:
            Built with :class:`~notionkit.dsl.CreatePageRequestBuilder`.
            The parent is a page or a data source; pages under a data
            source must set that data source's title column.  At most 100
            top-level children may be sent; append the rest with
            :meth:`BlockAPI.append_children`.

        Returns
        -------
        Page
            The created page.

        Raises
        ------
        NotionkitValidationError
            If the request exceeds an API limit.  Nothing is sent.
        """
        request.validate()
        data = self._transport.request("POST", "/pages", json=request.to_dict())
        return Page.from_dict(data)

    def retrieve(self, page_id: str, filter_properties: list[str] | None = None) -> Page:
        """Retrieve a page by its ID.

        Parameters
        ----------
        page_id:
            The UUID of the page to retrieve (with or without hyphens).
        filter_properties:
            Optional property IDs; when given only those properties are
            returned.
        """
        data = self._transport.request(
            "GET", f"/pages/{page_id}", params=_property_params(filter_properties)
        )
        return Page.from_dict(data)

    def update(self, page_id: str, request: UpdatePageRequest) -> Page:
        """Update a page's properties, icon, cover or trash state.

        Only properties present in *request* are changed; omitted
        properties are left untouched.
        """
        request.validate()
        data = self._transport.request("PATCH", f"/pages/{page_id}", json=request.to_dict())
        return Page.from_dict(data)

    def archive(self, page_id: str) -> Page:
        """Move a page to the trash."""
        return self.update(page_id, UpdatePageRequest(in_trash=True))

    def restore(self, page_id: str) -> Page:
        """Restore a page from the trash."""
        return self.update(page_id, UpdatePageRequest(in_trash=False))

    def retrieve_property(self, page_id: str, property_id: str) -> PropertyValue:
        """Retrieve one property value, following pagination for long values.

        Page objects truncate relation, people and long rich-text values
        at 25 entries; this endpoint returns them in full.
        """
        path = f"/pages/{page_id}/properties/{property_id}"
        pages: list[dict[str, Any]] = []

        def fetch(cursor: str | None, size: int | None) -> dict[str, Any]:
            data = self._transport.request("GET", path, params=_cursor_params(cursor))
            pages.append(data)
            return data

        for _ in iterate_pages(fetch):
            pass
        return merge_property_items(pages)


class AsyncPageAPI:
    """Asynchronous wrapper for the Notion Pages API.

    Mirrors :class:`PageAPI` but all methods are coroutines.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def create(self, request: CreatePageRequest) -> Page:
        """Create a new page (async).

        See :meth:`PageAPI.create` for parameter documentation.
        """
        request.validate()
        data = await self._transport.request("POST", "/pages", json=request.to_dict())
        return Page.from_dict(data)

    async def retrieve(self, page_id: str, filter_properties: list[str] | None = None) -> Page:
        data = await self._transport.request(
            "GET", f"/pages/{page_id}", params=_property_params(filter_properties)
        )
        return Page.from_dict(data)

    async def update(self, page_id: str, request: UpdatePageRequest) -> Page:
        """Update a page (async).

        See :meth:`PageAPI.update` for parameter documentation.
        """
        request.validate()
        data = await self._transport.request(
            "PATCH", f"/pages/{page_id}", json=request.to_dict()
        )
        return Page.from_dict(data)

    async def archive(self, page_id: str) -> Page:
        return await self.update(page_id, UpdatePageRequest(in_trash=True))

    async def restore(self, page_id: str) -> Page:
        return await self.update(page_id, UpdatePageRequest(in_trash=False))

    async def retrieve_property(self, page_id: str, property_id: str) -> PropertyValue:
        """Retrieve one property value (async).

        See :meth:`PageAPI.retrieve_property`.
        """
        path = f"/pages/{page_id}/properties/{property_id}"
        pages: list[dict[str, Any]] = []

        async def fetch(cursor: str | None, size: int | None) -> dict[str, Any]:
            data = await self._transport.request("GET", path, params=_cursor_params(cursor))
            pages.append(data)
            return data

        async for _ in aiterate_pages(fetch):
            pass
        return merge_property_items(pages)
