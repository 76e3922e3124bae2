"""Comment API wrappers for the Notion API."""

from __future__ import annotations

from typing import Any

from notionkit.dsl.requests import CreateCommentRequest
from notionkit.models.objects import Comment, PaginatedList

from .pagination import acollect_all, collect_all
from .transport import AsyncNotionTransport, NotionTransport


def _list_params(block_id: str, cursor: str | None, size: int | None) -> dict[str, Any]:
    params: dict[str, Any] = {"block_id": block_id}
    if cursor is not None:
        params["start_cursor"] = cursor
    if size is not None:
        params["page_size"] = size
    return params


def _comments_page(data: dict[str, Any]) -> PaginatedList[Comment]:
    return PaginatedList.from_dict(data, Comment.from_dict)


class CommentAPI:
    """Synchronous wrapper for the Notion Comments API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def create(self, request: CreateCommentRequest) -> Comment:
        """Start a discussion on a page or reply to an existing one.

        Raises
        ------
        NotionkitValidationError
            If the text is too long or more than 3 files are attached.
        """
        request.validate()
        return Comment.from_dict(self._transport.request("POST", "/comments", json=request.to_dict()))

    def list(
        self,
        block_id: str,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Comment]:
        """Fetch one page of the open comments on a page or block."""
        data = self._transport.request(
            "GET", "/comments", params=_list_params(block_id, start_cursor, page_size)
        )
        return _comments_page(data)

    def list_all(self, block_id: str, page_size: int | None = None) -> list[Comment]:
        return collect_all(lambda cursor, size: self.list(block_id, cursor, size), page_size)


class AsyncCommentAPI:
    """Asynchronous wrapper for the Notion Comments API."""

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def create(self, request: CreateCommentRequest) -> Comment:
        request.validate()
        data = await self._transport.request("POST", "/comments", json=request.to_dict())
        return Comment.from_dict(data)

    async def list(
        self,
        block_id: str,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Comment]:
        data = await self._transport.request(
            "GET", "/comments", params=_list_params(block_id, start_cursor, page_size)
        )
        return _comments_page(data)

    async def list_all(self, block_id: str, page_size: int | None = None) -> list[Comment]:
        async def fetch(cursor: str | None, size: int | None) -> PaginatedList[Comment]:
            return await self.list(block_id, cursor, size)

        return await acollect_all(fetch, page_size)
