"""User API wrappers for the Notion API."""

from __future__ import annotations

from typing import Any

from notionkit.models.objects import PaginatedList, User

from .pagination import acollect_all, collect_all
from .transport import AsyncNotionTransport, NotionTransport


def _list_params(cursor: str | None, size: int | None) -> dict[str, Any] | None:
    params: dict[str, Any] = {}
    if cursor is not None:
        params["start_cursor"] = cursor
    if size is not None:
        params["page_size"] = size
    return params or None


class UserAPI:
    """Synchronous wrapper for the Notion Users API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def me(self) -> User:
        """Return the bot user behind the configured token."""
        return User.from_dict(self._transport.request("GET", "/users/me"))

    def retrieve(self, user_id: str) -> User:
        return User.from_dict(self._transport.request("GET", f"/users/{user_id}"))

    def list(self, start_cursor: str | None = None, page_size: int | None = None) -> PaginatedList[User]:
        """Fetch one page of workspace members (guests are not included)."""
        data = self._transport.request("GET", "/users", params=_list_params(start_cursor, page_size))
        return PaginatedList.from_dict(data, User.from_dict)

    def list_all(self, page_size: int | None = None) -> list[User]:
        return collect_all(self.list, page_size)


class AsyncUserAPI:
    """Asynchronous wrapper for the Notion Users API."""

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def me(self) -> User:
        return User.from_dict(await self._transport.request("GET", "/users/me"))

    async def retrieve(self, user_id: str) -> User:
        return User.from_dict(await self._transport.request("GET", f"/users/{user_id}"))

    async def list(
        self,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[User]:
        data = await self._transport.request(
            "GET", "/users", params=_list_params(start_cursor, page_size)
        )
        return PaginatedList.from_dict(data, User.from_dict)

    async def list_all(self, page_size: int | None = None) -> list[User]:
        return await acollect_all(self.list, page_size)
