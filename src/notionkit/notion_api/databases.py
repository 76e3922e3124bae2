"""Database API wrappers for the Notion API.

A database is a container for one or more data sources.  Its schema
lives on the data sources (see :mod:`.data_sources`); the database itself
only carries title, description, icon, cover and placement.
"""

from __future__ import annotations

from notionkit.dsl.requests import CreateDatabaseRequest, UpdateDatabaseRequest
from notionkit.models.objects import Database

from .transport import AsyncNotionTransport, NotionTransport


class DatabaseAPI:
    """Synchronous wrapper for the Notion Databases API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def create(self, request: CreateDatabaseRequest) -> Database:
        """Create a database and its initial data source under a page.

        Raises
        ------
        NotionkitValidationError
            If the title or schema exceeds an API limit.  Nothing is sent.
        """
        request.validate()
        data = self._transport.request("POST", "/databases", json=request.to_dict())
        return Database.from_dict(data)

    def retrieve(self, database_id: str) -> Database:
        """Retrieve a database with references to its data sources."""
        return Database.from_dict(self._transport.request("GET", f"/databases/{database_id}"))

    def update(self, database_id: str, request: UpdateDatabaseRequest) -> Database:
        request.validate()
        data = self._transport.request(
            "PATCH", f"/databases/{database_id}", json=request.to_dict()
        )
        return Database.from_dict(data)

    def archive(self, database_id: str) -> Database:
        """Move a database to the trash."""
        return self.update(database_id, UpdateDatabaseRequest(in_trash=True))

    def restore(self, database_id: str) -> Database:
        return self.update(database_id, UpdateDatabaseRequest(in_trash=False))


class AsyncDatabaseAPI:
    """Asynchronous wrapper for the Notion Databases API.

    Mirrors :class:`DatabaseAPI` but all methods are coroutines.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def create(self, request: CreateDatabaseRequest) -> Database:
        request.validate()
        data = await self._transport.request("POST", "/databases", json=request.to_dict())
        return Database.from_dict(data)

    async def retrieve(self, database_id: str) -> Database:
        data = await self._transport.request("GET", f"/databases/{database_id}")
        return Database.from_dict(data)

    async def update(self, database_id: str, request: UpdateDatabaseRequest) -> Database:
        request.validate()
        data = await self._transport.request(
            "PATCH", f"/databases/{database_id}", json=request.to_dict()
        )
        return Database.from_dict(data)

    async def archive(self, database_id: str) -> Database:
        return await self.update(database_id, UpdateDatabaseRequest(in_trash=True))

    async def restore(self, database_id: str) -> Database:
        return await self.update(database_id, UpdateDatabaseRequest(in_trash=False))
