"""Data source API wrappers for the Notion API.

Data sources hold the property schema and the pages of a database.
Queries accept a :class:`~notionkit.dsl.QueryRequest` (see
:class:`~notionkit.dsl.QueryBuilder`) and are exposed three ways: one
page (:meth:`DataSourceAPI.query`), every result
(:meth:`DataSourceAPI.query_all`) and a lazy iterator
(:meth:`DataSourceAPI.iter_query`).
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from typing import Any

from notionkit.dsl.query import QueryRequest
from notionkit.dsl.requests import CreateDataSourceRequest, UpdateDataSourceRequest
from notionkit.models.objects import DataSource, PaginatedList, Template, object_from_dict

from .pagination import acollect_all, aiterate, collect_all, iterate
from .transport import AsyncNotionTransport, NotionTransport

_EMPTY_QUERY = QueryRequest()


def _query_page(data: dict[str, Any]) -> PaginatedList[Any]:
    # Results are pages, or data sources for wiki databases.
    return PaginatedList.from_dict(data, object_from_dict)


def _templates_page(data: dict[str, Any]) -> PaginatedList[Template]:
    return PaginatedList(
        results=[Template.from_dict(t) for t in data.get("templates") or []],
        has_more=bool(data.get("has_more", False)),
        next_cursor=data.get("next_cursor"),
    )


def _template_params(name: str | None, cursor: str | None, size: int | None) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if name is not None:
        params["name"] = name
    if cursor is not None:
        params["start_cursor"] = cursor
    if size is not None:
        params["page_size"] = size
    return params


class DataSourceAPI:
    """Synchronous wrapper for the Notion Data Sources API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def create(self, request: CreateDataSourceRequest) -> DataSource:
        """Add a new data source to an existing database."""
        request.validate()
        data = self._transport.request("POST", "/data_sources", json=request.to_dict())
        return DataSource.from_dict(data)

    def retrieve(self, data_source_id: str) -> DataSource:
        """Retrieve a data source with its typed property schema."""
        data = self._transport.request("GET", f"/data_sources/{data_source_id}")
        return DataSource.from_dict(data)

    def update(self, data_source_id: str, request: UpdateDataSourceRequest) -> DataSource:
        """Rename, re-icon, trash or change the schema of a data source.

        Properties mapped to ``None`` in *request* are deleted.
        """
        request.validate()
        data = self._transport.request(
            "PATCH", f"/data_sources/{data_source_id}", json=request.to_dict()
        )
        return DataSource.from_dict(data)

    def query(
        self,
        data_source_id: str,
        request: QueryRequest | None = None,
    ) -> PaginatedList[Any]:
        """Fetch one page of query results.

        Parameters
        ----------
        data_source_id:
            The data source to query.
        request:
            Filter, sorts, page size and cursor.  ``None`` returns the
            first page of all entries in default order.

        Returns
        -------
        PaginatedList
            Decoded :class:`~notionkit.models.Page` objects (or
            :class:`~notionkit.models.DataSource` for wiki databases).

        Raises
        ------
        NotionkitValidationError
            If the page size is out of range or the filter nests too deep.
        """
        request = request or _EMPTY_QUERY
        request.validate()
        data = self._transport.request(
            "POST",
            f"/data_sources/{data_source_id}/query",
            json=request.to_dict(),
            params=request.query_params() or None,
        )
        return _query_page(data)

    def query_all(self, data_source_id: str, request: QueryRequest | None = None) -> list[Any]:
        """Run a query and return every matching entry in server order."""
        request = request or _EMPTY_QUERY
        return collect_all(
            lambda cursor, size: self.query(data_source_id, request.with_cursor(cursor, size)),
            request.page_size,
        )

    def iter_query(self, data_source_id: str, request: QueryRequest | None = None) -> Iterator[Any]:
        """Lazily yield every matching entry; pages are fetched on demand."""
        request = request or _EMPTY_QUERY
        return iterate(
            lambda cursor, size: self.query(data_source_id, request.with_cursor(cursor, size)),
            request.page_size,
        )

    def list_templates(self, data_source_id: str, name: str | None = None) -> list[Template]:
        """List the page templates of a data source, optionally filtered by name."""

        def fetch(cursor: str | None, size: int | None) -> PaginatedList[Template]:
            data = self._transport.request(
                "GET",
                f"/data_sources/{data_source_id}/templates",
                params=_template_params(name, cursor, size) or None,
            )
            return _templates_page(data)

        return collect_all(fetch)


class AsyncDataSourceAPI:
    """Asynchronous wrapper for the Notion Data Sources API.

    Mirrors :class:`DataSourceAPI` but all methods are coroutines.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def create(self, request: CreateDataSourceRequest) -> DataSource:
        request.validate()
        data = await self._transport.request("POST", "/data_sources", json=request.to_dict())
        return DataSource.from_dict(data)

    async def retrieve(self, data_source_id: str) -> DataSource:
        data = await self._transport.request("GET", f"/data_sources/{data_source_id}")
        return DataSource.from_dict(data)

    async def update(self, data_source_id: str, request: UpdateDataSourceRequest) -> DataSource:
        request.validate()
        data = await self._transport.request(
            "PATCH", f"/data_sources/{data_source_id}", json=request.to_dict()
        )
        return DataSource.from_dict(data)

    async def query(
        self,
        data_source_id: str,
        request: QueryRequest | None = None,
    ) -> PaginatedList[Any]:
        """Fetch one page of query results (async).

        See :meth:`DataSourceAPI.query` for parameter documentation.
        """
        request = request or _EMPTY_QUERY
        request.validate()
        data = await self._transport.request(
            "POST",
            f"/data_sources/{data_source_id}/query",
            json=request.to_dict(),
            params=request.query_params() or None,
        )
        return _query_page(data)

    async def query_all(
        self,
        data_source_id: str,
        request: QueryRequest | None = None,
    ) -> list[Any]:
        query = request or _EMPTY_QUERY

        async def fetch(cursor: str | None, size: int | None) -> PaginatedList[Any]:
            return await self.query(data_source_id, query.with_cursor(cursor, size))

        return await acollect_all(fetch, query.page_size)

    def iter_query(
        self,
        data_source_id: str,
        request: QueryRequest | None = None,
    ) -> AsyncIterator[Any]:
        """Lazily yield every matching entry (async iterator)."""
        query = request or _EMPTY_QUERY

        async def fetch(cursor: str | None, size: int | None) -> PaginatedList[Any]:
            return await self.query(data_source_id, query.with_cursor(cursor, size))

        return aiterate(fetch, query.page_size)

    async def list_templates(self, data_source_id: str, name: str | None = None) -> list[Template]:
        async def fetch(cursor: str | None, size: int | None) -> PaginatedList[Template]:
            data = await self._transport.request(
                "GET",
                f"/data_sources/{data_source_id}/templates",
                params=_template_params(name, cursor, size) or None,
            )
            return _templates_page(data)

        return await acollect_all(fetch)
