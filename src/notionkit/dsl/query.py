"""Data-source query builder.

Usage::

    query = (
        QueryBuilder()
        .filter(lambda f: f.status("Stage").equals("Done"))
        .sort_by("Due", "descending")
        .page_size(50)
        .build()
    )
    client.data_sources.query("ds-id", query)
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Any, Union

from notionkit.models.filters import (
    FilterExpression,
    PropertySort,
    Sort,
    SortDirection,
    Timestamp,
    TimestampSort,
)
from notionkit.validation import validate_array, validate_filter, validate_page_size

from .filters import FilterBuilder, build_filter

FilterInput = Union[FilterExpression, Callable[[FilterBuilder], object]]


@dataclass(frozen=True)
class QueryRequest:
    """Body and query-string parameters of ``POST /data_sources/{id}/query``."""

    filter: FilterExpression | None = None
    sorts: Sequence[Sort] = ()
    page_size: int | None = None
    start_cursor: str | None = None
    filter_properties: Sequence[str] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "sorts", tuple(self.sorts))
        object.__setattr__(self, "filter_properties", tuple(self.filter_properties))

    def validate(self) -> None:
        if self.filter is not None:
            validate_filter(self.filter)
        if self.page_size is not None:
            validate_page_size(self.page_size)
        validate_array(self.sorts, "sorts")

    def with_cursor(self, cursor: str | None, page_size: int | None = None) -> QueryRequest:
        """Copy for the next page; *page_size* overrides when given."""
        return replace(
            self,
            start_cursor=cursor,
            page_size=page_size if page_size is not None else self.page_size,
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.filter is not None:
            body["filter"] = self.filter.to_dict()
        if self.sorts:
            body["sorts"] = [s.to_dict() for s in self.sorts]
        if self.page_size is not None:
            body["page_size"] = self.page_size
        if self.start_cursor is not None:
            body["start_cursor"] = self.start_cursor
        return body

    def query_params(self) -> list[tuple[str, str]]:
        # filter_properties[] travels in the query string, repeated per id.
        return [("filter_properties[]", prop) for prop in self.filter_properties]


class QueryBuilder:
    """Fluent builder for :class:`QueryRequest`; each call overwrites or appends."""

    def __init__(self) -> None:
        self._filter: FilterExpression | None = None
        self._sorts: list[Sort] = []
        self._page_size: int | None = None
        self._start_cursor: str | None = None
        self._filter_properties: list[str] = []

    def filter(self, value: FilterInput) -> QueryBuilder:
        if callable(value):
            self._filter = build_filter(value)
        else:
            self._filter = value
        return self

    def sort_by(
        self,
        property_name: str,
        direction: SortDirection | str = SortDirection.ASCENDING,
    ) -> QueryBuilder:
        self._sorts.append(PropertySort(property_name, SortDirection(direction)))
        return self

    def sort_by_timestamp(
        self,
        timestamp: Timestamp | str,
        direction: SortDirection | str = SortDirection.ASCENDING,
    ) -> QueryBuilder:
        self._sorts.append(TimestampSort(Timestamp(timestamp), SortDirection(direction)))
        return self

    def page_size(self, size: int) -> QueryBuilder:
        self._page_size = size
        return self

    def start_cursor(self, cursor: str | None) -> QueryBuilder:
        self._start_cursor = cursor
        return self

    def filter_properties(self, *property_ids: str) -> QueryBuilder:
        self._filter_properties.extend(property_ids)
        return self

    def build(self) -> QueryRequest:
        return QueryRequest(
            filter=self._filter,
            sorts=self._sorts,
            page_size=self._page_size,
            start_cursor=self._start_cursor,
            filter_properties=self._filter_properties,
        )
