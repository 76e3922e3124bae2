"""Unit tests for cursor pagination helpers."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from notionkit.errors import NotionkitApiError, NotionkitValidationError
from notionkit.models.objects import PaginatedList
from notionkit.notion_api.pagination import (
    acollect_all,
    aiterate,
    aiterate_pages,
    collect_all,
    iterate,
    iterate_pages,
)


def _pages(*sizes: int) -> list[dict]:
    """Raw list responses holding *sizes* items each, numbered across pages."""
    pages = []
    counter = 0
    for index, size in enumerate(sizes):
        last = index == len(sizes) - 1
        pages.append({
            "results": [{"n": counter + i} for i in range(size)],
            "has_more": not last,
            "next_cursor": None if last else f"cursor-{index + 1}",
        })
        counter += size
    return pages


class TestCollectAll:
    def test_three_pages_five_items(self):
        fetch = MagicMock(side_effect=_pages(2, 2, 1))
        items = collect_all(fetch, page_size=2)
        assert [i["n"] for i in items] == [0, 1, 2, 3, 4]
        assert fetch.call_count == 3
        assert [c.args for c in fetch.call_args_list] == [
            (None, 2),
            ("cursor-1", 2),
            ("cursor-2", 2),
        ]

    def test_single_empty_page(self):
        fetch = MagicMock(return_value={"results": [], "has_more": False, "next_cursor": None})
        assert collect_all(fetch) == []
        fetch.assert_called_once_with(None, None)

    def test_stops_when_cursor_missing_despite_has_more(self):
        fetch = MagicMock(return_value={"results": [1], "has_more": True, "next_cursor": None})
        assert collect_all(fetch) == [1]
        assert fetch.call_count == 1

    def test_accepts_paginated_list(self):
        fetch = MagicMock(side_effect=[
            PaginatedList(["a"], True, "c1"),
            PaginatedList(["b"], False, None),
        ])
        assert collect_all(fetch) == ["a", "b"]

    def test_error_discards_partial_results(self):
        err = NotionkitApiError("boom", status=500)
        fetch = MagicMock(side_effect=[_pages(2, 1)[0], err])
        with pytest.raises(NotionkitApiError):
            collect_all(fetch)

    @pytest.mark.parametrize("size", [0, 101])
    def test_page_size_out_of_range(self, size):
        fetch = MagicMock()
        with pytest.raises(NotionkitValidationError):
            collect_all(fetch, page_size=size)
        fetch.assert_not_called()


class TestIterate:
    def test_lazy_fetching(self):
        fetch = MagicMock(side_effect=_pages(2, 2, 1))
        it = iterate(fetch)
        assert fetch.call_count == 0
        assert next(it) == {"n": 0}
        assert fetch.call_count == 1
        assert next(it) == {"n": 1}
        assert next(it) == {"n": 2}
        assert fetch.call_count == 2

    def test_items_before_error_are_kept(self):
        err = NotionkitApiError("boom", status=500)
        fetch = MagicMock(side_effect=[_pages(2, 1)[0], err])
        seen = []
        with pytest.raises(NotionkitApiError):
            for item in iterate(fetch):
                seen.append(item["n"])
        assert seen == [0, 1]

    def test_iterate_pages_yields_pages(self):
        fetch = MagicMock(side_effect=_pages(2, 2, 1))
        pages = list(iterate_pages(fetch))
        assert [len(p.results) for p in pages] == [2, 2, 1]
        assert pages[-1].has_more is False

    def test_each_call_restarts_walk(self):
        fetch = MagicMock(side_effect=_pages(1) + _pages(1))
        assert list(iterate(fetch)) == [{"n": 0}]
        assert list(iterate(fetch)) == [{"n": 0}]
        assert [c.args[0] for c in fetch.call_args_list] == [None, None]


class TestAsyncPagination:
    async def test_acollect_all(self):
        fetch = AsyncMock(side_effect=_pages(2, 2, 1))
        items = await acollect_all(fetch, page_size=2)
        assert len(items) == 5
        assert fetch.await_count == 3

    async def test_aiterate(self):
        fetch = AsyncMock(side_effect=_pages(1, 1))
        seen = [item["n"] async for item in aiterate(fetch)]
        assert seen == [0, 1]

    async def test_aiterate_pages(self):
        fetch = AsyncMock(side_effect=_pages(3))
        pages = [p async for p in aiterate_pages(fetch)]
        assert len(pages) == 1
        assert pages[0].next_cursor is None
