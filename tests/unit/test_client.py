"""Tests for NotionkitClient (sync) and AsyncNotionkitClient (async).

All Notion API calls are mocked at the transport so that these tests run
entirely offline.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import block_dict, list_dict, page_dict

from notionkit import AsyncNotionkitClient, NotionkitClient
from notionkit.dsl import CreatePageRequestBuilder, page_content
from notionkit.errors import NotionkitValidationError
from notionkit.models import PageParent

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# parent -> children, as (id, has_children)
_TREE = {
    "page-1": [("b1", True), ("b2", False)],
    "b1": [("b3", True)],
    "b3": [("b4", False)],
}


def _route_tree(method: str, path: str, **kwargs) -> dict:
    parent = path.split("/")[2]
    return list_dict([
        block_dict(block_id, text=block_id, has_children=has_children)
        for block_id, has_children in _TREE[parent]
    ])


def _route_create(method: str, path: str, **kwargs) -> dict:
    if method == "POST" and path == "/pages":
        return page_dict("page-1")
    count = len(kwargs["json"]["children"])
    return list_dict([block_dict(f"new-{i}") for i in range(count)])


def _request_with_paragraphs(count: int):
    return (
        CreatePageRequestBuilder(PageParent("root"))
        .title("Long page")
        .content(page_content(lambda p: [p.paragraph(f"p{i}") for i in range(count)]))
        .build()
    )


# ===========================================================================
# Sync client tests
# ===========================================================================


class TestNotionkitClientInit:
    def test_creates_all_endpoints(self):
        client = NotionkitClient(token="test-token")
        for name in (
            "pages", "blocks", "databases", "data_sources",
            "comments", "users", "files", "search",
        ):
            assert getattr(client, name) is not None
        client.close()

    def test_forwards_kwargs_to_config(self):
        client = NotionkitClient(token="test-token", max_retries=7, timeout_seconds=5)
        assert client.config.max_retries == 7
        assert client.config.timeout_seconds == 5
        client.close()

    def test_from_config(self, config):
        client = NotionkitClient.from_config(config)
        assert client.config is config
        client.close()

    def test_invalid_config_raises(self):
        with pytest.raises(ValueError):
            NotionkitClient(token="")

    def test_context_manager_closes_transport(self):
        with NotionkitClient(token="test-token") as client:
            client._transport.close = MagicMock()
        client._transport.close.assert_called_once()

    def test_rate_limit_state_starts_unknown(self):
        with NotionkitClient(token="test-token") as client:
            assert client.rate_limit_state.remaining is None


class TestCreatePageWithContent:
    def test_splits_children_across_calls(self, config):
        client = NotionkitClient.from_config(config)
        client._transport.request = MagicMock(side_effect=_route_create)

        page = client.create_page_with_content(_request_with_paragraphs(250))

        assert page.id == "page-1"
        calls = client._transport.request.call_args_list
        assert [c.args for c in calls] == [
            ("POST", "/pages"),
            ("PATCH", "/blocks/page-1/children"),
            ("PATCH", "/blocks/page-1/children"),
        ]
        sizes = [len(c.kwargs["json"]["children"]) for c in calls]
        assert sizes == [100, 100, 50]
        first_appended = calls[1].kwargs["json"]["children"][0]
        assert first_appended["paragraph"]["rich_text"][0]["text"]["content"] == "p100"
        client.close()

    def test_small_page_single_call(self, config):
        client = NotionkitClient.from_config(config)
        client._transport.request = MagicMock(side_effect=_route_create)

        client.create_page_with_content(_request_with_paragraphs(3))

        assert client._transport.request.call_count == 1
        client.close()

    def test_invalid_tail_sends_nothing(self, config):
        client = NotionkitClient.from_config(config)
        client._transport.request = MagicMock(side_effect=_route_create)
        request = (
            CreatePageRequestBuilder(PageParent("root"))
            .content(page_content(lambda p: [p.paragraph("ok") for _ in range(120)]))
            .content(lambda p: p.paragraph("x" * 2001))
            .build()
        )

        with pytest.raises(NotionkitValidationError):
            client.create_page_with_content(request)

        client._transport.request.assert_not_called()
        client.close()


class TestRetrieveBlockTree:
    def test_unlimited_depth(self, config):
        client = NotionkitClient.from_config(config)
        client._transport.request = MagicMock(side_effect=_route_tree)

        tree = client.retrieve_block_tree("page-1")

        assert [b.id for b in tree] == ["b1", "b2"]
        assert [b.id for b in tree[0].children] == ["b3"]
        assert [b.id for b in tree[0].children[0].children] == ["b4"]
        assert tree[1].children is None
        assert client._transport.request.call_count == 3
        client.close()

    def test_depth_zero_returns_direct_children(self, config):
        client = NotionkitClient.from_config(config)
        client._transport.request = MagicMock(side_effect=_route_tree)

        tree = client.retrieve_block_tree("page-1", max_depth=0)

        assert [b.id for b in tree] == ["b1", "b2"]
        assert tree[0].children is None
        assert client._transport.request.call_count == 1
        client.close()

    def test_depth_one(self, config):
        client = NotionkitClient.from_config(config)
        client._transport.request = MagicMock(side_effect=_route_tree)

        tree = client.retrieve_block_tree("page-1", max_depth=1)

        assert [b.id for b in tree[0].children] == ["b3"]
        assert tree[0].children[0].children is None
        assert tree[0].children[0].has_children is True
        client.close()


# ===========================================================================
# Async client tests
# ===========================================================================


class TestAsyncNotionkitClient:
    async def test_context_manager_closes_transport(self):
        async with AsyncNotionkitClient(token="test-token") as client:
            client._transport.close = AsyncMock()
        client._transport.close.assert_awaited_once()

    async def test_from_config(self, config):
        client = AsyncNotionkitClient.from_config(config)
        assert client.config is config
        await client.close()

    async def test_create_page_with_content(self, config):
        client = AsyncNotionkitClient.from_config(config)
        client._transport.request = AsyncMock(side_effect=_route_create)

        page = await client.create_page_with_content(_request_with_paragraphs(150))

        assert page.id == "page-1"
        sizes = [
            len(c.kwargs["json"]["children"]) for c in client._transport.request.call_args_list
        ]
        assert sizes == [100, 50]
        await client.close()

    async def test_retrieve_block_tree(self, config):
        client = AsyncNotionkitClient.from_config(config)
        client._transport.request = AsyncMock(side_effect=_route_tree)

        tree = await client.retrieve_block_tree("page-1", max_depth=1)

        assert [b.id for b in tree] == ["b1", "b2"]
        assert [b.id for b in tree[0].children] == ["b3"]
        assert tree[0].children[0].children is None
        await client.close()
