"""Shared test fixtures for the notionkit test suite."""

from __future__ import annotations

import json

import httpx
import pytest

from notionkit.config import NotionkitConfig


def make_response(
    status_code: int = 200,
    body: dict | None = None,
    headers: dict | None = None,
) -> httpx.Response:
    """Build a minimal httpx.Response with a request attached."""
    content = json.dumps(body).encode() if body is not None else b""
    resp = httpx.Response(status_code, content=content, headers=headers or {})
    resp.request = httpx.Request("GET", "https://api.notion.com/v1/test")
    return resp


def page_dict(page_id: str = "page-1", title: str = "Hello") -> dict:
    """Minimal page object as returned by the API."""
    return {
        "object": "page",
        "id": page_id,
        "parent": {"type": "page_id", "page_id": "root"},
        "properties": {
            "title": {
                "id": "title",
                "type": "title",
                "title": [{"type": "text", "text": {"content": title}, "plain_text": title}],
            }
        },
        "url": f"https://www.notion.so/{page_id}",
    }


def block_dict(
    block_id: str = "blk-1",
    text: str = "hello",
    block_type: str = "paragraph",
    has_children: bool = False,
) -> dict:
    """Minimal text block as returned by the API."""
    return {
        "object": "block",
        "id": block_id,
        "type": block_type,
        "has_children": has_children,
        block_type: {
            "rich_text": [{"type": "text", "text": {"content": text}, "plain_text": text}],
            "color": "default",
        },
    }


def list_dict(results: list, next_cursor: str | None = None) -> dict:
    """Paginated list envelope."""
    return {
        "object": "list",
        "results": results,
        "has_more": next_cursor is not None,
        "next_cursor": next_cursor,
    }


@pytest.fixture
def config() -> NotionkitConfig:
    """Default test configuration with a dummy token."""
    return NotionkitConfig(token="test_token_1234")
