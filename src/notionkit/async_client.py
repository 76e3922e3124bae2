"""Asynchronous Notion API client.

:class:`AsyncNotionkitClient` mirrors :class:`NotionkitClient` but every
I/O method is an ``async def`` coroutine.  It uses the async variants of
the transport and the endpoint wrappers.

Usage::

    import asyncio
    from notionkit import AsyncNotionkitClient

    async def main():
        async with AsyncNotionkitClient(token="secret_xxx") as client:
            me = await client.users.me()
            async for block in client.blocks.iter_children("<page_id>"):
                print(block.type, block.text)

    asyncio.run(main())
"""

from __future__ import annotations

import dataclasses
from typing import Any

from notionkit.config import NotionkitConfig
from notionkit.dsl.requests import CreatePageRequest
from notionkit.models.blocks import Block
from notionkit.models.objects import Page
from notionkit.notion_api.blocks import AsyncBlockAPI
from notionkit.notion_api.comments import AsyncCommentAPI
from notionkit.notion_api.data_sources import AsyncDataSourceAPI
from notionkit.notion_api.databases import AsyncDatabaseAPI
from notionkit.notion_api.files import AsyncFileAPI
from notionkit.notion_api.pages import AsyncPageAPI
from notionkit.notion_api.rate_limit import RateLimitState
from notionkit.notion_api.search import AsyncSearchAPI
from notionkit.notion_api.transport import AsyncNotionTransport
from notionkit.notion_api.users import AsyncUserAPI
from notionkit.observability import set_log_level
from notionkit.utils.chunk import chunked
from notionkit.validation import MAX_BLOCKS_PER_REQUEST, validate_blocks


class AsyncNotionkitClient:
    """Asynchronous Notion API client.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`NotionkitConfig`.
    """

    def __init__(self, token: str, **kwargs: Any) -> None:
        """Create client.  All kwargs are forwarded to NotionkitConfig."""
        self._setup(NotionkitConfig(token=token, **kwargs))

    @classmethod
    def from_config(cls, config: NotionkitConfig) -> AsyncNotionkitClient:
        client = cls.__new__(cls)
        client._setup(config)
        return client

    def _setup(self, config: NotionkitConfig) -> None:
        self._config = config
        set_log_level(config.log_level)
        self._transport = AsyncNotionTransport(config)
        self.pages = AsyncPageAPI(self._transport)
        self.blocks = AsyncBlockAPI(self._transport)
        self.databases = AsyncDatabaseAPI(self._transport)
        self.data_sources = AsyncDataSourceAPI(self._transport)
        self.comments = AsyncCommentAPI(self._transport)
        self.users = AsyncUserAPI(self._transport)
        self.files = AsyncFileAPI(self._transport)
        self.search = AsyncSearchAPI(self._transport)

    @property
    def config(self) -> NotionkitConfig:
        return self._config

    @property
    def rate_limit_state(self) -> RateLimitState:
        return self._transport.rate_limit_state

    # ------------------------------------------------------------------
    # Multi-call helpers
    # ------------------------------------------------------------------

    async def create_page_with_content(self, request: CreatePageRequest) -> Page:
        """Create a page with any number of top-level blocks (async).

        See :meth:`NotionkitClient.create_page_with_content`.
        """
        children = list(request.children)
        first = dataclasses.replace(request, children=children[:MAX_BLOCKS_PER_REQUEST])
        rest = children[MAX_BLOCKS_PER_REQUEST:]
        for batch in chunked(rest, MAX_BLOCKS_PER_REQUEST):
            validate_blocks(batch)
        page = await self.pages.create(first)
        if rest:
            await self.blocks.append_all_children(page.id, rest)
        return page

    async def retrieve_block_tree(self, block_id: str, max_depth: int | None = None) -> list[Block]:
        """Fetch a block's children recursively (async).

        Children are fetched sequentially, one block at a time.
        """
        return await self._fetch_tree(block_id, 0, max_depth)

    async def _fetch_tree(self, block_id: str, depth: int, max_depth: int | None) -> list[Block]:
        blocks = await self.blocks.list_all_children(block_id)
        if max_depth is not None and depth >= max_depth:
            return blocks
        result: list[Block] = []
        for block in blocks:
            if block.has_children:
                children = await self._fetch_tree(block.id, depth + 1, max_depth)
                block = dataclasses.replace(block, children=tuple(children))
            result.append(block)
        return result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP transport."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncNotionkitClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
