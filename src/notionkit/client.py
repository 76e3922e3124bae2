"""Synchronous Notion API client.

:class:`NotionkitClient` owns one :class:`NotionTransport` and exposes the
endpoint wrappers as attributes.  Every method returns typed models from
:mod:`notionkit.models`.

Usage::

    from notionkit import NotionkitClient
    from notionkit.dsl import CreatePageRequestBuilder, QueryBuilder
    from notionkit.models import PageParent

    with NotionkitClient(token="secret_xxx") as client:
        page = client.pages.create(
            CreatePageRequestBuilder(PageParent("<page_id>"))
            .title("Release notes")
            .content(lambda c: c.heading1("v1.0").paragraph("First release"))
            .build()
        )
        done = client.data_sources.query_all(
            "<data_source_id>",
            QueryBuilder().filter(lambda f: f.status("Stage").equals("Done")).build(),
        )
"""

from __future__ import annotations

import dataclasses
from typing import Any

from notionkit.config import NotionkitConfig
from notionkit.dsl.requests import CreatePageRequest
from notionkit.models.blocks import Block
from notionkit.models.objects import Page
from notionkit.notion_api.blocks import BlockAPI
from notionkit.notion_api.comments import CommentAPI
from notionkit.notion_api.data_sources import DataSourceAPI
from notionkit.notion_api.databases import DatabaseAPI
from notionkit.notion_api.files import FileAPI
from notionkit.notion_api.pages import PageAPI
from notionkit.notion_api.rate_limit import RateLimitState
from notionkit.notion_api.search import SearchAPI
from notionkit.notion_api.transport import NotionTransport
from notionkit.notion_api.users import UserAPI
from notionkit.observability import set_log_level
from notionkit.utils.chunk import chunked
from notionkit.validation import MAX_BLOCKS_PER_REQUEST, validate_blocks


class NotionkitClient:
    """Synchronous Notion API client.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`NotionkitConfig`.

    Attributes
    ----------
    pages, blocks, databases, data_sources, comments, users, files, search:
        Endpoint wrappers sharing this client's transport and rate-limit
        state.
    """

    def __init__(self, token: str, **kwargs: Any) -> None:
        """Create client.  All kwargs are forwarded to NotionkitConfig."""
        self._setup(NotionkitConfig(token=token, **kwargs))

    @classmethod
    def from_config(cls, config: NotionkitConfig) -> NotionkitClient:
        """Create a client from an existing configuration object."""
        client = cls.__new__(cls)
        client._setup(config)
        return client

    def _setup(self, config: NotionkitConfig) -> None:
        self._config = config
        set_log_level(config.log_level)
        self._transport = NotionTransport(config)
        self.pages = PageAPI(self._transport)
        self.blocks = BlockAPI(self._transport)
        self.databases = DatabaseAPI(self._transport)
        self.data_sources = DataSourceAPI(self._transport)
        self.comments = CommentAPI(self._transport)
        self.users = UserAPI(self._transport)
        self.files = FileAPI(self._transport)
        self.search = SearchAPI(self._transport)

    @property
    def config(self) -> NotionkitConfig:
        return self._config

    @property
    def rate_limit_state(self) -> RateLimitState:
        """Snapshot of the rate-limit information last seen by this client."""
        return self._transport.rate_limit_state

    # ------------------------------------------------------------------
    # Multi-call helpers
    # ------------------------------------------------------------------

    def create_page_with_content(self, request: CreatePageRequest) -> Page:
        """Create a page with any number of top-level blocks.

        The first 100 blocks are sent with the create call; the rest are
        appended in batches of 100.  Every batch is validated before the
        page is created.

        Returns
        -------
        Page
            The page as returned by the create call.
        """
        children = list(request.children)
        first = dataclasses.replace(request, children=children[:MAX_BLOCKS_PER_REQUEST])
        rest = children[MAX_BLOCKS_PER_REQUEST:]
        for batch in chunked(rest, MAX_BLOCKS_PER_REQUEST):
            validate_blocks(batch)
        page = self.pages.create(first)
        if rest:
            self.blocks.append_all_children(page.id, rest)
        return page

    def retrieve_block_tree(self, block_id: str, max_depth: int | None = None) -> list[Block]:
        """Fetch the children of *block_id* and, recursively, theirs.

        Parameters
        ----------
        block_id:
            A page or block id.
        max_depth:
            Levels below the top to descend.  ``None`` means unlimited;
            ``0`` returns only direct children.

        Returns
        -------
        list[Block]
            Direct children with ``children`` populated for every block
            that has them, down to *max_depth*.
        """
        return self._fetch_tree(block_id, 0, max_depth)

    def _fetch_tree(self, block_id: str, depth: int, max_depth: int | None) -> list[Block]:
        blocks = self.blocks.list_all_children(block_id)
        if max_depth is not None and depth >= max_depth:
            return blocks
        result: list[Block] = []
        for block in blocks:
            if block.has_children:
                children = self._fetch_tree(block.id, depth + 1, max_depth)
                block = dataclasses.replace(block, children=tuple(children))
            result.append(block)
        return result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the HTTP transport."""
        self._transport.close()

    def __enter__(self) -> NotionkitClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
