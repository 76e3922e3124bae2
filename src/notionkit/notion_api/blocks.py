"""Block API wrappers for the Notion API.

Provides :class:`BlockAPI` (sync) and :class:`AsyncBlockAPI` (async) thin
wrappers around the Notion ``/blocks`` endpoints.  Child listings are
exposed three ways: one page (:meth:`BlockAPI.retrieve_children`), every
child collected into a list (:meth:`BlockAPI.list_all_children`) and a
lazy iterator (:meth:`BlockAPI.iter_children`).
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator, Sequence
from typing import Any

from notionkit.models.blocks import Block, BlockRequest
from notionkit.models.objects import PaginatedList
from notionkit.utils.chunk import chunked
from notionkit.validation import MAX_BLOCKS_PER_REQUEST, validate_block, validate_blocks

from .pagination import acollect_all, aiterate, collect_all, iterate
from .transport import AsyncNotionTransport, NotionTransport


def _list_params(start_cursor: str | None, page_size: int | None) -> dict[str, Any] | None:
    params: dict[str, Any] = {}
    if start_cursor is not None:
        params["start_cursor"] = start_cursor
    if page_size is not None:
        params["page_size"] = page_size
    return params or None


def update_body(block: BlockRequest, in_trash: bool | None = None) -> dict[str, Any]:
    """``PATCH /blocks/{id}`` body for *block*'s content.

    Children are never sent on update; use :meth:`BlockAPI.append_children`.
    """
    body: dict[str, Any] = {block.type.value: block.content.to_dict()}
    if in_trash is not None:
        body["in_trash"] = in_trash
    return body


def append_body(children: Sequence[BlockRequest], after: str | None) -> dict[str, Any]:
    body: dict[str, Any] = {"children": [child.to_dict() for child in children]}
    if after is not None:
        body["after"] = after
    return body


def _blocks_page(data: dict[str, Any]) -> PaginatedList[Block]:
    return PaginatedList.from_dict(data, Block.from_dict)


class BlockAPI:
    """Synchronous wrapper for the Notion Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def retrieve(self, block_id: str) -> Block:
        """Retrieve a single block by its ID."""
        return Block.from_dict(self._transport.request("GET", f"/blocks/{block_id}"))

    def update(self, block_id: str, block: BlockRequest) -> Block:
        """Replace a block's content.

        Parameters
        ----------
        block_id:
            The UUID of the block to update.
        block:
            A request of the block's existing type carrying the new
            content.  Its children, if any, are ignored.

        Returns
        -------
        Block
            The updated block.
        """
        validate_block(block)
        data = self._transport.request("PATCH", f"/blocks/{block_id}", json=update_body(block))
        return Block.from_dict(data)

    def delete(self, block_id: str) -> Block:
        """Delete (move to trash) a block.  Returns the trashed block."""
        return Block.from_dict(self._transport.request("DELETE", f"/blocks/{block_id}"))

    def retrieve_children(
        self,
        block_id: str,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Block]:
        """Fetch one page of a block's (or page's) children."""
        data = self._transport.request(
            "GET",
            f"/blocks/{block_id}/children",
            params=_list_params(start_cursor, page_size),
        )
        return _blocks_page(data)

    def list_all_children(self, block_id: str, page_size: int | None = None) -> list[Block]:
        """Retrieve every child of a block, following pagination cursors.

        Only direct children are returned; nested children need their own
        call (see :attr:`Block.has_children`).
        """
        return collect_all(
            lambda cursor, size: self.retrieve_children(block_id, cursor, size), page_size
        )

    def iter_children(self, block_id: str, page_size: int | None = None) -> Iterator[Block]:
        """Lazily yield every child of a block, one page request at a time."""
        return iterate(
            lambda cursor, size: self.retrieve_children(block_id, cursor, size), page_size
        )

    def append_children(
        self,
        block_id: str,
        children: Sequence[BlockRequest],
        after: str | None = None,
    ) -> list[Block]:
        """Append child blocks to a parent block or page.

        Parameters
        ----------
        block_id:
            The UUID of the parent block (or page) to append to.
        children:
            At most 100 blocks; nested children lists are limited the same
            way.  Use :meth:`append_all_children` for longer lists.
        after:
            Optional UUID of an existing child block.  The new children
            are inserted immediately after it instead of at the end.

        Returns
        -------
        list[Block]
            The appended top-level blocks, in order.

        Raises
        ------
        NotionkitValidationError
            If any limit is exceeded.  Nothing is sent.
        """
        validate_blocks(children)
        data = self._transport.request(
            "PATCH", f"/blocks/{block_id}/children", json=append_body(children, after)
        )
        return _blocks_page(data).results

    def append_all_children(
        self,
        block_id: str,
        children: Sequence[BlockRequest],
        after: str | None = None,
    ) -> list[Block]:
        """Append any number of blocks in batches of 100, keeping their order.

        Every batch is validated before the first request is sent.  When
        *after* is given, each batch is placed after the last block of the
        previous one.
        """
        batches = chunked(children, MAX_BLOCKS_PER_REQUEST)
        for batch in batches:
            validate_blocks(batch)
        created: list[Block] = []
        for batch in batches:
            appended = self.append_children(block_id, batch, after)
            created.extend(appended)
            if after is not None and appended:
                after = appended[-1].id
        return created


class AsyncBlockAPI:
    """Asynchronous wrapper for the Notion Blocks API.

    Mirrors :class:`BlockAPI` but all methods are coroutines.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, block_id: str) -> Block:
        return Block.from_dict(await self._transport.request("GET", f"/blocks/{block_id}"))

    async def update(self, block_id: str, block: BlockRequest) -> Block:
        """Replace a block's content (async).

        See :meth:`BlockAPI.update` for parameter documentation.
        """
        validate_block(block)
        data = await self._transport.request(
            "PATCH", f"/blocks/{block_id}", json=update_body(block)
        )
        return Block.from_dict(data)

    async def delete(self, block_id: str) -> Block:
        return Block.from_dict(await self._transport.request("DELETE", f"/blocks/{block_id}"))

    async def retrieve_children(
        self,
        block_id: str,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[Block]:
        data = await self._transport.request(
            "GET",
            f"/blocks/{block_id}/children",
            params=_list_params(start_cursor, page_size),
        )
        return _blocks_page(data)

    async def list_all_children(self, block_id: str, page_size: int | None = None) -> list[Block]:
        """Retrieve every child of a block (async).

        See :meth:`BlockAPI.list_all_children`.
        """

        async def fetch(cursor: str | None, size: int | None) -> PaginatedList[Block]:
            return await self.retrieve_children(block_id, cursor, size)

        return await acollect_all(fetch, page_size)

    def iter_children(self, block_id: str, page_size: int | None = None) -> AsyncIterator[Block]:
        """Lazily yield every child of a block (async iterator)."""

        async def fetch(cursor: str | None, size: int | None) -> PaginatedList[Block]:
            return await self.retrieve_children(block_id, cursor, size)

        return aiterate(fetch, page_size)

    async def append_children(
        self,
        block_id: str,
        children: Sequence[BlockRequest],
        after: str | None = None,
    ) -> list[Block]:
        """Append up to 100 child blocks (async).

        See :meth:`BlockAPI.append_children` for parameter documentation.
        """
        validate_blocks(children)
        data = await self._transport.request(
            "PATCH", f"/blocks/{block_id}/children", json=append_body(children, after)
        )
        return _blocks_page(data).results

    async def append_all_children(
        self,
        block_id: str,
        children: Sequence[BlockRequest],
        after: str | None = None,
    ) -> list[Block]:
        batches = chunked(children, MAX_BLOCKS_PER_REQUEST)
        for batch in batches:
            validate_blocks(batch)
        created: list[Block] = []
        for batch in batches:
            appended = await self.append_children(block_id, batch, after)
            created.extend(appended)
            if after is not None and appended:
                after = appended[-1].id
        return created
