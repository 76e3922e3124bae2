"""Block-tree builder.

Usage::

    from notionkit.dsl import page_content

    blocks = page_content(lambda p: (
        p.heading1("Release notes"),
        p.paragraph("Highlights:"),
        p.bullet("Faster sync", children=lambda c: c.paragraph("2x on large pages")),
        p.divider(),
    ))

Each method appends exactly one :class:`BlockRequest` to the builder; the
output order is the call order.  Container methods take a ``children``
callable that receives a fresh :class:`PageContentBuilder`, and whatever
it appends becomes the block's children.  Nothing is validated here; size
limits are checked by :mod:`notionkit.validation` before sending.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Union

from notionkit.models.base import (
    Color,
    DatabaseParent,
    ExternalFile,
    FileSource,
    FileUploadFile,
    Icon,
    PageParent,
)
from notionkit.models.blocks import (
    BlockRequest,
    BlockType,
    BookmarkContent,
    CalloutContent,
    CodeContent,
    ColumnContent,
    EmbedContent,
    EmptyContent,
    EquationContent,
    HeadingContent,
    LinkToPageContent,
    MediaContent,
    SyncedBlockContent,
    TableContent,
    TableOfContentsContent,
    TableRowContent,
    TextContent,
    ToDoContent,
)

from .rich_text import RichTextInput, to_rich_text

ChildrenInput = Union[Callable[["PageContentBuilder"], object], Sequence[BlockRequest], None]


def build_children(children: ChildrenInput) -> list[BlockRequest] | None:
    if children is None:
        return None
    if callable(children):
        builder = PageContentBuilder()
        children(builder)
        built = builder.build()
    else:
        built = list(children)
    return built or None


def _media_source(url: str | None, file_upload_id: str | None) -> FileSource:
    if (url is None) == (file_upload_id is None):
        raise ValueError("Provide exactly one of url or file_upload_id")
    if url is not None:
        return ExternalFile(url)
    return FileUploadFile(file_upload_id)


class PageContentBuilder:
    """Accumulates blocks for one nesting level."""

    def __init__(self) -> None:
        self._blocks: list[BlockRequest] = []

    def _add(
        self,
        block_type: BlockType,
        content: object,
        children: ChildrenInput = None,
    ) -> PageContentBuilder:
        self._blocks.append(BlockRequest(block_type, content, build_children(children)))
        return self

    # ── text blocks ─────────────────────────────────────────────────────
    def paragraph(
        self,
        text: RichTextInput = None,
        *,
        color: Color = Color.DEFAULT,
        children: ChildrenInput = None,
    ) -> PageContentBuilder:
        return self._add(BlockType.PARAGRAPH, TextContent(to_rich_text(text), color), children)

    def _heading(
        self,
        block_type: BlockType,
        text: RichTextInput,
        color: Color,
        toggleable: bool,
        children: ChildrenInput,
    ) -> PageContentBuilder:
        content = HeadingContent(to_rich_text(text), color, toggleable)
        return self._add(block_type, content, children)

    def heading1(
        self,
        text: RichTextInput,
        *,
        color: Color = Color.DEFAULT,
        toggleable: bool = False,
        children: ChildrenInput = None,
    ) -> PageContentBuilder:
        return self._heading(BlockType.HEADING_1, text, color, toggleable, children)

    def heading2(
        self,
        text: RichTextInput,
        *,
        color: Color = Color.DEFAULT,
        toggleable: bool = False,
        children: ChildrenInput = None,
    ) -> PageContentBuilder:
        return self._heading(BlockType.HEADING_2, text, color, toggleable, children)

    def heading3(
        self,
        text: RichTextInput,
        *,
        color: Color = Color.DEFAULT,
        toggleable: bool = False,
        children: ChildrenInput = None,
    ) -> PageContentBuilder:
        return self._heading(BlockType.HEADING_3, text, color, toggleable, children)

    def bullet(
        self,
        text: RichTextInput,
        *,
        color: Color = Color.DEFAULT,
        children: ChildrenInput = None,
    ) -> PageContentBuilder:
        content = TextContent(to_rich_text(text), color)
        return self._add(BlockType.BULLETED_LIST_ITEM, content, children)

    def number(
        self,
        text: RichTextInput,
        *,
        color: Color = Color.DEFAULT,
        children: ChildrenInput = None,
    ) -> PageContentBuilder:
        content = TextContent(to_rich_text(text), color)
        return self._add(BlockType.NUMBERED_LIST_ITEM, content, children)

    def to_do(
        self,
        text: RichTextInput,
        checked: bool = False,
        *,
        color: Color = Color.DEFAULT,
        children: ChildrenInput = None,
    ) -> PageContentBuilder:
        content = ToDoContent(to_rich_text(text), checked, color)
        return self._add(BlockType.TO_DO, content, children)

    def toggle(
        self,
        text: RichTextInput,
        children: ChildrenInput = None,
        *,
        color: Color = Color.DEFAULT,
    ) -> PageContentBuilder:
        return self._add(BlockType.TOGGLE, TextContent(to_rich_text(text), color), children)

    def quote(
        self,
        text: RichTextInput,
        *,
        color: Color = Color.DEFAULT,
        children: ChildrenInput = None,
    ) -> PageContentBuilder:
        return self._add(BlockType.QUOTE, TextContent(to_rich_text(text), color), children)

    def callout(
        self,
        text: RichTextInput,
        icon: Icon | str | None = None,
        *,
        color: Color = Color.DEFAULT,
        children: ChildrenInput = None,
    ) -> PageContentBuilder:
        """Append a callout.  A bare string *icon* is taken as an emoji."""
        content = CalloutContent(to_rich_text(text), icon, color)
        return self._add(BlockType.CALLOUT, content, children)

    def code(
        self,
        code: str,
        language: str = "plain text",
        caption: RichTextInput = None,
    ) -> PageContentBuilder:
        content = CodeContent(to_rich_text(code), language, to_rich_text(caption))
        return self._add(BlockType.CODE, content)

    def equation(self, expression: str) -> PageContentBuilder:
        return self._add(BlockType.EQUATION, EquationContent(expression))

    # ── structural blocks ───────────────────────────────────────────────
    def divider(self) -> PageContentBuilder:
        return self._add(BlockType.DIVIDER, EmptyContent())

    def breadcrumb(self) -> PageContentBuilder:
        return self._add(BlockType.BREADCRUMB, EmptyContent())

    def table_of_contents(self, color: Color = Color.DEFAULT) -> PageContentBuilder:
        return self._add(BlockType.TABLE_OF_CONTENTS, TableOfContentsContent(color))

    def table(
        self,
        table_width: int,
        rows: Callable[[TableBuilder], object],
        *,
        has_column_header: bool = False,
        has_row_header: bool = False,
    ) -> PageContentBuilder:
        """Append a table whose rows are added through a :class:`TableBuilder`."""
        builder = TableBuilder()
        rows(builder)
        content = TableContent(table_width, has_column_header, has_row_header)
        return self._add(BlockType.TABLE, content, builder.build())

    def column_list(self, columns: Callable[[ColumnListBuilder], object]) -> PageContentBuilder:
        builder = ColumnListBuilder()
        columns(builder)
        return self._add(BlockType.COLUMN_LIST, EmptyContent(), builder.build())

    def synced_block(self, children: ChildrenInput) -> PageContentBuilder:
        """Append an original synced block holding *children*."""
        return self._add(BlockType.SYNCED_BLOCK, SyncedBlockContent(), children)

    def synced_block_reference(self, block_id: str) -> PageContentBuilder:
        """Append a copy of an existing synced block."""
        return self._add(BlockType.SYNCED_BLOCK, SyncedBlockContent(block_id))

    # ── links and embeds ────────────────────────────────────────────────
    def bookmark(self, url: str, caption: RichTextInput = None) -> PageContentBuilder:
        return self._add(BlockType.BOOKMARK, BookmarkContent(url, to_rich_text(caption)))

    def embed(self, url: str) -> PageContentBuilder:
        return self._add(BlockType.EMBED, EmbedContent(url))

    def link_to_page(
        self,
        page_id: str | None = None,
        *,
        database_id: str | None = None,
    ) -> PageContentBuilder:
        if (page_id is None) == (database_id is None):
            raise ValueError("Provide exactly one of page_id or database_id")
        target = PageParent(page_id) if page_id is not None else DatabaseParent(database_id)
        return self._add(BlockType.LINK_TO_PAGE, LinkToPageContent(target))

    # ── media ───────────────────────────────────────────────────────────
    def _media(
        self,
        block_type: BlockType,
        url: str | None,
        file_upload_id: str | None,
        caption: RichTextInput,
        name: str | None = None,
    ) -> PageContentBuilder:
        source = _media_source(url, file_upload_id)
        return self._add(block_type, MediaContent(source, to_rich_text(caption), name))

    def image(
        self,
        url: str | None = None,
        *,
        file_upload_id: str | None = None,
        caption: RichTextInput = None,
    ) -> PageContentBuilder:
        return self._media(BlockType.IMAGE, url, file_upload_id, caption)

    def video(
        self,
        url: str | None = None,
        *,
        file_upload_id: str | None = None,
        caption: RichTextInput = None,
    ) -> PageContentBuilder:
        return self._media(BlockType.VIDEO, url, file_upload_id, caption)

    def audio(
        self,
        url: str | None = None,
        *,
        file_upload_id: str | None = None,
        caption: RichTextInput = None,
    ) -> PageContentBuilder:
        return self._media(BlockType.AUDIO, url, file_upload_id, caption)

    def pdf(
        self,
        url: str | None = None,
        *,
        file_upload_id: str | None = None,
        caption: RichTextInput = None,
    ) -> PageContentBuilder:
        return self._media(BlockType.PDF, url, file_upload_id, caption)

    def file(
        self,
        url: str | None = None,
        *,
        file_upload_id: str | None = None,
        caption: RichTextInput = None,
        name: str | None = None,
    ) -> PageContentBuilder:
        return self._media(BlockType.FILE, url, file_upload_id, caption, name)

    # ── escape hatch ────────────────────────────────────────────────────
    def add_block(self, block: BlockRequest) -> PageContentBuilder:
        self._blocks.append(block)
        return self

    def build(self) -> list[BlockRequest]:
        return list(self._blocks)


class TableBuilder:
    """Scope for :meth:`PageContentBuilder.table`; each :meth:`row` adds one row."""

    def __init__(self) -> None:
        self._rows: list[BlockRequest] = []

    def row(self, *cells: RichTextInput) -> TableBuilder:
        content = TableRowContent(tuple(tuple(to_rich_text(cell)) for cell in cells))
        self._rows.append(BlockRequest(BlockType.TABLE_ROW, content))
        return self

    def build(self) -> list[BlockRequest]:
        return list(self._rows)


class ColumnListBuilder:
    """Scope for :meth:`PageContentBuilder.column_list`."""

    def __init__(self) -> None:
        self._columns: list[BlockRequest] = []

    def column(
        self,
        children: ChildrenInput,
        width_ratio: float | None = None,
    ) -> ColumnListBuilder:
        built = build_children(children)
        self._columns.append(BlockRequest(BlockType.COLUMN, ColumnContent(width_ratio), built))
        return self

    def build(self) -> list[BlockRequest]:
        return list(self._columns)


def page_content(fn: Callable[[PageContentBuilder], object]) -> list[BlockRequest]:
    """Run *fn* against a fresh builder and return the top-level blocks."""
    builder = PageContentBuilder()
    fn(builder)
    return builder.build()
