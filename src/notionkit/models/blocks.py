"""Block model: the closed set of content-block variants.

Two parallel shapes exist:

* :class:`BlockRequest` -- what callers build and send.  It carries a
  :class:`BlockType`, the variant's content dataclass and, for container
  types only, an ordered tuple of child requests.
* :class:`Block` -- what the server returns.  It adds the server-assigned
  fields (``id``, timestamps, authorship, ``archived`` ...) and is never
  mutated after decoding.

The variant payloads are frozen content dataclasses; :data:`CONTENT_TYPES`
maps every :class:`BlockType` to its content class and drives decoding.
Sequences stored on content objects are converted to tuples at
construction.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .base import (
    Color,
    DatabaseParent,
    FileSource,
    Icon,
    PageParent,
    UserRef,
    color_from_wire,
    coerce_icon,
    file_source_from_dict,
    icon_from_dict,
    parent_from_dict,
)
from .rich_text import RichText, plain_text, rich_text_list_from_dict, rich_text_to_list


class BlockType(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    CODE = "code"
    QUOTE = "quote"
    CALLOUT = "callout"
    DIVIDER = "divider"
    TABLE = "table"
    TABLE_ROW = "table_row"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    SYNCED_BLOCK = "synced_block"
    BOOKMARK = "bookmark"
    EMBED = "embed"
    EQUATION = "equation"
    BREADCRUMB = "breadcrumb"
    TABLE_OF_CONTENTS = "table_of_contents"
    CHILD_PAGE = "child_page"
    CHILD_DATABASE = "child_database"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    FILE = "file"
    PDF = "pdf"
    LINK_TO_PAGE = "link_to_page"
    UNSUPPORTED = "unsupported"


# Variants that may carry nested children in a request.
CONTAINER_TYPES: frozenset[BlockType] = frozenset({
    BlockType.PARAGRAPH,
    BlockType.HEADING_1,
    BlockType.HEADING_2,
    BlockType.HEADING_3,
    BlockType.BULLETED_LIST_ITEM,
    BlockType.NUMBERED_LIST_ITEM,
    BlockType.TO_DO,
    BlockType.TOGGLE,
    BlockType.QUOTE,
    BlockType.CALLOUT,
    BlockType.TABLE,
    BlockType.COLUMN_LIST,
    BlockType.COLUMN,
    BlockType.SYNCED_BLOCK,
})

MEDIA_TYPES: frozenset[BlockType] = frozenset({
    BlockType.IMAGE,
    BlockType.VIDEO,
    BlockType.AUDIO,
    BlockType.FILE,
    BlockType.PDF,
})


def _freeze(obj: Any, *names: str) -> None:
    for name in names:
        value = getattr(obj, name)
        if value is not None and not isinstance(value, tuple):
            object.__setattr__(obj, name, tuple(value))


def _runs(data: dict[str, Any], key: str = "rich_text") -> tuple[RichText, ...]:
    return tuple(rich_text_list_from_dict(data.get(key)))


# ---------------------------------------------------------------------------
# Content variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextContent:
    """Paragraph, list items, toggle and quote."""

    rich_text: Sequence[RichText] = ()
    color: Color = Color.DEFAULT

    def __post_init__(self) -> None:
        _freeze(self, "rich_text")

    def to_dict(self) -> dict[str, Any]:
        return {"rich_text": rich_text_to_list(list(self.rich_text)), "color": Color(self.color).value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TextContent:
        return cls(_runs(data), color_from_wire(data.get("color")))


@dataclass(frozen=True)
class HeadingContent:
    rich_text: Sequence[RichText] = ()
    color: Color = Color.DEFAULT
    is_toggleable: bool = False

    def __post_init__(self) -> None:
        _freeze(self, "rich_text")

    def to_dict(self) -> dict[str, Any]:
        return {
            "rich_text": rich_text_to_list(list(self.rich_text)),
            "color": Color(self.color).value,
            "is_toggleable": self.is_toggleable,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HeadingContent:
        return cls(
            _runs(data),
            color_from_wire(data.get("color")),
            bool(data.get("is_toggleable", False)),
        )


@dataclass(frozen=True)
class ToDoContent:
    rich_text: Sequence[RichText] = ()
    checked: bool = False
    color: Color = Color.DEFAULT

    def __post_init__(self) -> None:
        _freeze(self, "rich_text")

    def to_dict(self) -> dict[str, Any]:
        return {
            "rich_text": rich_text_to_list(list(self.rich_text)),
            "checked": self.checked,
            "color": Color(self.color).value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToDoContent:
        return cls(_runs(data), bool(data.get("checked", False)), color_from_wire(data.get("color")))


@dataclass(frozen=True)
class CodeContent:
    rich_text: Sequence[RichText] = ()
    language: str = "plain text"
    caption: Sequence[RichText] = ()

    def __post_init__(self) -> None:
        _freeze(self, "rich_text", "caption")

    def to_dict(self) -> dict[str, Any]:
        return {
            "rich_text": rich_text_to_list(list(self.rich_text)),
            "language": self.language,
            "caption": rich_text_to_list(list(self.caption)),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CodeContent:
        return cls(_runs(data), data.get("language", "plain text"), _runs(data, "caption"))


@dataclass(frozen=True)
class CalloutContent:
    rich_text: Sequence[RichText] = ()
    icon: Icon | None = None
    color: Color = Color.DEFAULT

    def __post_init__(self) -> None:
        _freeze(self, "rich_text")
        object.__setattr__(self, "icon", coerce_icon(self.icon))

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "rich_text": rich_text_to_list(list(self.rich_text)),
            "color": Color(self.color).value,
        }
        if self.icon is not None:
            payload["icon"] = self.icon.to_dict()
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CalloutContent:
        return cls(_runs(data), icon_from_dict(data.get("icon")), color_from_wire(data.get("color")))


@dataclass(frozen=True)
class MediaContent:
    """Image, video, audio, file and PDF blocks.  ``name`` applies to files."""

    source: FileSource
    caption: Sequence[RichText] = ()
    name: str | None = None

    def __post_init__(self) -> None:
        _freeze(self, "caption")

    def to_dict(self) -> dict[str, Any]:
        payload = self.source.to_dict()
        payload["caption"] = rich_text_to_list(list(self.caption))
        if self.name is not None:
            payload["name"] = self.name
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MediaContent:
        return cls(file_source_from_dict(data), _runs(data, "caption"), data.get("name"))


@dataclass(frozen=True)
class TableContent:
    table_width: int
    has_column_header: bool = False
    has_row_header: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "table_width": self.table_width,
            "has_column_header": self.has_column_header,
            "has_row_header": self.has_row_header,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TableContent:
        return cls(
            int(data.get("table_width", 0)),
            bool(data.get("has_column_header", False)),
            bool(data.get("has_row_header", False)),
        )


@dataclass(frozen=True)
class TableRowContent:
    cells: Sequence[Sequence[RichText]] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", tuple(tuple(cell) for cell in self.cells))

    def to_dict(self) -> dict[str, Any]:
        return {"cells": [rich_text_to_list(list(cell)) for cell in self.cells]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TableRowContent:
        return cls(tuple(tuple(rich_text_list_from_dict(cell)) for cell in data.get("cells", [])))


@dataclass(frozen=True)
class ColumnContent:
    width_ratio: float | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.width_ratio is None:
            return {}
        return {"width_ratio": self.width_ratio}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ColumnContent:
        return cls(data.get("width_ratio"))


@dataclass(frozen=True)
class SyncedBlockContent:
    """An original synced block (``synced_from is None``) or a reference."""

    synced_from: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.synced_from is None:
            return {"synced_from": None}
        return {"synced_from": {"type": "block_id", "block_id": self.synced_from}}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SyncedBlockContent:
        source = data.get("synced_from") or {}
        return cls(source.get("block_id"))


@dataclass(frozen=True)
class BookmarkContent:
    url: str
    caption: Sequence[RichText] = ()

    def __post_init__(self) -> None:
        _freeze(self, "caption")

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "caption": rich_text_to_list(list(self.caption))}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BookmarkContent:
        return cls(data.get("url", ""), _runs(data, "caption"))


@dataclass(frozen=True)
class EmbedContent:
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EmbedContent:
        return cls(data.get("url", ""))


@dataclass(frozen=True)
class EquationContent:
    expression: str

    def to_dict(self) -> dict[str, Any]:
        return {"expression": self.expression}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EquationContent:
        return cls(data.get("expression", ""))


@dataclass(frozen=True)
class TableOfContentsContent:
    color: Color = Color.DEFAULT

    def to_dict(self) -> dict[str, Any]:
        return {"color": Color(self.color).value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TableOfContentsContent:
        return cls(color_from_wire(data.get("color")))


@dataclass(frozen=True)
class ChildPageContent:
    title: str

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChildPageContent:
        return cls(data.get("title", ""))


@dataclass(frozen=True)
class ChildDatabaseContent:
    title: str

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChildDatabaseContent:
        return cls(data.get("title", ""))


@dataclass(frozen=True)
class LinkToPageContent:
    target: Union[PageParent, DatabaseParent]

    def to_dict(self) -> dict[str, Any]:
        return self.target.to_dict()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LinkToPageContent:
        target = parent_from_dict(data)
        if not isinstance(target, (PageParent, DatabaseParent)):
            raise ValueError(f"link_to_page cannot target {data.get('type')!r}")
        return cls(target)


@dataclass(frozen=True)
class EmptyContent:
    """Divider, breadcrumb and column list carry no payload."""

    def to_dict(self) -> dict[str, Any]:
        return {}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EmptyContent:
        return cls()


@dataclass(frozen=True)
class UnsupportedContent:
    """Payload of a block type this library does not model, kept verbatim."""

    raw: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UnsupportedContent:
        return cls(dict(data))


BlockContent = Union[
    TextContent,
    HeadingContent,
    ToDoContent,
    CodeContent,
    CalloutContent,
    MediaContent,
    TableContent,
    TableRowContent,
    ColumnContent,
    SyncedBlockContent,
    BookmarkContent,
    EmbedContent,
    EquationContent,
    TableOfContentsContent,
    ChildPageContent,
    ChildDatabaseContent,
    LinkToPageContent,
    EmptyContent,
    UnsupportedContent,
]

CONTENT_TYPES: dict[BlockType, type] = {
    BlockType.PARAGRAPH: TextContent,
    BlockType.HEADING_1: HeadingContent,
    BlockType.HEADING_2: HeadingContent,
    BlockType.HEADING_3: HeadingContent,
    BlockType.BULLETED_LIST_ITEM: TextContent,
    BlockType.NUMBERED_LIST_ITEM: TextContent,
    BlockType.TO_DO: ToDoContent,
    BlockType.TOGGLE: TextContent,
    BlockType.CODE: CodeContent,
    BlockType.QUOTE: TextContent,
    BlockType.CALLOUT: CalloutContent,
    BlockType.DIVIDER: EmptyContent,
    BlockType.TABLE: TableContent,
    BlockType.TABLE_ROW: TableRowContent,
    BlockType.COLUMN_LIST: EmptyContent,
    BlockType.COLUMN: ColumnContent,
    BlockType.SYNCED_BLOCK: SyncedBlockContent,
    BlockType.BOOKMARK: BookmarkContent,
    BlockType.EMBED: EmbedContent,
    BlockType.EQUATION: EquationContent,
    BlockType.BREADCRUMB: EmptyContent,
    BlockType.TABLE_OF_CONTENTS: TableOfContentsContent,
    BlockType.CHILD_PAGE: ChildPageContent,
    BlockType.CHILD_DATABASE: ChildDatabaseContent,
    BlockType.IMAGE: MediaContent,
    BlockType.VIDEO: MediaContent,
    BlockType.AUDIO: MediaContent,
    BlockType.FILE: MediaContent,
    BlockType.PDF: MediaContent,
    BlockType.LINK_TO_PAGE: LinkToPageContent,
    BlockType.UNSUPPORTED: UnsupportedContent,
}


def content_from_dict(block_type: BlockType, data: dict[str, Any]) -> BlockContent:
    return CONTENT_TYPES[block_type].from_dict(data or {})


def _content_text(content: BlockContent) -> str:
    runs = getattr(content, "rich_text", None)
    if runs is not None:
        return plain_text(list(runs))
    if isinstance(content, TableRowContent):
        return " | ".join(plain_text(list(cell)) for cell in content.cells)
    if isinstance(content, EquationContent):
        return content.expression
    if isinstance(content, (ChildPageContent, ChildDatabaseContent)):
        return content.title
    return ""


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BlockRequest:
    """A block to be created or appended.

    Raises
    ------
    ValueError
        If *children* is given for a leaf type.
    TypeError
        If *content* is not the content class registered for *type*.
    """

    type: BlockType
    content: BlockContent
    children: Sequence[BlockRequest] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", BlockType(self.type))
        if self.type is BlockType.UNSUPPORTED:
            raise ValueError("Cannot build a request for an unsupported block")
        expected = CONTENT_TYPES[self.type]
        if not isinstance(self.content, expected):
            raise TypeError(
                f"{self.type.value} expects {expected.__name__}, "
                f"got {type(self.content).__name__}"
            )
        if self.children is not None:
            if self.type not in CONTAINER_TYPES:
                raise ValueError(f"{self.type.value} blocks cannot have children")
            _freeze(self, "children")

    @property
    def text(self) -> str:
        return _content_text(self.content)

    def to_dict(self) -> dict[str, Any]:
        payload = self.content.to_dict()
        if self.children:
            payload["children"] = [child.to_dict() for child in self.children]
        return {"object": "block", "type": self.type.value, self.type.value: payload}


# ---------------------------------------------------------------------------
# Response side
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Block:
    """A block as returned by the server.

    ``raw_type`` keeps the wire tag, which differs from ``type.value`` only
    for block types decoded as :attr:`BlockType.UNSUPPORTED`.  ``children``
    is populated only when the payload embeds them.
    """

    id: str
    type: BlockType
    content: BlockContent
    raw_type: str = ""
    parent: Any = None
    created_time: str | None = None
    last_edited_time: str | None = None
    created_by: UserRef | None = None
    last_edited_by: UserRef | None = None
    has_children: bool = False
    archived: bool = False
    in_trash: bool = False
    children: tuple[Block, ...] | None = None

    @property
    def text(self) -> str:
        """Plain display text of the block's primary rich text."""
        return _content_text(self.content)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Block:
        raw_type = data.get("type", "unsupported")
        try:
            block_type = BlockType(raw_type)
        except ValueError:
            block_type = BlockType.UNSUPPORTED
        payload = data.get(raw_type) or {}

        children = None
        if isinstance(payload.get("children"), list):
            children = tuple(cls.from_dict(child) for child in payload["children"])

        parent = None
        if data.get("parent"):
            try:
                parent = parent_from_dict(data["parent"])
            except ValueError:
                parent = None

        return cls(
            id=data.get("id", ""),
            type=block_type,
            content=content_from_dict(block_type, payload),
            raw_type=raw_type,
            parent=parent,
            created_time=data.get("created_time"),
            last_edited_time=data.get("last_edited_time"),
            created_by=UserRef.from_dict(data.get("created_by")),
            last_edited_by=UserRef.from_dict(data.get("last_edited_by")),
            has_children=bool(data.get("has_children", children is not None and len(children) > 0)),
            archived=bool(data.get("archived", False)),
            in_trash=bool(data.get("in_trash", False)),
            children=children,
        )
