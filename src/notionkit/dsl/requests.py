"""Immutable request objects and their builders.

Each request is a frozen dataclass with ``validate()`` (pre-flight limit
checks, raising :class:`~notionkit.errors.NotionkitValidationError`) and
``to_dict()`` (the JSON body).  Builders are thin mutable accumulators::

    request = (
        CreatePageRequestBuilder(DataSourceParent("ds-id"))
        .title("Weekly sync", property_name="Name")
        .properties(lambda p: p.select("Stage", "Todo"))
        .content(lambda c: c.paragraph("Agenda"))
        .icon("🗓️")
        .build()
    )
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

from notionkit.models.base import FileSource, Icon, Parent, coerce_icon, drop_none
from notionkit.models.blocks import BlockRequest
from notionkit.models.properties import (
    PropertySchema,
    PropertyValue,
    TitleValue,
    schemas_to_dict,
    values_to_dict,
)
from notionkit.models.rich_text import RichText, rich_text_to_list
from notionkit.validation import (
    validate_blocks,
    validate_comment_attachments,
    validate_page_size,
    validate_property_values,
    validate_rich_text,
    validate_schemas,
)

from .blocks import ChildrenInput, build_children
from .properties import PagePropertiesBuilder, PropertySchemaBuilder
from .rich_text import RichTextInput, to_rich_text


def _icon_dict(icon: Icon | None) -> dict[str, Any] | None:
    return icon.to_dict() if icon is not None else None


def _cover_dict(cover: FileSource | None) -> dict[str, Any] | None:
    return cover.to_dict() if cover is not None else None


def _runs(runs: Sequence[RichText] | None) -> list[dict[str, Any]] | None:
    return rich_text_to_list(runs) if runs is not None else None


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CreatePageRequest:
    parent: Parent
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)
    children: Sequence[BlockRequest] = ()
    icon: Icon | None = None
    cover: FileSource | None = None
    template_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", dict(self.properties))
        object.__setattr__(self, "children", tuple(self.children))

    def validate(self) -> None:
        validate_property_values(self.properties)
        if self.children:
            validate_blocks(self.children)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "parent": self.parent.to_dict(),
            "properties": values_to_dict(self.properties),
        }
        if self.children:
            body["children"] = [b.to_dict() for b in self.children]
        if self.template_id is not None:
            body["template"] = {"type": "template_id", "template_id": self.template_id}
        body["icon"] = _icon_dict(self.icon)
        body["cover"] = _cover_dict(self.cover)
        return drop_none(body)


@dataclass(frozen=True)
class UpdatePageRequest:
    """Partial update: fields left as ``None`` are not sent."""

    properties: Mapping[str, PropertyValue] = field(default_factory=dict)
    icon: Icon | None = None
    cover: FileSource | None = None
    in_trash: bool | None = None
    is_locked: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", dict(self.properties))

    def validate(self) -> None:
        validate_property_values(self.properties)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.properties:
            body["properties"] = values_to_dict(self.properties)
        body["icon"] = _icon_dict(self.icon)
        body["cover"] = _cover_dict(self.cover)
        body["in_trash"] = self.in_trash
        body["is_locked"] = self.is_locked
        return drop_none(body)


_PB = TypeVar("_PB", bound="_PagePropertiesMixin")


class _PagePropertiesMixin:
    _properties: dict[str, PropertyValue]

    def title(self: _PB, text: RichTextInput, property_name: str = "title") -> _PB:
        """Set the title property.  Pages under a data source use its title column name."""
        self._properties[property_name] = TitleValue(to_rich_text(text))
        return self

    def properties(self: _PB, fn: Callable[[PagePropertiesBuilder], object]) -> _PB:
        builder = PagePropertiesBuilder()
        fn(builder)
        self._properties.update(builder.build())
        return self

    def icon(self: _PB, icon: Icon | str | None) -> _PB:
        self._icon = coerce_icon(icon)
        return self

    def cover(self: _PB, cover: FileSource | None) -> _PB:
        self._cover = cover
        return self


class CreatePageRequestBuilder(_PagePropertiesMixin):
    def __init__(self, parent: Parent) -> None:
        self._parent = parent
        self._properties: dict[str, PropertyValue] = {}
        self._children: list[BlockRequest] = []
        self._icon: Icon | None = None
        self._cover: FileSource | None = None
        self._template_id: str | None = None

    def content(self, children: ChildrenInput) -> CreatePageRequestBuilder:
        """Append top-level blocks from a :class:`PageContentBuilder` scope or a list."""
        self._children.extend(build_children(children) or [])
        return self

    def template(self, template_id: str) -> CreatePageRequestBuilder:
        self._template_id = template_id
        return self

    def build(self) -> CreatePageRequest:
        return CreatePageRequest(
            parent=self._parent,
            properties=self._properties,
            children=self._children,
            icon=self._icon,
            cover=self._cover,
            template_id=self._template_id,
        )


class UpdatePageRequestBuilder(_PagePropertiesMixin):
    def __init__(self) -> None:
        self._properties: dict[str, PropertyValue] = {}
        self._icon: Icon | None = None
        self._cover: FileSource | None = None
        self._in_trash: bool | None = None
        self._is_locked: bool | None = None

    def archive(self) -> UpdatePageRequestBuilder:
        self._in_trash = True
        return self

    def restore(self) -> UpdatePageRequestBuilder:
        self._in_trash = False
        return self

    def lock(self, locked: bool = True) -> UpdatePageRequestBuilder:
        self._is_locked = locked
        return self

    def build(self) -> UpdatePageRequest:
        return UpdatePageRequest(
            properties=self._properties,
            icon=self._icon,
            cover=self._cover,
            in_trash=self._in_trash,
            is_locked=self._is_locked,
        )


# ---------------------------------------------------------------------------
# Databases and data sources
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CreateDatabaseRequest:
    """Create a database together with its first data source."""

    parent: Parent
    title: Sequence[RichText] = ()
    description: Sequence[RichText] = ()
    properties: Mapping[str, PropertySchema | None] = field(default_factory=dict)
    icon: Icon | None = None
    cover: FileSource | None = None
    is_inline: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "title", tuple(self.title))
        object.__setattr__(self, "description", tuple(self.description))
        object.__setattr__(self, "properties", dict(self.properties))

    def validate(self) -> None:
        validate_rich_text(self.title, "title")
        validate_rich_text(self.description, "description")
        validate_schemas(self.properties, "initial_data_source.properties")

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "parent": self.parent.to_dict(),
            "title": rich_text_to_list(self.title),
            "initial_data_source": {"properties": schemas_to_dict(self.properties)},
        }
        if self.description:
            body["description"] = rich_text_to_list(self.description)
        body["icon"] = _icon_dict(self.icon)
        body["cover"] = _cover_dict(self.cover)
        body["is_inline"] = self.is_inline
        return drop_none(body)


@dataclass(frozen=True)
class UpdateDatabaseRequest:
    title: Sequence[RichText] | None = None
    description: Sequence[RichText] | None = None
    icon: Icon | None = None
    cover: FileSource | None = None
    is_inline: bool | None = None
    in_trash: bool | None = None

    def validate(self) -> None:
        if self.title is not None:
            validate_rich_text(self.title, "title")
        if self.description is not None:
            validate_rich_text(self.description, "description")

    def to_dict(self) -> dict[str, Any]:
        return drop_none({
            "title": _runs(self.title),
            "description": _runs(self.description),
            "icon": _icon_dict(self.icon),
            "cover": _cover_dict(self.cover),
            "is_inline": self.is_inline,
            "in_trash": self.in_trash,
        })


@dataclass(frozen=True)
class CreateDataSourceRequest:
    """Add a data source to an existing database (``parent`` is a DatabaseParent)."""

    parent: Parent
    properties: Mapping[str, PropertySchema | None] = field(default_factory=dict)
    title: Sequence[RichText] = ()
    icon: Icon | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", dict(self.properties))
        object.__setattr__(self, "title", tuple(self.title))

    def validate(self) -> None:
        validate_rich_text(self.title, "title")
        validate_schemas(self.properties)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "parent": self.parent.to_dict(),
            "properties": schemas_to_dict(self.properties),
        }
        if self.title:
            body["title"] = rich_text_to_list(self.title)
        body["icon"] = _icon_dict(self.icon)
        return drop_none(body)


@dataclass(frozen=True)
class UpdateDataSourceRequest:
    """``properties`` maps names to new schemas; a ``None`` schema deletes the column."""

    properties: Mapping[str, PropertySchema | None] = field(default_factory=dict)
    title: Sequence[RichText] | None = None
    icon: Icon | None = None
    in_trash: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", dict(self.properties))

    def validate(self) -> None:
        if self.title is not None:
            validate_rich_text(self.title, "title")
        validate_schemas(self.properties)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.properties:
            # Deletions are explicit nulls, so bypass drop_none here.
            body["properties"] = schemas_to_dict(self.properties)
        body.update(drop_none({
            "title": _runs(self.title),
            "icon": _icon_dict(self.icon),
            "in_trash": self.in_trash,
        }))
        return body


_SB = TypeVar("_SB", bound="_SchemaRequestBuilder")


class _SchemaRequestBuilder:
    def __init__(self) -> None:
        self._title: list[RichText] = []
        self._description: list[RichText] = []
        self._properties: dict[str, PropertySchema | None] = {}
        self._icon: Icon | None = None
        self._cover: FileSource | None = None

    def title(self: _SB, text: RichTextInput) -> _SB:
        self._title = to_rich_text(text)
        return self

    def description(self: _SB, text: RichTextInput) -> _SB:
        self._description = to_rich_text(text)
        return self

    def properties(self: _SB, fn: Callable[[PropertySchemaBuilder], object]) -> _SB:
        builder = PropertySchemaBuilder()
        fn(builder)
        self._properties.update(builder.build())
        return self

    def icon(self: _SB, icon: Icon | str | None) -> _SB:
        self._icon = coerce_icon(icon)
        return self

    def cover(self: _SB, cover: FileSource | None) -> _SB:
        self._cover = cover
        return self


class CreateDatabaseRequestBuilder(_SchemaRequestBuilder):
    def __init__(self, parent: Parent) -> None:
        super().__init__()
        self._parent = parent
        self._is_inline: bool | None = None

    def inline(self, is_inline: bool = True) -> CreateDatabaseRequestBuilder:
        self._is_inline = is_inline
        return self

    def build(self) -> CreateDatabaseRequest:
        return CreateDatabaseRequest(
            parent=self._parent,
            title=self._title,
            description=self._description,
            properties=self._properties,
            icon=self._icon,
            cover=self._cover,
            is_inline=self._is_inline,
        )


class CreateDataSourceRequestBuilder(_SchemaRequestBuilder):
    def __init__(self, parent: Parent) -> None:
        super().__init__()
        self._parent = parent

    def build(self) -> CreateDataSourceRequest:
        return CreateDataSourceRequest(
            parent=self._parent,
            properties=self._properties,
            title=self._title,
            icon=self._icon,
        )


class UpdateDataSourceRequestBuilder(_SchemaRequestBuilder):
    def __init__(self) -> None:
        super().__init__()
        self._title_set = False
        self._in_trash: bool | None = None

    def title(self, text: RichTextInput) -> UpdateDataSourceRequestBuilder:
        self._title_set = True
        return super().title(text)

    def archive(self) -> UpdateDataSourceRequestBuilder:
        self._in_trash = True
        return self

    def restore(self) -> UpdateDataSourceRequestBuilder:
        self._in_trash = False
        return self

    def build(self) -> UpdateDataSourceRequest:
        return UpdateDataSourceRequest(
            properties=self._properties,
            title=tuple(self._title) if self._title_set else None,
            icon=self._icon,
            in_trash=self._in_trash,
        )


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CreateCommentRequest:
    """A comment on a page (new discussion) or a reply in a discussion.

    Exactly one of ``page_id`` and ``discussion_id`` must be set.
    """

    rich_text: Sequence[RichText]
    page_id: str | None = None
    discussion_id: str | None = None
    attachments: Sequence[str] = ()
    display_name: str | None = None

    def __post_init__(self) -> None:
        if (self.page_id is None) == (self.discussion_id is None):
            raise ValueError("Provide exactly one of page_id or discussion_id")
        object.__setattr__(self, "rich_text", tuple(self.rich_text))
        object.__setattr__(self, "attachments", tuple(self.attachments))

    def validate(self) -> None:
        validate_rich_text(self.rich_text)
        validate_comment_attachments(self.attachments)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"rich_text": rich_text_to_list(self.rich_text)}
        if self.page_id is not None:
            body["parent"] = {"type": "page_id", "page_id": self.page_id}
        else:
            body["discussion_id"] = self.discussion_id
        if self.attachments:
            body["attachments"] = [
                {"type": "file_upload", "file_upload_id": upload_id}
                for upload_id in self.attachments
            ]
        if self.display_name is not None:
            body["display_name"] = {"type": "custom", "custom": {"name": self.display_name}}
        return body


class CreateCommentRequestBuilder:
    def __init__(self, *, page_id: str | None = None, discussion_id: str | None = None) -> None:
        self._page_id = page_id
        self._discussion_id = discussion_id
        self._rich_text: list[RichText] = []
        self._attachments: list[str] = []
        self._display_name: str | None = None

    def text(self, text: RichTextInput) -> CreateCommentRequestBuilder:
        self._rich_text.extend(to_rich_text(text))
        return self

    def attach(self, file_upload_id: str) -> CreateCommentRequestBuilder:
        self._attachments.append(file_upload_id)
        return self

    def display_name(self, name: str) -> CreateCommentRequestBuilder:
        self._display_name = name
        return self

    def build(self) -> CreateCommentRequest:
        return CreateCommentRequest(
            rich_text=self._rich_text,
            page_id=self._page_id,
            discussion_id=self._discussion_id,
            attachments=self._attachments,
            display_name=self._display_name,
        )


# ---------------------------------------------------------------------------
# Search and file uploads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SearchRequest:
    """``POST /search``; ``object_type`` is ``"page"`` or ``"data_source"``."""

    query: str | None = None
    object_type: str | None = None
    sort_direction: str | None = None
    page_size: int | None = None
    start_cursor: str | None = None

    def __post_init__(self) -> None:
        if self.object_type not in (None, "page", "data_source"):
            raise ValueError(f"object_type must be 'page' or 'data_source', got {self.object_type!r}")
        if self.sort_direction not in (None, "ascending", "descending"):
            raise ValueError(
                f"sort_direction must be 'ascending' or 'descending', got {self.sort_direction!r}"
            )

    def validate(self) -> None:
        if self.page_size is not None:
            validate_page_size(self.page_size)

    def to_dict(self) -> dict[str, Any]:
        return drop_none({
            "query": self.query,
            "filter": (
                {"property": "object", "value": self.object_type}
                if self.object_type is not None
                else None
            ),
            "sort": (
                {"timestamp": "last_edited_time", "direction": self.sort_direction}
                if self.sort_direction is not None
                else None
            ),
            "page_size": self.page_size,
            "start_cursor": self.start_cursor,
        })


@dataclass(frozen=True)
class CreateFileUploadRequest:
    """Start an upload.  ``mode`` is single_part, multi_part or external_url."""

    mode: str = "single_part"
    filename: str | None = None
    content_type: str | None = None
    number_of_parts: int | None = None
    external_url: str | None = None

    def __post_init__(self) -> None:
        if self.mode not in ("single_part", "multi_part", "external_url"):
            raise ValueError(f"Unknown upload mode: {self.mode!r}")
        if self.mode == "multi_part" and not self.number_of_parts:
            raise ValueError("multi_part uploads require number_of_parts")
        if self.mode == "external_url" and not self.external_url:
            raise ValueError("external_url uploads require external_url")

    def to_dict(self) -> dict[str, Any]:
        return drop_none({
            "mode": self.mode,
            "filename": self.filename,
            "content_type": self.content_type,
            "number_of_parts": self.number_of_parts,
            "external_url": self.external_url,
        })
