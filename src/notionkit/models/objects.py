"""Top-level response objects.

Every class decodes with ``from_dict``; unknown keys are ignored and
absent optional keys become ``None`` (or an empty collection).  These are
read-only snapshots of one response.  Nothing is cached between calls.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from .base import Icon, Parent, UserRef, icon_from_dict, parent_from_dict
from .blocks import Block
from .properties import (
    PropertyDefinition,
    PropertyValue,
    TitleValue,
    value_from_dict,
)
from .rich_text import RichText, plain_text, rich_text_list_from_dict

T = TypeVar("T")


def _parent(data: dict[str, Any]) -> Parent | None:
    raw = data.get("parent")
    if not raw:
        return None
    try:
        return parent_from_dict(raw)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Page:
    id: str
    parent: Parent | None = None
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    property_ids: dict[str, str] = field(default_factory=dict)
    url: str | None = None
    public_url: str | None = None
    icon: Icon | None = None
    cover: Icon | None = None
    created_time: str | None = None
    last_edited_time: str | None = None
    created_by: UserRef | None = None
    last_edited_by: UserRef | None = None
    archived: bool = False
    in_trash: bool = False

    @property
    def title(self) -> str:
        """Plain text of the title property, ``""`` if none is present."""
        for value in self.properties.values():
            if isinstance(value, TitleValue) and value.type == "title":
                return value.plain_text
        return ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Page:
        raw_props: dict[str, Any] = data.get("properties") or {}
        return cls(
            id=data.get("id", ""),
            parent=_parent(data),
            properties={name: value_from_dict(raw) for name, raw in raw_props.items()},
            property_ids={name: raw.get("id", "") for name, raw in raw_props.items()},
            url=data.get("url"),
            public_url=data.get("public_url"),
            icon=icon_from_dict(data.get("icon")),
            cover=icon_from_dict(data.get("cover")),
            created_time=data.get("created_time"),
            last_edited_time=data.get("last_edited_time"),
            created_by=UserRef.from_dict(data.get("created_by")),
            last_edited_by=UserRef.from_dict(data.get("last_edited_by")),
            archived=bool(data.get("archived", False)),
            in_trash=bool(data.get("in_trash", False)),
        )


# ---------------------------------------------------------------------------
# Databases and data sources
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DataSourceRef:
    id: str
    name: str = ""


@dataclass(frozen=True)
class Database:
    """A database container.  Its columns live on its data sources."""

    id: str
    title: list[RichText] = field(default_factory=list)
    description: list[RichText] = field(default_factory=list)
    parent: Parent | None = None
    data_sources: list[DataSourceRef] = field(default_factory=list)
    icon: Icon | None = None
    cover: Icon | None = None
    is_inline: bool = False
    url: str | None = None
    public_url: str | None = None
    created_time: str | None = None
    last_edited_time: str | None = None
    archived: bool = False
    in_trash: bool = False

    @property
    def plain_title(self) -> str:
        return plain_text(self.title)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Database:
        return cls(
            id=data.get("id", ""),
            title=rich_text_list_from_dict(data.get("title")),
            description=rich_text_list_from_dict(data.get("description")),
            parent=_parent(data),
            data_sources=[
                DataSourceRef(ds.get("id", ""), ds.get("name", ""))
                for ds in data.get("data_sources") or []
            ],
            icon=icon_from_dict(data.get("icon")),
            cover=icon_from_dict(data.get("cover")),
            is_inline=bool(data.get("is_inline", False)),
            url=data.get("url"),
            public_url=data.get("public_url"),
            created_time=data.get("created_time"),
            last_edited_time=data.get("last_edited_time"),
            archived=bool(data.get("archived", False)),
            in_trash=bool(data.get("in_trash", False)),
        )


@dataclass(frozen=True)
class DataSource:
    """A table of pages sharing one property schema."""

    id: str
    title: list[RichText] = field(default_factory=list)
    description: list[RichText] = field(default_factory=list)
    parent: Parent | None = None
    database_parent: Parent | None = None
    properties: dict[str, PropertyDefinition] = field(default_factory=dict)
    icon: Icon | None = None
    url: str | None = None
    created_time: str | None = None
    last_edited_time: str | None = None
    archived: bool = False
    in_trash: bool = False

    @property
    def plain_title(self) -> str:
        return plain_text(self.title)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DataSource:
        raw_props: dict[str, Any] = data.get("properties") or {}
        database_parent = None
        if data.get("database_parent"):
            try:
                database_parent = parent_from_dict(data["database_parent"])
            except ValueError:
                database_parent = None
        return cls(
            id=data.get("id", ""),
            title=rich_text_list_from_dict(data.get("title")),
            description=rich_text_list_from_dict(data.get("description")),
            parent=_parent(data),
            database_parent=database_parent,
            properties={
                name: PropertyDefinition.from_dict(name, raw) for name, raw in raw_props.items()
            },
            icon=icon_from_dict(data.get("icon")),
            url=data.get("url"),
            created_time=data.get("created_time"),
            last_edited_time=data.get("last_edited_time"),
            archived=bool(data.get("archived", False)),
            in_trash=bool(data.get("in_trash", False)),
        )


@dataclass(frozen=True)
class Template:
    id: str
    name: str = ""
    is_default: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Template:
        return cls(data.get("id", ""), data.get("name", ""), bool(data.get("is_default", False)))


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CommentAttachment:
    category: str | None = None
    url: str | None = None
    expiry_time: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CommentAttachment:
        file = data.get("file") or {}
        return cls(data.get("category"), file.get("url"), file.get("expiry_time"))


@dataclass(frozen=True)
class Comment:
    id: str
    discussion_id: str = ""
    parent: Parent | None = None
    rich_text: list[RichText] = field(default_factory=list)
    attachments: list[CommentAttachment] = field(default_factory=list)
    display_name: str | None = None
    created_time: str | None = None
    last_edited_time: str | None = None
    created_by: UserRef | None = None

    @property
    def text(self) -> str:
        return plain_text(self.rich_text)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Comment:
        display = data.get("display_name") or {}
        return cls(
            id=data.get("id", ""),
            discussion_id=data.get("discussion_id", ""),
            parent=_parent(data),
            rich_text=rich_text_list_from_dict(data.get("rich_text")),
            attachments=[CommentAttachment.from_dict(a) for a in data.get("attachments") or []],
            display_name=display.get("resolved_name"),
            created_time=data.get("created_time"),
            last_edited_time=data.get("last_edited_time"),
            created_by=UserRef.from_dict(data.get("created_by")),
        )


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class User:
    """A person or a bot.  ``email`` is only present for people."""

    id: str
    type: str | None = None
    name: str | None = None
    avatar_url: str | None = None
    email: str | None = None
    workspace_name: str | None = None

    @property
    def is_bot(self) -> bool:
        return self.type == "bot"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        person = data.get("person") or {}
        bot = data.get("bot") or {}
        return cls(
            id=data.get("id", ""),
            type=data.get("type"),
            name=data.get("name"),
            avatar_url=data.get("avatar_url"),
            email=person.get("email"),
            workspace_name=bot.get("workspace_name"),
        )


# ---------------------------------------------------------------------------
# File uploads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FileUpload:
    """State of one upload.  ``status`` is pending, uploaded, expired or failed."""

    id: str
    status: str = "pending"
    filename: str | None = None
    content_type: str | None = None
    content_length: int | None = None
    upload_url: str | None = None
    complete_url: str | None = None
    expiry_time: str | None = None
    created_time: str | None = None
    total_parts: int | None = None
    sent_parts: int | None = None

    @property
    def is_uploaded(self) -> bool:
        return self.status == "uploaded"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileUpload:
        parts = data.get("number_of_parts") or {}
        return cls(
            id=data.get("id", ""),
            status=data.get("status", "pending"),
            filename=data.get("filename"),
            content_type=data.get("content_type"),
            content_length=data.get("content_length"),
            upload_url=data.get("upload_url"),
            complete_url=data.get("complete_url"),
            expiry_time=data.get("expiry_time"),
            created_time=data.get("created_time"),
            total_parts=parts.get("total"),
            sent_parts=parts.get("sent"),
        )


# ---------------------------------------------------------------------------
# Dispatch and pagination
# ---------------------------------------------------------------------------

_OBJECT_DECODERS: dict[str, Callable[[dict[str, Any]], Any]] = {
    "page": Page.from_dict,
    "database": Database.from_dict,
    "data_source": DataSource.from_dict,
    "block": Block.from_dict,
    "comment": Comment.from_dict,
    "user": User.from_dict,
    "file_upload": FileUpload.from_dict,
}


def object_from_dict(data: dict[str, Any]) -> Any:
    """Decode any top-level object by its ``object`` tag.

    Objects of unknown kind are returned as the raw ``dict``.
    """
    decoder = _OBJECT_DECODERS.get(data.get("object", ""))
    return decoder(data) if decoder is not None else data


@dataclass(frozen=True)
class PaginatedList(Generic[T]):
    """One page of a list endpoint."""

    results: list[T] = field(default_factory=list)
    has_more: bool = False
    next_cursor: str | None = None

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        decoder: Callable[[dict[str, Any]], T] | None = None,
    ) -> PaginatedList[T]:
        raw = data.get("results") or []
        results = [decoder(item) for item in raw] if decoder is not None else list(raw)
        return cls(
            results=results,
            has_more=bool(data.get("has_more", False)),
            next_cursor=data.get("next_cursor"),
        )
