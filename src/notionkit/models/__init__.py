"""Typed request and response models for the Notion API."""

from __future__ import annotations

from .base import (
    BlockParent,
    Color,
    DatabaseParent,
    DataSourceParent,
    DateRange,
    EmojiIcon,
    ExternalFile,
    FileSource,
    FileUploadFile,
    HostedFile,
    Icon,
    PageParent,
    Parent,
    UserRef,
    WorkspaceParent,
    format_date,
    format_instant,
    parent_from_dict,
)
from .blocks import (
    CONTAINER_TYPES,
    Block,
    BlockRequest,
    BlockType,
)
from .filters import (
    CompoundFilter,
    FilterExpression,
    PropertyFilter,
    PropertySort,
    Sort,
    SortDirection,
    Timestamp,
    TimestampFilter,
    TimestampSort,
)
from .objects import (
    Comment,
    Database,
    DataSource,
    FileUpload,
    Page,
    PaginatedList,
    Template,
    User,
    object_from_dict,
)
from .properties import (
    PropertyDefinition,
    PropertySchema,
    PropertyType,
    PropertyValue,
    SelectOption,
)
from .rich_text import (
    Annotations,
    EquationRun,
    MentionRun,
    RichText,
    TextRun,
)

__all__ = [
    "CONTAINER_TYPES",
    "Annotations",
    "Block",
    "BlockParent",
    "BlockRequest",
    "BlockType",
    "Color",
    "Comment",
    "CompoundFilter",
    "DataSource",
    "DataSourceParent",
    "Database",
    "DatabaseParent",
    "DateRange",
    "EmojiIcon",
    "EquationRun",
    "ExternalFile",
    "FileSource",
    "FileUpload",
    "FileUploadFile",
    "FilterExpression",
    "HostedFile",
    "Icon",
    "MentionRun",
    "Page",
    "PageParent",
    "PaginatedList",
    "Parent",
    "PropertyDefinition",
    "PropertyFilter",
    "PropertySchema",
    "PropertySort",
    "PropertyType",
    "PropertyValue",
    "RichText",
    "SelectOption",
    "Sort",
    "SortDirection",
    "Template",
    "TextRun",
    "Timestamp",
    "TimestampFilter",
    "TimestampSort",
    "User",
    "UserRef",
    "WorkspaceParent",
    "format_date",
    "format_instant",
    "object_from_dict",
    "parent_from_dict",
]
