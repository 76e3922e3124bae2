"""Pre-flight checks against the Notion API's documented size limits.

Every function here is pure and synchronous.  On a violation it raises
:class:`~notionkit.errors.NotionkitValidationError` whose message names
the limit and the observed value and whose ``context`` carries
``field``, ``limit`` and ``value``.  A request that fails here is never
sent.

The rich-text limit applies to each run separately, not to the sum of a
rich-text array.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, NoReturn

from notionkit.errors import NotionkitValidationError
from notionkit.models.base import ExternalFile
from notionkit.models.blocks import (
    BlockRequest,
    BookmarkContent,
    EmbedContent,
    EquationContent,
    MediaContent,
    TableRowContent,
)
from notionkit.models.filters import FilterExpression, filter_depth
from notionkit.models.properties import (
    EmailValue,
    FilesValue,
    MultiSelectSchema,
    MultiSelectValue,
    PeopleValue,
    PhoneNumberValue,
    PropertySchema,
    PropertyValue,
    RelationValue,
    SelectSchema,
    StatusSchema,
    TitleValue,
    UrlValue,
)
from notionkit.models.rich_text import EquationRun, LinkPreviewMention, MentionRun, RichText, TextRun

MAX_RICH_TEXT_LENGTH = 2000
MAX_URL_LENGTH = 2000
MAX_EQUATION_LENGTH = 1000
MAX_EMAIL_LENGTH = 200
MAX_PHONE_LENGTH = 200
MAX_BLOCKS_PER_REQUEST = 100
MAX_SELECT_OPTIONS = 100
MAX_ARRAY_ELEMENTS = 100
MAX_COMMENT_ATTACHMENTS = 3
MAX_PAGE_SIZE = 100
MAX_FILTER_DEPTH = 2
MAX_UPLOAD_BYTES = 500 * 1024 * 1024
MAX_UPLOAD_PARTS = 1000


def _fail(message: str, field: str, limit: int, value: Any) -> NoReturn:
    raise NotionkitValidationError(
        message=message,
        context={"field": field, "limit": limit, "value": value},
    )


def _check_length(text: str | None, limit: int, field: str, what: str) -> None:
    if text is not None and len(text) > limit:
        _fail(
            f"{field}: {what} is {len(text)} characters long, exceeding the limit of {limit}",
            field,
            limit,
            len(text),
        )


def _check_count(items: Sequence[Any] | int, limit: int, field: str, what: str) -> None:
    count = items if isinstance(items, int) else len(items)
    if count > limit:
        _fail(
            f"{field}: {count} {what} exceed the limit of {limit}",
            field,
            limit,
            count,
        )


# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------

def validate_rich_text(runs: Iterable[RichText], field: str = "rich_text") -> None:
    """Check each run's content, link and equation lengths."""
    for index, run in enumerate(runs):
        where = f"{field}[{index}]"
        if isinstance(run, TextRun):
            _check_length(run.content, MAX_RICH_TEXT_LENGTH, where, "rich text content")
            _check_length(run.link, MAX_URL_LENGTH, where, "link URL")
        elif isinstance(run, EquationRun):
            _check_length(run.expression, MAX_EQUATION_LENGTH, where, "equation expression")
        elif isinstance(run, MentionRun) and isinstance(run.mention, LinkPreviewMention):
            _check_length(run.mention.url, MAX_URL_LENGTH, where, "link preview URL")


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

def validate_block(block: BlockRequest, field: str = "block") -> None:
    """Check one block's content and, recursively, its children."""
    content = block.content
    for attr in ("rich_text", "caption"):
        runs = getattr(content, attr, None)
        if runs:
            validate_rich_text(runs, f"{field}.{attr}")
    if isinstance(content, TableRowContent):
        for index, cell in enumerate(content.cells):
            validate_rich_text(cell, f"{field}.cells[{index}]")
    if isinstance(content, EquationContent):
        _check_length(content.expression, MAX_EQUATION_LENGTH, field, "equation expression")
    if isinstance(content, (BookmarkContent, EmbedContent)):
        _check_length(content.url, MAX_URL_LENGTH, field, "URL")
    if isinstance(content, MediaContent) and isinstance(content.source, ExternalFile):
        _check_length(content.source.url, MAX_URL_LENGTH, field, "file URL")
    if block.children:
        validate_blocks(block.children, f"{field}.children")


def validate_blocks(blocks: Sequence[BlockRequest], field: str = "children") -> None:
    """Check the per-request block count and every block in the tree."""
    _check_count(blocks, MAX_BLOCKS_PER_REQUEST, field, "blocks")
    for index, block in enumerate(blocks):
        validate_block(block, f"{field}[{index}]")


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

def validate_schemas(schemas: Mapping[str, PropertySchema | None], field: str = "properties") -> None:
    """Check option counts and option-name uniqueness of select-like columns."""
    for name, schema in schemas.items():
        if not isinstance(schema, (SelectSchema, MultiSelectSchema, StatusSchema)):
            continue
        where = f"{field}.{name}"
        _check_count(schema.options, MAX_SELECT_OPTIONS, where, "options")
        seen: set[str] = set()
        for option in schema.options:
            if option.name is None:
                continue
            if option.name in seen:
                raise NotionkitValidationError(
                    message=f"{where}: option name {option.name!r} is not unique",
                    context={"field": where, "limit": None, "value": option.name},
                )
            seen.add(option.name)


def validate_property_values(
    values: Mapping[str, PropertyValue],
    field: str = "properties",
) -> None:
    """Check text lengths and array sizes of page property values."""
    for name, value in values.items():
        where = f"{field}.{name}"
        if isinstance(value, TitleValue):
            validate_rich_text(value.rich_text, where)
        elif isinstance(value, UrlValue):
            _check_length(value.url, MAX_URL_LENGTH, where, "URL")
        elif isinstance(value, EmailValue):
            _check_length(value.email, MAX_EMAIL_LENGTH, where, "email")
        elif isinstance(value, PhoneNumberValue):
            _check_length(value.phone_number, MAX_PHONE_LENGTH, where, "phone number")
        elif isinstance(value, MultiSelectValue):
            _check_count(value.options, MAX_ARRAY_ELEMENTS, where, "multi-select options")
        elif isinstance(value, RelationValue):
            _check_count(value.page_ids, MAX_ARRAY_ELEMENTS, where, "related pages")
        elif isinstance(value, PeopleValue):
            _check_count(value.people, MAX_ARRAY_ELEMENTS, where, "people")
        elif isinstance(value, FilesValue):
            _check_count(value.files, MAX_ARRAY_ELEMENTS, where, "files")
            for index, named in enumerate(value.files):
                if isinstance(named.source, ExternalFile):
                    _check_length(named.source.url, MAX_URL_LENGTH, f"{where}[{index}]", "file URL")


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------

def validate_array(items: Sequence[Any], field: str) -> None:
    """Generic request array cap (sorts, attachments of one value, ...)."""
    _check_count(items, MAX_ARRAY_ELEMENTS, field, "elements")


def validate_comment_attachments(attachments: Sequence[Any], field: str = "attachments") -> None:
    _check_count(attachments, MAX_COMMENT_ATTACHMENTS, field, "attachments")


def validate_upload_size(size: int, field: str = "file") -> None:
    if size > MAX_UPLOAD_BYTES:
        _fail(
            f"{field}: {size} bytes exceed the upload limit of {MAX_UPLOAD_BYTES} bytes",
            field,
            MAX_UPLOAD_BYTES,
            size,
        )


def validate_page_size(page_size: int, field: str = "page_size") -> None:
    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        _fail(
            f"{field}: {page_size} is outside the allowed range 1..{MAX_PAGE_SIZE}",
            field,
            MAX_PAGE_SIZE,
            page_size,
        )


def validate_filter(expr: FilterExpression, field: str = "filter") -> None:
    """Compound filters may nest at most two levels deep."""
    depth = filter_depth(expr)
    if depth > MAX_FILTER_DEPTH:
        _fail(
            f"{field}: compound filters nest {depth} levels deep, exceeding the limit of "
            f"{MAX_FILTER_DEPTH}",
            field,
            MAX_FILTER_DEPTH,
            depth,
        )
