"""Rich-text runs: styled text, mentions and inline equations.

A rich-text value is an ordered ``list`` of runs.  Each run is one of
:class:`TextRun`, :class:`MentionRun` or :class:`EquationRun`; all three
are frozen and carry their own :class:`Annotations`.

``plain_text`` is always derived.  For text it is the content, for
equations the expression, and for mentions a label computed from the
mentioned entity.  When decoding a server response the server's own
``plain_text`` is kept for mentions, since only the server knows user
names and page titles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from .base import Color, DateRange, color_from_wire

# ---------------------------------------------------------------------------
# Annotations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Annotations:
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: Color = Color.DEFAULT

    def to_dict(self) -> dict[str, Any]:
        return {
            "bold": self.bold,
            "italic": self.italic,
            "strikethrough": self.strikethrough,
            "underline": self.underline,
            "code": self.code,
            "color": Color(self.color).value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Annotations:
        if not data:
            return PLAIN
        return cls(
            bold=bool(data.get("bold", False)),
            italic=bool(data.get("italic", False)),
            strikethrough=bool(data.get("strikethrough", False)),
            underline=bool(data.get("underline", False)),
            code=bool(data.get("code", False)),
            color=color_from_wire(data.get("color")),
        )


PLAIN = Annotations()


# ---------------------------------------------------------------------------
# Mentions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UserMention:
    user_id: str
    type: ClassVar[str] = "user"

    def payload(self) -> dict[str, Any]:
        return {"object": "user", "id": self.user_id}

    def label(self) -> str:
        return "@Unknown User"


@dataclass(frozen=True)
class PageMention:
    page_id: str
    type: ClassVar[str] = "page"

    def payload(self) -> dict[str, Any]:
        return {"id": self.page_id}

    def label(self) -> str:
        return "Untitled"


@dataclass(frozen=True)
class DatabaseMention:
    database_id: str
    type: ClassVar[str] = "database"

    def payload(self) -> dict[str, Any]:
        return {"id": self.database_id}

    def label(self) -> str:
        return "Untitled"


@dataclass(frozen=True)
class DateMention:
    date: DateRange
    type: ClassVar[str] = "date"

    def payload(self) -> dict[str, Any]:
        return self.date.to_dict()

    def label(self) -> str:
        return self.date.display


@dataclass(frozen=True)
class LinkPreviewMention:
    url: str
    type: ClassVar[str] = "link_preview"

    def payload(self) -> dict[str, Any]:
        return {"url": self.url}

    def label(self) -> str:
        return self.url


Mention = Union[UserMention, PageMention, DatabaseMention, DateMention, LinkPreviewMention]


def mention_from_dict(data: dict[str, Any]) -> Mention | None:
    """Decode a mention payload, ``None`` for kinds this library does not model."""
    kind = data.get("type")
    inner = data.get(kind, {}) if isinstance(kind, str) else {}
    if kind == "user":
        return UserMention(inner.get("id", ""))
    if kind == "page":
        return PageMention(inner.get("id", ""))
    if kind == "database":
        return DatabaseMention(inner.get("id", ""))
    if kind == "date":
        return DateMention(DateRange.from_dict(inner))
    if kind == "link_preview":
        return LinkPreviewMention(inner.get("url", ""))
    return None


# ---------------------------------------------------------------------------
# Runs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextRun:
    """A span of literal text, optionally linked."""

    content: str
    link: str | None = None
    annotations: Annotations = PLAIN
    type: ClassVar[str] = "text"

    @property
    def plain_text(self) -> str:
        return self.content

    @property
    def href(self) -> str | None:
        return self.link

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "text",
            "text": {
                "content": self.content,
                "link": {"url": self.link} if self.link is not None else None,
            },
            "annotations": self.annotations.to_dict(),
        }


@dataclass(frozen=True)
class MentionRun:
    """An inline reference to a user, page, database, date or URL."""

    mention: Mention
    annotations: Annotations = PLAIN
    href: str | None = None
    # Server-provided display text; only set when decoding responses.
    _server_text: str | None = field(default=None, repr=False, compare=False)
    type: ClassVar[str] = "mention"

    @property
    def plain_text(self) -> str:
        if self._server_text is not None:
            return self._server_text
        return self.mention.label()

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "mention",
            "mention": {"type": self.mention.type, self.mention.type: self.mention.payload()},
            "annotations": self.annotations.to_dict(),
        }


@dataclass(frozen=True)
class EquationRun:
    """An inline KaTeX expression."""

    expression: str
    annotations: Annotations = PLAIN
    type: ClassVar[str] = "equation"

    @property
    def plain_text(self) -> str:
        return self.expression

    @property
    def href(self) -> str | None:
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "equation",
            "equation": {"expression": self.expression},
            "annotations": self.annotations.to_dict(),
        }


RichText = Union[TextRun, MentionRun, EquationRun]


def rich_text_from_dict(data: dict[str, Any]) -> RichText:
    """Decode one rich-text object from the API.

    Unknown run or mention types degrade to a :class:`TextRun` holding the
    server's ``plain_text`` so nothing is silently dropped.
    """
    annotations = Annotations.from_dict(data.get("annotations"))
    kind = data.get("type")

    if kind == "text":
        text = data.get("text") or {}
        link = text.get("link") or {}
        return TextRun(
            content=text.get("content", ""),
            link=link.get("url"),
            annotations=annotations,
        )
    if kind == "equation":
        return EquationRun(
            expression=(data.get("equation") or {}).get("expression", ""),
            annotations=annotations,
        )
    if kind == "mention":
        mention = mention_from_dict(data.get("mention") or {})
        if mention is not None:
            return MentionRun(
                mention=mention,
                annotations=annotations,
                href=data.get("href"),
                _server_text=data.get("plain_text"),
            )

    return TextRun(
        content=data.get("plain_text", ""),
        link=data.get("href"),
        annotations=annotations,
    )


def rich_text_list_from_dict(items: list[dict[str, Any]] | None) -> list[RichText]:
    return [rich_text_from_dict(item) for item in items or []]


def rich_text_to_list(runs: list[RichText]) -> list[dict[str, Any]]:
    return [run.to_dict() for run in runs]


def plain_text(runs: list[RichText]) -> str:
    """Concatenate the display text of *runs*."""
    return "".join(run.plain_text for run in runs)
