"""Small value types shared by every Notion object.

Everything here is a frozen dataclass with a ``to_dict()`` producing the
wire JSON and, where the type also appears in responses, a ``*_from_dict``
decoder that ignores unknown keys.

Closed unions (``Parent``, ``FileSource``, ``Icon``) are plain ``Union``
aliases over their variants plus a dispatch table keyed by the wire tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from enum import Enum
from typing import Any, Union
from zoneinfo import ZoneInfo

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def drop_none(payload: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *payload* without keys whose value is ``None``."""
    return {k: v for k, v in payload.items() if v is not None}


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------

class Color(str, Enum):
    """Text and block colors, foreground and background."""

    DEFAULT = "default"
    GRAY = "gray"
    BROWN = "brown"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"
    RED = "red"
    GRAY_BACKGROUND = "gray_background"
    BROWN_BACKGROUND = "brown_background"
    ORANGE_BACKGROUND = "orange_background"
    YELLOW_BACKGROUND = "yellow_background"
    GREEN_BACKGROUND = "green_background"
    BLUE_BACKGROUND = "blue_background"
    PURPLE_BACKGROUND = "purple_background"
    PINK_BACKGROUND = "pink_background"
    RED_BACKGROUND = "red_background"

    @property
    def is_background(self) -> bool:
        return self.value.endswith("_background")

    def as_background(self) -> Color:
        """Return the background variant of a foreground color."""
        if self is Color.DEFAULT or self.is_background:
            return self
        return Color(f"{self.value}_background")


def color_from_wire(value: str | None) -> Color:
    """Decode a color, falling back to ``DEFAULT`` for unknown values."""
    if not value:
        return Color.DEFAULT
    try:
        return Color(value)
    except ValueError:
        return Color.DEFAULT


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

DateLike = Union[str, date, datetime]


def _resolve_tz(tz: tzinfo | str | None) -> tzinfo:
    if tz is None:
        return timezone.utc
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def _parse_iso(value: str) -> date | datetime | None:
    text = value.strip()
    if not any(sep in text for sep in ("T", "t", " ")):
        # Calendar date only; basic format YYYYMMDD is widened first.
        if len(text) == 8 and text.isdigit():
            text = f"{text[:4]}-{text[4:6]}-{text[6:]}"
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_instant(value: DateLike, tz: tzinfo | str | None = None) -> str:
    """Normalise a date or point in time to the wire format used by filters.

    * ``date`` values and date-only strings (``YYYY-MM-DD`` or
      ``YYYYMMDD``) become ``YYYY-MM-DD``.
    * Datetimes (objects or ISO-8601 strings) are converted to UTC and
      rendered as ``YYYY-MM-DDTHH:MM:SS[.mmm]Z``.
    * Naive datetimes are interpreted in *tz* (a ``tzinfo`` or an IANA
      name), defaulting to UTC.

    Strings that are not valid ISO-8601 are passed through unchanged so the
    server can report them.
    """
    parsed: date | datetime | None
    if isinstance(value, str):
        parsed = _parse_iso(value)
        if parsed is None:
            return value
    else:
        parsed = value

    if not isinstance(parsed, datetime):
        return parsed.isoformat()

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=_resolve_tz(tz))
    parsed = parsed.astimezone(timezone.utc)
    spec = "milliseconds" if parsed.microsecond else "seconds"
    return parsed.replace(tzinfo=None).isoformat(timespec=spec) + "Z"


def format_date(value: DateLike, time_zone: str | None = None) -> str:
    """Render a page date value.

    Unlike :func:`format_instant` the local wall-clock time is preserved.
    When *time_zone* is given Notion expects the datetime without an
    offset, so aware datetimes are converted into that zone first.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, datetime):
        if time_zone is not None and value.tzinfo is not None:
            value = value.astimezone(ZoneInfo(time_zone)).replace(tzinfo=None)
        return value.isoformat()
    return value.isoformat()


@dataclass(frozen=True)
class DateRange:
    """A date, datetime or range, optionally pinned to an IANA time zone."""

    start: DateLike
    end: DateLike | None = None
    time_zone: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "start": format_date(self.start, self.time_zone),
            "end": format_date(self.end, self.time_zone) if self.end is not None else None,
        }
        if self.time_zone is not None:
            payload["time_zone"] = self.time_zone
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DateRange:
        return cls(
            start=data.get("start", ""),
            end=data.get("end"),
            time_zone=data.get("time_zone"),
        )

    @property
    def display(self) -> str:
        start = format_date(self.start, self.time_zone)
        if self.end is None:
            return start
        return f"{start} → {format_date(self.end, self.time_zone)}"


# ---------------------------------------------------------------------------
# Parents
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PageParent:
    page_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "page_id", "page_id": self.page_id}


@dataclass(frozen=True)
class DatabaseParent:
    database_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "database_id", "database_id": self.database_id}


@dataclass(frozen=True)
class DataSourceParent:
    data_source_id: str
    # Only reported by the server.
    database_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none({
            "type": "data_source_id",
            "data_source_id": self.data_source_id,
            "database_id": self.database_id,
        })


@dataclass(frozen=True)
class BlockParent:
    block_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "block_id", "block_id": self.block_id}


@dataclass(frozen=True)
class WorkspaceParent:
    def to_dict(self) -> dict[str, Any]:
        return {"type": "workspace", "workspace": True}


Parent = Union[PageParent, DatabaseParent, DataSourceParent, BlockParent, WorkspaceParent]


def parent_from_dict(data: dict[str, Any]) -> Parent:
    """Decode a parent object.  Raises ``ValueError`` for unknown tags."""
    kind = data.get("type")
    if kind == "page_id":
        return PageParent(data["page_id"])
    if kind == "database_id":
        return DatabaseParent(data["database_id"])
    if kind == "data_source_id":
        return DataSourceParent(data["data_source_id"], data.get("database_id"))
    if kind == "block_id":
        return BlockParent(data["block_id"])
    if kind == "workspace":
        return WorkspaceParent()
    raise ValueError(f"Unknown parent type: {kind!r}")


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExternalFile:
    """A file hosted outside Notion."""

    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "external", "external": {"url": self.url}}


@dataclass(frozen=True)
class FileUploadFile:
    """A file previously sent through the file-upload API."""

    file_upload_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "file_upload", "file_upload": {"id": self.file_upload_id}}


@dataclass(frozen=True)
class HostedFile:
    """A Notion-hosted file.  The URL is signed and expires."""

    url: str
    expiry_time: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"type": "file", "file": drop_none({"url": self.url, "expiry_time": self.expiry_time})}


FileSource = Union[ExternalFile, FileUploadFile, HostedFile]


def file_source_from_dict(data: dict[str, Any]) -> FileSource:
    kind = data.get("type")
    if kind == "external":
        return ExternalFile(data.get("external", {}).get("url", ""))
    if kind == "file_upload":
        return FileUploadFile(data.get("file_upload", {}).get("id", ""))
    if kind == "file":
        inner = data.get("file", {})
        return HostedFile(inner.get("url", ""), inner.get("expiry_time"))
    raise ValueError(f"Unknown file type: {kind!r}")


# ---------------------------------------------------------------------------
# Icons
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EmojiIcon:
    emoji: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "emoji", "emoji": self.emoji}


Icon = Union[EmojiIcon, ExternalFile, FileUploadFile, HostedFile]


def icon_from_dict(data: dict[str, Any] | None) -> Icon | None:
    if not data:
        return None
    if data.get("type") == "emoji":
        return EmojiIcon(data.get("emoji", ""))
    try:
        return file_source_from_dict(data)
    except ValueError:
        return None


def coerce_icon(icon: Icon | str | None) -> Icon | None:
    """Accept a bare emoji string as shorthand for :class:`EmojiIcon`."""
    if isinstance(icon, str):
        return EmojiIcon(icon)
    return icon


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UserRef:
    """A user reference as embedded in other objects."""

    id: str
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"object": "user", "id": self.id}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> UserRef | None:
        if not data or "id" not in data:
            return None
        return cls(id=data["id"], name=data.get("name"))
