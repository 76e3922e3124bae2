"""Filter expressions and sort specifications for data source queries.

A filter is a tree: :class:`PropertyFilter` and :class:`TimestampFilter`
leaves combined by :class:`CompoundFilter` nodes (``and`` / ``or``) to any
depth.  Trees are built bottom-up and never mutated, so cycles cannot
occur.  ``to_dict()`` yields the nested JSON accepted by the query
endpoint.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class Timestamp(str, Enum):
    CREATED_TIME = "created_time"
    LAST_EDITED_TIME = "last_edited_time"


@dataclass(frozen=True)
class PropertyFilter:
    """``{"property": name, property_type: {comparator: value}}``."""

    property: str
    property_type: str
    condition: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "condition", dict(self.condition))

    def to_dict(self) -> dict[str, Any]:
        return {"property": self.property, self.property_type: dict(self.condition)}


@dataclass(frozen=True)
class TimestampFilter:
    """``{"timestamp": ts, ts: {comparator: value}}``."""

    timestamp: Timestamp
    condition: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", Timestamp(self.timestamp))
        object.__setattr__(self, "condition", dict(self.condition))

    def to_dict(self) -> dict[str, Any]:
        ts = self.timestamp.value
        return {"timestamp": ts, ts: dict(self.condition)}


@dataclass(frozen=True)
class CompoundFilter:
    """``{"and": [...]}`` or ``{"or": [...]}``."""

    operator: str
    filters: Sequence[FilterExpression]

    def __post_init__(self) -> None:
        if self.operator not in ("and", "or"):
            raise ValueError(f"Compound operator must be 'and' or 'or', got {self.operator!r}")
        object.__setattr__(self, "filters", tuple(self.filters))

    def to_dict(self) -> dict[str, Any]:
        return {self.operator: [f.to_dict() for f in self.filters]}


FilterExpression = Union[PropertyFilter, TimestampFilter, CompoundFilter]


def filter_depth(expr: FilterExpression) -> int:
    """Nesting depth of compound operators (a bare leaf has depth 0)."""
    if isinstance(expr, CompoundFilter):
        return 1 + max((filter_depth(f) for f in expr.filters), default=0)
    return 0


@dataclass(frozen=True)
class PropertySort:
    property: str
    direction: SortDirection = SortDirection.ASCENDING

    def to_dict(self) -> dict[str, Any]:
        return {"property": self.property, "direction": SortDirection(self.direction).value}


@dataclass(frozen=True)
class TimestampSort:
    timestamp: Timestamp
    direction: SortDirection = SortDirection.ASCENDING

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": Timestamp(self.timestamp).value,
            "direction": SortDirection(self.direction).value,
        }


Sort = Union[PropertySort, TimestampSort]
