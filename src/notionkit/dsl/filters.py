"""Filter-expression builder.

Usage::

    from notionkit.dsl import build_filter

    expr = build_filter(lambda f: f.and_(
        f.title("Name").contains("launch"),
        f.or_(
            f.select("Stage").equals("Done"),
            f.checkbox("Shipped").equals(True),
        ),
    ))

Every property accessor returns a condition object that exposes only the
comparators valid for that property type, so ``f.checkbox("x").contains``
fails with ``AttributeError`` instead of producing a filter the server
would reject.  Each comparator returns an immutable leaf expression.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import tzinfo
from typing import Any

from notionkit.models.base import DateLike, format_instant
from notionkit.models.filters import (
    CompoundFilter,
    FilterExpression,
    PropertyFilter,
    Timestamp,
    TimestampFilter,
)

_EXPRESSION_TYPES = (PropertyFilter, TimestampFilter, CompoundFilter)

# ---------------------------------------------------------------------------
# Comparator families
# ---------------------------------------------------------------------------

class _Condition:
    """Base for all condition objects; knows how to emit one leaf."""

    def __init__(self, property_name: str, property_type: str) -> None:
        self._property = property_name
        self._type = property_type

    def _leaf(self, comparator: str, value: Any) -> FilterExpression:
        return PropertyFilter(self._property, self._type, {comparator: value})

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._property!r})"


class _Equality(_Condition):
    def equals(self, value: Any) -> FilterExpression:
        return self._leaf("equals", value)

    def does_not_equal(self, value: Any) -> FilterExpression:
        return self._leaf("does_not_equal", value)


class _Emptiness(_Condition):
    def is_empty(self) -> FilterExpression:
        return self._leaf("is_empty", True)

    def is_not_empty(self) -> FilterExpression:
        return self._leaf("is_not_empty", True)


class _Containment(_Condition):
    def contains(self, value: str) -> FilterExpression:
        return self._leaf("contains", value)

    def does_not_contain(self, value: str) -> FilterExpression:
        return self._leaf("does_not_contain", value)


class _Ordering(_Condition):
    def greater_than(self, value: float) -> FilterExpression:
        return self._leaf("greater_than", value)

    def less_than(self, value: float) -> FilterExpression:
        return self._leaf("less_than", value)

    def greater_than_or_equal_to(self, value: float) -> FilterExpression:
        return self._leaf("greater_than_or_equal_to", value)

    def less_than_or_equal_to(self, value: float) -> FilterExpression:
        return self._leaf("less_than_or_equal_to", value)


# ---------------------------------------------------------------------------
# Per-type conditions
# ---------------------------------------------------------------------------

class TextCondition(_Equality, _Containment, _Emptiness):
    """title, rich_text, url, email and phone_number."""

    def starts_with(self, value: str) -> FilterExpression:
        return self._leaf("starts_with", value)

    def ends_with(self, value: str) -> FilterExpression:
        return self._leaf("ends_with", value)


class NumberCondition(_Equality, _Ordering, _Emptiness):
    pass


class CheckboxCondition(_Condition):
    def equals(self, value: bool) -> FilterExpression:
        return self._leaf("equals", bool(value))

    def does_not_equal(self, value: bool) -> FilterExpression:
        return self._leaf("does_not_equal", bool(value))


class SelectCondition(_Equality, _Emptiness):
    """select and status."""


class MultiSelectCondition(_Containment, _Emptiness):
    pass


class PeopleCondition(_Containment, _Emptiness):
    """people, created_by, last_edited_by and relation (ids, not names)."""


class FilesCondition(_Emptiness):
    pass


class UniqueIdCondition(_Equality, _Ordering):
    pass


class _DateComparators(_Condition):
    """Date comparators.

    Values may be ISO strings, ``date`` or ``datetime`` objects; they are
    normalised with :func:`~notionkit.models.base.format_instant`.  Naive
    datetimes are read in *tz* (UTC when omitted).
    """

    def __init__(
        self,
        property_name: str,
        property_type: str = "date",
        tz: tzinfo | str | None = None,
    ) -> None:
        super().__init__(property_name, property_type)
        self._tz = tz

    def _at(self, comparator: str, value: DateLike) -> FilterExpression:
        return self._leaf(comparator, format_instant(value, self._tz))

    def equals(self, value: DateLike) -> FilterExpression:
        return self._at("equals", value)

    def before(self, value: DateLike) -> FilterExpression:
        return self._at("before", value)

    def after(self, value: DateLike) -> FilterExpression:
        return self._at("after", value)

    def on_or_before(self, value: DateLike) -> FilterExpression:
        return self._at("on_or_before", value)

    def on_or_after(self, value: DateLike) -> FilterExpression:
        return self._at("on_or_after", value)

    # Relative windows take an empty object on the wire.
    def this_week(self) -> FilterExpression:
        return self._leaf("this_week", {})

    def past_week(self) -> FilterExpression:
        return self._leaf("past_week", {})

    def past_month(self) -> FilterExpression:
        return self._leaf("past_month", {})

    def past_year(self) -> FilterExpression:
        return self._leaf("past_year", {})

    def next_week(self) -> FilterExpression:
        return self._leaf("next_week", {})

    def next_month(self) -> FilterExpression:
        return self._leaf("next_month", {})

    def next_year(self) -> FilterExpression:
        return self._leaf("next_year", {})


class DateCondition(_DateComparators, _Emptiness):
    pass


class TimestampCondition(_DateComparators):
    """Date comparators on a page's own created/last-edited time."""

    def __init__(self, timestamp: Timestamp, tz: tzinfo | str | None = None) -> None:
        super().__init__(Timestamp(timestamp).value, Timestamp(timestamp).value, tz)
        self._timestamp = Timestamp(timestamp)

    def _leaf(self, comparator: str, value: Any) -> FilterExpression:
        return TimestampFilter(self._timestamp, {comparator: value})


# ---------------------------------------------------------------------------
# Builder scope
# ---------------------------------------------------------------------------

class FilterBuilder:
    """Entry points for every filterable property type plus ``and_``/``or_``."""

    # ── compound ────────────────────────────────────────────────────────
    def and_(self, *expressions: FilterExpression) -> CompoundFilter:
        return CompoundFilter("and", expressions)

    def or_(self, *expressions: FilterExpression) -> CompoundFilter:
        return CompoundFilter("or", expressions)

    # ── text-like ───────────────────────────────────────────────────────
    def title(self, name: str) -> TextCondition:
        return TextCondition(name, "title")

    def rich_text(self, name: str) -> TextCondition:
        return TextCondition(name, "rich_text")

    def url(self, name: str) -> TextCondition:
        return TextCondition(name, "url")

    def email(self, name: str) -> TextCondition:
        return TextCondition(name, "email")

    def phone_number(self, name: str) -> TextCondition:
        return TextCondition(name, "phone_number")

    # ── scalar ──────────────────────────────────────────────────────────
    def number(self, name: str) -> NumberCondition:
        return NumberCondition(name, "number")

    def checkbox(self, name: str) -> CheckboxCondition:
        return CheckboxCondition(name, "checkbox")

    def unique_id(self, name: str) -> UniqueIdCondition:
        return UniqueIdCondition(name, "unique_id")

    # ── options ─────────────────────────────────────────────────────────
    def select(self, name: str) -> SelectCondition:
        return SelectCondition(name, "select")

    def status(self, name: str) -> SelectCondition:
        return SelectCondition(name, "status")

    def multi_select(self, name: str) -> MultiSelectCondition:
        return MultiSelectCondition(name, "multi_select")

    # ── references ──────────────────────────────────────────────────────
    def people(self, name: str) -> PeopleCondition:
        return PeopleCondition(name, "people")

    def created_by(self, name: str) -> PeopleCondition:
        return PeopleCondition(name, "created_by")

    def last_edited_by(self, name: str) -> PeopleCondition:
        return PeopleCondition(name, "last_edited_by")

    def relation(self, name: str) -> PeopleCondition:
        return PeopleCondition(name, "relation")

    def files(self, name: str) -> FilesCondition:
        return FilesCondition(name, "files")

    # ── dates ───────────────────────────────────────────────────────────
    def date(self, name: str, tz: tzinfo | str | None = None) -> DateCondition:
        return DateCondition(name, "date", tz)

    def created_time(self, tz: tzinfo | str | None = None) -> TimestampCondition:
        return TimestampCondition(Timestamp.CREATED_TIME, tz)

    def last_edited_time(self, tz: tzinfo | str | None = None) -> TimestampCondition:
        return TimestampCondition(Timestamp.LAST_EDITED_TIME, tz)


def build_filter(fn: Callable[[FilterBuilder], object]) -> FilterExpression:
    """Run *fn* against a :class:`FilterBuilder` and return its expression.

    Raises
    ------
    TypeError
        If *fn* does not return exactly one filter expression (for
        example ``None`` or a tuple of expressions).
    """
    result = fn(FilterBuilder())
    if not isinstance(result, _EXPRESSION_TYPES):
        raise TypeError(
            "filter scope must return exactly one filter expression, "
            f"got {type(result).__name__}"
        )
    return result
