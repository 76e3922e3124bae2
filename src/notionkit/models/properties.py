"""Database property schemas and page property values.

Two parallel closed unions keyed by :class:`PropertyType`:

* **Schemas** describe a column of a database / data source
  (``number`` with a format, ``select`` with its options, ``relation``
  with its target ...).  ``to_dict()`` yields ``{type: config}`` as used in
  create and update requests.
* **Values** hold what one page stores in a column.  ``to_dict()`` yields
  ``{type: value}`` as used in page create and update requests.  Variants
  computed by the server (formula, rollup, timestamps, authorship,
  unique id) are decoded from responses but have ``read_only = True``.

Types the library does not model decode to :class:`UnsupportedSchema` /
:class:`UnsupportedValue` with the raw payload kept.

Nothing here checks that a page's values match its parent's schema; the
server is the authority on that.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from .base import (
    Color,
    DateRange,
    FileSource,
    UserRef,
    color_from_wire,
    drop_none,
    file_source_from_dict,
)
from .rich_text import RichText, plain_text, rich_text_list_from_dict, rich_text_to_list


class PropertyType(str, Enum):
    TITLE = "title"
    RICH_TEXT = "rich_text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    STATUS = "status"
    DATE = "date"
    PEOPLE = "people"
    FILES = "files"
    CHECKBOX = "checkbox"
    URL = "url"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    FORMULA = "formula"
    RELATION = "relation"
    ROLLUP = "rollup"
    CREATED_TIME = "created_time"
    CREATED_BY = "created_by"
    LAST_EDITED_TIME = "last_edited_time"
    LAST_EDITED_BY = "last_edited_by"
    UNIQUE_ID = "unique_id"


class NumberFormat(str, Enum):
    NUMBER = "number"
    NUMBER_WITH_COMMAS = "number_with_commas"
    PERCENT = "percent"
    DOLLAR = "dollar"
    EURO = "euro"
    POUND = "pound"
    YEN = "yen"
    RUPEE = "rupee"
    WON = "won"
    YUAN = "yuan"


def _tuple(value: Any) -> tuple:
    return value if isinstance(value, tuple) else tuple(value)


# ---------------------------------------------------------------------------
# Select options
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SelectOption:
    """A named choice of a select, multi-select or status property.

    In value payloads an option is referenced by ``name`` (or ``id`` when
    no name is given).
    """

    name: str | None = None
    color: Color | None = None
    id: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none({
            "id": self.id,
            "name": self.name,
            "color": Color(self.color).value if self.color is not None else None,
            "description": self.description,
        })

    def ref(self) -> dict[str, Any]:
        if self.name is not None:
            return {"name": self.name}
        return {"id": self.id}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SelectOption:
        return cls(
            name=data.get("name"),
            color=color_from_wire(data["color"]) if data.get("color") else None,
            id=data.get("id"),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class StatusGroup:
    name: str
    color: Color | None = None
    option_ids: Sequence[str] = ()
    id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "option_ids", _tuple(self.option_ids))

    def to_dict(self) -> dict[str, Any]:
        return drop_none({
            "id": self.id,
            "name": self.name,
            "color": Color(self.color).value if self.color is not None else None,
            "option_ids": list(self.option_ids),
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusGroup:
        return cls(
            name=data.get("name", ""),
            color=color_from_wire(data["color"]) if data.get("color") else None,
            option_ids=tuple(data.get("option_ids", [])),
            id=data.get("id"),
        )


def _options(data: dict[str, Any]) -> tuple[SelectOption, ...]:
    return tuple(SelectOption.from_dict(o) for o in data.get("options", []))


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

# Types whose schema carries no configuration.
_PLAIN_SCHEMA_TYPES: frozenset[PropertyType] = frozenset({
    PropertyType.TITLE,
    PropertyType.RICH_TEXT,
    PropertyType.DATE,
    PropertyType.PEOPLE,
    PropertyType.FILES,
    PropertyType.CHECKBOX,
    PropertyType.URL,
    PropertyType.EMAIL,
    PropertyType.PHONE_NUMBER,
    PropertyType.CREATED_TIME,
    PropertyType.CREATED_BY,
    PropertyType.LAST_EDITED_TIME,
    PropertyType.LAST_EDITED_BY,
})


@dataclass(frozen=True)
class PlainSchema:
    """A column type without configuration (title, checkbox, url ...)."""

    type: PropertyType

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", PropertyType(self.type))
        if self.type not in _PLAIN_SCHEMA_TYPES:
            raise ValueError(f"{self.type.value} properties need a dedicated schema class")

    def to_dict(self) -> dict[str, Any]:
        return {self.type.value: {}}


@dataclass(frozen=True)
class NumberSchema:
    format: NumberFormat | str = NumberFormat.NUMBER
    type: ClassVar[PropertyType] = PropertyType.NUMBER

    def to_dict(self) -> dict[str, Any]:
        fmt = self.format.value if isinstance(self.format, NumberFormat) else self.format
        return {"number": {"format": fmt}}


@dataclass(frozen=True)
class SelectSchema:
    options: Sequence[SelectOption] = ()
    type: ClassVar[PropertyType] = PropertyType.SELECT

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _tuple(self.options))

    def to_dict(self) -> dict[str, Any]:
        return {self.type.value: {"options": [o.to_dict() for o in self.options]}}


@dataclass(frozen=True)
class MultiSelectSchema(SelectSchema):
    type: ClassVar[PropertyType] = PropertyType.MULTI_SELECT


@dataclass(frozen=True)
class StatusSchema:
    options: Sequence[SelectOption] = ()
    groups: Sequence[StatusGroup] = ()
    type: ClassVar[PropertyType] = PropertyType.STATUS

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _tuple(self.options))
        object.__setattr__(self, "groups", _tuple(self.groups))

    def to_dict(self) -> dict[str, Any]:
        config: dict[str, Any] = {}
        if self.options:
            config["options"] = [o.to_dict() for o in self.options]
        if self.groups:
            config["groups"] = [g.to_dict() for g in self.groups]
        return {"status": config}


@dataclass(frozen=True)
class FormulaSchema:
    expression: str
    type: ClassVar[PropertyType] = PropertyType.FORMULA

    def to_dict(self) -> dict[str, Any]:
        return {"formula": {"expression": self.expression}}


@dataclass(frozen=True)
class RelationSchema:
    """Link to pages of another data source.

    A *single* relation exists only on this side.  A *dual* relation also
    creates (or names) the synced property on the target.
    """

    data_source_id: str
    database_id: str | None = None
    dual: bool = False
    synced_property_name: str | None = None
    synced_property_id: str | None = None
    type: ClassVar[PropertyType] = PropertyType.RELATION

    def to_dict(self) -> dict[str, Any]:
        config: dict[str, Any] = {"data_source_id": self.data_source_id}
        if self.database_id is not None:
            config["database_id"] = self.database_id
        if self.dual:
            config["type"] = "dual_property"
            config["dual_property"] = drop_none({
                "synced_property_name": self.synced_property_name,
                "synced_property_id": self.synced_property_id,
            })
        else:
            config["type"] = "single_property"
            config["single_property"] = {}
        return {"relation": config}


@dataclass(frozen=True)
class RollupSchema:
    relation_property_name: str
    rollup_property_name: str
    function: str = "show_original"
    type: ClassVar[PropertyType] = PropertyType.ROLLUP

    def to_dict(self) -> dict[str, Any]:
        return {
            "rollup": {
                "relation_property_name": self.relation_property_name,
                "rollup_property_name": self.rollup_property_name,
                "function": self.function,
            }
        }


@dataclass(frozen=True)
class UniqueIdSchema:
    prefix: str | None = None
    type: ClassVar[PropertyType] = PropertyType.UNIQUE_ID

    def to_dict(self) -> dict[str, Any]:
        return {"unique_id": {"prefix": self.prefix}}


@dataclass(frozen=True)
class UnsupportedSchema:
    type_name: str
    raw: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {self.type_name: dict(self.raw)}


PropertySchema = Union[
    PlainSchema,
    NumberSchema,
    SelectSchema,
    MultiSelectSchema,
    StatusSchema,
    FormulaSchema,
    RelationSchema,
    RollupSchema,
    UniqueIdSchema,
    UnsupportedSchema,
]


def schema_from_dict(data: dict[str, Any]) -> PropertySchema:
    """Decode the schema part of a property definition."""
    raw_type = data.get("type", "")
    config = data.get(raw_type) or {}
    try:
        kind = PropertyType(raw_type)
    except ValueError:
        return UnsupportedSchema(raw_type, dict(config))

    if kind in _PLAIN_SCHEMA_TYPES:
        return PlainSchema(kind)
    if kind is PropertyType.NUMBER:
        return NumberSchema(config.get("format", "number"))
    if kind is PropertyType.SELECT:
        return SelectSchema(_options(config))
    if kind is PropertyType.MULTI_SELECT:
        return MultiSelectSchema(_options(config))
    if kind is PropertyType.STATUS:
        return StatusSchema(
            _options(config),
            tuple(StatusGroup.from_dict(g) for g in config.get("groups", [])),
        )
    if kind is PropertyType.FORMULA:
        return FormulaSchema(config.get("expression", ""))
    if kind is PropertyType.RELATION:
        dual = config.get("type") == "dual_property"
        dual_config = config.get("dual_property") or {}
        return RelationSchema(
            data_source_id=config.get("data_source_id", ""),
            database_id=config.get("database_id"),
            dual=dual,
            synced_property_name=dual_config.get("synced_property_name"),
            synced_property_id=dual_config.get("synced_property_id"),
        )
    if kind is PropertyType.ROLLUP:
        return RollupSchema(
            config.get("relation_property_name", ""),
            config.get("rollup_property_name", ""),
            config.get("function", "show_original"),
        )
    return UniqueIdSchema(config.get("prefix"))


@dataclass(frozen=True)
class PropertyDefinition:
    """A schema as returned by the server, with its id and name."""

    id: str
    name: str
    schema: PropertySchema
    description: str | None = None

    @property
    def type(self) -> str:
        schema_type = getattr(self.schema, "type", None)
        if isinstance(schema_type, PropertyType):
            return schema_type.value
        return getattr(self.schema, "type_name", "")

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> PropertyDefinition:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", name),
            schema=schema_from_dict(data),
            description=data.get("description"),
        )


def schemas_to_dict(schemas: Mapping[str, PropertySchema | None]) -> dict[str, Any]:
    """Encode a ``name -> schema`` mapping.  ``None`` removes a property."""
    return {
        name: (schema.to_dict() if schema is not None else None)
        for name, schema in schemas.items()
    }


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TitleValue:
    rich_text: Sequence[RichText] = ()
    type: ClassVar[str] = "title"
    read_only: ClassVar[bool] = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "rich_text", _tuple(self.rich_text))

    @property
    def plain_text(self) -> str:
        return plain_text(list(self.rich_text))

    def to_dict(self) -> dict[str, Any]:
        return {self.type: rich_text_to_list(list(self.rich_text))}


@dataclass(frozen=True)
class RichTextValue(TitleValue):
    type: ClassVar[str] = "rich_text"


@dataclass(frozen=True)
class NumberValue:
    number: float | None = None
    type: ClassVar[str] = "number"
    read_only: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {"number": self.number}


@dataclass(frozen=True)
class SelectValue:
    option: SelectOption | None = None
    type: ClassVar[str] = "select"
    read_only: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {self.type: self.option.ref() if self.option is not None else None}


@dataclass(frozen=True)
class StatusValue(SelectValue):
    type: ClassVar[str] = "status"


@dataclass(frozen=True)
class MultiSelectValue:
    options: Sequence[SelectOption] = ()
    type: ClassVar[str] = "multi_select"
    read_only: ClassVar[bool] = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _tuple(self.options))

    @property
    def names(self) -> list[str]:
        return [o.name for o in self.options if o.name is not None]

    def to_dict(self) -> dict[str, Any]:
        return {"multi_select": [o.ref() for o in self.options]}


@dataclass(frozen=True)
class DateValue:
    date: DateRange | None = None
    type: ClassVar[str] = "date"
    read_only: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date.to_dict() if self.date is not None else None}


@dataclass(frozen=True)
class CheckboxValue:
    checked: bool = False
    type: ClassVar[str] = "checkbox"
    read_only: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {"checkbox": self.checked}


@dataclass(frozen=True)
class UrlValue:
    url: str | None = None
    type: ClassVar[str] = "url"
    read_only: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url}


@dataclass(frozen=True)
class EmailValue:
    email: str | None = None
    type: ClassVar[str] = "email"
    read_only: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {"email": self.email}


@dataclass(frozen=True)
class PhoneNumberValue:
    phone_number: str | None = None
    type: ClassVar[str] = "phone_number"
    read_only: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {"phone_number": self.phone_number}


@dataclass(frozen=True)
class PeopleValue:
    people: Sequence[UserRef] = ()
    type: ClassVar[str] = "people"
    read_only: ClassVar[bool] = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "people", _tuple(self.people))

    @property
    def user_ids(self) -> list[str]:
        return [p.id for p in self.people]

    def to_dict(self) -> dict[str, Any]:
        return {"people": [p.to_dict() for p in self.people]}


@dataclass(frozen=True)
class RelationValue:
    page_ids: Sequence[str] = ()
    has_more: bool = False
    type: ClassVar[str] = "relation"
    read_only: ClassVar[bool] = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "page_ids", _tuple(self.page_ids))

    def to_dict(self) -> dict[str, Any]:
        return {"relation": [{"id": page_id} for page_id in self.page_ids]}


@dataclass(frozen=True)
class NamedFile:
    name: str
    source: FileSource

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, **self.source.to_dict()}


@dataclass(frozen=True)
class FilesValue:
    files: Sequence[NamedFile] = ()
    type: ClassVar[str] = "files"
    read_only: ClassVar[bool] = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", _tuple(self.files))

    def to_dict(self) -> dict[str, Any]:
        return {"files": [f.to_dict() for f in self.files]}


# -- server-computed ----------------------------------------------------------

@dataclass(frozen=True)
class FormulaValue:
    """Result of a formula; ``result_type`` is string, number, boolean or date."""

    result_type: str
    value: Any = None
    type: ClassVar[str] = "formula"
    read_only: ClassVar[bool] = True

    def to_dict(self) -> dict[str, Any]:
        value = self.value.to_dict() if isinstance(self.value, DateRange) else self.value
        return {"formula": {"type": self.result_type, self.result_type: value}}


@dataclass(frozen=True)
class RollupValue:
    """Result of a rollup; ``value`` is kept as decoded JSON."""

    result_type: str
    value: Any = None
    function: str | None = None
    type: ClassVar[str] = "rollup"
    read_only: ClassVar[bool] = True

    def to_dict(self) -> dict[str, Any]:
        return {"rollup": drop_none({
            "type": self.result_type,
            self.result_type: self.value,
            "function": self.function,
        })}


@dataclass(frozen=True)
class TimestampValue:
    """``created_time`` or ``last_edited_time``."""

    type: str
    time: str | None = None
    read_only: ClassVar[bool] = True

    def to_dict(self) -> dict[str, Any]:
        return {self.type: self.time}


@dataclass(frozen=True)
class AuthorValue:
    """``created_by`` or ``last_edited_by``."""

    type: str
    user: UserRef | None = None
    read_only: ClassVar[bool] = True

    def to_dict(self) -> dict[str, Any]:
        return {self.type: self.user.to_dict() if self.user is not None else None}


@dataclass(frozen=True)
class UniqueIdValue:
    number: int | None = None
    prefix: str | None = None
    type: ClassVar[str] = "unique_id"
    read_only: ClassVar[bool] = True

    @property
    def display(self) -> str:
        if self.number is None:
            return ""
        return f"{self.prefix}-{self.number}" if self.prefix else str(self.number)

    def to_dict(self) -> dict[str, Any]:
        return {"unique_id": {"number": self.number, "prefix": self.prefix}}


@dataclass(frozen=True)
class UnsupportedValue:
    type_name: str
    raw: Any = None
    read_only: ClassVar[bool] = True

    @property
    def type(self) -> str:
        return self.type_name

    def to_dict(self) -> dict[str, Any]:
        return {self.type_name: self.raw}


PropertyValue = Union[
    TitleValue,
    RichTextValue,
    NumberValue,
    SelectValue,
    StatusValue,
    MultiSelectValue,
    DateValue,
    CheckboxValue,
    UrlValue,
    EmailValue,
    PhoneNumberValue,
    PeopleValue,
    RelationValue,
    FilesValue,
    FormulaValue,
    RollupValue,
    TimestampValue,
    AuthorValue,
    UniqueIdValue,
    UnsupportedValue,
]


def _named_file(data: dict[str, Any]) -> NamedFile:
    return NamedFile(data.get("name", ""), file_source_from_dict(data))


def _formula(data: dict[str, Any]) -> FormulaValue:
    result_type = data.get("type", "string")
    value = data.get(result_type)
    if result_type == "date" and isinstance(value, dict):
        value = DateRange.from_dict(value)
    return FormulaValue(result_type, value)


def value_from_dict(data: dict[str, Any]) -> PropertyValue:
    """Decode one page property value from the API."""
    kind = data.get("type", "")
    raw = data.get(kind)

    if kind in ("title", "rich_text"):
        runs = tuple(rich_text_list_from_dict(raw))
        return TitleValue(runs) if kind == "title" else RichTextValue(runs)
    if kind == "number":
        return NumberValue(raw)
    if kind in ("select", "status"):
        option = SelectOption.from_dict(raw) if raw else None
        return SelectValue(option) if kind == "select" else StatusValue(option)
    if kind == "multi_select":
        return MultiSelectValue(tuple(SelectOption.from_dict(o) for o in raw or []))
    if kind == "date":
        return DateValue(DateRange.from_dict(raw) if raw else None)
    if kind == "checkbox":
        return CheckboxValue(bool(raw))
    if kind == "url":
        return UrlValue(raw)
    if kind == "email":
        return EmailValue(raw)
    if kind == "phone_number":
        return PhoneNumberValue(raw)
    if kind == "people":
        return PeopleValue(tuple(u for u in (UserRef.from_dict(p) for p in raw or []) if u))
    if kind == "relation":
        return RelationValue(
            tuple(r.get("id", "") for r in raw or []),
            bool(data.get("has_more", False)),
        )
    if kind == "files":
        return FilesValue(tuple(_named_file(f) for f in raw or []))
    if kind == "formula":
        return _formula(raw or {})
    if kind == "rollup":
        raw = raw or {}
        result_type = raw.get("type", "")
        return RollupValue(result_type, raw.get(result_type), raw.get("function"))
    if kind in ("created_time", "last_edited_time"):
        return TimestampValue(kind, raw)
    if kind in ("created_by", "last_edited_by"):
        return AuthorValue(kind, UserRef.from_dict(raw))
    if kind == "unique_id":
        raw = raw or {}
        return UniqueIdValue(raw.get("number"), raw.get("prefix"))
    return UnsupportedValue(kind, raw)


def values_to_dict(values: Mapping[str, PropertyValue]) -> dict[str, Any]:
    return {name: value.to_dict() for name, value in values.items()}


def values_from_dict(data: Mapping[str, Any]) -> dict[str, PropertyValue]:
    return {name: value_from_dict(raw) for name, raw in data.items()}
