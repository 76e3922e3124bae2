"""Property schema and property value builders.

Schemas (database / data source columns)::

    schema = database_properties(lambda p: (
        p.title("Name"),
        p.number("Price", format="dollar"),
        p.select("Stage", lambda o: o.option("Todo", "red").option("Done", "green")),
        p.relation("Owner", "ds-123", options=lambda r: r.dual("Tasks")),
    ))

Values (one page)::

    values = page_properties(lambda p: (
        p.title("Name", "Launch"),
        p.number("Price", 9.5),
        p.multi_select("Tags", "a", "b"),
    ))

Both produce a ``name -> object`` dict in call order.  A repeated name
replaces the earlier entry.  Neither checks for required columns.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from notionkit.models.base import Color, DateLike, DateRange, ExternalFile, FileUploadFile, UserRef
from notionkit.models.properties import (
    CheckboxValue,
    DateValue,
    EmailValue,
    FilesValue,
    FormulaSchema,
    MultiSelectSchema,
    MultiSelectValue,
    NamedFile,
    NumberFormat,
    NumberSchema,
    NumberValue,
    PeopleValue,
    PhoneNumberValue,
    PlainSchema,
    PropertySchema,
    PropertyType,
    PropertyValue,
    RelationSchema,
    RelationValue,
    RichTextValue,
    RollupSchema,
    SelectOption,
    SelectSchema,
    SelectValue,
    StatusGroup,
    StatusSchema,
    StatusValue,
    TitleValue,
    UniqueIdSchema,
    UrlValue,
)

from .rich_text import RichTextInput, to_rich_text

# ---------------------------------------------------------------------------
# Schema scopes
# ---------------------------------------------------------------------------

class SelectOptionsBuilder:
    """Scope for select, multi-select and status options."""

    def __init__(self) -> None:
        self._options: list[SelectOption] = []
        self._groups: list[StatusGroup] = []

    def option(
        self,
        name: str,
        color: Color | str | None = None,
        description: str | None = None,
    ) -> SelectOptionsBuilder:
        resolved = Color(color) if color is not None else None
        self._options.append(SelectOption(name=name, color=resolved, description=description))
        return self

    def group(self, name: str, color: Color | str | None = None) -> SelectOptionsBuilder:
        """Add a status group.  Ignored for select and multi-select."""
        self._groups.append(StatusGroup(name, Color(color) if color is not None else None))
        return self

    def build(self) -> list[SelectOption]:
        return list(self._options)

    def build_groups(self) -> list[StatusGroup]:
        return list(self._groups)


class RelationBuilder:
    """Scope for a relation column: :meth:`single` (default) or :meth:`dual`."""

    def __init__(self) -> None:
        self._dual = False
        self._synced_name: str | None = None

    def single(self) -> RelationBuilder:
        self._dual = False
        self._synced_name = None
        return self

    def dual(self, synced_property_name: str | None = None) -> RelationBuilder:
        self._dual = True
        self._synced_name = synced_property_name
        return self

    def build(self, data_source_id: str, database_id: str | None) -> RelationSchema:
        return RelationSchema(
            data_source_id=data_source_id,
            database_id=database_id,
            dual=self._dual,
            synced_property_name=self._synced_name,
        )


def _collect_options(fn: Callable[[SelectOptionsBuilder], object] | None) -> SelectOptionsBuilder:
    builder = SelectOptionsBuilder()
    if fn is not None:
        fn(builder)
    return builder


class PropertySchemaBuilder:
    """Accumulates ``name -> schema`` entries."""

    def __init__(self) -> None:
        self._schemas: dict[str, PropertySchema | None] = {}

    def _set(self, name: str, schema: PropertySchema | None) -> PropertySchemaBuilder:
        # A repeated name keeps its first position.
        self._schemas[name] = schema
        return self

    def _plain(self, name: str, kind: PropertyType) -> PropertySchemaBuilder:
        return self._set(name, PlainSchema(kind))

    def title(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.TITLE)

    def rich_text(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.RICH_TEXT)

    def number(self, name: str, format: NumberFormat | str = NumberFormat.NUMBER) -> PropertySchemaBuilder:
        return self._set(name, NumberSchema(format))

    def select(
        self,
        name: str,
        options: Callable[[SelectOptionsBuilder], object] | None = None,
    ) -> PropertySchemaBuilder:
        return self._set(name, SelectSchema(_collect_options(options).build()))

    def multi_select(
        self,
        name: str,
        options: Callable[[SelectOptionsBuilder], object] | None = None,
    ) -> PropertySchemaBuilder:
        return self._set(name, MultiSelectSchema(_collect_options(options).build()))

    def status(
        self,
        name: str,
        options: Callable[[SelectOptionsBuilder], object] | None = None,
    ) -> PropertySchemaBuilder:
        builder = _collect_options(options)
        return self._set(name, StatusSchema(builder.build(), builder.build_groups()))

    def date(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.DATE)

    def people(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.PEOPLE)

    def files(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.FILES)

    def checkbox(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.CHECKBOX)

    def url(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.URL)

    def email(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.EMAIL)

    def phone_number(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.PHONE_NUMBER)

    def formula(self, name: str, expression: str) -> PropertySchemaBuilder:
        return self._set(name, FormulaSchema(expression))

    def relation(
        self,
        name: str,
        data_source_id: str,
        database_id: str | None = None,
        options: Callable[[RelationBuilder], object] | None = None,
    ) -> PropertySchemaBuilder:
        builder = RelationBuilder()
        if options is not None:
            options(builder)
        return self._set(name, builder.build(data_source_id, database_id))

    def rollup(
        self,
        name: str,
        relation_property_name: str,
        rollup_property_name: str,
        function: str = "show_original",
    ) -> PropertySchemaBuilder:
        return self._set(name, RollupSchema(relation_property_name, rollup_property_name, function))

    def created_time(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.CREATED_TIME)

    def created_by(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.CREATED_BY)

    def last_edited_time(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.LAST_EDITED_TIME)

    def last_edited_by(self, name: str) -> PropertySchemaBuilder:
        return self._plain(name, PropertyType.LAST_EDITED_BY)

    def unique_id(self, name: str, prefix: str | None = None) -> PropertySchemaBuilder:
        return self._set(name, UniqueIdSchema(prefix))

    def remove(self, name: str) -> PropertySchemaBuilder:
        """Mark *name* for deletion (only meaningful in update requests)."""
        return self._set(name, None)

    def build(self) -> dict[str, PropertySchema | None]:
        return dict(self._schemas)


def database_properties(fn: Callable[[PropertySchemaBuilder], object]) -> dict[str, PropertySchema | None]:
    builder = PropertySchemaBuilder()
    fn(builder)
    return builder.build()


# ---------------------------------------------------------------------------
# Value scope
# ---------------------------------------------------------------------------

def external_file(name: str, url: str) -> NamedFile:
    return NamedFile(name, ExternalFile(url))


def uploaded_file(name: str, file_upload_id: str) -> NamedFile:
    return NamedFile(name, FileUploadFile(file_upload_id))


class PagePropertiesBuilder:
    """Accumulates ``name -> value`` entries for a page."""

    def __init__(self) -> None:
        self._values: dict[str, PropertyValue] = {}

    def _set(self, name: str, value: PropertyValue) -> PagePropertiesBuilder:
        self._values[name] = value
        return self

    def title(self, name: str, text: RichTextInput) -> PagePropertiesBuilder:
        return self._set(name, TitleValue(to_rich_text(text)))

    def rich_text(self, name: str, text: RichTextInput) -> PagePropertiesBuilder:
        return self._set(name, RichTextValue(to_rich_text(text)))

    def number(self, name: str, value: float | None) -> PagePropertiesBuilder:
        return self._set(name, NumberValue(float(value) if value is not None else None))

    def checkbox(self, name: str, checked: bool) -> PagePropertiesBuilder:
        return self._set(name, CheckboxValue(checked))

    def url(self, name: str, url: str | None) -> PagePropertiesBuilder:
        return self._set(name, UrlValue(url))

    def email(self, name: str, email: str | None) -> PagePropertiesBuilder:
        return self._set(name, EmailValue(email))

    def phone_number(self, name: str, phone_number: str | None) -> PagePropertiesBuilder:
        return self._set(name, PhoneNumberValue(phone_number))

    def select(self, name: str, option: str | None) -> PagePropertiesBuilder:
        """Set a select by option name; ``None`` clears it."""
        return self._set(name, SelectValue(SelectOption(option) if option is not None else None))

    def multi_select(self, name: str, *options: str) -> PagePropertiesBuilder:
        return self._set(name, MultiSelectValue(tuple(SelectOption(o) for o in options)))

    def status(self, name: str, option: str | None) -> PagePropertiesBuilder:
        return self._set(name, StatusValue(SelectOption(option) if option is not None else None))

    def date(
        self,
        name: str,
        start: DateLike | None,
        end: DateLike | None = None,
        time_zone: str | None = None,
    ) -> PagePropertiesBuilder:
        """Set a date or datetime; ``start=None`` clears the value."""
        if start is None:
            return self._set(name, DateValue(None))
        return self._set(name, DateValue(DateRange(start, end, time_zone)))

    def date_range(
        self,
        name: str,
        start: DateLike,
        end: DateLike,
        time_zone: str | None = None,
    ) -> PagePropertiesBuilder:
        return self._set(name, DateValue(DateRange(start, end, time_zone)))

    def people(self, name: str, *user_ids: str) -> PagePropertiesBuilder:
        return self._set(name, PeopleValue(tuple(UserRef(uid) for uid in user_ids)))

    def relation(self, name: str, *page_ids: str) -> PagePropertiesBuilder:
        return self._set(name, RelationValue(page_ids))

    def files(self, name: str, *files: NamedFile) -> PagePropertiesBuilder:
        return self._set(name, FilesValue(files))

    def set(self, name: str, value: PropertyValue) -> PagePropertiesBuilder:
        """Store a pre-built value."""
        return self._set(name, value)

    def build(self) -> dict[str, PropertyValue]:
        return dict(self._values)


def page_properties(fn: Callable[[PagePropertiesBuilder], Any]) -> dict[str, PropertyValue]:
    builder = PagePropertiesBuilder()
    fn(builder)
    return builder.build()
