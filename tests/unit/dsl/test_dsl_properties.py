"""Tests for property schema and page property builders."""

from __future__ import annotations

from datetime import date, datetime, timezone

from notionkit.dsl import database_properties, external_file, page_properties, uploaded_file
from notionkit.models.properties import (
    MultiSelectValue,
    NumberValue,
    SelectSchema,
    StatusSchema,
    TitleValue,
    schemas_to_dict,
    values_to_dict,
)


class TestDatabaseProperties:
    def test_keys_in_call_order(self):
        schemas = database_properties(lambda p: (
            p.title("Name"),
            p.number("Price", format="dollar"),
            p.checkbox("Done"),
        ))
        assert list(schemas) == ["Name", "Price", "Done"]

    def test_wire_shapes(self):
        schemas = database_properties(lambda p: (
            p.title("Name"),
            p.number("Price", format="dollar"),
            p.select("Stage", lambda o: o.option("Todo", "red").option("Done", "green")),
            p.formula("Total", 'prop("Price") * 2'),
        ))
        assert schemas_to_dict(schemas) == {
            "Name": {"title": {}},
            "Price": {"number": {"format": "dollar"}},
            "Stage": {"select": {"options": [
                {"name": "Todo", "color": "red"},
                {"name": "Done", "color": "green"},
            ]}},
            "Total": {"formula": {"expression": 'prop("Price") * 2'}},
        }

    def test_last_write_wins(self):
        schemas = database_properties(lambda p: p.checkbox("X").url("Y").number("X"))
        assert list(schemas) == ["X", "Y"]
        assert schemas_to_dict(schemas)["X"] == {"number": {"format": "number"}}

    def test_select_without_options(self):
        schemas = database_properties(lambda p: p.select("Tag"))
        assert isinstance(schemas["Tag"], SelectSchema)
        assert schemas["Tag"].options == ()

    def test_status_groups(self):
        schemas = database_properties(lambda p: p.status(
            "State", lambda o: o.option("Open").group("Active", "blue")
        ))
        schema = schemas["State"]
        assert isinstance(schema, StatusSchema)
        assert schema.to_dict()["status"]["groups"] == [{"name": "Active", "color": "blue", "option_ids": []}]

    def test_single_relation_is_default(self):
        schemas = database_properties(lambda p: p.relation("Owner", "ds-1"))
        assert schemas_to_dict(schemas)["Owner"] == {"relation": {
            "data_source_id": "ds-1",
            "type": "single_property",
            "single_property": {},
        }}

    def test_dual_relation(self):
        schemas = database_properties(
            lambda p: p.relation("Owner", "ds-1", options=lambda r: r.dual("Tasks"))
        )
        relation = schemas_to_dict(schemas)["Owner"]["relation"]
        assert relation["type"] == "dual_property"
        assert relation["dual_property"] == {"synced_property_name": "Tasks"}

    def test_rollup(self):
        schemas = database_properties(lambda p: p.rollup("Sum", "Items", "Price", "sum"))
        assert schemas_to_dict(schemas)["Sum"]["rollup"]["function"] == "sum"

    def test_remove_encodes_null(self):
        schemas = database_properties(lambda p: p.remove("Old"))
        assert schemas_to_dict(schemas) == {"Old": None}


class TestPageProperties:
    def test_values_in_call_order(self):
        values = page_properties(lambda p: (
            p.title("Name", "Launch"),
            p.number("Price", 9.5),
            p.multi_select("Tags", "a", "b"),
        ))
        assert list(values) == ["Name", "Price", "Tags"]
        assert isinstance(values["Name"], TitleValue)
        assert isinstance(values["Tags"], MultiSelectValue)
        assert values["Tags"].names == ["a", "b"]

    def test_last_write_wins(self):
        values = page_properties(lambda p: p.number("N", 1).checkbox("C", True).number("N", 2))
        assert list(values) == ["N", "C"]
        assert values["N"] == NumberValue(2.0)

    def test_wire_shapes(self):
        values = page_properties(lambda p: (
            p.checkbox("Done", True),
            p.select("Stage", "Todo"),
            p.status("State", None),
            p.url("Link", "https://x.y"),
            p.relation("Refs", "p1", "p2"),
            p.people("Who", "u1"),
        ))
        assert values_to_dict(values) == {
            "Done": {"checkbox": True},
            "Stage": {"select": {"name": "Todo"}},
            "State": {"status": None},
            "Link": {"url": "https://x.y"},
            "Refs": {"relation": [{"id": "p1"}, {"id": "p2"}]},
            "Who": {"people": [{"object": "user", "id": "u1"}]},
        }

    def test_date_value(self):
        values = page_properties(lambda p: p.date("Due", date(2024, 3, 1)))
        assert values_to_dict(values)["Due"] == {"date": {"start": "2024-03-01", "end": None}}

    def test_date_range_with_time_zone(self):
        start = datetime(2024, 3, 1, 17, 0, tzinfo=timezone.utc)
        values = page_properties(
            lambda p: p.date_range("When", start, "2024-03-02", time_zone="Europe/Berlin")
        )
        assert values_to_dict(values)["When"] == {"date": {
            "start": "2024-03-01T18:00:00",
            "end": "2024-03-02",
            "time_zone": "Europe/Berlin",
        }}

    def test_date_none_clears(self):
        values = page_properties(lambda p: p.date("Due", None))
        assert values_to_dict(values) == {"Due": {"date": None}}

    def test_files(self):
        values = page_properties(lambda p: p.files(
            "Docs",
            external_file("brief.pdf", "https://x.y/brief.pdf"),
            uploaded_file("img.png", "fu-1"),
        ))
        assert values_to_dict(values)["Docs"] == {"files": [
            {"name": "brief.pdf", "type": "external", "external": {"url": "https://x.y/brief.pdf"}},
            {"name": "img.png", "type": "file_upload", "file_upload": {"id": "fu-1"}},
        ]}
