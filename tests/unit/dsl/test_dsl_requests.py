"""Tests for create/update request objects and their builders."""

from __future__ import annotations

import pytest

from notionkit.dsl import (
    CreateCommentRequest,
    CreateCommentRequestBuilder,
    CreateDatabaseRequestBuilder,
    CreateFileUploadRequest,
    CreatePageRequestBuilder,
    SearchRequest,
    UpdateDatabaseRequest,
    UpdateDataSourceRequestBuilder,
    UpdatePageRequestBuilder,
)
from notionkit.errors import NotionkitValidationError
from notionkit.models import DataSourceParent, EmojiIcon, ExternalFile, PageParent, TextRun


class TestCreatePageRequest:
    def test_body_under_data_source(self):
        request = (
            CreatePageRequestBuilder(DataSourceParent("ds-1"))
            .title("Weekly sync", property_name="Name")
            .properties(lambda p: p.select("Stage", "Todo"))
            .content(lambda c: c.paragraph("Agenda"))
            .icon("🗓️")
            .build()
        )
        body = request.to_dict()
        assert body["parent"] == {"type": "data_source_id", "data_source_id": "ds-1"}
        assert list(body["properties"]) == ["Name", "Stage"]
        assert body["properties"]["Name"]["title"][0]["text"]["content"] == "Weekly sync"
        assert body["icon"] == {"type": "emoji", "emoji": "🗓️"}
        assert len(body["children"]) == 1
        assert "cover" not in body

    def test_minimal_body_omits_optional_keys(self):
        body = CreatePageRequestBuilder(PageParent("root")).title("T").build().to_dict()
        assert set(body) == {"parent", "properties"}

    def test_template(self):
        body = CreatePageRequestBuilder(PageParent("p")).template("tpl-1").build().to_dict()
        assert body["template"] == {"type": "template_id", "template_id": "tpl-1"}

    def test_cover(self):
        request = CreatePageRequestBuilder(PageParent("p")).cover(ExternalFile("https://x.y/c.png")).build()
        assert request.to_dict()["cover"] == {"type": "external", "external": {"url": "https://x.y/c.png"}}

    def test_title_overrides_earlier_title(self):
        request = CreatePageRequestBuilder(PageParent("p")).title("a").title("b").build()
        assert request.properties["title"].plain_text == "b"

    def test_rewritten_property_keeps_first_position(self):
        request = (
            CreatePageRequestBuilder(PageParent("p"))
            .title("a")
            .properties(lambda p: p.select("Stage", "Todo"))
            .title("b")
            .build()
        )
        assert list(request.properties) == ["title", "Stage"]
        assert request.properties["title"].plain_text == "b"

    def test_request_is_frozen(self):
        request = CreatePageRequestBuilder(PageParent("p")).build()
        with pytest.raises(AttributeError):
            request.template_id = "x"

    def test_builder_mutation_does_not_leak(self):
        builder = CreatePageRequestBuilder(PageParent("p")).title("a")
        first = builder.build()
        builder.properties(lambda p: p.checkbox("Done", True))
        assert "Done" not in first.properties

    def test_validate_url_length(self):
        request = CreatePageRequestBuilder(PageParent("p")).properties(
            lambda p: p.url("Link", "https://x.y/" + "a" * 2000)
        ).build()
        with pytest.raises(NotionkitValidationError, match="limit of 2000"):
            request.validate()

    def test_validate_nested_children(self):
        request = CreatePageRequestBuilder(PageParent("p")).content(
            lambda c: c.toggle("t", lambda inner: [inner.paragraph(str(i)) for i in range(101)])
        ).build()
        with pytest.raises(NotionkitValidationError) as exc_info:
            request.validate()
        assert exc_info.value.field == "children[0].children"


class TestUpdateRequests:
    def test_update_page_archive(self):
        assert UpdatePageRequestBuilder().archive().build().to_dict() == {"in_trash": True}

    def test_update_page_lock_and_icon(self):
        body = UpdatePageRequestBuilder().lock().icon(EmojiIcon("✅")).build().to_dict()
        assert body == {"is_locked": True, "icon": {"type": "emoji", "emoji": "✅"}}

    def test_update_data_source_title_and_columns(self):
        request = (
            UpdateDataSourceRequestBuilder()
            .title("Renamed")
            .properties(lambda p: p.checkbox("Done").remove("Old"))
            .build()
        )
        body = request.to_dict()
        assert body["properties"] == {"Done": {"checkbox": {}}, "Old": None}
        assert body["title"][0]["text"]["content"] == "Renamed"

    def test_update_data_source_without_title(self):
        body = UpdateDataSourceRequestBuilder().archive().build().to_dict()
        assert body == {"in_trash": True}

    def test_update_database(self):
        body = UpdateDatabaseRequest(title=[TextRun("New")], is_inline=True).to_dict()
        assert body["is_inline"] is True
        assert body["title"][0]["text"]["content"] == "New"
        assert "description" not in body


class TestCreateDatabaseRequest:
    def test_duplicate_option_names_rejected(self):
        request = CreateDatabaseRequestBuilder(PageParent("p")).properties(
            lambda p: p.select("Tag", lambda o: o.option("a").option("a"))
        ).build()
        with pytest.raises(NotionkitValidationError, match="not unique"):
            request.validate()

    def test_101_options_rejected(self):
        def options(o):
            for i in range(101):
                o.option(f"opt{i}")

        request = CreateDatabaseRequestBuilder(PageParent("p")).properties(
            lambda p: p.multi_select("Tags", options)
        ).build()
        with pytest.raises(NotionkitValidationError) as exc_info:
            request.validate()
        assert exc_info.value.limit == 100
        assert exc_info.value.value == 101

    def test_inline_flag(self):
        body = CreateDatabaseRequestBuilder(PageParent("p")).inline().build().to_dict()
        assert body["is_inline"] is True
        assert body["initial_data_source"] == {"properties": {}}


class TestCommentRequests:
    def test_reply_body(self):
        body = (
            CreateCommentRequestBuilder(discussion_id="d1")
            .text("Thanks")
            .attach("fu-1")
            .display_name("Bot")
            .build()
            .to_dict()
        )
        assert body["discussion_id"] == "d1"
        assert "parent" not in body
        assert body["attachments"] == [{"type": "file_upload", "file_upload_id": "fu-1"}]
        assert body["display_name"] == {"type": "custom", "custom": {"name": "Bot"}}

    def test_exactly_one_target(self):
        with pytest.raises(ValueError):
            CreateCommentRequest(rich_text=[TextRun("x")])
        with pytest.raises(ValueError):
            CreateCommentRequest(rich_text=[TextRun("x")], page_id="p", discussion_id="d")


class TestSearchAndUploadRequests:
    def test_empty_search(self):
        assert SearchRequest().to_dict() == {}

    def test_search_page_size_validated(self):
        with pytest.raises(NotionkitValidationError):
            SearchRequest(page_size=0).validate()

    def test_bad_sort_direction(self):
        with pytest.raises(ValueError):
            SearchRequest(sort_direction="sideways")

    def test_upload_modes(self):
        with pytest.raises(ValueError):
            CreateFileUploadRequest(mode="multi_part")
        with pytest.raises(ValueError):
            CreateFileUploadRequest(mode="external_url")
        with pytest.raises(ValueError):
            CreateFileUploadRequest(mode="streaming")
        assert CreateFileUploadRequest().to_dict() == {"mode": "single_part"}
