"""Unit tests for the endpoint wrappers.

All HTTP calls go through a transport mock (MagicMock / AsyncMock); the
assertions check the method, path and body each wrapper sends and the
typed model it decodes.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import block_dict, list_dict, page_dict

from notionkit.dsl import (
    CreateCommentRequestBuilder,
    CreateDatabaseRequestBuilder,
    CreateDataSourceRequestBuilder,
    CreatePageRequestBuilder,
    QueryBuilder,
    SearchRequest,
    UpdateDataSourceRequestBuilder,
    UpdatePageRequestBuilder,
    page_content,
)
from notionkit.errors import NotionkitValidationError
from notionkit.models import (
    Block,
    BlockRequest,
    BlockType,
    Comment,
    Database,
    DatabaseParent,
    DataSource,
    Page,
    PageParent,
    User,
)
from notionkit.models.blocks import TextContent
from notionkit.models.properties import RelationValue, RollupValue, TitleValue
from notionkit.models.rich_text import TextRun
from notionkit.notion_api.blocks import AsyncBlockAPI, BlockAPI
from notionkit.notion_api.comments import AsyncCommentAPI, CommentAPI
from notionkit.notion_api.data_sources import AsyncDataSourceAPI, DataSourceAPI
from notionkit.notion_api.databases import AsyncDatabaseAPI, DatabaseAPI
from notionkit.notion_api.pages import AsyncPageAPI, PageAPI
from notionkit.notion_api.search import AsyncSearchAPI, SearchAPI
from notionkit.notion_api.users import AsyncUserAPI, UserAPI

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_sync_transport(*responses):
    t = MagicMock()
    if len(responses) == 1:
        t.request.return_value = responses[0]
    else:
        t.request.side_effect = list(responses)
    return t


def make_async_transport(*responses):
    t = MagicMock()
    if len(responses) == 1:
        t.request = AsyncMock(return_value=responses[0])
    else:
        t.request = AsyncMock(side_effect=list(responses))
    return t


def paragraphs(count: int) -> list[BlockRequest]:
    return page_content(lambda p: [p.paragraph(f"p{i}") for i in range(count)])


def _relation_item(page_id: str) -> dict:
    return {"object": "property_item", "type": "relation", "relation": {"id": page_id}}


def _database_dict(db_id: str = "db-1") -> dict:
    return {
        "object": "database",
        "id": db_id,
        "title": [{"type": "text", "text": {"content": "Tasks"}, "plain_text": "Tasks"}],
        "data_sources": [{"id": "ds-1", "name": "Tasks"}],
        "in_trash": False,
    }


def _data_source_dict(ds_id: str = "ds-1") -> dict:
    return {
        "object": "data_source",
        "id": ds_id,
        "title": [{"type": "text", "text": {"content": "Tasks"}, "plain_text": "Tasks"}],
        "parent": {"type": "database_id", "database_id": "db-1"},
        "properties": {
            "Name": {"id": "title", "name": "Name", "type": "title", "title": {}},
            "Stage": {
                "id": "abc",
                "name": "Stage",
                "type": "select",
                "select": {"options": [{"id": "o1", "name": "Todo", "color": "red"}]},
            },
        },
    }


# ===========================================================================
# Pages
# ===========================================================================

class TestPageAPI:
    def test_create_sends_body_and_decodes_page(self):
        t = make_sync_transport(page_dict("pg-1", "Launch"))
        request = CreatePageRequestBuilder(PageParent("root")).title("Launch").build()
        page = PageAPI(t).create(request)
        t.request.assert_called_once_with("POST", "/pages", json=request.to_dict())
        assert isinstance(page, Page)
        assert page.id == "pg-1"
        assert page.title == "Launch"

    def test_create_validates_before_sending(self):
        t = make_sync_transport({})
        request = CreatePageRequestBuilder(PageParent("root")).title("x" * 2001).build()
        with pytest.raises(NotionkitValidationError):
            PageAPI(t).create(request)
        t.request.assert_not_called()

    def test_create_rejects_101_children(self):
        t = make_sync_transport({})
        request = CreatePageRequestBuilder(PageParent("root")).content(paragraphs(101)).build()
        with pytest.raises(NotionkitValidationError) as exc_info:
            PageAPI(t).create(request)
        assert exc_info.value.limit == 100
        t.request.assert_not_called()

    def test_retrieve_with_filter_properties(self):
        t = make_sync_transport(page_dict())
        PageAPI(t).retrieve("pg-1", filter_properties=["title", "abc"])
        t.request.assert_called_once_with(
            "GET",
            "/pages/pg-1",
            params=[("filter_properties", "title"), ("filter_properties", "abc")],
        )

    def test_retrieve_without_filter_sends_no_params(self):
        t = make_sync_transport(page_dict())
        PageAPI(t).retrieve("pg-1")
        t.request.assert_called_once_with("GET", "/pages/pg-1", params=None)

    def test_update_sends_only_set_fields(self):
        t = make_sync_transport(page_dict())
        request = UpdatePageRequestBuilder().properties(lambda p: p.checkbox("Done", True)).build()
        PageAPI(t).update("pg-1", request)
        t.request.assert_called_once_with(
            "PATCH", "/pages/pg-1", json={"properties": {"Done": {"checkbox": True}}}
        )

    def test_archive_and_restore_use_in_trash(self):
        t = make_sync_transport(page_dict(), page_dict())
        api = PageAPI(t)
        api.archive("pg-1")
        api.restore("pg-1")
        bodies = [c.kwargs["json"] for c in t.request.call_args_list]
        assert bodies == [{"in_trash": True}, {"in_trash": False}]

    def test_retrieve_property_simple(self):
        t = make_sync_transport({"object": "property_item", "type": "number", "number": 4})
        value = PageAPI(t).retrieve_property("pg-1", "n%3D")
        t.request.assert_called_once_with("GET", "/pages/pg-1/properties/n%3D", params=None)
        assert value.number == 4

    def test_retrieve_property_follows_cursor_and_merges(self):
        first = {
            "object": "list",
            "results": [_relation_item("a"), _relation_item("b")],
            "has_more": True,
            "next_cursor": "c1",
            "property_item": {"type": "relation", "relation": {}},
        }
        second = {
            "object": "list",
            "results": [_relation_item("c")],
            "has_more": False,
            "next_cursor": None,
            "property_item": {"type": "relation", "relation": {}},
        }
        t = make_sync_transport(first, second)
        value = PageAPI(t).retrieve_property("pg-1", "rel")
        assert isinstance(value, RelationValue)
        assert value.page_ids == ("a", "b", "c")
        assert t.request.call_args_list[1].kwargs["params"] == {"start_cursor": "c1"}

    def test_retrieve_property_title_items(self):
        run = {"type": "text", "text": {"content": "Hi"}, "plain_text": "Hi"}
        data = {
            "object": "list",
            "results": [{"object": "property_item", "type": "title", "title": run}],
            "has_more": False,
            "next_cursor": None,
            "property_item": {"type": "title", "title": {}},
        }
        value = PageAPI(make_sync_transport(data)).retrieve_property("pg-1", "title")
        assert isinstance(value, TitleValue)
        assert value.plain_text == "Hi"

    def test_retrieve_property_rollup_uses_summary(self):
        data = {
            "object": "list",
            "results": [],
            "has_more": False,
            "next_cursor": None,
            "property_item": {
                "type": "rollup",
                "rollup": {"type": "number", "number": 12, "function": "sum"},
            },
        }
        value = PageAPI(make_sync_transport(data)).retrieve_property("pg-1", "r")
        assert isinstance(value, RollupValue)
        assert value.value == 12
        assert value.function == "sum"


class TestAsyncPageAPI:
    async def test_create(self):
        t = make_async_transport(page_dict("pg-9"))
        request = CreatePageRequestBuilder(PageParent("root")).title("T").build()
        page = await AsyncPageAPI(t).create(request)
        t.request.assert_awaited_once_with("POST", "/pages", json=request.to_dict())
        assert page.id == "pg-9"

    async def test_archive(self):
        t = make_async_transport(page_dict())
        await AsyncPageAPI(t).archive("pg-1")
        t.request.assert_awaited_once_with("PATCH", "/pages/pg-1", json={"in_trash": True})

    async def test_retrieve_property_follows_cursor(self):
        item = {"type": "relation", "relation": {}}
        first = {
            "object": "list",
            "results": [_relation_item("a")],
            "has_more": True,
            "next_cursor": "c1",
            "property_item": item,
        }
        second = {
            "object": "list",
            "results": [_relation_item("b")],
            "has_more": False,
            "next_cursor": None,
            "property_item": item,
        }
        t = make_async_transport(first, second)
        value = await AsyncPageAPI(t).retrieve_property("pg-1", "rel")
        assert value.page_ids == ("a", "b")
        params = [c.kwargs["params"] for c in t.request.call_args_list]
        assert params == [None, {"start_cursor": "c1"}]


# ===========================================================================
# Blocks
# ===========================================================================

class TestBlockAPI:
    def test_retrieve(self):
        t = make_sync_transport(block_dict("b1", "hi"))
        block = BlockAPI(t).retrieve("b1")
        t.request.assert_called_once_with("GET", "/blocks/b1")
        assert isinstance(block, Block)
        assert block.text == "hi"

    def test_update_sends_content_only(self):
        t = make_sync_transport(block_dict("b1", "new"))
        request = BlockRequest(BlockType.PARAGRAPH, TextContent([TextRun("new")]))
        BlockAPI(t).update("b1", request)
        method, path = t.request.call_args.args
        body = t.request.call_args.kwargs["json"]
        assert (method, path) == ("PATCH", "/blocks/b1")
        assert list(body) == ["paragraph"]
        assert body["paragraph"]["rich_text"][0]["text"]["content"] == "new"

    def test_delete(self):
        t = make_sync_transport(block_dict("b1"))
        BlockAPI(t).delete("b1")
        t.request.assert_called_once_with("DELETE", "/blocks/b1")

    def test_retrieve_children_params(self):
        t = make_sync_transport(list_dict([block_dict("b1")]))
        page = BlockAPI(t).retrieve_children("pg", start_cursor="c", page_size=10)
        t.request.assert_called_once_with(
            "GET", "/blocks/pg/children", params={"start_cursor": "c", "page_size": 10}
        )
        assert [b.id for b in page.results] == ["b1"]

    def test_list_all_children_follows_cursor(self):
        t = make_sync_transport(
            list_dict([block_dict("b1"), block_dict("b2")], "c1"),
            list_dict([block_dict("b3")]),
        )
        blocks = BlockAPI(t).list_all_children("pg")
        assert [b.id for b in blocks] == ["b1", "b2", "b3"]
        assert t.request.call_args_list[1].kwargs["params"] == {"start_cursor": "c1"}

    def test_iter_children_is_lazy(self):
        t = make_sync_transport(list_dict([block_dict("b1")], "c1"), list_dict([block_dict("b2")]))
        it = BlockAPI(t).iter_children("pg")
        assert t.request.call_count == 0
        assert next(it).id == "b1"
        assert t.request.call_count == 1

    def test_append_children_body(self):
        t = make_sync_transport(list_dict([block_dict("n1")]))
        children = paragraphs(1)
        result = BlockAPI(t).append_children("pg", children, after="b0")
        t.request.assert_called_once_with(
            "PATCH",
            "/blocks/pg/children",
            json={"children": [children[0].to_dict()], "after": "b0"},
        )
        assert [b.id for b in result] == ["n1"]

    def test_append_children_rejects_101(self):
        t = make_sync_transport({})
        with pytest.raises(NotionkitValidationError):
            BlockAPI(t).append_children("pg", paragraphs(101))
        t.request.assert_not_called()

    def test_append_all_children_batches_in_order(self):
        t = make_sync_transport(
            list_dict([block_dict(f"a{i}") for i in range(100)]),
            list_dict([block_dict(f"b{i}") for i in range(100)]),
            list_dict([block_dict(f"c{i}") for i in range(50)]),
        )
        children = paragraphs(250)
        created = BlockAPI(t).append_all_children("pg", children)
        assert t.request.call_count == 3
        sizes = [len(c.kwargs["json"]["children"]) for c in t.request.call_args_list]
        assert sizes == [100, 100, 50]
        first_texts = [
            c.kwargs["json"]["children"][0]["paragraph"]["rich_text"][0]["text"]["content"]
            for c in t.request.call_args_list
        ]
        assert first_texts == ["p0", "p100", "p200"]
        assert len(created) == 250

    def test_append_all_children_chains_after(self):
        t = make_sync_transport(
            list_dict([block_dict(f"a{i}") for i in range(100)]),
            list_dict([block_dict("b0")]),
        )
        BlockAPI(t).append_all_children("pg", paragraphs(101), after="anchor")
        afters = [c.kwargs["json"]["after"] for c in t.request.call_args_list]
        assert afters == ["anchor", "a99"]

    def test_append_all_children_validates_every_batch_first(self):
        t = make_sync_transport({})
        children = paragraphs(150)
        children[120] = page_content(lambda p: p.paragraph("x" * 2001))[0]
        with pytest.raises(NotionkitValidationError):
            BlockAPI(t).append_all_children("pg", children)
        t.request.assert_not_called()


class TestAsyncBlockAPI:
    async def test_list_all_children(self):
        t = make_async_transport(list_dict([block_dict("b1")], "c1"), list_dict([block_dict("b2")]))
        blocks = await AsyncBlockAPI(t).list_all_children("pg")
        assert [b.id for b in blocks] == ["b1", "b2"]

    async def test_iter_children(self):
        t = make_async_transport(list_dict([block_dict("b1")], "c1"), list_dict([block_dict("b2")]))
        ids = [b.id async for b in AsyncBlockAPI(t).iter_children("pg")]
        assert ids == ["b1", "b2"]

    async def test_append_all_children(self):
        t = make_async_transport(
            list_dict([block_dict(f"a{i}") for i in range(100)]),
            list_dict([block_dict("b0")]),
        )
        created = await AsyncBlockAPI(t).append_all_children("pg", paragraphs(101))
        assert len(created) == 101
        assert t.request.await_count == 2


# ===========================================================================
# Databases and data sources
# ===========================================================================

class TestDatabaseAPI:
    def test_create_sends_initial_data_source(self):
        t = make_sync_transport(_database_dict())
        request = (
            CreateDatabaseRequestBuilder(PageParent("root"))
            .title("Tasks")
            .properties(lambda p: p.title("Name").checkbox("Done"))
            .build()
        )
        db = DatabaseAPI(t).create(request)
        body = t.request.call_args.kwargs["json"]
        assert t.request.call_args.args == ("POST", "/databases")
        assert body["initial_data_source"]["properties"] == {
            "Name": {"title": {}},
            "Done": {"checkbox": {}},
        }
        assert isinstance(db, Database)
        assert db.data_sources[0].id == "ds-1"
        assert db.plain_title == "Tasks"

    def test_retrieve(self):
        t = make_sync_transport(_database_dict("db-7"))
        assert DatabaseAPI(t).retrieve("db-7").id == "db-7"
        t.request.assert_called_once_with("GET", "/databases/db-7")

    def test_archive(self):
        t = make_sync_transport(_database_dict())
        DatabaseAPI(t).archive("db-1")
        t.request.assert_called_once_with("PATCH", "/databases/db-1", json={"in_trash": True})

    async def test_async_restore(self):
        t = make_async_transport(_database_dict())
        await AsyncDatabaseAPI(t).restore("db-1")
        t.request.assert_awaited_once_with("PATCH", "/databases/db-1", json={"in_trash": False})


class TestDataSourceAPI:
    def test_retrieve_decodes_schema(self):
        t = make_sync_transport(_data_source_dict())
        ds = DataSourceAPI(t).retrieve("ds-1")
        t.request.assert_called_once_with("GET", "/data_sources/ds-1")
        assert isinstance(ds, DataSource)
        assert ds.properties["Stage"].type == "select"
        assert ds.properties["Stage"].schema.options[0].name == "Todo"

    def test_create(self):
        t = make_sync_transport(_data_source_dict("ds-2"))
        request = (
            CreateDataSourceRequestBuilder(DatabaseParent("db-1"))
            .title("Archive")
            .properties(lambda p: p.title("Name"))
            .build()
        )
        DataSourceAPI(t).create(request)
        body = t.request.call_args.kwargs["json"]
        assert body["parent"] == {"type": "database_id", "database_id": "db-1"}
        assert body["properties"] == {"Name": {"title": {}}}

    def test_update_sends_explicit_null_for_removed_property(self):
        t = make_sync_transport(_data_source_dict())
        request = UpdateDataSourceRequestBuilder().properties(lambda p: p.remove("Old")).build()
        DataSourceAPI(t).update("ds-1", request)
        t.request.assert_called_once_with(
            "PATCH", "/data_sources/ds-1", json={"properties": {"Old": None}}
        )

    def test_query_sends_filter_and_properties(self):
        t = make_sync_transport(list_dict([page_dict("p1")]))
        query = (
            QueryBuilder()
            .filter(lambda f: f.checkbox("Done").equals(True))
            .filter_properties("title")
            .build()
        )
        page = DataSourceAPI(t).query("ds-1", query)
        t.request.assert_called_once_with(
            "POST",
            "/data_sources/ds-1/query",
            json={"filter": {"property": "Done", "checkbox": {"equals": True}}},
            params=[("filter_properties[]", "title")],
        )
        assert isinstance(page.results[0], Page)

    def test_query_without_request(self):
        t = make_sync_transport(list_dict([]))
        DataSourceAPI(t).query("ds-1")
        t.request.assert_called_once_with("POST", "/data_sources/ds-1/query", json={}, params=None)

    def test_query_validates_page_size(self):
        t = make_sync_transport({})
        with pytest.raises(NotionkitValidationError):
            DataSourceAPI(t).query("ds-1", QueryBuilder().page_size(101).build())
        t.request.assert_not_called()

    def test_query_all_paginates_with_same_filter(self):
        t = make_sync_transport(
            list_dict([page_dict("p1"), page_dict("p2")], "c1"),
            list_dict([page_dict("p3"), page_dict("p4")], "c2"),
            list_dict([page_dict("p5")]),
        )
        query = QueryBuilder().filter(lambda f: f.title("Name").is_not_empty()).page_size(2).build()
        pages = DataSourceAPI(t).query_all("ds-1", query)
        assert [p.id for p in pages] == ["p1", "p2", "p3", "p4", "p5"]
        bodies = [c.kwargs["json"] for c in t.request.call_args_list]
        assert [b.get("start_cursor") for b in bodies] == [None, "c1", "c2"]
        assert all(b["page_size"] == 2 for b in bodies)
        assert all(b["filter"] == query.filter.to_dict() for b in bodies)

    def test_iter_query(self):
        t = make_sync_transport(list_dict([page_dict("p1")], "c1"), list_dict([page_dict("p2")]))
        assert [p.id for p in DataSourceAPI(t).iter_query("ds-1")] == ["p1", "p2"]

    def test_list_templates(self):
        t = make_sync_transport({
            "templates": [{"id": "t1", "name": "Bug", "is_default": True}],
            "has_more": False,
            "next_cursor": None,
        })
        templates = DataSourceAPI(t).list_templates("ds-1", name="Bug")
        t.request.assert_called_once_with(
            "GET", "/data_sources/ds-1/templates", params={"name": "Bug"}
        )
        assert templates[0].name == "Bug"
        assert templates[0].is_default is True


class TestAsyncDataSourceAPI:
    async def test_query_all(self):
        t = make_async_transport(list_dict([page_dict("p1")], "c1"), list_dict([page_dict("p2")]))
        pages = await AsyncDataSourceAPI(t).query_all("ds-1")
        assert [p.id for p in pages] == ["p1", "p2"]

    async def test_iter_query(self):
        t = make_async_transport(list_dict([page_dict("p1")]))
        ids = [p.id async for p in AsyncDataSourceAPI(t).iter_query("ds-1")]
        assert ids == ["p1"]


# ===========================================================================
# Comments, users, search
# ===========================================================================

def _comment_dict(comment_id: str = "c1") -> dict:
    return {
        "object": "comment",
        "id": comment_id,
        "discussion_id": "d1",
        "rich_text": [{"type": "text", "text": {"content": "LGTM"}, "plain_text": "LGTM"}],
        "display_name": {"type": "integration", "resolved_name": "Bot"},
    }


class TestCommentAPI:
    def test_create_on_page(self):
        t = make_sync_transport(_comment_dict())
        request = CreateCommentRequestBuilder(page_id="pg-1").text("LGTM").build()
        comment = CommentAPI(t).create(request)
        body = t.request.call_args.kwargs["json"]
        assert body["parent"] == {"type": "page_id", "page_id": "pg-1"}
        assert isinstance(comment, Comment)
        assert comment.text == "LGTM"
        assert comment.display_name == "Bot"

    def test_create_rejects_four_attachments(self):
        t = make_sync_transport({})
        builder = CreateCommentRequestBuilder(discussion_id="d1").text("files")
        for i in range(4):
            builder.attach(f"f{i}")
        with pytest.raises(NotionkitValidationError):
            CommentAPI(t).create(builder.build())
        t.request.assert_not_called()

    def test_list_all(self):
        t = make_sync_transport(list_dict([_comment_dict("c1")], "x"), list_dict([_comment_dict("c2")]))
        comments = CommentAPI(t).list_all("pg-1")
        assert [c.id for c in comments] == ["c1", "c2"]
        assert t.request.call_args_list[0].kwargs["params"] == {"block_id": "pg-1"}
        assert t.request.call_args_list[1].kwargs["params"] == {"block_id": "pg-1", "start_cursor": "x"}

    async def test_async_list(self):
        t = make_async_transport(list_dict([_comment_dict()]))
        page = await AsyncCommentAPI(t).list("pg-1", page_size=5)
        t.request.assert_awaited_once_with(
            "GET", "/comments", params={"block_id": "pg-1", "page_size": 5}
        )
        assert page.results[0].id == "c1"


class TestUserAPI:
    def test_me(self):
        t = make_sync_transport({"object": "user", "id": "u1", "type": "bot", "bot": {"workspace_name": "Acme"}})
        user = UserAPI(t).me()
        t.request.assert_called_once_with("GET", "/users/me")
        assert isinstance(user, User)
        assert user.is_bot
        assert user.workspace_name == "Acme"

    def test_list_all(self):
        person = {"object": "user", "id": "u2", "type": "person", "person": {"email": "a@b.c"}}
        t = make_sync_transport(list_dict([person]))
        users = UserAPI(t).list_all()
        t.request.assert_called_once_with("GET", "/users", params=None)
        assert users[0].email == "a@b.c"

    async def test_async_list_all(self):
        t = make_async_transport(
            list_dict([{"object": "user", "id": "u1"}], "c"),
            list_dict([{"object": "user", "id": "u2"}]),
        )
        users = await AsyncUserAPI(t).list_all(page_size=1)
        assert [u.id for u in users] == ["u1", "u2"]


class TestSearchAPI:
    def test_search_body(self):
        t = make_sync_transport(list_dict([page_dict("p1")]))
        request = SearchRequest(query="plan", object_type="page", sort_direction="descending")
        page = SearchAPI(t).search(request)
        t.request.assert_called_once_with(
            "POST",
            "/search",
            json={
                "query": "plan",
                "filter": {"property": "object", "value": "page"},
                "sort": {"timestamp": "last_edited_time", "direction": "descending"},
            },
        )
        assert isinstance(page.results[0], Page)

    def test_search_decodes_mixed_results(self):
        t = make_sync_transport(list_dict([page_dict("p1"), _data_source_dict("ds-1")]))
        results = SearchAPI(t).search().results
        assert isinstance(results[0], Page)
        assert isinstance(results[1], DataSource)

    def test_search_all(self):
        t = make_sync_transport(list_dict([page_dict("p1")], "c1"), list_dict([page_dict("p2")]))
        results = SearchAPI(t).search_all(SearchRequest(query="x"))
        assert [r.id for r in results] == ["p1", "p2"]
        assert t.request.call_args_list[1].kwargs["json"] == {"query": "x", "start_cursor": "c1"}

    def test_invalid_object_type(self):
        with pytest.raises(ValueError):
            SearchRequest(object_type="database")

    async def test_async_search_all(self):
        t = make_async_transport(list_dict([page_dict("p1")]))
        results = await AsyncSearchAPI(t).search_all()
        assert [r.id for r in results] == ["p1"]
