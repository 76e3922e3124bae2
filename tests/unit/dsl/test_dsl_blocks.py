"""Tests for the block-tree and rich-text builders."""

from __future__ import annotations

import pytest

from notionkit.dsl import page_content, rich_text, split_rich_text, to_rich_text
from notionkit.models import Block, BlockRequest, BlockType, Color, EmojiIcon, TextRun
from notionkit.models.blocks import EmptyContent, TextContent


class TestPageContent:
    def test_one_block_per_call_in_order(self):
        blocks = page_content(lambda p: (
            p.heading1("Title"),
            p.paragraph("Intro"),
            p.bullet("One"),
            p.bullet("Two"),
            p.divider(),
        ))
        assert [b.type for b in blocks] == [
            BlockType.HEADING_1,
            BlockType.PARAGRAPH,
            BlockType.BULLETED_LIST_ITEM,
            BlockType.BULLETED_LIST_ITEM,
            BlockType.DIVIDER,
        ]

    def test_statement_style_matches_chained_style(self):
        def statements(p):
            p.paragraph("a")
            p.paragraph("b")

        chained = page_content(lambda p: p.paragraph("a").paragraph("b"))
        assert page_content(statements) == chained

    def test_nested_children(self):
        blocks = page_content(lambda p: p.toggle(
            "More",
            lambda c: c.paragraph("hidden").bullet("x", children=lambda cc: cc.paragraph("deep")),
        ))
        toggle = blocks[0]
        assert [child.type for child in toggle.children] == [
            BlockType.PARAGRAPH,
            BlockType.BULLETED_LIST_ITEM,
        ]
        assert toggle.children[1].children[0].text == "deep"

    def test_empty_children_scope_means_no_children(self):
        blocks = page_content(lambda p: p.toggle("Empty", lambda c: None))
        assert blocks[0].children is None

    def test_empty_scope(self):
        assert page_content(lambda p: None) == []

    def test_builds_are_repeatable(self):
        def scope(p):
            p.heading2("H").to_do("task", checked=True)

        assert page_content(scope) == page_content(scope)

    def test_to_do_payload(self):
        block = page_content(lambda p: p.to_do("ship", True))[0]
        assert block.to_dict()["to_do"]["checked"] is True

    def test_callout_takes_emoji_shorthand(self):
        block = page_content(lambda p: p.callout("Note", "💡"))[0]
        assert block.content.icon == EmojiIcon("💡")
        assert block.to_dict()["callout"]["icon"] == {"type": "emoji", "emoji": "💡"}

    def test_code_block(self):
        block = page_content(lambda p: p.code("print(1)", "python"))[0]
        payload = block.to_dict()["code"]
        assert payload["language"] == "python"
        assert payload["rich_text"][0]["text"]["content"] == "print(1)"

    def test_table_rows(self):
        block = page_content(lambda p: p.table(
            2,
            lambda t: t.row("a", "b").row("c", "d"),
            has_column_header=True,
        ))[0]
        assert block.content.table_width == 2
        assert [row.text for row in block.children] == ["a | b", "c | d"]

    def test_column_list(self):
        block = page_content(lambda p: p.column_list(
            lambda cols: cols.column(lambda c: c.paragraph("left")).column(
                lambda c: c.paragraph("right"), width_ratio=0.3
            )
        ))[0]
        assert block.type is BlockType.COLUMN_LIST
        assert len(block.children) == 2
        assert block.children[1].to_dict()["column"] == {
            "width_ratio": 0.3,
            "children": [block.children[1].children[0].to_dict()],
        }

    def test_media_requires_exactly_one_source(self):
        with pytest.raises(ValueError):
            page_content(lambda p: p.image())
        with pytest.raises(ValueError):
            page_content(lambda p: p.image("https://x.y/a.png", file_upload_id="fu"))

    def test_image_from_upload(self):
        block = page_content(lambda p: p.image(file_upload_id="fu-1"))[0]
        assert block.to_dict()["image"]["file_upload"] == {"id": "fu-1"}

    def test_link_to_page_requires_one_target(self):
        with pytest.raises(ValueError):
            page_content(lambda p: p.link_to_page())

    def test_synced_block_reference(self):
        block = page_content(lambda p: p.synced_block_reference("orig"))[0]
        assert block.to_dict()["synced_block"] == {
            "synced_from": {"type": "block_id", "block_id": "orig"}
        }


class TestBlockRequest:
    def test_leaf_type_rejects_children(self):
        child = BlockRequest(BlockType.PARAGRAPH, TextContent())
        with pytest.raises(ValueError):
            BlockRequest(BlockType.DIVIDER, EmptyContent(), [child])

    def test_content_type_checked(self):
        with pytest.raises(TypeError):
            BlockRequest(BlockType.PARAGRAPH, EmptyContent())

    def test_wire_shape(self):
        block = page_content(lambda p: p.paragraph("hi", color=Color.BLUE))[0]
        assert block.to_dict() == {
            "object": "block",
            "type": "paragraph",
            "paragraph": {
                "rich_text": [TextRun("hi").to_dict()],
                "color": "blue",
            },
        }

    def test_decode_of_encoded_request_keeps_content(self):
        request = page_content(lambda p: p.quote(
            lambda t: t.text("see ").bold("this"),
            children=lambda c: c.paragraph("nested"),
        ))[0]
        decoded = Block.from_dict({"id": "b1", **request.to_dict()})
        assert decoded.type is BlockType.QUOTE
        assert decoded.content == request.content
        assert decoded.children[0].content == request.children[0].content
        assert decoded.has_children is True


class TestRichTextBuilder:
    def test_one_run_per_call(self):
        runs = rich_text(lambda t: t.text("Hello ").bold("world").link("https://x.y", "!"))
        assert len(runs) == 3
        assert runs[1].annotations.bold is True
        assert runs[2].link == "https://x.y"
        assert runs[2].content == "!"

    def test_link_without_display_shows_url(self):
        runs = rich_text(lambda t: t.link("https://x.y"))
        assert runs[0].content == "https://x.y"

    def test_background_color(self):
        runs = rich_text(lambda t: t.background_colored("hi", "red"))
        assert runs[0].annotations.color is Color.RED_BACKGROUND

    def test_mentions_and_equations(self):
        runs = rich_text(lambda t: t.user_mention("u1").equation("e=mc^2").page_mention("p1"))
        wire = [r.to_dict() for r in runs]
        assert wire[0]["mention"] == {"type": "user", "user": {"object": "user", "id": "u1"}}
        assert wire[1]["equation"] == {"expression": "e=mc^2"}
        assert wire[2]["mention"]["page"] == {"id": "p1"}

    def test_to_rich_text_shorthands(self):
        assert to_rich_text(None) == []
        assert to_rich_text("") == []
        assert to_rich_text("x") == [TextRun("x")]
        assert to_rich_text([TextRun("y")]) == [TextRun("y")]

    def test_long_text_is_not_split_implicitly(self):
        assert len(to_rich_text("x" * 5000)) == 1

    def test_split_rich_text_keeps_annotations(self):
        runs = rich_text(lambda t: t.bold("a" * 4500))
        pieces = split_rich_text(runs)
        assert [len(p.content) for p in pieces] == [2000, 2000, 500]
        assert all(p.annotations.bold for p in pieces)
