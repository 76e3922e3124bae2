"""Rich-text builder.

Usage::

    from notionkit.dsl import rich_text

    runs = rich_text(lambda t: t.text("Hello ").bold("world").link("https://x.y", "!"))

Every method appends exactly one run and returns the builder, so calls
may be chained or issued one per line with the same result.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Union

from notionkit.models.base import Color, DateLike, DateRange
from notionkit.models.rich_text import (
    PLAIN,
    Annotations,
    DatabaseMention,
    DateMention,
    EquationRun,
    LinkPreviewMention,
    MentionRun,
    PageMention,
    RichText,
    TextRun,
    UserMention,
)
from notionkit.utils.text_split import split_string


class RichTextBuilder:
    """Accumulates rich-text runs in call order."""

    def __init__(self) -> None:
        self._runs: list[RichText] = []

    def _styled(self, content: str, **flags: object) -> RichTextBuilder:
        self._runs.append(TextRun(content, annotations=replace(PLAIN, **flags)))
        return self

    # ── text ────────────────────────────────────────────────────────────
    def text(self, content: str) -> RichTextBuilder:
        self._runs.append(TextRun(content))
        return self

    def bold(self, content: str) -> RichTextBuilder:
        return self._styled(content, bold=True)

    def italic(self, content: str) -> RichTextBuilder:
        return self._styled(content, italic=True)

    def bold_italic(self, content: str) -> RichTextBuilder:
        return self._styled(content, bold=True, italic=True)

    def code(self, content: str) -> RichTextBuilder:
        return self._styled(content, code=True)

    def strikethrough(self, content: str) -> RichTextBuilder:
        return self._styled(content, strikethrough=True)

    def underline(self, content: str) -> RichTextBuilder:
        return self._styled(content, underline=True)

    def colored(self, content: str, color: Color | str) -> RichTextBuilder:
        return self._styled(content, color=Color(color))

    def background_colored(self, content: str, color: Color | str) -> RichTextBuilder:
        """Like :meth:`colored` but always uses the ``*_background`` variant."""
        return self._styled(content, color=Color(color).as_background())

    def link(self, url: str, display: str | None = None) -> RichTextBuilder:
        """Append a linked run showing *display*, or the URL itself."""
        self._runs.append(TextRun(display if display is not None else url, link=url))
        return self

    def formatted(
        self,
        content: str,
        *,
        bold: bool = False,
        italic: bool = False,
        strikethrough: bool = False,
        underline: bool = False,
        code: bool = False,
        color: Color | str = Color.DEFAULT,
        link: str | None = None,
    ) -> RichTextBuilder:
        annotations = Annotations(bold, italic, strikethrough, underline, code, Color(color))
        self._runs.append(TextRun(content, link=link, annotations=annotations))
        return self

    # ── equations and mentions ──────────────────────────────────────────
    def equation(self, expression: str) -> RichTextBuilder:
        self._runs.append(EquationRun(expression))
        return self

    def user_mention(self, user_id: str) -> RichTextBuilder:
        self._runs.append(MentionRun(UserMention(user_id)))
        return self

    def page_mention(self, page_id: str) -> RichTextBuilder:
        self._runs.append(MentionRun(PageMention(page_id)))
        return self

    def database_mention(self, database_id: str) -> RichTextBuilder:
        self._runs.append(MentionRun(DatabaseMention(database_id)))
        return self

    def date_mention(
        self,
        start: DateLike,
        end: DateLike | None = None,
        time_zone: str | None = None,
    ) -> RichTextBuilder:
        self._runs.append(MentionRun(DateMention(DateRange(start, end, time_zone))))
        return self

    def link_mention(self, url: str) -> RichTextBuilder:
        self._runs.append(MentionRun(LinkPreviewMention(url)))
        return self

    def add(self, run: RichText) -> RichTextBuilder:
        """Append a pre-built run."""
        self._runs.append(run)
        return self

    def build(self) -> list[RichText]:
        return list(self._runs)


def rich_text(fn: Callable[[RichTextBuilder], object]) -> list[RichText]:
    """Run *fn* against a fresh builder and return the runs it appended."""
    builder = RichTextBuilder()
    fn(builder)
    return builder.build()


RichTextInput = Union[str, Sequence[RichText], Callable[[RichTextBuilder], object], None]


def to_rich_text(value: RichTextInput) -> list[RichText]:
    """Coerce the accepted shorthand forms into a list of runs.

    * ``None`` or ``""`` -- no runs
    * ``str`` -- one plain run
    * callable -- run against a fresh :class:`RichTextBuilder`
    * sequence of runs -- copied as-is
    """
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [TextRun(value)]
    if callable(value):
        return rich_text(value)
    return list(value)


def split_rich_text(runs: Sequence[RichText], limit: int = 2000) -> list[RichText]:
    """Split text runs longer than *limit* into consecutive runs.

    Annotations and links are copied onto every piece.  Mentions and
    equations are left untouched.  Never applied implicitly.
    """
    result: list[RichText] = []
    for run in runs:
        if isinstance(run, TextRun) and len(run.content) > limit:
            result.extend(replace(run, content=piece) for piece in split_string(run.content, limit))
        else:
            result.append(run)
    return result
