"""notionkit.notion_api -- Notion API transport and endpoint wrappers.

This sub-package provides:

* :mod:`.rate_limit` -- Rate-limit header tracking and strategy presets.
* :mod:`.retries` -- Retry decision logic and exponential backoff.
* :mod:`.transport` -- HTTP transport with auth, pacing and 429 retries.
* :mod:`.pagination` -- Cursor walking (collect-all and lazy iteration).
* :mod:`.pages`, :mod:`.blocks`, :mod:`.databases`, :mod:`.data_sources`,
  :mod:`.comments`, :mod:`.users`, :mod:`.files`, :mod:`.search` --
  endpoint wrappers returning typed models.
"""

from __future__ import annotations

from .blocks import AsyncBlockAPI, BlockAPI
from .comments import AsyncCommentAPI, CommentAPI
from .data_sources import AsyncDataSourceAPI, DataSourceAPI
from .databases import AsyncDatabaseAPI, DatabaseAPI
from .files import AsyncFileAPI, FileAPI
from .pages import AsyncPageAPI, PageAPI
from .pagination import (
    acollect_all,
    aiterate,
    aiterate_pages,
    collect_all,
    iterate,
    iterate_pages,
)
from .rate_limit import (
    AsyncRateLimitTracker,
    RateLimitMode,
    RateLimitState,
    RateLimitStrategy,
    RateLimitTracker,
)
from .retries import compute_backoff, should_retry
from .search import AsyncSearchAPI, SearchAPI
from .transport import AsyncNotionTransport, NotionTransport
from .users import AsyncUserAPI, UserAPI

__all__ = [
    "AsyncBlockAPI",
    "AsyncCommentAPI",
    "AsyncDataSourceAPI",
    "AsyncDatabaseAPI",
    "AsyncFileAPI",
    "AsyncNotionTransport",
    "AsyncPageAPI",
    "AsyncRateLimitTracker",
    "AsyncSearchAPI",
    "AsyncUserAPI",
    "BlockAPI",
    "CommentAPI",
    "DataSourceAPI",
    "DatabaseAPI",
    "FileAPI",
    "NotionTransport",
    "PageAPI",
    "RateLimitMode",
    "RateLimitState",
    "RateLimitStrategy",
    "RateLimitTracker",
    "SearchAPI",
    "UserAPI",
    "acollect_all",
    "aiterate",
    "aiterate_pages",
    "collect_all",
    "compute_backoff",
    "iterate",
    "iterate_pages",
    "should_retry",
]
