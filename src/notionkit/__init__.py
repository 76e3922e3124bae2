"""notionkit — Typed Python client for the Notion REST API.

Public re-exports
-----------------

* **Clients:** :class:`NotionkitClient`, :class:`AsyncNotionkitClient`
* **Configuration:** :class:`NotionkitConfig`, :class:`RateLimitStrategy`
* **Errors:** Every :class:`NotionkitError` subclass and :class:`ErrorCode`
* **Builders:** The request DSL entry points from :mod:`notionkit.dsl`
* **Models:** The top-level Notion objects and parents

Usage::

    from notionkit import NotionkitClient, CreatePageRequestBuilder, PageParent

    client = NotionkitClient(token="secret_xxx")
    page = client.pages.create(
        CreatePageRequestBuilder(PageParent("<page_id>"))
        .title("My Page")
        .content(lambda c: c.heading1("Hello").paragraph("World"))
        .build()
    )
"""

from __future__ import annotations

from notionkit.async_client import AsyncNotionkitClient

# ── Clients ────────────────────────────────────────────────────────────
from notionkit.client import NotionkitClient

# ── Configuration ───────────────────────────────────────────────────────
from notionkit.config import NotionkitConfig

# ── Builders ────────────────────────────────────────────────────────────
from notionkit.dsl import (
    CreateCommentRequestBuilder,
    CreateDatabaseRequestBuilder,
    CreateDataSourceRequestBuilder,
    CreateFileUploadRequest,
    CreatePageRequestBuilder,
    QueryBuilder,
    SearchRequest,
    UpdateDataSourceRequestBuilder,
    UpdatePageRequestBuilder,
    build_filter,
    database_properties,
    page_content,
    page_properties,
    rich_text,
)

# ── Errors ──────────────────────────────────────────────────────────────
from notionkit.errors import (
    ErrorCode,
    NotionkitApiError,
    NotionkitAuthError,
    NotionkitError,
    NotionkitNetworkError,
    NotionkitNotFoundError,
    NotionkitPermissionError,
    NotionkitRateLimitError,
    NotionkitValidationError,
)

# ── Models ──────────────────────────────────────────────────────────────
from notionkit.models import (
    Block,
    BlockParent,
    Comment,
    Database,
    DatabaseParent,
    DataSource,
    DataSourceParent,
    FileUpload,
    Page,
    PageParent,
    PaginatedList,
    RichText,
    User,
    WorkspaceParent,
)
from notionkit.notion_api.rate_limit import RateLimitState, RateLimitStrategy

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Clients
    "NotionkitClient",
    "AsyncNotionkitClient",
    # Configuration
    "NotionkitConfig",
    "RateLimitStrategy",
    "RateLimitState",
    # Error base + code enum
    "NotionkitError",
    "ErrorCode",
    "NotionkitValidationError",
    "NotionkitApiError",
    "NotionkitAuthError",
    "NotionkitPermissionError",
    "NotionkitNotFoundError",
    "NotionkitRateLimitError",
    "NotionkitNetworkError",
    # Builders
    "CreatePageRequestBuilder",
    "UpdatePageRequestBuilder",
    "CreateDatabaseRequestBuilder",
    "CreateDataSourceRequestBuilder",
    "UpdateDataSourceRequestBuilder",
    "CreateCommentRequestBuilder",
    "CreateFileUploadRequest",
    "SearchRequest",
    "QueryBuilder",
    "build_filter",
    "database_properties",
    "page_content",
    "page_properties",
    "rich_text",
    # Models — objects
    "Page",
    "Block",
    "Database",
    "DataSource",
    "Comment",
    "User",
    "FileUpload",
    "PaginatedList",
    "RichText",
    # Models — parents
    "PageParent",
    "DatabaseParent",
    "DataSourceParent",
    "BlockParent",
    "WorkspaceParent",
]
