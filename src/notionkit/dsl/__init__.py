"""notionkit.dsl -- builders that produce immutable request objects.

* :mod:`.rich_text` -- rich-text runs.
* :mod:`.blocks` -- block trees (page content).
* :mod:`.properties` -- property schemas and page property values.
* :mod:`.filters` -- typed filter expressions.
* :mod:`.query` -- data source queries.
* :mod:`.requests` -- create/update request objects.
"""

from __future__ import annotations

from .blocks import ColumnListBuilder, PageContentBuilder, TableBuilder, page_content
from .filters import FilterBuilder, build_filter
from .properties import (
    PagePropertiesBuilder,
    PropertySchemaBuilder,
    RelationBuilder,
    SelectOptionsBuilder,
    database_properties,
    external_file,
    page_properties,
    uploaded_file,
)
from .query import QueryBuilder, QueryRequest
from .requests import (
    CreateCommentRequest,
    CreateCommentRequestBuilder,
    CreateDatabaseRequest,
    CreateDatabaseRequestBuilder,
    CreateDataSourceRequest,
    CreateDataSourceRequestBuilder,
    CreateFileUploadRequest,
    CreatePageRequest,
    CreatePageRequestBuilder,
    SearchRequest,
    UpdateDatabaseRequest,
    UpdateDataSourceRequest,
    UpdateDataSourceRequestBuilder,
    UpdatePageRequest,
    UpdatePageRequestBuilder,
)
from .rich_text import RichTextBuilder, rich_text, split_rich_text, to_rich_text

__all__ = [
    "ColumnListBuilder",
    "CreateCommentRequest",
    "CreateCommentRequestBuilder",
    "CreateDataSourceRequest",
    "CreateDataSourceRequestBuilder",
    "CreateDatabaseRequest",
    "CreateDatabaseRequestBuilder",
    "CreateFileUploadRequest",
    "CreatePageRequest",
    "CreatePageRequestBuilder",
    "FilterBuilder",
    "PageContentBuilder",
    "PagePropertiesBuilder",
    "PropertySchemaBuilder",
    "QueryBuilder",
    "QueryRequest",
    "RelationBuilder",
    "RichTextBuilder",
    "SearchRequest",
    "SelectOptionsBuilder",
    "TableBuilder",
    "UpdateDataSourceRequest",
    "UpdateDataSourceRequestBuilder",
    "UpdateDatabaseRequest",
    "UpdatePageRequest",
    "UpdatePageRequestBuilder",
    "build_filter",
    "database_properties",
    "external_file",
    "page_content",
    "page_properties",
    "rich_text",
    "split_rich_text",
    "to_rich_text",
    "uploaded_file",
]
