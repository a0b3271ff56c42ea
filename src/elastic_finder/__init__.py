"""Compose boolean search queries and materialize paginated results."""

from elastic_finder.builders import Builder, BuilderRegistry, DocumentBuilder, default_registry, finder
from elastic_finder.domain import ClauseCategory, IndexDescriptor, IndexSettings, PageResult, PaginationLinks
from elastic_finder.engine import SearchEngine
from elastic_finder.indices import IndexManager
from elastic_finder.pagination import StaticPageResolver, UrlPageResolver
from elastic_finder.query import ClauseStore, QueryRequest, compile_query

__all__ = [
    "Builder",
    "BuilderRegistry",
    "ClauseCategory",
    "ClauseStore",
    "DocumentBuilder",
    "IndexDescriptor",
    "IndexManager",
    "IndexSettings",
    "PageResult",
    "PaginationLinks",
    "QueryRequest",
    "SearchEngine",
    "StaticPageResolver",
    "UrlPageResolver",
    "compile_query",
    "default_registry",
    "finder",
]
