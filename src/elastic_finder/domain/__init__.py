"""Domain contracts for elastic-finder."""

from elastic_finder.domain.contracts import IndexDescriptor, IndexSettings, PageResult, PaginationLinks
from elastic_finder.domain.enums import (
    BOOL_CATEGORIES,
    BackendName,
    ClauseCategory,
    IndexAction,
    parse_clause_category,
)

__all__ = [
    "BOOL_CATEGORIES",
    "BackendName",
    "ClauseCategory",
    "IndexAction",
    "IndexDescriptor",
    "IndexSettings",
    "PageResult",
    "PaginationLinks",
    "parse_clause_category",
]
