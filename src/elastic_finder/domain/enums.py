"""Typed enumerations and conversions for CLI/domain choices."""

from __future__ import annotations

from enum import StrEnum

from elastic_finder.errors import UnsupportedClauseCategoryError


class BackendName(StrEnum):
    """Represent supported search backends."""

    ELASTICSEARCH = "elasticsearch"
    OPENSEARCH = "opensearch"
    HTTP = "http"


class ClauseCategory(StrEnum):
    """Represent the keyed clause collections of a builder."""

    MUST = "must"
    SHOULD = "should"
    MUST_NOT = "must_not"
    FILTER = "filter"
    AGGREGATION = "aggregation"


class IndexAction(StrEnum):
    """Represent index lifecycle actions exposed on the CLI."""

    EXISTS = "exists"
    CREATE = "create"
    DELETE = "delete"
    FLUSH = "flush"


BOOL_CATEGORIES: tuple[ClauseCategory, ...] = (
    ClauseCategory.MUST,
    ClauseCategory.SHOULD,
    ClauseCategory.MUST_NOT,
    ClauseCategory.FILTER,
)


def parse_clause_category(value: ClauseCategory | str) -> ClauseCategory:
    """Parse one clause category value.

    Args:
        value (ClauseCategory | str): Raw category value.

    Raises:
        UnsupportedClauseCategoryError: If the category is not supported.

    Returns:
        ClauseCategory: Parsed category.

    """
    if isinstance(value, ClauseCategory):
        return value
    normalized = value.strip().lower()
    try:
        return ClauseCategory(normalized)
    except ValueError as exc:
        raise UnsupportedClauseCategoryError(normalized) from exc
