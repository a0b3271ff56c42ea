"""Generic builder used when an entity has no specialized builder."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Self

from elastic_finder.aggregations import bucket_counts, terms_aggregation
from elastic_finder.domain import IndexSettings
from elastic_finder.engine import SearchEngine

if TYPE_CHECKING:
    from collections.abc import Sequence

    from elastic_finder.engine import AggregationFormatter

_WHITESPACE_RUN = re.compile(r"\s+")
_MATCH_ALL_QUERIES = frozenset({"", "*", "match_all"})


def normalize_match_text(text: str) -> str:
    """Trim, collapse inner whitespace runs to one space and lowercase.

    Returns:
        str: Normalized text.

    """
    return _WHITESPACE_RUN.sub(" ", text.strip()).lower()


class Builder(SearchEngine):
    """Search any entity through a single free-text field."""

    match_field = "message"
    number_of_shards = 1
    number_of_replicas = 0

    def mappings(self) -> IndexSettings:
        """Return one shard without replicas.

        Returns:
            IndexSettings: Index creation settings.

        """
        return IndexSettings(
            number_of_shards=self.number_of_shards,
            number_of_replicas=self.number_of_replicas,
        )

    def match(self, query_string: str) -> Self:
        """Require every term of `query_string` in `match_field`.

        The text is trimmed, inner whitespace runs collapse to one space and
        the result is lowercased before the clause is written.

        Args:
            query_string (str): Free text typed by a user.

        Returns:
            Self: This builder.

        """
        return self.set_must_query(
            "match",
            {
                self.match_field: {
                    "query": normalize_match_text(query_string),
                    "operator": "AND",
                },
            },
        )

    def query_string(self, query: str, fields: Sequence[str] | None = None) -> Self:
        """Add a simple query string over several fields.

        An empty query, `*` or `match_all` matches every document instead.

        Args:
            query (str): Query expression.
            fields (Sequence[str] | None): Searched fields; `match_field` by default.

        Returns:
            Self: This builder.

        """
        normalized = query.strip()
        if normalized in _MATCH_ALL_QUERIES:
            return self.set_must_query("match_all", {})

        return self.set_must_query(
            "simple_query_string",
            {
                "query": normalized,
                "fields": list(fields or (self.match_field,)),
                "default_operator": "and",
            },
        )

    def terms(
        self,
        name: str,
        *,
        field: str,
        size: int = 10,
        min_doc_count: int = 1,
        formatter: AggregationFormatter = bucket_counts,
    ) -> Self:
        """Aggregate hits by the values of a keyword field.

        Args:
            name (str): Aggregation name.
            field (str): Keyword field.
            size (int): Maximum number of buckets.
            min_doc_count (int): Minimum document count per bucket.
            formatter (AggregationFormatter): Formatter registered for `name`.

        Returns:
            Self: This builder.

        """
        self.set_aggregation(name, terms_aggregation(field=field, size=size, min_doc_count=min_doc_count))
        return self.register_formatter(name, formatter)
