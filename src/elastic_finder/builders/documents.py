"""Builder specialized for ingested corpus documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from elastic_finder.aggregations import bucket_counts, bucket_keys, significant_terms_aggregation, terms_aggregation
from elastic_finder.builders.generic import Builder
from elastic_finder.builders.registry import default_registry
from elastic_finder.domain import IndexSettings

if TYPE_CHECKING:
    from collections.abc import Mapping

    from elastic_finder.engine import AggregationFormatter

EXTENSIONS_AGGREGATION = "extensions"
TOKENS_AGGREGATION = "tokens"


def document_mapping_body() -> dict[str, Any]:
    """Build the field mapping of the documents index.

    Returns:
        dict[str, Any]: Mapping payload.

    """
    return {
        "properties": {
            "path": {"type": "keyword"},
            "filename": {"type": "keyword"},
            "extension": {"type": "keyword"},
            "content": {"type": "text"},
            "content_raw": {"type": "text"},
            "tokens": {"type": "keyword"},
        },
    }


@default_registry.register("Document")
class DocumentBuilder(Builder):
    """Search documents by content, file extension and path."""

    match_field = "content"

    def mappings(self) -> IndexSettings:
        """Return one shard, no replica and the document field mapping.

        Returns:
            IndexSettings: Index creation settings.

        """
        return IndexSettings(
            number_of_shards=self.number_of_shards,
            number_of_replicas=self.number_of_replicas,
            mappings=document_mapping_body(),
        )

    def aggregation_formatters(self) -> Mapping[str, AggregationFormatter]:
        """Return formatters of the extension and token aggregations."""
        return {
            EXTENSIONS_AGGREGATION: self.format_extensions,
            TOKENS_AGGREGATION: self.format_tokens,
        }

    def with_extensions(self, *extensions: str) -> Self:
        """Keep documents with one of the given file extensions.

        Extensions are lowercased and prefixed with a dot when missing, so
        `PDF`, `pdf` and `.pdf` are equivalent.

        Returns:
            Self: This builder.

        """
        normalized = sorted({f".{extension.strip().lower().lstrip('.')}" for extension in extensions})
        return self.set_filter("terms", {"extension": normalized})

    def under_path(self, prefix: str) -> Self:
        """Keep documents whose path starts with `prefix` (taken verbatim)."""
        return self.set_filter("prefix", {"path": prefix})

    def extension_breakdown(self, size: int = 20) -> Self:
        """Count matching documents per file extension."""
        return self.set_aggregation(EXTENSIONS_AGGREGATION, terms_aggregation(field="extension", size=size))

    def top_tokens(self, size: int = 25) -> Self:
        """Collect the most significant tokens of matching documents."""
        return self.set_aggregation(TOKENS_AGGREGATION, significant_terms_aggregation(field="tokens", size=size))

    def format_extensions(self, aggregation: dict[str, Any]) -> dict[str, int]:  # noqa: PLR6301
        """Return the document count per extension."""
        return bucket_counts(aggregation)

    def format_tokens(self, aggregation: dict[str, Any]) -> list[str]:  # noqa: PLR6301
        """Return significant tokens, most significant first."""
        return bucket_keys(aggregation)
