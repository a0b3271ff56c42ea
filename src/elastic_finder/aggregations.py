"""Aggregation body builders and bucket formatting helpers."""

from __future__ import annotations

from typing import Any


def terms_aggregation(*, field: str, size: int = 10, min_doc_count: int = 1) -> dict[str, Any]:
    """Build a terms aggregation body.

    Args:
        field (str): Keyword field to bucket on.
        size (int): Maximum number of buckets.
        min_doc_count (int): Minimum document count per bucket.

    Returns:
        dict[str, Any]: Aggregation payload.

    """
    return {
        "terms": {
            "field": field,
            "size": max(1, size),
            "min_doc_count": max(1, min_doc_count),
        },
    }


def significant_terms_aggregation(*, field: str, size: int = 10) -> dict[str, Any]:
    """Build a significant_terms aggregation body.

    Returns:
        dict[str, Any]: Aggregation payload.

    """
    return {
        "significant_terms": {
            "field": field,
            "size": max(1, size),
        },
    }


def significant_text_aggregation(
    *,
    field: str,
    size: int = 10,
    filter_duplicate_text: bool = True,
) -> dict[str, Any]:
    """Build a significant_text aggregation body.

    Returns:
        dict[str, Any]: Aggregation payload.

    """
    return {
        "significant_text": {
            "field": field,
            "size": max(1, size),
            "filter_duplicate_text": filter_duplicate_text,
        },
    }


def bucket_counts(aggregation: dict[str, Any]) -> dict[str, int]:
    """Map bucket keys to document counts.

    Buckets may report their count as `doc_count` (backend default) or `count`.

    Args:
        aggregation (dict[str, Any]): Raw aggregation result.

    Returns:
        dict[str, int]: Document count per bucket key, in bucket order.

    """
    counts: dict[str, int] = {}
    for bucket in aggregation.get("buckets", []):
        count = bucket.get("doc_count", bucket.get("count", 0))
        counts[str(bucket["key"])] = int(count)
    return counts


def bucket_keys(aggregation: dict[str, Any]) -> list[str]:
    """Return bucket keys in bucket order."""
    return [str(bucket["key"]) for bucket in aggregation.get("buckets", [])]
