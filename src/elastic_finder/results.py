"""Turn raw search responses into paginated, model-shaped results."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from elastic_finder.domain import PageResult, PaginationLinks
from elastic_finder.errors import MalformedResponseError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from elastic_finder.engine import SearchEngine

_TOTAL_HITS_PATH = "hits.total.value"
_HIT_IDS_PATH = "hits.hits[]._id"
_logger = logging.getLogger(__name__)


def extract_total_hits(raw: Mapping[str, Any]) -> int:
    """Read the total hit count of a response.

    Args:
        raw (Mapping[str, Any]): Raw backend response.

    Raises:
        MalformedResponseError: If `hits.total.value` is absent.

    Returns:
        int: Total hit count, as reported.

    """
    try:
        return raw["hits"]["total"]["value"]
    except (KeyError, TypeError) as exc:
        raise MalformedResponseError(_TOTAL_HITS_PATH) from exc


def extract_hit_ids(raw: Mapping[str, Any]) -> list[str]:
    """Read hit identifiers in backend order.

    Args:
        raw (Mapping[str, Any]): Raw backend response.

    Raises:
        MalformedResponseError: If the hits list or one `_id` is absent.

    Returns:
        list[str]: Hit identifiers.

    """
    try:
        return [hit["_id"] for hit in raw["hits"]["hits"]]
    except (KeyError, TypeError) as exc:
        raise MalformedResponseError(_HIT_IDS_PATH) from exc


def record_identifier(record: Any, *, id_field: str = "id") -> Any | None:
    """Return the identifier of a resolved record, if it exposes one."""
    if isinstance(record, Mapping):
        return record.get(id_field)
    return getattr(record, id_field, None)


def order_by_hits(records: Sequence[Any], ids: Sequence[Any], *, id_field: str = "id") -> list[Any]:
    """Reorder resolved records to follow backend hit order.

    Records whose identifier is not among the hits keep their relative order
    at the end. When any record lacks an identifier the lookup order is kept.

    Args:
        records (Sequence[Any]): Records as returned by the lookup.
        ids (Sequence[Any]): Hit identifiers in backend order.
        id_field (str): Record attribute or key holding the identifier.

    Returns:
        list[Any]: Records in hit order.

    """
    keys = [record_identifier(record, id_field=id_field) for record in records]
    if any(key is None for key in keys):
        return list(records)

    rank = {str(hit_id): position for position, hit_id in enumerate(ids)}
    pairs = sorted(zip(keys, records, strict=True), key=lambda pair: rank.get(str(pair[0]), len(rank)))
    return [record for _, record in pairs]


def resolve_models(builder: SearchEngine, raw: Mapping[str, Any], *, page_size: int) -> tuple[Any, ...]:
    """Resolve the hits of a response into domain records.

    A zero page size short-circuits without calling the record lookup.

    Returns:
        tuple[Any, ...]: Resolved records.

    """
    if not page_size:
        return ()

    ids = extract_hit_ids(raw)
    records = list(builder.records.find_by_ids(ids))
    if builder.preserve_hit_order:
        records = order_by_hits(records, ids, id_field=builder.record_id_field)
    _logger.debug("Resolved %d records from %d hits.", len(records), len(ids))
    return tuple(records)


def format_aggregations(builder: SearchEngine, raw: Mapping[str, Any]) -> dict[str, Any]:
    """Apply the builder's registered formatter to every response aggregation.

    Raises:
        UnformattedAggregationError: If an aggregation has no formatter.

    Returns:
        dict[str, Any]: Formatted value per aggregation name.

    """
    formatted: dict[str, Any] = {}
    for name, aggregation in (raw.get("aggregations") or {}).items():
        formatter = builder.formatter_for(name)
        formatted[name] = formatter(aggregation)
    return formatted


def materialize(  # noqa: PLR0913
    builder: SearchEngine,
    raw: dict[str, Any],
    *,
    page: int,
    page_size: int,
    page_name: str,
    path: str,
) -> PageResult:
    """Build the result page of one executed search.

    Args:
        builder (SearchEngine): Builder that executed the search.
        raw (dict[str, Any]): Raw backend response.
        page (int): Current 1-based page.
        page_size (int): Requested page size.
        page_name (str): Query-string parameter carrying the page.
        path (str): Current request path used in page links.

    Returns:
        PageResult: Materialized page.

    """
    total_hits = extract_total_hits(raw)
    models = resolve_models(builder, raw, page_size=page_size)
    links = PaginationLinks(
        total=total_hits,
        per_page=page_size,
        current_page=page,
        path=path,
        page_name=page_name,
    )
    aggregations = format_aggregations(builder, raw)
    return PageResult(
        total_hits=total_hits,
        models=models,
        links=links,
        aggregations=aggregations,
        raw=raw,
    )
