"""Render a clause store into the single request sent to the backend."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from elastic_finder.domain.enums import BOOL_CATEGORIES, ClauseCategory

if TYPE_CHECKING:
    from elastic_finder.query.store import ClauseStore

TIEBREAKER_SORT_KEY = "_doc"
_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QueryRequest:
    """Represent one compiled search request.

    Args:
        index: Target index name.
        from_: Zero-based hit offset.
        size: Page size.
        track_total_hits: Whether the backend counts every matching hit.
        query: Query expression; `None` when no bool clause was set.
        aggs: Aggregation definitions, if any.
        script: Script block, if any.
        sort: Sort criteria, always ending with the tiebreaker key.

    """

    index: str
    from_: int
    size: int
    track_total_hits: bool = True
    query: dict[str, Any] | None = None
    aggs: dict[str, Any] | None = None
    script: dict[str, Any] | None = None
    sort: tuple[Any, ...] = field(default=(TIEBREAKER_SORT_KEY,))

    def body(self) -> dict[str, Any]:
        """Render the backend search body.

        Returns:
            dict[str, Any]: Search body including pagination keys.

        """
        body: dict[str, Any] = {
            "from": self.from_,
            "size": self.size,
            "track_total_hits": self.track_total_hits,
        }
        if self.query is not None:
            body["query"] = copy.deepcopy(self.query)
        if self.aggs is not None:
            body["aggs"] = copy.deepcopy(self.aggs)
        if self.script is not None:
            body["script"] = copy.deepcopy(self.script)
        body["sort"] = list(self.sort)
        return body

    def to_params(self) -> dict[str, Any]:
        """Render the request as client call parameters.

        Returns:
            dict[str, Any]: Parameters with the index name and the search body.

        """
        return {"index": self.index, "body": self.body()}


def compute_offset(*, page: int, page_size: int) -> int:
    """Compute the hit offset of a 1-based page.

    Pages lower than 1 yield a negative offset which the backend rejects.

    Returns:
        int: Zero-based offset.

    """
    return (page - 1) * page_size


def _render_bool(store: ClauseStore) -> dict[str, Any] | None:
    """Build the bool query from non-empty categories only.

    Returns:
        dict[str, Any] | None: `{"bool": ...}` expression, or `None`.

    """
    bool_query: dict[str, Any] = {}
    for category in BOOL_CATEGORIES:
        clauses = store.get(category)
        if not clauses:
            continue
        bool_query[category.value] = [{key: copy.deepcopy(body)} for key, body in clauses.items()]

    if not bool_query:
        return None
    return {"bool": bool_query}


def compile_query(
    store: ClauseStore,
    *,
    index: str,
    page: int,
    page_size: int,
    track_total_hits: bool = True,
) -> QueryRequest:
    """Compile the store state into a backend request.

    The store is only read, so compiling twice with the same state yields
    equal requests.

    Args:
        store (ClauseStore): Accumulated clauses.
        index (str): Target index name.
        page (int): 1-based page number.
        page_size (int): Number of hits per page.
        track_total_hits (bool): Whether to request exact hit counts.

    Returns:
        QueryRequest: Compiled request.

    """
    aggregations = store.get(ClauseCategory.AGGREGATION)
    request = QueryRequest(
        index=index,
        from_=compute_offset(page=page, page_size=page_size),
        size=page_size,
        track_total_hits=track_total_hits,
        query=_render_bool(store),
        aggs=copy.deepcopy(dict(aggregations)) if aggregations else None,
        script=copy.deepcopy(store.script) if store.script is not None else None,
        sort=(*store.sort, TIEBREAKER_SORT_KEY),
    )
    _logger.debug("Compiled search request for index '%s': %s", index, request.body())
    return request
