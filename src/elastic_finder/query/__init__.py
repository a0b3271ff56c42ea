"""Clause accumulation and request compilation."""

from elastic_finder.query.compiler import TIEBREAKER_SORT_KEY, QueryRequest, compile_query, compute_offset
from elastic_finder.query.store import ClauseStore

__all__ = ["TIEBREAKER_SORT_KEY", "ClauseStore", "QueryRequest", "compile_query", "compute_offset"]
