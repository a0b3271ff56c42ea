"""Keyed clause collections accumulated by a builder before compilation."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from elastic_finder.domain.enums import ClauseCategory, parse_clause_category

if TYPE_CHECKING:
    from collections.abc import Mapping


class ClauseStore:
    """Hold one keyed collection per clause category plus a single script.

    A category collection does not exist until its first write, so an unused
    category is distinguishable from one holding an empty clause.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._collections: dict[ClauseCategory, dict[str, Any]] = {}
        self._script: dict[str, Any] | None = None
        self._sort: list[Any] = []

    def set_clause(self, category: ClauseCategory | str, key: str, body: Any) -> None:
        """Insert or overwrite one clause.

        Args:
            category (ClauseCategory | str): Target clause category.
            key (str): Clause key, e.g. `match` or an aggregation name.
            body (Any): Backend clause body, stored without validation.

        """
        parsed = parse_clause_category(category)
        self._collections.setdefault(parsed, {})[key] = body

    def set_script(self, body: dict[str, Any]) -> None:
        """Replace the script slot; the last write wins."""
        self._script = body

    def add_sort(self, criterion: Any) -> None:
        """Append one caller sort criterion."""
        self._sort.append(criterion)

    def has(self, category: ClauseCategory | str) -> bool:
        """Return whether a category holds at least one clause."""
        return bool(self._collections.get(parse_clause_category(category)))

    def get(self, category: ClauseCategory | str) -> Mapping[str, Any] | None:
        """Return a read-only view of one category.

        Args:
            category (ClauseCategory | str): Clause category.

        Returns:
            Mapping[str, Any] | None: Clauses by key, or `None` if never written.

        """
        collection = self._collections.get(parse_clause_category(category))
        if collection is None:
            return None
        return MappingProxyType(collection)

    @property
    def script(self) -> dict[str, Any] | None:
        """Return the active script, if any."""
        return self._script

    @property
    def sort(self) -> tuple[Any, ...]:
        """Return caller sort criteria in insertion order."""
        return tuple(self._sort)
