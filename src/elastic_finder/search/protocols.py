"""Protocols for the collaborators a builder talks to."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from elastic_finder.query.compiler import QueryRequest


class SearchBackend(Protocol):
    """Define a thin interface for Elasticsearch/OpenSearch operations."""

    backend_name: str

    def search(self, *, request: QueryRequest) -> dict[str, Any]:
        """Execute a compiled search request.

        Args:
            request (QueryRequest): Compiled request.

        Returns:
            dict[str, Any]: Raw backend response.

        """

    def index_exists(self, *, index: str) -> bool:
        """Check whether an index exists.

        Args:
            index (str): Index name.

        Returns:
            bool: Whether the index exists.

        """

    def create_index(self, *, index: str, body: dict[str, Any]) -> dict[str, Any]:
        """Create an index.

        Args:
            index (str): Index name.
            body (dict[str, Any]): Settings and mappings payload.

        Returns:
            dict[str, Any]: Backend acknowledgement.

        """

    def delete_index(self, *, index: str) -> dict[str, Any]:
        """Delete an index.

        Args:
            index (str): Index name.

        Returns:
            dict[str, Any]: Backend acknowledgement.

        """


class RecordLookup(Protocol):
    """Resolve hit identifiers into domain records."""

    def find_by_ids(self, ids: Sequence[str]) -> Sequence[Any]:
        """Return the records matching `ids`, in the lookup's own order."""


class PageResolver(Protocol):
    """Resolve the current page and request path."""

    def current_page(self) -> int:
        """Return the current 1-based page number."""

    def current_path(self) -> str:
        """Return the current request path."""
