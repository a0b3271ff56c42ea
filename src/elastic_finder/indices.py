"""Index lifecycle management around a declared index descriptor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from elastic_finder.domain import IndexDescriptor
    from elastic_finder.search.protocols import SearchBackend

_FLUSH_MESSAGE = "All documents deleted from {index}"
_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IndexManager:
    """Create, delete and flush one index through a search backend.

    Nothing here guards against concurrent callers: two managers that both see
    the index as absent will both create it, and the second create surfaces
    as `IndexConflictError`.
    """

    backend: SearchBackend
    descriptor: IndexDescriptor

    @property
    def index(self) -> str:
        """Return the managed index name."""
        return self.descriptor.name

    def exists(self) -> bool:
        """Return whether the index exists on the backend."""
        return self.backend.index_exists(index=self.index)

    def ensure(self) -> bool:
        """Create the index when it does not exist yet.

        Returns:
            bool: `True` when this call created the index.

        """
        if self.exists():
            return False
        self.create()
        return True

    def create(self) -> dict[str, Any]:
        """Create the index with its declared settings.

        Raises:
            IndexConflictError: Reported by the backend when the index exists.

        Returns:
            dict[str, Any]: Backend acknowledgement.

        """
        _logger.info("Creating index '%s'.", self.index)
        return self.backend.create_index(index=self.index, body=self.descriptor.settings.to_body())

    def delete(self) -> dict[str, Any]:
        """Delete the index.

        Raises:
            IndexMissingError: Reported by the backend when the index is absent.

        Returns:
            dict[str, Any]: Backend acknowledgement.

        """
        _logger.info("Deleting index '%s'.", self.index)
        return self.backend.delete_index(index=self.index)

    def flush(self) -> str:
        """Drop every document by deleting and recreating the index.

        The two calls are not atomic: if the create fails the index is left
        absent and `create()` must be retried.

        Returns:
            str: Confirmation message naming the index.

        """
        self.delete()
        self.create()
        return _FLUSH_MESSAGE.format(index=self.index)
