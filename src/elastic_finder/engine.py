"""Builder base: clause mutation, index bootstrap and search execution."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Self

from elastic_finder.domain import ClauseCategory, IndexDescriptor
from elastic_finder.errors import BuilderSpentError, MissingIndexNameError, UnformattedAggregationError
from elastic_finder.indices import IndexManager
from elastic_finder.pagination import DEFAULT_PAGE_NAME, StaticPageResolver
from elastic_finder.query import ClauseStore, compile_query
from elastic_finder.results import materialize

if TYPE_CHECKING:
    from collections.abc import Sequence

    from elastic_finder.domain import IndexSettings, PageResult
    from elastic_finder.query import QueryRequest
    from elastic_finder.search.protocols import PageResolver, RecordLookup, SearchBackend

AggregationFormatter = Callable[[dict[str, Any]], Any]

DEFAULT_PAGE_SIZE = 10
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_logger = logging.getLogger(__name__)


class HitIdLookup:
    """Record lookup returning the hit identifiers themselves."""

    def find_by_ids(self, ids: Sequence[str]) -> list[str]:  # noqa: PLR6301
        """Return `ids` unchanged."""
        return list(ids)


def entity_name(entity: object) -> str:
    """Return the type name of an entity given as string, class or instance."""
    if isinstance(entity, str):
        return entity
    if isinstance(entity, type):
        return entity.__name__
    return type(entity).__name__


def resolve_index_name(entity: object) -> str:
    """Resolve the default index of an entity.

    Resolution order: `searchable_as()`, then `__tablename__`, then the
    snake_case entity type name.

    Args:
        entity (object): Entity class, instance or type name.

    Raises:
        MissingIndexNameError: If no entity is given.

    Returns:
        str: Index name.

    """
    if entity is None:
        raise MissingIndexNameError(entity)

    searchable_as = getattr(entity, "searchable_as", None)
    if callable(searchable_as):
        return str(searchable_as())

    table_name = getattr(entity, "__tablename__", None)
    if table_name:
        return str(table_name)

    return _CAMEL_BOUNDARY.sub("_", entity_name(entity)).lower()


class SearchEngine(ABC):
    """Accumulate clauses, then execute exactly one paginated search.

    Constructing a builder makes sure its index exists, creating it with the
    settings from `mappings()` when it does not. After `paginate` succeeds the
    builder is spent; obtain a new one for the next query.
    """

    track_total_hits: bool = True
    preserve_hit_order: bool = True
    record_id_field: str = "id"

    def __init__(
        self,
        entity: object = None,
        *,
        backend: SearchBackend,
        records: RecordLookup | None = None,
        pages: PageResolver | None = None,
        index: str | None = None,
    ) -> None:
        """Bind collaborators, resolve the index and bootstrap it.

        Args:
            entity (object): Entity searched by this builder.
            backend (SearchBackend): Search backend adapter.
            records (RecordLookup | None): Lookup hydrating hit ids; defaults to
                the entity when it defines `find_by_ids`, else to the ids themselves.
            pages (PageResolver | None): Current page/path resolver.
            index (str | None): Explicit index overriding the entity default.

        """
        self.entity = entity
        self.backend = backend
        self.records = records if records is not None else _default_records(entity)
        self.pages = pages if pages is not None else StaticPageResolver()
        self.page = 1
        self.page_size = DEFAULT_PAGE_SIZE
        self.page_name = DEFAULT_PAGE_NAME
        self._store = ClauseStore()
        self._formatters: dict[str, AggregationFormatter] = dict(self.aggregation_formatters())
        self._spent = False

        self.index = index or resolve_index_name(entity)
        self.indices.ensure()

    @abstractmethod
    def mappings(self) -> IndexSettings:
        """Return the settings used when creating the index."""

    def aggregation_formatters(self) -> Mapping[str, AggregationFormatter]:  # noqa: PLR6301
        """Return aggregation formatters registered at construction."""
        return {}

    @property
    def descriptor(self) -> IndexDescriptor:
        """Return the current index name with its declared settings."""
        return IndexDescriptor(name=self.index, settings=self.mappings())

    @property
    def indices(self) -> IndexManager:
        """Return an index manager for the current index."""
        return IndexManager(backend=self.backend, descriptor=self.descriptor)

    @property
    def spent(self) -> bool:
        """Return whether the builder already executed its search."""
        return self._spent

    def _ensure_assembling(self) -> None:
        if self._spent:
            raise BuilderSpentError

    # Setters

    def set_index(self, index: str) -> Self:
        """Override the index resolved at construction."""
        self._ensure_assembling()
        self.index = index
        return self

    def set_clause(self, category: ClauseCategory | str, key: str, body: Any) -> Self:
        """Write one clause into a category.

        Args:
            category (ClauseCategory | str): Target category.
            key (str): Clause key within the category.
            body (Any): Backend clause body, not validated.

        Returns:
            Self: This builder.

        """
        self._ensure_assembling()
        self._store.set_clause(category, key, body)
        return self

    def set_must_query(self, key: str, body: Any) -> Self:
        """Add a clause every hit must match."""
        return self.set_clause(ClauseCategory.MUST, key, body)

    def set_should_query(self, key: str, body: Any) -> Self:
        """Add a clause that raises the score of matching hits."""
        return self.set_clause(ClauseCategory.SHOULD, key, body)

    def set_must_not_query(self, key: str, body: Any) -> Self:
        """Add a clause no hit may match."""
        return self.set_clause(ClauseCategory.MUST_NOT, key, body)

    def set_filter(self, key: str, body: Any) -> Self:
        """Add a non-scoring filter clause."""
        return self.set_clause(ClauseCategory.FILTER, key, body)

    def set_aggregation(self, key: str, body: Any) -> Self:
        """Add an aggregation; its result needs a registered formatter."""
        return self.set_clause(ClauseCategory.AGGREGATION, key, body)

    def set_script(self, body: dict[str, Any]) -> Self:
        """Set the single script block, replacing any previous one."""
        self._ensure_assembling()
        self._store.set_script(body)
        return self

    def add_sort(self, field: str, order: str | None = None) -> Self:
        """Add a sort criterion applied before the tiebreaker.

        Args:
            field (str): Sort field.
            order (str | None): `asc` or `desc`; backend default when omitted.

        Returns:
            Self: This builder.

        """
        self._ensure_assembling()
        self._store.add_sort(field if order is None else {field: {"order": order}})
        return self

    def register_formatter(self, name: str, formatter: AggregationFormatter) -> Self:
        """Register the formatter of one aggregation name."""
        self._ensure_assembling()
        self._formatters[name] = formatter
        return self

    def formatter_for(self, name: str) -> AggregationFormatter:
        """Return the formatter registered for an aggregation.

        Raises:
            UnformattedAggregationError: If none is registered.

        Returns:
            AggregationFormatter: Formatter callable.

        """
        try:
            return self._formatters[name]
        except KeyError as exc:
            raise UnformattedAggregationError(name) from exc

    # Execution

    def build_request(self) -> QueryRequest:
        """Compile the current clauses without executing them.

        Returns:
            QueryRequest: Request for the current page settings.

        """
        return compile_query(
            self._store,
            index=self.index,
            page=self.page,
            page_size=self.page_size,
            track_total_hits=self.track_total_hits,
        )

    def paginate(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_name: str = DEFAULT_PAGE_NAME,
        page: int | None = None,
    ) -> PageResult:
        """Execute the query and materialize one page of results.

        Args:
            page_size (int): Hits per page; 0 only counts and aggregates.
            page_name (str): Query-string parameter used in page links.
            page (int | None): 1-based page; resolved from `pages` when omitted.

        Returns:
            PageResult: Materialized page.

        """
        self._ensure_assembling()
        self.page_size = page_size
        self.page_name = page_name
        self.page = page or self.pages.current_page()

        request = self.build_request()
        _logger.debug("Searching index '%s' (page=%d, size=%d).", self.index, self.page, self.page_size)
        raw = self.backend.search(request=request)
        self._spent = True

        return materialize(
            self,
            raw,
            page=self.page,
            page_size=self.page_size,
            page_name=self.page_name,
            path=self.pages.current_path(),
        )

    # Index lifecycle

    def index_exists(self) -> bool:
        """Return whether the index exists."""
        return self.indices.exists()

    def create_index(self) -> dict[str, Any]:
        """Create the index; an existing index raises `IndexConflictError`."""
        return self.indices.create()

    def delete_index(self) -> dict[str, Any]:
        """Delete the index; a missing index raises `IndexMissingError`."""
        return self.indices.delete()

    def flush(self) -> str:
        """Delete and recreate the index, dropping every document.

        Returns:
            str: Confirmation message naming the index.

        """
        return self.indices.flush()


def _default_records(entity: object) -> RecordLookup:
    if callable(getattr(entity, "find_by_ids", None)):
        return entity  # type: ignore[return-value]
    return HitIdLookup()
