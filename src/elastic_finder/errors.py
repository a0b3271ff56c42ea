"""Project-specific exceptions for elastic-finder."""


class ElasticFinderError(Exception):
    """Base exception for the project."""


class MissingOptionalDependencyError(ImportError, ElasticFinderError):
    """Raised when an optional dependency is not installed."""


class UnsupportedBackendError(ValueError, ElasticFinderError):
    """Raised when the user asks for an unsupported backend."""

    def __init__(self, backend: str, supported: str) -> None:
        """Build exception payload for unsupported backend values."""
        super().__init__(f"Unsupported backend '{backend}'. Supported values: {supported}.")


class UnsupportedClauseCategoryError(ValueError, ElasticFinderError):
    """Raised when a clause category name is not recognized."""

    def __init__(self, category: str) -> None:
        """Build exception payload for unknown clause categories."""
        super().__init__(f"Unsupported clause category: {category}")


class MissingBackendUrlError(ValueError, ElasticFinderError):
    """Raised when no backend URL is supplied and no client is injected."""

    def __init__(self) -> None:
        """Build exception payload for missing backend URLs."""
        super().__init__("Backend URL is required when no client instance is provided.")


class MissingIndexNameError(ValueError, ElasticFinderError):
    """Raised when no index name can be resolved for a builder."""

    def __init__(self, entity: object) -> None:
        """Build exception payload for unresolvable index names."""
        super().__init__(f"Cannot resolve an index name for entity {entity!r}; pass `index=` explicitly.")


class InvalidSettingsError(ValueError, ElasticFinderError):
    """Raised when configuration values cannot be parsed."""


class BackendUnavailableError(ConnectionError, ElasticFinderError):
    """Raised when the search backend cannot be reached."""

    def __init__(self, detail: str) -> None:
        """Build exception payload for transport failures."""
        super().__init__(f"Search backend unavailable: {detail}")


class IndexConflictError(FileExistsError, ElasticFinderError):
    """Raised when creating an index that already exists."""

    def __init__(self, index: str) -> None:
        """Build exception payload for index creation conflicts."""
        self.index = index
        super().__init__(f"Index '{index}' already exists.")


class BackendRequestError(RuntimeError, ElasticFinderError):
    """Raised when the search backend rejects a request."""

    def __init__(self, status_code: int, error_type: str, *, index: str) -> None:
        """Build exception payload for rejected backend requests."""
        self.status_code = status_code
        self.error_type = error_type
        self.index = index
        super().__init__(f"Backend rejected request on index '{index}' with status {status_code}: {error_type}")


class IndexMissingError(LookupError, ElasticFinderError):
    """Raised when an operation targets an index that does not exist."""

    def __init__(self, index: str) -> None:
        """Build exception payload for missing indices."""
        self.index = index
        super().__init__(f"Index '{index}' does not exist.")


class MalformedResponseError(ValueError, ElasticFinderError):
    """Raised when a backend response lacks an expected field."""

    def __init__(self, path: str) -> None:
        """Build exception payload for missing response fields."""
        self.path = path
        super().__init__(f"Malformed search response: missing '{path}'.")


class UnformattedAggregationError(LookupError, ElasticFinderError):
    """Raised when a response aggregation has no registered formatter."""

    def __init__(self, aggregation: str) -> None:
        """Build exception payload for aggregations without formatter."""
        self.aggregation = aggregation
        super().__init__(f"No formatter registered for aggregation '{aggregation}'.")


class BuilderSpentError(RuntimeError, ElasticFinderError):
    """Raised when a builder is reused after its query was executed."""

    def __init__(self) -> None:
        """Build exception payload for spent builders."""
        super().__init__("This builder already executed its query; obtain a new builder.")
