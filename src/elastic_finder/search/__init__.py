"""Search backend interfaces and adapters."""

from elastic_finder.search.adapters import ElasticClientAdapter, HttpClientAdapter, OpenSearchClientAdapter
from elastic_finder.search.factory import build_search_backend, supported_backends
from elastic_finder.search.protocols import PageResolver, RecordLookup, SearchBackend
from elastic_finder.search.translation import translate_backend_error, translated_errors

__all__ = [
    "ElasticClientAdapter",
    "HttpClientAdapter",
    "OpenSearchClientAdapter",
    "PageResolver",
    "RecordLookup",
    "SearchBackend",
    "build_search_backend",
    "supported_backends",
    "translate_backend_error",
    "translated_errors",
]
