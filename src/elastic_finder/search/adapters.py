"""Adapters implementing the thin SearchBackend interface."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import import_module
from typing import TYPE_CHECKING, Any

import httpx

from elastic_finder.errors import (
    BackendRequestError,
    BackendUnavailableError,
    IndexConflictError,
    IndexMissingError,
    MissingOptionalDependencyError,
)
from elastic_finder.search.translation import INDEX_EXISTS_ERROR_TYPE, NOT_FOUND_STATUS, translated_errors

if TYPE_CHECKING:
    from elastic_finder.query.compiler import QueryRequest

DEFAULT_MAX_RETRIES = 2
_ELASTIC_MISSING_DEP_MSG = "Install the optional dependency group 'elasticsearch' to use this backend."
_OPENSEARCH_MISSING_DEP_MSG = "Install the optional dependency group 'opensearch' to use this backend."


def _response_error_type(response: httpx.Response) -> str:
    """Return the backend error type of a failed REST response.

    Returns:
        str: `error.type` from the JSON body, else the reason phrase.

    """
    try:
        error = response.json().get("error")
    except (ValueError, AttributeError):
        return response.reason_phrase
    if isinstance(error, dict):
        return str(error.get("type") or response.reason_phrase)
    return str(error or response.reason_phrase)


@dataclass(frozen=True, slots=True)
class ElasticClientAdapter:
    """Thin adapter around the Elasticsearch Python client."""

    client: Any
    backend_name: str = "elasticsearch"

    @classmethod
    def from_connection(
        cls,
        *,
        url: str,
        timeout_s: float,
        verify_certs: bool,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> ElasticClientAdapter:
        """Build an adapter from connection settings.

        Args:
            url (str): Backend URL.
            timeout_s (float): Request timeout in seconds.
            verify_certs (bool): Whether TLS certificates are verified.
            max_retries (int): Retry budget of the client transport.

        Raises:
            MissingOptionalDependencyError: If `elasticsearch` is not installed.

        Returns:
            ElasticClientAdapter: Configured adapter.

        """
        try:
            module = import_module("elasticsearch")
        except ImportError as exc:
            raise MissingOptionalDependencyError(_ELASTIC_MISSING_DEP_MSG) from exc

        elasticsearch_class = module.Elasticsearch
        client = elasticsearch_class(
            hosts=[url],
            request_timeout=timeout_s,
            verify_certs=verify_certs,
            max_retries=max_retries,
            retry_on_timeout=True,
        )
        return cls(client=client)

    def search(self, *, request: QueryRequest) -> dict[str, Any]:
        """Execute a compiled search request.

        Args:
            request (QueryRequest): Compiled request.

        Returns:
            dict[str, Any]: Raw backend response payload.

        """
        with translated_errors(index=request.index):
            response = self.client.search(**request.to_params())
        return dict(response)

    def index_exists(self, *, index: str) -> bool:
        """Check whether an index exists.

        Returns:
            bool: Whether the index exists.

        """
        with translated_errors(index=index):
            return bool(self.client.indices.exists(index=index))

    def create_index(self, *, index: str, body: dict[str, Any]) -> dict[str, Any]:
        """Create an index from a settings/mappings payload.

        Returns:
            dict[str, Any]: Backend acknowledgement.

        """
        with translated_errors(index=index):
            response = self.client.indices.create(index=index, **body)
        return dict(response)

    def delete_index(self, *, index: str) -> dict[str, Any]:
        """Delete an index.

        Returns:
            dict[str, Any]: Backend acknowledgement.

        """
        with translated_errors(index=index):
            response = self.client.indices.delete(index=index)
        return dict(response)


@dataclass(frozen=True, slots=True)
class OpenSearchClientAdapter:
    """Thin adapter around the OpenSearch Python client."""

    client: Any
    backend_name: str = "opensearch"

    @classmethod
    def from_connection(
        cls,
        *,
        url: str,
        timeout_s: float,
        verify_certs: bool,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> OpenSearchClientAdapter:
        """Build an adapter from connection settings.

        Args:
            url (str): Backend URL.
            timeout_s (float): Request timeout in seconds.
            verify_certs (bool): Whether TLS certificates are verified.
            max_retries (int): Retry budget of the client transport.

        Raises:
            MissingOptionalDependencyError: If `opensearch-py` is not installed.

        Returns:
            OpenSearchClientAdapter: Configured adapter.

        """
        try:
            module = import_module("opensearchpy")
        except ImportError as exc:
            raise MissingOptionalDependencyError(_OPENSEARCH_MISSING_DEP_MSG) from exc

        opensearch_class = module.OpenSearch
        client = opensearch_class(
            hosts=[url],
            timeout=timeout_s,
            use_ssl=url.startswith("https://"),
            verify_certs=verify_certs,
            max_retries=max_retries,
            retry_on_timeout=True,
        )
        return cls(client=client)

    def search(self, *, request: QueryRequest) -> dict[str, Any]:
        """Execute a compiled search request.

        Args:
            request (QueryRequest): Compiled request.

        Returns:
            dict[str, Any]: Raw backend response payload.

        """
        with translated_errors(index=request.index):
            response = self.client.search(**request.to_params())
        return dict(response)

    def index_exists(self, *, index: str) -> bool:
        """Check whether an index exists.

        Returns:
            bool: Whether the index exists.

        """
        with translated_errors(index=index):
            return bool(self.client.indices.exists(index=index))

    def create_index(self, *, index: str, body: dict[str, Any]) -> dict[str, Any]:
        """Create an index from a settings/mappings payload.

        Returns:
            dict[str, Any]: Backend acknowledgement.

        """
        with translated_errors(index=index):
            response = self.client.indices.create(index=index, body=body)
        return dict(response)

    def delete_index(self, *, index: str) -> dict[str, Any]:
        """Delete an index.

        Returns:
            dict[str, Any]: Backend acknowledgement.

        """
        with translated_errors(index=index):
            response = self.client.indices.delete(index=index)
        return dict(response)


@dataclass(frozen=True, slots=True)
class HttpClientAdapter:
    """Talk to the backend REST API directly over `httpx`.

    Useful when neither official client is installed; both Elasticsearch and
    OpenSearch expose the same index and search endpoints.
    """

    client: httpx.Client
    backend_name: str = "http"

    @classmethod
    def from_connection(
        cls,
        *,
        url: str,
        timeout_s: float,
        verify_certs: bool,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> HttpClientAdapter:
        """Build an adapter from connection settings.

        Args:
            url (str): Backend base URL.
            timeout_s (float): Request timeout in seconds.
            verify_certs (bool): Whether TLS certificates are verified.
            max_retries (int): Connection retries of the HTTP transport.

        Returns:
            HttpClientAdapter: Configured adapter.

        """
        transport = httpx.HTTPTransport(retries=max_retries, verify=verify_certs)
        client = httpx.Client(base_url=url.rstrip("/"), timeout=timeout_s, transport=transport)
        return cls(client=client)

    def _send(
        self,
        method: str,
        *,
        index: str,
        path: str = "",
        payload: dict[str, Any] | None = None,
        missing_ok: bool = False,
    ) -> httpx.Response:
        """Send one request and map failures onto project exceptions.

        Args:
            method (str): HTTP method.
            index (str): Target index name.
            path (str): Path suffix after the index segment.
            payload (dict[str, Any] | None): Optional JSON body.
            missing_ok (bool): Whether a 404 response is returned instead of raised.

        Raises:
            BackendUnavailableError: On transport failures.
            IndexMissingError: On 404 responses unless `missing_ok`.
            IndexConflictError: When the index already exists.
            BackendRequestError: On any other unsuccessful status.

        Returns:
            httpx.Response: Successful (or tolerated 404) response.

        """
        try:
            response = self.client.request(method, f"/{index}{path}", json=payload)
        except httpx.TransportError as exc:
            raise BackendUnavailableError(f"{exc.__class__.__name__}: {exc}") from exc

        if response.status_code == NOT_FOUND_STATUS:
            if missing_ok:
                return response
            raise IndexMissingError(index)
        if response.is_error and INDEX_EXISTS_ERROR_TYPE in response.text:
            raise IndexConflictError(index)
        if not response.is_success:
            raise BackendRequestError(response.status_code, _response_error_type(response), index=index)
        return response

    def search(self, *, request: QueryRequest) -> dict[str, Any]:
        """Execute a compiled search request.

        Returns:
            dict[str, Any]: Raw backend response payload.

        """
        response = self._send("POST", index=request.index, path="/_search", payload=request.body())
        return dict(response.json())

    def index_exists(self, *, index: str) -> bool:
        """Check whether an index exists.

        Returns:
            bool: Whether the index exists.

        """
        response = self._send("HEAD", index=index, missing_ok=True)
        return response.status_code != NOT_FOUND_STATUS

    def create_index(self, *, index: str, body: dict[str, Any]) -> dict[str, Any]:
        """Create an index from a settings/mappings payload.

        Returns:
            dict[str, Any]: Backend acknowledgement.

        """
        response = self._send("PUT", index=index, payload=body)
        return dict(response.json())

    def delete_index(self, *, index: str) -> dict[str, Any]:
        """Delete an index.

        Returns:
            dict[str, Any]: Backend acknowledgement.

        """
        response = self._send("DELETE", index=index)
        return dict(response.json())
