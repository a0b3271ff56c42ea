"""Factory helpers to instantiate the configured search backend."""

from __future__ import annotations

from typing import TYPE_CHECKING

from elastic_finder.domain import BackendName
from elastic_finder.errors import MissingBackendUrlError, UnsupportedBackendError
from elastic_finder.search.adapters import (
    DEFAULT_MAX_RETRIES,
    ElasticClientAdapter,
    HttpClientAdapter,
    OpenSearchClientAdapter,
)

if TYPE_CHECKING:
    from elastic_finder.search.protocols import SearchBackend

_ADAPTERS: dict[BackendName, type[ElasticClientAdapter | OpenSearchClientAdapter | HttpClientAdapter]] = {
    BackendName.ELASTICSEARCH: ElasticClientAdapter,
    BackendName.OPENSEARCH: OpenSearchClientAdapter,
    BackendName.HTTP: HttpClientAdapter,
}


def supported_backends() -> tuple[BackendName, ...]:
    """Return backend names supported by the project.

    Returns:
        tuple[BackendName, ...]: Supported backend identifiers.

    """
    return tuple(BackendName)


def build_search_backend(  # noqa: PLR0913
    *,
    backend: BackendName | str,
    client: object | None = None,
    url: str | None = None,
    timeout_s: float = 30.0,
    verify_certs: bool = True,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> SearchBackend:
    """Build a concrete backend adapter from user options.

    Args:
        backend (BackendName | str): Backend identifier.
        client (object | None): Optional pre-configured backend client.
        url (str | None): Optional backend URL when no client is injected.
        timeout_s (float): Request timeout in seconds.
        verify_certs (bool): Whether TLS certificates are verified.
        max_retries (int): Retry budget handed to the client transport.

    Raises:
        MissingBackendUrlError: If `url` is missing when `client` is absent.
        UnsupportedBackendError: If the backend identifier is unsupported.

    Returns:
        SearchBackend: Search backend adapter.

    """
    backend_name = backend.value if isinstance(backend, BackendName) else backend.strip().lower()

    try:
        adapter_class = _ADAPTERS[BackendName(backend_name)]
    except ValueError as exc:
        supported = ", ".join(item.value for item in supported_backends())
        raw_backend = backend.value if isinstance(backend, BackendName) else backend
        raise UnsupportedBackendError(backend=raw_backend, supported=supported) from exc

    if client is not None:
        return adapter_class(client=client)
    if url is None:
        raise MissingBackendUrlError
    return adapter_class.from_connection(
        url=url,
        timeout_s=timeout_s,
        verify_certs=verify_certs,
        max_retries=max_retries,
    )
