"""Translate search client exceptions into project exceptions."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import httpx

from elastic_finder.errors import (
    BackendRequestError,
    BackendUnavailableError,
    ElasticFinderError,
    IndexConflictError,
    IndexMissingError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

NOT_FOUND_STATUS = 404
INDEX_EXISTS_ERROR_TYPE = "resource_already_exists_exception"
INDEX_MISSING_ERROR_TYPE = "index_not_found_exception"
# Class names shared by the elasticsearch, elastic_transport and opensearchpy transport layers.
_TRANSPORT_ERROR_NAMES = frozenset({"ConnectionError", "ConnectionTimeout", "SSLError"})


def _error_text(exc: BaseException) -> str:
    """Collect the error type and message reported by a client exception.

    Returns:
        str: Lowercased error description.

    """
    error_type = getattr(exc, "error", "")
    return f"{error_type} {exc}".lower()


def _status_code(exc: BaseException) -> int | None:
    """Return the HTTP status carried by a client exception, if numeric.

    Returns:
        int | None: HTTP status code.

    """
    status = getattr(exc, "status_code", None)
    return status if isinstance(status, int) else None


def _is_transport_error(exc: BaseException) -> bool:
    if isinstance(exc, (httpx.TransportError, ConnectionError, TimeoutError)):
        return True
    return any(cls.__name__ in _TRANSPORT_ERROR_NAMES for cls in type(exc).__mro__)


def translate_backend_error(exc: BaseException, *, index: str) -> ElasticFinderError | None:
    """Map one client exception onto the project error taxonomy.

    Args:
        exc (BaseException): Exception raised by a search client.
        index (str): Index targeted by the failed call.

    Returns:
        ElasticFinderError | None: Translated error, or `None` when the
        exception has no project counterpart and must propagate unchanged.

    """
    if isinstance(exc, ElasticFinderError):
        return exc

    text = _error_text(exc)
    if INDEX_EXISTS_ERROR_TYPE in text:
        return IndexConflictError(index)
    if _status_code(exc) == NOT_FOUND_STATUS or INDEX_MISSING_ERROR_TYPE in text:
        return IndexMissingError(index)
    if _is_transport_error(exc):
        return BackendUnavailableError(f"{exc.__class__.__name__}: {exc}")
    status = _status_code(exc)
    if status is not None:
        error_type = getattr(exc, "error", None)
        return BackendRequestError(status, str(error_type or exc.__class__.__name__), index=index)
    return None


@contextlib.contextmanager
def translated_errors(*, index: str) -> Iterator[None]:
    """Re-raise client exceptions raised in the block as project exceptions.

    Args:
        index (str): Index targeted by the wrapped call.

    Yields:
        None: Control to the wrapped block.

    """
    try:
        yield
    except Exception as exc:
        translated = translate_backend_error(exc, index=index)
        if translated is None or translated is exc:
            raise
        raise translated from exc
