"""CLI command handlers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from elastic_finder.builders import finder
from elastic_finder.cli.common_runtime import effective_index
from elastic_finder.domain import IndexAction, IndexDescriptor, IndexSettings
from elastic_finder.indices import IndexManager
from elastic_finder.pagination import StaticPageResolver
from elastic_finder.search.factory import build_search_backend

if TYPE_CHECKING:
    import argparse

    from elastic_finder.config import FinderSettings
    from elastic_finder.domain import PageResult
    from elastic_finder.search.protocols import SearchBackend

_DEFAULT_ENTITY = "Document"
_logger = logging.getLogger(__name__)


def backend_from_settings(settings: FinderSettings) -> SearchBackend:
    """Build the backend adapter described by settings.

    Returns:
        SearchBackend: Backend adapter.

    """
    return build_search_backend(
        backend=settings.backend,
        url=settings.backend_url,
        timeout_s=settings.timeout_s,
        verify_certs=settings.verify_certs,
        max_retries=settings.max_retries,
    )


def handle_index(args: argparse.Namespace, settings: FinderSettings) -> dict[str, Any]:
    """Run one index lifecycle action.

    Args:
        args (argparse.Namespace): Parsed command-line arguments.
        settings (FinderSettings): Effective settings.

    Returns:
        dict[str, Any]: Action outcome payload.

    """
    index = effective_index(settings)
    manager = IndexManager(
        backend=backend_from_settings(settings),
        descriptor=IndexDescriptor(
            name=index,
            settings=IndexSettings(number_of_shards=args.shards, number_of_replicas=args.replicas),
        ),
    )
    action = IndexAction(args.action)
    payload: dict[str, Any] = {"index": index, "action": action.value}

    if action == IndexAction.EXISTS:
        payload["exists"] = manager.exists()
    elif action == IndexAction.CREATE:
        payload["response"] = manager.create()
    elif action == IndexAction.DELETE:
        payload["response"] = manager.delete()
    else:
        payload["message"] = manager.flush()

    _logger.info("Index action '%s' done on '%s'.", action.value, index)
    return payload


def handle_search(args: argparse.Namespace, settings: FinderSettings) -> PageResult:
    """Run one paginated search with the builder of `--entity`.

    Args:
        args (argparse.Namespace): Parsed command-line arguments.
        settings (FinderSettings): Effective settings.

    Returns:
        PageResult: Materialized page; models are the hit identifiers.

    """
    page_size = settings.page_size if args.size is None else args.size
    builder = finder(
        args.entity or _DEFAULT_ENTITY,
        backend=backend_from_settings(settings),
        pages=StaticPageResolver(page=args.page, path=args.path),
        index=effective_index(settings),
    )

    fields = [field.strip() for field in str(args.fields or "").split(",") if field.strip()]
    builder.query_string(args.query, fields or None)
    for field in args.terms_agg:
        builder.terms(field, field=field, size=args.agg_size)

    return builder.paginate(page_size=page_size, page_name=settings.page_name, page=args.page)
