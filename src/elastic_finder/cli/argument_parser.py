"""Argument parser construction for all CLI subcommands."""

from __future__ import annotations

import argparse
import os

from elastic_finder.cli.command_handlers import handle_index, handle_search
from elastic_finder.domain import BackendName, IndexAction


def add_shared_runtime_flags(subparser: argparse.ArgumentParser) -> None:
    """Add connection and runtime flags shared by subcommands.

    Every flag defaults to `None` so that settings files and environment
    variables apply unless the flag is given.
    """
    subparser.add_argument(
        "--config",
        default=os.getenv("ELASTIC_FINDER_CONFIG"),
        help="Optional YAML/JSON settings file.",
    )
    subparser.add_argument(
        "--backend",
        default=None,
        choices=[backend.value for backend in BackendName],
        help="Search backend adapter.",
    )
    subparser.add_argument(
        "--backend-url",
        default=None,
        help="Backend base URL (Elasticsearch or OpenSearch).",
    )
    subparser.add_argument(
        "--index",
        default=None,
        help="Target index name.",
    )
    subparser.add_argument(
        "--timeout",
        dest="timeout_s",
        default=None,
        type=float,
        help="Request timeout in seconds.",
    )
    subparser.add_argument(
        "--max-retries",
        default=None,
        type=int,
        help="Retry budget of the backend client.",
    )
    subparser.add_argument(
        "--verify-certs",
        default=None,
        action=argparse.BooleanOptionalAction,
        help="Verify TLS certificates.",
    )
    subparser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    subparser.add_argument(
        "--output",
        default="-",
        help="Output destination: '-' for stdout or path to file.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        argparse.ArgumentParser: Configured parser.

    """
    parser = argparse.ArgumentParser(prog="elastic-finder")
    subparsers = parser.add_subparsers(dest="command")

    index_parser = subparsers.add_parser("index", help="Manage the lifecycle of an index.")
    index_parser.add_argument(
        "action",
        choices=[action.value for action in IndexAction],
        help="Lifecycle action; 'flush' deletes and recreates the index.",
    )
    index_parser.add_argument("--shards", default=1, type=int, help="Primary shard count on create.")
    index_parser.add_argument("--replicas", default=0, type=int, help="Replica count on create.")
    add_shared_runtime_flags(index_parser)
    index_parser.set_defaults(handler=handle_index)

    search_parser = subparsers.add_parser("search", help="Run one paginated search.")
    search_parser.add_argument(
        "--entity",
        default=None,
        help="Entity type whose builder runs the search (default: Document).",
    )
    search_parser.add_argument(
        "--query",
        default="match_all",
        help="Simple query string; 'match_all' or '*' matches every document.",
    )
    search_parser.add_argument(
        "--fields",
        default="",
        help="Comma-separated fields searched by --query; builder default when empty.",
    )
    search_parser.add_argument("--page", default=1, type=int, help="1-based page number.")
    search_parser.add_argument("--size", default=None, type=int, help="Hits per page.")
    search_parser.add_argument("--path", default="/", help="Path used in pagination links.")
    search_parser.add_argument(
        "--terms-agg",
        action="append",
        default=[],
        help="Keyword field to count hits by. Can be repeated.",
    )
    search_parser.add_argument("--agg-size", default=10, type=int, help="Maximum buckets per aggregation.")
    add_shared_runtime_flags(search_parser)
    search_parser.set_defaults(handler=handle_search)

    return parser
