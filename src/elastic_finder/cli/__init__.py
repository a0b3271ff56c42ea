"""Unified CLI package exports."""

from elastic_finder.cli.argument_parser import build_parser
from elastic_finder.cli.command_handlers import build_search_backend
from elastic_finder.cli.entrypoint import main

__all__ = ["build_parser", "build_search_backend", "main"]
