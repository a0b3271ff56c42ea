"""CLI entrypoint execution flow."""

from __future__ import annotations

import logging

from elastic_finder.cli.argument_parser import build_parser
from elastic_finder.cli.common_runtime import configure_logging, emit_payload, settings_from_args
from elastic_finder.errors import ElasticFinderError

_logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return a process exit code.

    Args:
        argv (list[str] | None): Optional command-line arguments.

    Returns:
        int: Process exit code.

    """
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 1

    try:
        settings = settings_from_args(args)
        configure_logging(settings.log_level)
        payload = handler(args, settings)
    except ElasticFinderError:
        _logger.exception("Command '%s' failed.", args.command)
        return 1

    emit_payload(payload=payload, output=args.output)
    return 0
