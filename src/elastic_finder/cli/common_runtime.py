"""Shared CLI runtime primitives (settings, logging, payload emission)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from elastic_finder.config import FinderSettings, load_settings, merge_settings

if TYPE_CHECKING:
    import argparse

_DEFAULT_LOG_FORMAT = "%(levelname)s %(name)s - %(message)s"
_DEFAULT_INDEX = "documents"
_CLI_SETTING_FIELDS = (
    "backend",
    "backend_url",
    "index",
    "timeout_s",
    "verify_certs",
    "max_retries",
    "log_level",
)


def settings_from_args(args: argparse.Namespace) -> FinderSettings:
    """Merge file/environment settings with explicit CLI flags.

    Args:
        args (argparse.Namespace): Parsed command-line arguments.

    Raises:
        InvalidSettingsError: If the merged values are invalid.

    Returns:
        FinderSettings: Effective settings.

    """
    settings = load_settings(getattr(args, "config", None))
    overrides = {
        name: getattr(args, name) for name in _CLI_SETTING_FIELDS if getattr(args, name, None) is not None
    }
    return merge_settings(settings, overrides)


def effective_index(settings: FinderSettings) -> str:
    """Return the configured index, or the CLI default."""
    return settings.index or _DEFAULT_INDEX


def configure_logging(level: str) -> None:
    """Configure root logging for CLI runs."""
    logging.basicConfig(level=level.upper(), format=_DEFAULT_LOG_FORMAT)


def emit_payload(payload: dict[str, Any] | BaseModel | str, output: str) -> None:
    """Emit payload to stdout or to a file.

    Args:
        payload (dict[str, Any] | BaseModel | str): Data payload to serialize.
        output (str): Output path or "-" for stdout.

    """
    if isinstance(payload, str):
        serialized = payload
    else:
        payload_dict = payload.model_dump(mode="json") if isinstance(payload, BaseModel) else payload
        serialized = json.dumps(payload_dict, ensure_ascii=False, indent=2)

    if output == "-":
        print(serialized)
        return

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if serialized.endswith("\n"):
        output_path.write_text(serialized, encoding="utf-8")
    else:
        output_path.write_text(serialized + "\n", encoding="utf-8")
