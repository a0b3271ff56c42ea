"""Runtime settings loaded from files and `ELASTIC_FINDER_*` environment variables."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from elastic_finder.domain import BackendName
from elastic_finder.errors import InvalidSettingsError

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PREFIX = "ELASTIC_FINDER_"
_ENV_FIELDS = (
    "backend",
    "backend_url",
    "index",
    "timeout_s",
    "max_retries",
    "page_size",
    "page_name",
    "log_level",
)
_UNSUPPORTED_SETTINGS_FILE = "Unsupported settings file '{path}'; use .yaml, .yml or .json."
_SETTINGS_ROOT_NOT_MAPPING = "Settings file '{path}' must contain a mapping at its root."


class FinderSettings(BaseModel):
    """Represent backend connection and pagination defaults.

    Args:
        backend: Backend adapter to build.
        backend_url: Backend base URL.
        index: Optional index overriding the entity default.
        timeout_s: Request timeout in seconds.
        verify_certs: Whether TLS certificates are verified.
        max_retries: Retry budget of the client transport.
        page_size: Default page size.
        page_name: Query-string parameter carrying the page.
        log_level: Logging level name.

    """

    model_config = ConfigDict(frozen=True)

    backend: BackendName = BackendName.ELASTICSEARCH
    backend_url: str = "http://localhost:9200"
    index: str | None = None
    timeout_s: float = Field(default=30.0, gt=0)
    verify_certs: bool = True
    max_retries: int = Field(default=2, ge=0)
    page_size: int = Field(default=10, ge=0)
    page_name: str = "page"
    log_level: str = "INFO"


def env_bool(name: str, *, default_value: bool, environ: Mapping[str, str] | None = None) -> bool:
    """Read a boolean value from environment variables.

    Args:
        name (str): Environment variable name.
        default_value (bool): Fallback value when missing or invalid.
        environ (Mapping[str, str] | None): Environment; `os.environ` by default.

    Returns:
        bool: Parsed boolean value.

    """
    raw = (os.environ if environ is None else environ).get(name)
    if raw is None:
        return default_value
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default_value


def _validate(data: dict[str, Any]) -> FinderSettings:
    try:
        return FinderSettings.model_validate(data)
    except ValidationError as exc:
        raise InvalidSettingsError(str(exc)) from exc


def settings_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    base: FinderSettings | None = None,
) -> FinderSettings:
    """Apply `ELASTIC_FINDER_*` environment overrides.

    Args:
        environ (Mapping[str, str] | None): Environment; `os.environ` by default.
        base (FinderSettings | None): Settings to override; defaults otherwise.

    Raises:
        InvalidSettingsError: If one value cannot be validated.

    Returns:
        FinderSettings: Resulting settings.

    """
    env = os.environ if environ is None else environ
    data = (base or FinderSettings()).model_dump()
    for field_name in _ENV_FIELDS:
        raw = env.get(f"{ENV_PREFIX}{field_name.upper()}")
        if raw is not None and raw.strip():
            data[field_name] = raw.strip()
    data["verify_certs"] = env_bool(
        f"{ENV_PREFIX}VERIFY_CERTS",
        default_value=bool(data["verify_certs"]),
        environ=env,
    )
    return _validate(data)


def _read_settings_file(path: Path) -> dict[str, Any]:
    """Parse a YAML or JSON settings file.

    Raises:
        InvalidSettingsError: On unsupported suffixes or non-mapping content.

    Returns:
        dict[str, Any]: Raw settings.

    """
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        from yaml import safe_load  # noqa: PLC0415

        data = safe_load(text)
    elif suffix == ".json":
        data = json.loads(text)
    else:
        raise InvalidSettingsError(_UNSUPPORTED_SETTINGS_FILE.format(path=path))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidSettingsError(_SETTINGS_ROOT_NOT_MAPPING.format(path=path))
    return data


def load_settings(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> FinderSettings:
    """Load settings from an optional file, then apply environment overrides.

    Args:
        path (str | Path | None): Optional `.yaml`, `.yml` or `.json` file.
        environ (Mapping[str, str] | None): Environment; `os.environ` by default.

    Raises:
        InvalidSettingsError: If the file or one value is invalid.

    Returns:
        FinderSettings: Resulting settings.

    """
    base = FinderSettings()
    if path is not None:
        base = _validate(_read_settings_file(Path(path).expanduser()))
    return settings_from_env(environ, base=base)


def merge_settings(base: FinderSettings, overrides: Mapping[str, Any]) -> FinderSettings:
    """Return `base` with validated overrides applied.

    Raises:
        InvalidSettingsError: If one override is invalid.

    Returns:
        FinderSettings: Resulting settings.

    """
    return _validate({**base.model_dump(), **overrides})
