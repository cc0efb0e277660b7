"""
prefsort — layered config loading.

File: src/prefsort/config/loader.py

Layers, lowest first: built-in defaults, ``prefsort.toml``, ``PREFSORT_*``
environment variables, then command-line flags. Each layer is a partial
``{section: {key: value}}`` table and later layers win key by key; the
result is validated once, after the last layer is applied.

Relative paths in the TOML file are anchored at the file's directory. Paths
given on the command line or in the environment are kept as typed.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from prefsort.config.schema import (
    CONFIG_FIELDS,
    PATH_FIELDS,
    ConfigField,
    assert_valid_config,
    default_config,
    merge_config,
)

DEFAULT_CONFIG_FILE: Final[str] = "prefsort.toml"
ENV_PREFIX: Final[str] = "PREFSORT_"

_FLAG_WORDS: Final[Mapping[str, bool]] = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


class ConfigLoadError(ValueError):
    """Raised when config cannot be loaded or overrides cannot be coerced."""


def env_variable(field: ConfigField) -> str:
    """Name of the environment variable overriding ``field``."""

    return f"{ENV_PREFIX}{field.section}_{field.key}".upper()


def load_config(
    config_path: str | Path | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return the validated effective config.

    ``config_path`` must exist when given; otherwise ``./prefsort.toml`` is
    used if present. ``cli_overrides`` maps ``"section.key"`` to a value,
    and ``None`` values mean the flag was not passed.
    """

    explicit = config_path is not None
    path = (Path(config_path).expanduser() if explicit else Path(DEFAULT_CONFIG_FILE)).resolve()

    effective = default_config()
    for layer in (
        _file_layer(path, required=explicit),
        _env_layer(os.environ if environ is None else environ),
        _cli_layer(cli_overrides or {}),
    ):
        effective = merge_config(effective, layer)
    return assert_valid_config(effective)


def _file_layer(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return {}

    try:
        table = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc

    for section, key in PATH_FIELDS:
        values = table.get(section)
        if not isinstance(values, dict):
            continue
        raw = values.get(key)
        if isinstance(raw, str) and raw.strip():
            values[key] = (path.parent / Path(raw.strip()).expanduser()).resolve().as_posix()
    return table


def _env_layer(environ: Mapping[str, str]) -> dict[str, dict[str, object]]:
    layer: dict[str, dict[str, object]] = {}
    for field in CONFIG_FIELDS:
        name = env_variable(field)
        if name not in environ:
            continue
        raw = environ[name].strip()
        value = _parse_flag(name, raw) if field.kind == "flag" else raw
        layer.setdefault(field.section, {})[field.key] = value
    return layer


def _parse_flag(name: str, raw: str) -> bool:
    try:
        return _FLAG_WORDS[raw.lower()]
    except KeyError:
        accepted = "/".join(_FLAG_WORDS)
        raise ConfigLoadError(f"{name}={raw!r} is not a boolean ({accepted})") from None


def _cli_layer(overrides: Mapping[str, object]) -> dict[str, dict[str, object]]:
    layer: dict[str, dict[str, object]] = {}
    for dotted, value in overrides.items():
        if value is None:
            continue
        section, _, key = dotted.partition(".")
        if not section or not key:
            raise ConfigLoadError(f"invalid override {dotted!r}; expected section.key")
        layer.setdefault(section, {})[key] = value
    return layer


__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "env_variable",
    "load_config",
]
