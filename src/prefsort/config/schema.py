"""
prefsort — config schema, defaults and strict validation.

File: src/prefsort/config/schema.py

Purpose
- Define the typed shape of ``prefsort.toml`` and its built-in defaults.
- Validate merged config deterministically, reporting every issue with its dotted path.

The config is exactly two levels deep: ``[section]`` tables holding scalar
keys. Each key is described once in :data:`CONFIG_FIELDS`; validation, env
variable names and path anchoring are all driven from that table.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal, TypedDict

UI_MODES: Final[tuple[str, ...]] = ("console", "tui")
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class UiConfig(TypedDict):
    mode: str
    no_color: bool


class LoggingSection(TypedDict):
    level: str
    file: str


class OutputConfig(TypedDict):
    path: str


class PrefsortConfig(TypedDict):
    ui: UiConfig
    logging: LoggingSection
    output: OutputConfig


DEFAULT_CONFIG: Final[PrefsortConfig] = {
    "ui": {"mode": "console", "no_color": False},
    "logging": {"level": "WARNING", "file": ""},
    "output": {"path": ""},
}


@dataclass(frozen=True, slots=True)
class ConfigField:
    """One ``section.key`` entry and the kind of value it accepts.

    ``choice`` fields accept one of ``choices`` (compared upper-cased when
    ``upper`` is set), ``flag`` fields a TOML boolean, and ``path`` fields a
    string that may be empty.
    """

    section: str
    key: str
    kind: Literal["choice", "flag", "path"]
    choices: tuple[str, ...] = ()
    upper: bool = False

    @property
    def dotted(self) -> str:
        return f"{self.section}.{self.key}"


CONFIG_FIELDS: Final[tuple[ConfigField, ...]] = (
    ConfigField("ui", "mode", "choice", choices=UI_MODES),
    ConfigField("ui", "no_color", "flag"),
    ConfigField("logging", "level", "choice", choices=LOG_LEVELS, upper=True),
    ConfigField("logging", "file", "path"),
    ConfigField("output", "path", "path"),
)

PATH_FIELDS: Final[tuple[tuple[str, str], ...]] = tuple(
    (field.section, field.key) for field in CONFIG_FIELDS if field.kind == "path"
)


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    """Validation result with normalized config when no issues were found."""

    config: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised when strict config validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered or '- <root>: unknown failure'}")


class _Rejected(ValueError):
    """A single value failed its field check; the message becomes an issue."""


def default_config() -> dict[str, Any]:
    """Return a fresh copy of the built-in defaults."""

    return merge_config({}, DEFAULT_CONFIG)


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Overlay ``overlay`` onto a copy of ``base``, one section table at a time."""

    merged: dict[str, Any] = {
        key: dict(value) if isinstance(value, Mapping) else value for key, value in base.items()
    }
    for key, value in overlay.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = dict(value) if isinstance(value, Mapping) else value
    return merged


def validate_config(config: Mapping[str, object] | object) -> ConfigValidationResult:
    """Validate config and return structured issues with deterministic paths."""

    if not isinstance(config, Mapping):
        issue = ConfigValidationIssue("<root>", f"expected table, got {type(config).__name__}")
        return ConfigValidationResult(config=None, issues=(issue,))

    issues: list[ConfigValidationIssue] = [
        ConfigValidationIssue(name, "unknown field") for name in _unknown_keys(config, DEFAULT_CONFIG)
    ]
    normalized: dict[str, dict[str, Any]] = {}
    for section, defaults in DEFAULT_CONFIG.items():
        table = config.get(section, {})
        if not isinstance(table, Mapping):
            issues.append(ConfigValidationIssue(section, f"expected table, got {type(table).__name__}"))
            continue
        issues.extend(
            ConfigValidationIssue(f"{section}.{name}", "unknown field")
            for name in _unknown_keys(table, defaults)
        )
        normalized[section] = {}
        for field in _section_fields(section):
            try:
                normalized[section][field.key] = _check(field, table.get(field.key, defaults[field.key]))
            except _Rejected as exc:
                issues.append(ConfigValidationIssue(field.dotted, str(exc)))

    if issues:
        return ConfigValidationResult(config=None, issues=tuple(issues))
    return ConfigValidationResult(config=normalized, issues=())


def assert_valid_config(config: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate config and raise ``ConfigValidationError`` on failure."""

    result = validate_config(config)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def log_level_number(level: str) -> int:
    """Translate a validated level name to its ``logging`` constant."""

    parsed = logging.getLevelName(level.upper())
    if not isinstance(parsed, int):
        raise ValueError(f"unsupported logging level {level!r}")
    return parsed


def _section_fields(section: str) -> tuple[ConfigField, ...]:
    return tuple(field for field in CONFIG_FIELDS if field.section == section)


def _unknown_keys(table: Mapping[Any, object], known: Mapping[str, object]) -> list[str]:
    return sorted(str(key) for key in table if key not in known)


def _check(field: ConfigField, value: object) -> object:
    if field.kind == "flag":
        if not isinstance(value, bool):
            raise _Rejected(f"expected boolean, got {type(value).__name__}")
        return value

    if not isinstance(value, str):
        raise _Rejected(f"expected string, got {type(value).__name__}")
    text = value.strip()

    if field.kind == "path":
        if "\x00" in text:
            raise _Rejected("must not contain NUL bytes")
        return text

    if field.upper:
        text = text.upper()
    if text not in field.choices:
        raise _Rejected(f"invalid value {text!r}; expected one of: {', '.join(field.choices)}")
    return text


__all__ = [
    "CONFIG_FIELDS",
    "DEFAULT_CONFIG",
    "LOG_LEVELS",
    "PATH_FIELDS",
    "UI_MODES",
    "ConfigField",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "PrefsortConfig",
    "assert_valid_config",
    "default_config",
    "log_level_number",
    "merge_config",
    "validate_config",
]
