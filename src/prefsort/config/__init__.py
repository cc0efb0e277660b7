"""
prefsort config package public API.

File: src/prefsort/config/__init__.py

Purpose
- Export config loading/validation entrypoints and public error types.
- Support loading from ``prefsort.toml`` + ``PREFSORT_`` env overrides.
"""

from prefsort.config.loader import (
    DEFAULT_CONFIG_FILE,
    ENV_PREFIX,
    ConfigLoadError,
    env_variable,
    load_config,
)
from prefsort.config.schema import (
    CONFIG_FIELDS,
    DEFAULT_CONFIG,
    LOG_LEVELS,
    PATH_FIELDS,
    UI_MODES,
    ConfigField,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    PrefsortConfig,
    assert_valid_config,
    default_config,
    log_level_number,
    merge_config,
    validate_config,
)

__all__ = [
    "CONFIG_FIELDS",
    "ConfigField",
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "LOG_LEVELS",
    "PATH_FIELDS",
    "PrefsortConfig",
    "UI_MODES",
    "assert_valid_config",
    "default_config",
    "env_variable",
    "load_config",
    "log_level_number",
    "merge_config",
    "validate_config",
]
