"""
prefsort — unit tests for config schema validation

File: tests/unit/config/test_schema.py
"""

from __future__ import annotations

import logging

import pytest

from prefsort.config.schema import (
    CONFIG_FIELDS,
    DEFAULT_CONFIG,
    PATH_FIELDS,
    ConfigValidationError,
    assert_valid_config,
    default_config,
    log_level_number,
    merge_config,
    validate_config,
)


def test_defaults_are_valid() -> None:
    result = validate_config(default_config())
    assert result.is_valid
    assert result.config == default_config()


def test_default_config_returns_independent_copies() -> None:
    first = default_config()
    first["ui"]["mode"] = "tui"
    assert default_config()["ui"]["mode"] == DEFAULT_CONFIG["ui"]["mode"]


def test_merge_is_deep() -> None:
    merged = merge_config(default_config(), {"ui": {"mode": "tui"}})
    assert merged["ui"] == {"mode": "tui", "no_color": False}


def test_issues_are_collected_with_paths() -> None:
    result = validate_config(
        {
            "ui": {"mode": "gui", "no_color": "yes", "theme": "dark"},
            "logging": {"level": 10},
            "extra": {},
        }
    )
    assert not result.is_valid
    paths = [issue.path for issue in result.issues]
    assert paths == ["extra", "ui.theme", "ui.mode", "ui.no_color", "logging.level"]


def test_level_is_upper_cased() -> None:
    config = assert_valid_config({"logging": {"level": "debug"}})
    assert config["logging"]["level"] == "DEBUG"


def test_assert_valid_config_raises_with_rendered_issues() -> None:
    with pytest.raises(ConfigValidationError) as excinfo:
        assert_valid_config({"output": {"path": 3}})
    assert "output.path: expected string" in str(excinfo.value)
    assert len(excinfo.value.issues) == 1


def test_root_must_be_mapping() -> None:
    result = validate_config(["not", "a", "table"])
    assert result.config is None
    assert result.issues[0].path == "<root>"


@pytest.mark.parametrize(("name", "number"), [("DEBUG", logging.DEBUG), ("warning", logging.WARNING)])
def test_log_level_number(name: str, number: int) -> None:
    assert log_level_number(name) == number


def test_sections_must_be_tables() -> None:
    result = validate_config({"logging": "DEBUG"})
    assert [(issue.path, issue.message) for issue in result.issues] == [
        ("logging", "expected table, got str")
    ]


def test_blank_choice_is_rejected() -> None:
    with pytest.raises(ConfigValidationError, match="ui.mode: invalid value ''"):
        assert_valid_config({"ui": {"mode": "  "}})


def test_path_fields_come_from_field_table() -> None:
    assert PATH_FIELDS == (("logging", "file"), ("output", "path"))
    assert [field.dotted for field in CONFIG_FIELDS if field.kind == "flag"] == ["ui.no_color"]
