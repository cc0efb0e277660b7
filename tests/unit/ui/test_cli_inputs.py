"""Unit tests for CLI argument parsing and item acquisition."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from prefsort.ui.cli import (
    CAPTURE_PROMPT,
    CLIError,
    acquire_items,
    build_parser,
    capture_items,
    clean_items,
    read_items_file,
)


@pytest.mark.unit
class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.items == []
        assert args.file_path is None
        assert args.tui is False
        assert args.output_path is None
        assert args.no_color is False

    def test_all_flags(self) -> None:
        args = build_parser().parse_args(
            ["a", "b", "--file", "x.txt", "--tui", "-o", "out.txt", "--log-level", "debug"]
        )
        assert args.items == ["a", "b"]
        assert args.file_path == "x.txt"
        assert args.tui is True
        assert args.output_path == "out.txt"
        assert args.log_level == "debug"

    def test_items_may_surround_options(self) -> None:
        args = build_parser().parse_intermixed_args(["a", "--no-color", "b", "--tui", "c"])
        assert args.items == ["a", "b", "c"]
        assert args.no_color is True
        assert args.tui is True

    def test_version_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["--version"])
        assert excinfo.value.code == 0
        assert capsys.readouterr().out.startswith("prefsort ")


@pytest.mark.unit
class TestItemSources:
    def test_clean_items_trims_and_drops_blanks(self) -> None:
        assert clean_items(["  a ", "", "   ", "b", "a"]) == ["a", "b", "a"]

    def test_file_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "items.txt"
        path.write_text("Apple\n\n  Banana  \r\nCherry", encoding="utf-8")
        assert read_items_file(path) == ["Apple", "Banana", "Cherry"]

    def test_missing_file_is_cli_error(self, tmp_path: Path) -> None:
        with pytest.raises(CLIError, match="failed to read file") as excinfo:
            read_items_file(tmp_path / "nope.txt")
        assert excinfo.value.exit_code == 1

    def test_file_wins_over_positional(self, tmp_path: Path) -> None:
        path = tmp_path / "items.txt"
        path.write_text("from-file\n", encoding="utf-8")
        items = acquire_items(
            str(path), ["from-args"], input_stream=io.StringIO(), output=io.StringIO()
        )
        assert items == ["from-file"]

    def test_positional_wins_over_prompt(self) -> None:
        stdin = io.StringIO("typed\n\n")
        items = acquire_items(None, [" x ", "y"], input_stream=stdin, output=io.StringIO())
        assert items == ["x", "y"]
        assert stdin.tell() == 0


@pytest.mark.unit
class TestCaptureItems:
    def test_blank_line_ends_capture(self) -> None:
        output = io.StringIO()
        items = capture_items(io.StringIO("Apple\n  Banana \n\nignored\n"), output)
        assert items == ["Apple", "Banana"]
        assert output.getvalue() == f"{CAPTURE_PROMPT}\n> > > "

    def test_eof_before_blank_line_is_read_error(self) -> None:
        with pytest.raises(CLIError, match="read error: EOF"):
            capture_items(io.StringIO("Apple\n"), io.StringIO())

    def test_immediate_blank_line_yields_no_items(self) -> None:
        assert capture_items(io.StringIO("\n"), io.StringIO()) == []
