"""Command-line interface for prefsort."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

import structlog

from prefsort import __version__
from prefsort.config import (
    ConfigLoadError,
    ConfigValidationError,
    load_config,
    log_level_number,
)
from prefsort.engine import (
    ConsoleOracle,
    OracleInputError,
    Ranking,
    SortAborted,
    SortCancelled,
    sort_items,
)
from prefsort.observability import LoggingConfig, setup_logging, shutdown_logging
from prefsort.ui.render import CLIRenderer, OutputWriteError, create_renderer, write_ranking
from prefsort.ui.tui import TUIRuntimeError, TUIUnavailableError, run_tui

_LOGGER = structlog.get_logger(__name__)

CAPTURE_PROMPT = "Enter items to sort, one per line. Submit an empty line when done:"


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for a ranking run."""

    parser = argparse.ArgumentParser(
        prog="prefsort",
        description=(
            "prefsort — rank a list by answering pairwise questions.\n\n"
            "Items come from --file, else positional arguments, else are read\n"
            "interactively one per line.\n\n"
            "  prefsort apple banana cherry\n"
            "  prefsort --file todo.txt --tui -o ranked.txt\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("items", nargs="*", help="Items to rank (ignored when --file is given).")
    parser.add_argument(
        "--file",
        dest="file_path",
        default=None,
        help="Path to a file with one item per line.",
    )
    parser.add_argument(
        "--tui",
        action="store_true",
        help="Launch the interactive terminal UI (requires textual).",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output_path",
        default=None,
        help="Also write the final ranking to this file.",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to prefsort TOML config (default: ./prefsort.toml if present).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level: DEBUG, INFO, WARNING, ERROR or CRITICAL.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Append JSON-lines logs to this file.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output (also honors NO_COLOR).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, run one ranking, and return the process exit code."""

    parser = build_parser()
    namespace = parser.parse_intermixed_args(list(argv) if argv is not None else None)

    try:
        return _cmd_rank(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code


# ---------------------------------------------------------------------------
# Command handler
# ---------------------------------------------------------------------------


def _cmd_rank(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    mode = str(config["ui"]["mode"])
    no_color = bool(config["ui"]["no_color"])

    try:
        handle = setup_logging(
            LoggingConfig(
                level=log_level_number(config["logging"]["level"]),
                log_file=config["logging"]["file"] or None,
                log_to_stderr=mode == "console",
            )
        )
    except OSError as exc:
        raise CLIError(f"failed to open log file: {exc}", exit_code=2) from exc

    try:
        renderer = create_renderer(no_color=no_color)
        items = acquire_items(args.file_path, args.items, input_stream=sys.stdin, output=sys.stdout)
        if not items:
            raise CLIError("no items provided; exiting")
        _LOGGER.info("cli.items_acquired", items=len(items), mode=mode)

        if mode == "tui":
            ranking = _rank_with_tui(items, no_color=no_color)
        else:
            ranking = _rank_in_console(items, renderer)
        if ranking is None:
            return 0

        renderer.ranking(ranking)
        output_path = str(config["output"]["path"])
        if output_path:
            try:
                write_ranking(ranking, output_path)
            except OutputWriteError as exc:
                raise CLIError(str(exc)) from exc
            _LOGGER.info("cli.output_written", path=output_path)
        return 0
    finally:
        shutdown_logging(handle)


def _rank_in_console(items: Sequence[str], renderer: CLIRenderer) -> Ranking | None:
    renderer.intro(len(items))
    try:
        return sort_items(items, ConsoleOracle(sys.stdin, sys.stdout))
    except SortAborted:
        renderer.text("Quitting.")
        _LOGGER.info("cli.quit", mode="console")
        return None
    except OracleInputError as exc:
        raise CLIError(str(exc)) from exc


def _rank_with_tui(items: Sequence[str], *, no_color: bool) -> Ranking | None:
    try:
        return run_tui(items, no_color=no_color)
    except SortCancelled:
        _LOGGER.info("cli.quit", mode="tui")
        return None
    except (TUIUnavailableError, TUIRuntimeError) as exc:
        raise CLIError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Input acquisition
# ---------------------------------------------------------------------------


def acquire_items(
    file_path: str | None,
    positional: Sequence[str],
    *,
    input_stream: TextIO,
    output: TextIO,
) -> list[str]:
    """Collect items from ``--file``, else positional args, else interactively."""

    if file_path:
        return read_items_file(file_path)
    if positional:
        return clean_items(positional)
    return capture_items(input_stream, output)


def clean_items(values: Iterable[str]) -> list[str]:
    """Trim each value and drop the empty ones, preserving order and duplicates."""

    return [stripped for stripped in (value.strip() for value in values) if stripped]


def read_items_file(path: str | Path) -> list[str]:
    """Read newline-delimited items from ``path``."""

    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CLIError(f"failed to read file: {exc}") from exc
    return clean_items(text.split("\n"))


def capture_items(input_stream: TextIO, output: TextIO) -> list[str]:
    """Prompt for one item per line until a blank line is submitted."""

    print(CAPTURE_PROMPT, file=output)
    items: list[str] = []
    while True:
        output.write("> ")
        output.flush()
        try:
            line = input_stream.readline()
        except OSError as exc:
            raise CLIError(f"read error: {exc}") from exc
        if not line:
            raise CLIError("read error: EOF")
        stripped = line.strip()
        if not stripped:
            return items
        items.append(stripped)


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, object] = {
        "ui.mode": "tui" if args.tui else None,
        "ui.no_color": True if args.no_color else None,
        "logging.level": args.log_level,
        "logging.file": args.log_file,
        "output.path": args.output_path,
    }
    try:
        return load_config(args.config_path, cli_overrides=overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc


__all__ = [
    "CAPTURE_PROMPT",
    "CLIError",
    "acquire_items",
    "build_parser",
    "capture_items",
    "clean_items",
    "read_items_file",
    "run_cli",
]
