"""UI package exports for CLI, rendering, and optional TUI surfaces."""

from prefsort.ui.cli import CLIError, build_parser, run_cli
from prefsort.ui.render import CLIRenderer, OutputWriteError, create_renderer
from prefsort.ui.tui import run_tui, tui_available

__all__ = [
    "CLIError",
    "CLIRenderer",
    "OutputWriteError",
    "build_parser",
    "create_renderer",
    "run_cli",
    "run_tui",
    "tui_available",
]
