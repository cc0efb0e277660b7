"""Output rendering for the prefsort console mode.

File: src/prefsort/ui/render.py

Purpose
- Print the intro banner and final ranking shown around a console session.
- Keep the numbered ranking text identical for stdout and the ``-o`` file.
- Respect the NO_COLOR environment variable and the --no-color CLI flag.

Headings are emitted bold through ``rich`` only when color is allowed and
stdout is a terminal; otherwise every line is plain text.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from rich.console import Console
from rich.text import Text

from prefsort.engine.oracle import PrefsortError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from prefsort.engine.merge_sort import Ranking

RANKING_HEADING = "Final ranking (best -> worst):"


class OutputWriteError(PrefsortError):
    """The ranking could not be written to the requested file."""


def _color_allowed(no_color_flag: bool, stream: TextIO) -> bool:
    """Check whether color output should be attempted."""

    if no_color_flag:
        return False
    if os.environ.get("NO_COLOR", ""):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def format_ranking(items: Sequence[str]) -> str:
    """Render ``items`` as ``{rank}. {item}`` lines, one per item."""

    return "".join(f"{rank}. {item}\n" for rank, item in enumerate(items, start=1))


def write_ranking(ranking: Ranking, path: str | Path) -> Path:
    """Write the numbered ranking to ``path`` and return the resolved path."""

    target = Path(path)
    try:
        target.write_text(format_ranking(ranking.items), encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(f"failed to write output file {target}: {exc}") from exc
    return target


class CLIRenderer:
    """Thin console output renderer.

    Produces clean, deterministic plain-text output.
    """

    def __init__(self, *, no_color: bool = False, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._color = _color_allowed(no_color, self._stream)
        self._console = (
            Console(file=self._stream, highlight=False, soft_wrap=True) if self._color else None
        )

    @property
    def color(self) -> bool:
        return self._color

    def text(self, line: str) -> None:
        """Print a plain text line."""

        print(line, file=self._stream)

    def heading(self, text: str) -> None:
        """Print a heading line, bold when color is allowed."""

        if self._console is not None:
            self._console.print(Text(text, style="bold"))
            return
        self.text(text)

    def intro(self, count: int) -> None:
        """Explain the pairwise session before the first prompt."""

        self.text(f"\nGot {count} items. We'll ask pairwise questions to rank them.")
        self.text("On each prompt enter 1 or 2 to choose the item you prefer. Enter q to quit.\n")

    def ranking(self, ranking: Ranking) -> None:
        """Print the final ranking, most preferred first."""

        self.text("")
        self.heading(RANKING_HEADING)
        self._stream.write(format_ranking(ranking.items))
        self._stream.flush()


def create_renderer(*, no_color: bool = False, stream: TextIO | None = None) -> CLIRenderer:
    """Create a CLI renderer with the given settings."""

    return CLIRenderer(no_color=no_color, stream=stream)


__all__ = [
    "CLIRenderer",
    "OutputWriteError",
    "RANKING_HEADING",
    "create_renderer",
    "format_ranking",
    "write_ranking",
]
