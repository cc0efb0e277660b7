"""Interactive ranking TUI — 3-layer architecture (session / controller / view).

Also serves as the entrypoint module. Exposes ``tui_available()`` and
``run_tui()`` for the CLI without importing Textual until it is needed.
"""

from __future__ import annotations

from importlib.util import find_spec
from typing import TYPE_CHECKING

from prefsort.engine.oracle import PrefsortError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from prefsort.engine.merge_sort import Ranking


class TUIUnavailableError(PrefsortError):
    """Textual is not installed."""


class TUIRuntimeError(PrefsortError):
    """The Textual event loop could not be started or crashed."""


def tui_available() -> bool:
    """Return whether optional TUI dependencies are available in this environment."""
    return find_spec("textual") is not None


def run_tui(items: Sequence[str], *, no_color: bool = False) -> Ranking:
    """Rank ``items`` in the interactive TUI and return the final ranking."""
    if not tui_available():
        raise TUIUnavailableError(
            "TUI requires optional dependency. Install: pip install -e '.[tui]'"
        )

    from prefsort.ui.tui.app import run_ranking_app

    return run_ranking_app(items, no_color=no_color)


__all__ = ["TUIRuntimeError", "TUIUnavailableError", "run_tui", "tui_available"]
