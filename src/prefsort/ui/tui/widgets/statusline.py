"""Status line widget — always-visible bottom bar with prompt hint and progress.

File: src/prefsort/ui/tui/widgets/statusline.py
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widget import Widget
from textual.widgets import Static

from prefsort.ui.tui.state import RankingState


class StatusLine(Widget):
    """Shows the current status message and the comparison counter."""

    DEFAULT_CSS = """
    StatusLine {
        dock: bottom;
        height: 1;
        background: #0b1020;
        color: #7f8aa3;
        padding: 0 1;
    }
    #status-inner {
        width: 100%;
        height: 1;
    }
    #status-message {
        width: 1fr;
    }
    #status-progress {
        width: auto;
        min-width: 12;
        text-align: right;
    }
    """

    def compose(self) -> ComposeResult:
        with Horizontal(id="status-inner"):
            yield Static("", id="status-message")
            yield Static("", id="status-progress")

    def update_from_state(self, state: RankingState, progress: str = "") -> None:
        self.query_one("#status-message", Static).update(f" {state.status}")
        self.query_one("#status-progress", Static).update(f" {progress} " if progress else "")


__all__ = ["StatusLine"]
