"""Main Textual App — view layer that renders state and emits intents.

File: src/prefsort/ui/tui/app.py

This is the UI event loop of an interactive ranking. It:
- Starts the background SortSession once mounted
- Receives session events from the relay thread as Textual messages
- Translates key presses into controller intents
- Exits when the sort finishes or the user quits

All request/reply logic lives in the controller; this file only does rendering.
"""

from __future__ import annotations

import contextlib
import os
from collections.abc import Sequence

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.message import Message
from textual.widgets import Static

from prefsort.engine.merge_sort import Ranking, max_comparisons
from prefsort.ui.tui import TUIRuntimeError
from prefsort.ui.tui.controller import RankingController
from prefsort.ui.tui.session import SessionEvent, SessionEventKind, SortSession
from prefsort.ui.tui.state import RankingState, Side
from prefsort.ui.tui.widgets.cards import ChoiceCards
from prefsort.ui.tui.widgets.statusline import StatusLine

TITLE_TEXT = "Interactive Tournament — choose which item you prefer"

_CSS = """
Screen { background: #05070c; color: #c8cdd8; }
#title { padding: 1 2; color: #3fa9f5; text-style: bold; }
"""
_CSS_NO_COLOR = """
Screen { background: black; color: white; }
#title { padding: 1 2; text-style: bold; }
.card { border: round white; }
.card.idle { border: round white; }
StatusLine { background: black; color: white; }
"""


class SessionEventPosted(Message):
    """A session event relayed from a background thread."""

    def __init__(self, event: SessionEvent) -> None:
        super().__init__()
        self.event = event


class RankingApp(App[None]):
    """Pairwise ranking TUI: two cards, pick one with the arrow keys."""

    TITLE = "prefsort"
    CSS = _CSS
    BINDINGS = [
        Binding("left", "choose('left')", "Prefer left", priority=True),
        Binding("h", "choose('left')", "Prefer left", show=False, priority=True),
        Binding("right", "choose('right')", "Prefer right", priority=True),
        Binding("l", "choose('right')", "Prefer right", show=False, priority=True),
        Binding("q", "quit_ranking", "Quit", priority=True),
        Binding("ctrl+c", "quit_ranking", "Quit", show=False, priority=True),
    ]

    def __init__(self, session: SortSession, *, no_color: bool = False) -> None:
        self._monochrome = no_color or bool(os.environ.get("NO_COLOR", ""))
        super().__init__()
        self._sort_session = session
        self._ranking_state = RankingState(
            total_items=len(session.items),
            max_comparisons=max_comparisons(len(session.items)),
            no_color=self._monochrome,
        )
        self._ranking_controller = RankingController(
            state=self._ranking_state,
            on_state_change=self._on_state_change,
        )

    @property
    def controller(self) -> RankingController:
        return self._ranking_controller

    @property
    def session(self) -> SortSession:
        return self._sort_session

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def compose(self) -> ComposeResult:
        yield Static(TITLE_TEXT, id="title", markup=False)
        yield ChoiceCards(id="cards")
        yield StatusLine()

    def on_mount(self) -> None:
        self._refresh_widgets()
        self._sort_session.start(self._deliver)

    # ------------------------------------------------------------------
    # Session → UI
    # ------------------------------------------------------------------

    def _deliver(self, event: SessionEvent) -> None:
        """Sink called on the relay/sorter threads; ``post_message`` is thread-safe."""
        self.post_message(SessionEventPosted(event))

    async def on_session_event_posted(self, message: SessionEventPosted) -> None:
        event = message.event
        await self._ranking_controller.handle_session_event(event)
        if event.kind is SessionEventKind.FINISHED:
            self.exit()

    # ------------------------------------------------------------------
    # State change callback: update widgets
    # ------------------------------------------------------------------

    async def _on_state_change(self) -> None:
        self._refresh_widgets()

    def _refresh_widgets(self) -> None:
        with contextlib.suppress(NoMatches):
            self.query_one(ChoiceCards).update_from_state(self._ranking_state)
        with contextlib.suppress(NoMatches):
            self.query_one(StatusLine).update_from_state(
                self._ranking_state, self._ranking_controller.progress_text()
            )

    # ------------------------------------------------------------------
    # Key intents
    # ------------------------------------------------------------------

    async def action_choose(self, side: str) -> None:
        await self._ranking_controller.choose(Side(side))

    async def action_quit_ranking(self) -> None:
        await self._ranking_controller.request_quit()
        self._sort_session.cancel()
        self.exit()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_ranking_app(items: Sequence[str], *, no_color: bool = False) -> Ranking:
    """Run the ranking TUI to completion and return the final ranking.

    Raises :class:`~prefsort.engine.oracle.SortCancelled` when the user quits
    before the sort completes, and :class:`TUIRuntimeError` when the event
    loop fails.
    """
    effective_no_color = no_color or bool(os.environ.get("NO_COLOR", ""))
    RankingApp.CSS = _CSS_NO_COLOR if effective_no_color else _CSS

    session = SortSession(items)
    app = RankingApp(session, no_color=effective_no_color)
    try:
        app.run()
    except Exception as exc:
        raise TUIRuntimeError(f"failed to run TUI: {exc}") from exc
    finally:
        session.shutdown()

    if app.return_code:
        raise TUIRuntimeError(f"failed to run TUI: exited with code {app.return_code}")
    return session.result()


__all__ = ["RankingApp", "SessionEventPosted", "TITLE_TEXT", "run_ranking_app"]
