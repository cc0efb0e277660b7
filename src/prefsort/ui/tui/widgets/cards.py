"""Choice cards widget — the two items being compared, side by side.

File: src/prefsort/ui/tui/widgets/cards.py
"""

from __future__ import annotations

from rich.style import Style
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widget import Widget
from textual.widgets import Static

from prefsort.ui.tui.state import RankingState, SessionPhase

_S_ARROW = Style(color="#3fa9f5", bold=True)
_S_ITEM = Style(color="#c8cdd8", bold=True)
_S_IDLE = Style(color="#7f8aa3")


class ChoiceCards(Widget):
    """Two cards; the left one is chosen with ← / h, the right one with → / l."""

    DEFAULT_CSS = """
    ChoiceCards {
        height: auto;
        width: 100%;
        padding: 1 2;
    }
    #cards-row {
        height: auto;
        width: 100%;
    }
    .card {
        width: 1fr;
        min-height: 5;
        border: round #3fa9f5;
        padding: 1 2;
        content-align: center middle;
    }
    .card.idle {
        border: round #1a2550;
    }
    """

    def compose(self) -> ComposeResult:
        with Horizontal(id="cards-row"):
            yield Static("", id="card-left", classes="card idle")
            yield Static("", id="card-right", classes="card idle")

    def update_from_state(self, state: RankingState) -> None:
        """Refresh both cards from the controller's state."""
        left = self.query_one("#card-left", Static)
        right = self.query_one("#card-right", Static)
        active = state.phase is SessionPhase.AWAITING_CHOICE

        for card in (left, right):
            card.set_class(not active, "idle")

        if not state.has_pair:
            left.update("")
            right.update("")
            return
        left.update(card_text(state.left, arrow="←", arrow_first=True, no_color=state.no_color))
        right.update(card_text(state.right, arrow="→", arrow_first=False, no_color=state.no_color))


def card_text(item: str, *, arrow: str, arrow_first: bool, no_color: bool = False) -> Text:
    """Render one card body as rich text with its arrow hint."""
    arrow_style = Style() if no_color else _S_ARROW
    item_style = Style(bold=True) if no_color else _S_ITEM
    text = Text()
    if arrow_first:
        text.append(f"{arrow} ", style=arrow_style)
        text.append(item, style=item_style)
    else:
        text.append(item, style=item_style)
        text.append(f" {arrow}", style=arrow_style)
    return text


__all__ = ["ChoiceCards", "card_text"]
