"""Controller layer — owns RankingState, answers comparison requests.

File: src/prefsort/ui/tui/controller.py

NO widget/Textual imports. The controller:
1. Receives session events and key intents from the view layer.
2. Stores the pending comparison and sends the user's answer into its reply slot.
3. Notifies the view layer via a callback when state changes.

This keeps the request/reply discipline testable without Textual.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from prefsort.engine.merge_sort import max_comparisons
from prefsort.engine.oracle import ComparisonRequest, SortCancelled
from prefsort.ui.tui.session import SessionEvent, SessionEventKind, SessionStatus
from prefsort.ui.tui.state import CHOOSE_STATUS, RankingState, SessionPhase, Side

# Type alias for the state-change notification callback
StateCallback = Callable[[], Awaitable[None] | None]


class RankingController:
    """Application controller — one pending comparison at a time."""

    def __init__(
        self,
        *,
        state: RankingState | None = None,
        on_state_change: StateCallback | None = None,
        total_items: int = 0,
        no_color: bool = False,
    ) -> None:
        self.state = state or RankingState()
        if state is None:
            self.state.no_color = no_color
            self.state.total_items = total_items
            self.state.max_comparisons = max_comparisons(total_items)
        self._on_state_change = on_state_change
        self._logger = structlog.get_logger(__name__)

    # ------------------------------------------------------------------
    # State notification
    # ------------------------------------------------------------------

    async def _notify(self) -> None:
        if self._on_state_change is not None:
            result = self._on_state_change()
            if asyncio.iscoroutine(result):
                await result

    # ------------------------------------------------------------------
    # Session events
    # ------------------------------------------------------------------

    async def handle_session_event(self, event: SessionEvent) -> None:
        if event.kind is SessionEventKind.COMPARISON_REQUESTED:
            assert event.request is not None
            await self.receive(event.request)
        elif event.kind is SessionEventKind.FINISHED:
            await self.finish(event.status)

    async def receive(self, request: ComparisonRequest) -> None:
        """Display ``request`` and hold its reply slot until the user chooses."""
        if self.state.pending is not None:
            raise RuntimeError(
                f"comparison #{request.index} arrived while "
                f"#{self.state.pending.index} is still pending"
            )
        self.state.left = request.a
        self.state.right = request.b
        self.state.pending = request
        self.state.phase = SessionPhase.AWAITING_CHOICE
        self.state.status = CHOOSE_STATUS
        await self._notify()

    async def finish(self, status: SessionStatus | None = None) -> None:
        self.state.pending = None
        self.state.phase = SessionPhase.FINISHED
        if status is SessionStatus.COMPLETED:
            self.state.status = "Ranking complete."
        elif status is SessionStatus.FAILED:
            self.state.status = "Ranking failed."
        else:
            self.state.status = "Ranking stopped."
        await self._notify()

    # ------------------------------------------------------------------
    # Intents (actions from the view)
    # ------------------------------------------------------------------

    async def choose(self, side: Side) -> bool:
        """Intent: user picked a side. Returns whether an answer was sent."""
        request = self.state.pending
        if request is None:
            return False

        self.state.pending = None
        try:
            request.answer(side.prefers_first)
        except SortCancelled:
            self._logger.debug("tui.answer_dropped", index=request.index)
            self.state.status = "Ranking stopped."
            await self._notify()
            return False

        self.state.answered += 1
        self.state.phase = SessionPhase.WAITING
        self.state.status = f"Sent choice: {side.value}"
        self._logger.debug("tui.choice_sent", index=request.index, side=side.value)
        await self._notify()
        return True

    async def request_quit(self) -> None:
        """Intent: user pressed quit."""
        self.state.pending = None
        self.state.phase = SessionPhase.QUITTING
        self.state.status = "Quitting."
        await self._notify()

    def progress_text(self) -> str:
        """Comparison counter shown in the status line."""
        current = self.state.answered + (1 if self.state.pending is not None else 0)
        if self.state.max_comparisons <= 0:
            noun = "item" if self.state.total_items == 1 else "items"
            return f"{self.state.total_items} {noun}"
        return f"comparison {current} of at most {self.state.max_comparisons}"


__all__ = ["RankingController", "StateCallback"]
