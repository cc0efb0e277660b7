"""Background sort session for the interactive UI — NO Textual imports.

File: src/prefsort/ui/tui/session.py

Runs the merge sort on a sorter thread whose oracle hands every comparison
to a capacity-1 mailbox and blocks on a per-request reply slot. A relay
thread drains the mailbox and forwards each request to a sink (the Textual
app posts them into its message queue). When sorting ends, whether it
completed, was cancelled or failed, the sink receives exactly one FINISHED
event.

Threads and channels:

    sorter --put--> RequestMailbox --get--> relay --sink--> UI loop
       ^                                                      |
       +----------------- ReplySlot.send(bool) ---------------+

The ranking is handed back through a buffered completion queue, so the sorter
never waits for a reader.
"""

from __future__ import annotations

import enum
import itertools
import queue
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Final

import structlog

from prefsort.engine.merge_sort import Ranking, sort_items
from prefsort.engine.oracle import ComparisonRequest, SortCancelled, SortSessionError
from prefsort.utils.concurrency import CancellationToken, ReplySlot, RequestMailbox

_DEFAULT_JOIN_TIMEOUT_SECS: Final[float] = 5.0

# ---------------------------------------------------------------------------
# Session event model
# ---------------------------------------------------------------------------


class SessionEventKind(enum.Enum):
    COMPARISON_REQUESTED = "comparison_requested"
    FINISHED = "finished"


class SessionStatus(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SessionEvent:
    kind: SessionEventKind
    request: ComparisonRequest | None = None
    status: SessionStatus | None = None


SessionSink = Callable[[SessionEvent], Any]


# ---------------------------------------------------------------------------
# Oracle used on the sorter thread
# ---------------------------------------------------------------------------


class MailboxOracle:
    """Turns each ``ask`` into a :class:`ComparisonRequest` and waits for its reply."""

    def __init__(
        self,
        mailbox: RequestMailbox[ComparisonRequest],
        cancel_token: CancellationToken,
    ) -> None:
        self._mailbox = mailbox
        self._cancel_token = cancel_token
        self._counter = itertools.count(1)

    def ask(self, a: str, b: str) -> bool:
        self._cancel_token.raise_if_cancelled()
        reply: ReplySlot[bool] = ReplySlot()
        request = ComparisonRequest(a=a, b=b, reply=reply, index=next(self._counter))
        self._mailbox.put(request, self._cancel_token)
        return reply.wait(self._cancel_token)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class SortSession:
    """Owns the sorter and relay threads for one interactive ranking."""

    def __init__(self, items: Sequence[str], *, logger: Any | None = None) -> None:
        self._items = tuple(items)
        self._logger = logger if logger is not None else structlog.get_logger(__name__)
        self._token = CancellationToken()
        self._mailbox: RequestMailbox[ComparisonRequest] = RequestMailbox(capacity=1)
        self._completion: queue.Queue[Ranking] = queue.Queue(maxsize=1)
        self._finished = threading.Event()
        self._finished_lock = threading.Lock()
        self._finished_sent = False
        self._status = SessionStatus.IDLE
        self._error: BaseException | None = None
        self._ranking: Ranking | None = None
        self._sink: SessionSink | None = None
        self._sorter: threading.Thread | None = None
        self._relay: threading.Thread | None = None

    @property
    def items(self) -> tuple[str, ...]:
        return self._items

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def cancel_token(self) -> CancellationToken:
        return self._token

    @property
    def is_alive(self) -> bool:
        return any(t is not None and t.is_alive() for t in (self._sorter, self._relay))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, sink: SessionSink) -> None:
        if self._sorter is not None:
            raise RuntimeError("session already started")
        self._sink = sink
        self._status = SessionStatus.RUNNING
        self._sorter = threading.Thread(
            target=self._run_sorter, name="prefsort-sorter", daemon=True
        )
        self._relay = threading.Thread(target=self._run_relay, name="prefsort-relay", daemon=True)
        self._logger.debug("session.started", items=len(self._items))
        self._sorter.start()
        self._relay.start()

    def cancel(self) -> None:
        """Ask the sorter to stop at its current or next comparison."""
        if self._status is SessionStatus.RUNNING and not self._finished.is_set():
            self._logger.info("session.cancel_requested")
        self._token.cancel()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for both threads; return True when neither is still running."""
        for thread in (self._sorter, self._relay):
            if thread is not None:
                thread.join(timeout)
        return not self.is_alive

    def shutdown(self, *, timeout: float = _DEFAULT_JOIN_TIMEOUT_SECS) -> bool:
        """Cancel unless already finished, then join both threads."""
        if not self._finished.is_set():
            self.cancel()
        stopped = self.join(timeout)
        if not stopped:
            self._logger.warning("session.threads_still_running", timeout_seconds=timeout)
        return stopped

    def result(self) -> Ranking:
        """Return the ranking produced by a naturally completed sort.

        Raises :class:`SortCancelled` when the session was cancelled first and
        :class:`SortSessionError` when the sorter failed.
        """
        if self._ranking is None:
            try:
                self._ranking = self._completion.get_nowait()
            except queue.Empty:
                if self._error is not None:
                    raise SortSessionError(f"sorter failed: {self._error}") from self._error
                if self._token.is_cancelled:
                    raise SortCancelled("ranking cancelled before completion") from None
                raise RuntimeError("sort has not finished") from None
        return self._ranking

    # ------------------------------------------------------------------
    # Threads
    # ------------------------------------------------------------------

    def _run_sorter(self) -> None:
        oracle = MailboxOracle(self._mailbox, self._token)
        try:
            ranking = sort_items(
                self._items, oracle, cancel_token=self._token, logger=self._logger
            )
        except SortCancelled:
            self._status = SessionStatus.CANCELLED
            self._logger.info("session.cancelled")
        except Exception as exc:  # noqa: BLE001 - surfaced to the caller via result().
            self._error = exc
            self._status = SessionStatus.FAILED
            self._logger.error("session.sorter_failed", error=repr(exc))
        else:
            self._completion.put_nowait(ranking)
            self._status = SessionStatus.COMPLETED
            self._finished.set()
            self._emit_finished()
        finally:
            # Closing wakes the relay even if it missed the completion signal.
            self._mailbox.close()

    def _run_relay(self) -> None:
        while not self._finished.is_set():
            request = self._mailbox.get()
            if request is None:
                break
            if request.reply.is_settled:
                # Abandoned by a cancelled sorter before the UI ever saw it.
                continue
            self._emit(SessionEvent(kind=SessionEventKind.COMPARISON_REQUESTED, request=request))
            # Only one request may be pending in the UI at a time.
            request.reply.wait_settled()
        self._emit_finished()

    def _emit_finished(self) -> None:
        with self._finished_lock:
            if self._finished_sent:
                return
            self._finished_sent = True
        self._emit(SessionEvent(kind=SessionEventKind.FINISHED, status=self._status))

    def _emit(self, event: SessionEvent) -> None:
        assert self._sink is not None
        self._sink(event)


__all__ = [
    "MailboxOracle",
    "SessionEvent",
    "SessionEventKind",
    "SessionSink",
    "SessionStatus",
    "SortSession",
]
