"""Thread-level concurrency primitives shared by the sorter, relay and UI."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from prefsort.engine.oracle import ReplyAlreadySent, SortCancelled

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


class CancellationToken:
    """Cooperative cancellation token backed by ``threading.Event``.

    Callbacks registered with :meth:`add_callback` run once, on the thread that
    calls :meth:`cancel` (or immediately when the token is already cancelled).
    Blocking primitives use them to wake their waiters.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SortCancelled("operation cancelled")

    def add_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass


class ReplySlot(Generic[T]):
    """Single-use reply channel: one writer sends exactly once, one reader waits."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._sent = False
        self._abandoned = False
        self._value: T | None = None

    @property
    def is_settled(self) -> bool:
        """True once a value was sent or the waiter gave up."""
        with self._cond:
            return self._sent or self._abandoned

    def send(self, value: T) -> None:
        with self._cond:
            if self._sent:
                raise ReplyAlreadySent("reply slot already answered")
            if self._abandoned:
                raise SortCancelled("reply slot abandoned by cancelled sort")
            self._value = value
            self._sent = True
            self._cond.notify_all()

    def wait(self, cancel_token: CancellationToken | None = None) -> T:
        """Block until a value arrives; raise ``SortCancelled`` if the token fires first."""

        def _wake() -> None:
            with self._cond:
                self._cond.notify_all()

        if cancel_token is not None:
            cancel_token.add_callback(_wake)
        try:
            with self._cond:
                while not self._sent:
                    if cancel_token is not None and cancel_token.is_cancelled:
                        self._abandoned = True
                        self._cond.notify_all()
                        raise SortCancelled("operation cancelled while awaiting reply")
                    self._cond.wait()
                return self._value  # type: ignore[return-value]
        finally:
            if cancel_token is not None:
                cancel_token.remove_callback(_wake)

    def wait_settled(self, timeout: float | None = None) -> bool:
        """Block until the slot is answered or abandoned; return whether it settled."""
        with self._cond:
            return self._cond.wait_for(lambda: self._sent or self._abandoned, timeout)

    def abandon(self) -> None:
        with self._cond:
            if not self._sent:
                self._abandoned = True
            self._cond.notify_all()


@dataclass(slots=True)
class RequestMailbox(Generic[T]):
    """Bounded, closable single-producer/single-consumer mailbox.

    ``capacity`` defaults to one, which keeps at most one request in flight
    between the sorter and the relay.
    """

    capacity: int = 1
    _items: list[T] = field(init=False, default_factory=list, repr=False)
    _closed: bool = field(init=False, default=False)
    _cond: threading.Condition = field(init=False, default_factory=threading.Condition, repr=False)

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError("capacity must be > 0")

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def put(self, item: T, cancel_token: CancellationToken | None = None) -> None:
        def _wake() -> None:
            with self._cond:
                self._cond.notify_all()

        if cancel_token is not None:
            cancel_token.add_callback(_wake)
        try:
            with self._cond:
                while len(self._items) >= self.capacity and not self._closed:
                    if cancel_token is not None and cancel_token.is_cancelled:
                        raise SortCancelled("operation cancelled while handing off request")
                    self._cond.wait()
                if self._closed:
                    raise RuntimeError("mailbox is closed")
                if cancel_token is not None and cancel_token.is_cancelled:
                    raise SortCancelled("operation cancelled while handing off request")
                self._items.append(item)
                self._cond.notify_all()
        finally:
            if cancel_token is not None:
                cancel_token.remove_callback(_wake)

    def get(self, timeout: float | None = None) -> T | None:
        """Return the next item, or ``None`` once the mailbox is closed and drained.

        Also returns ``None`` on timeout; check :attr:`closed` to tell them apart.
        """
        with self._cond:
            if not self._cond.wait_for(lambda: self._items or self._closed, timeout):
                return None
            if not self._items:
                return None
            item = self._items.pop(0)
            self._cond.notify_all()
            return item

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()


__all__ = [
    "CancellationToken",
    "ReplySlot",
    "RequestMailbox",
]
