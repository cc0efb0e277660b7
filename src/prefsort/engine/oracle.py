"""Decision-oracle protocol, comparison requests and the prefsort error taxonomy.

File: src/prefsort/engine/oracle.py

An oracle answers one question: given items ``a`` and ``b``, should ``a`` be
ranked above ``b``? The merge sort engine only ever talks to this protocol,
so the console prompt and the Textual UI are interchangeable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    from prefsort.utils.concurrency import ReplySlot


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class PrefsortError(Exception):
    """Base class for all prefsort failures."""


class SortAborted(PrefsortError):
    """The user asked to stop ranking (``q`` at the prompt)."""


class SortCancelled(SortAborted):
    """The sort was cancelled cooperatively (UI quit or token fired)."""


class OracleInputError(PrefsortError):
    """The oracle could not obtain an answer (end of input, I/O error)."""


class ReplyAlreadySent(PrefsortError):
    """A reply slot was written to more than once."""


class SortSessionError(PrefsortError):
    """The background sorter thread failed."""


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class DecisionOracle(Protocol):
    def ask(self, a: str, b: str) -> bool:
        """Return True iff ``a`` should be ranked above ``b``."""
        ...


class FunctionOracle:
    """Adapts a plain ``prefer(a, b) -> bool`` callable to :class:`DecisionOracle`."""

    __slots__ = ("_prefer",)

    def __init__(self, prefer: Callable[[str, str], bool]) -> None:
        self._prefer = prefer

    def ask(self, a: str, b: str) -> bool:
        return bool(self._prefer(a, b))


class CountingOracle:
    """Wraps another oracle and records every question it forwards."""

    def __init__(self, inner: DecisionOracle, *, logger: Any | None = None) -> None:
        self._inner = inner
        self._logger = logger
        self.calls: list[tuple[str, str, bool]] = []

    @property
    def count(self) -> int:
        return len(self.calls)

    def ask(self, a: str, b: str) -> bool:
        answer = self._inner.ask(a, b)
        self.calls.append((a, b, answer))
        if self._logger is not None:
            self._logger.debug(
                "comparison.decided",
                index=len(self.calls),
                winner="a" if answer else "b",
            )
        return answer


def as_oracle(prefer: DecisionOracle | Callable[[str, str], bool]) -> DecisionOracle:
    if isinstance(prefer, DecisionOracle):
        return prefer
    if callable(prefer):
        return FunctionOracle(prefer)
    raise TypeError(f"expected a DecisionOracle or callable, got {type(prefer).__name__}")


# ---------------------------------------------------------------------------
# Comparison request
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ComparisonRequest:
    """One pending pairwise question and the slot its answer must be sent to."""

    a: str
    b: str
    reply: ReplySlot[bool]
    index: int = 0

    def answer(self, prefer_a: bool) -> None:
        self.reply.send(prefer_a)


__all__ = [
    "ComparisonRequest",
    "CountingOracle",
    "DecisionOracle",
    "FunctionOracle",
    "OracleInputError",
    "PrefsortError",
    "ReplyAlreadySent",
    "SortAborted",
    "SortCancelled",
    "SortSessionError",
    "as_oracle",
]
