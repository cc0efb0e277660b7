"""Blocking console decision oracle.

File: src/prefsort/engine/console_oracle.py

Prints both items with ``1``/``2`` labels and reads one line per attempt from
a shared input stream. Invalid answers re-prompt forever; ``q`` raises
:class:`SortAborted`; a read failure raises :class:`OracleInputError`.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Final, TextIO

import structlog

from prefsort.engine.oracle import OracleInputError, SortAborted

if TYPE_CHECKING:
    from prefsort.utils.concurrency import CancellationToken

PREFER_A: Final[frozenset[str]] = frozenset({"1", "a"})
PREFER_B: Final[frozenset[str]] = frozenset({"2", "b"})
QUIT: Final[frozenset[str]] = frozenset({"q", "quit", "exit"})

_INVALID_NOTICE: Final[str] = "Invalid input; please enter 1 or 2 (or q to quit)."


class ConsoleOracle:
    """Ask the person at the terminal which of two items they prefer."""

    def __init__(
        self,
        input_stream: TextIO | None = None,
        output: TextIO | None = None,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        self._input = input_stream if input_stream is not None else sys.stdin
        self._output = output if output is not None else sys.stdout
        self._cancel_token = cancel_token
        self._logger = structlog.get_logger(__name__)

    def ask(self, a: str, b: str) -> bool:
        while True:
            self._write("Which do you prefer?\n")
            self._write(f"  1) {a}\n")
            self._write(f"  2) {b}\n")
            self._write("Enter 1 or 2 (or q to quit): ")

            answer = parse_answer(self._read_line())
            if answer is not None:
                return answer
            self._logger.debug("console.invalid_answer")
            self._write(_INVALID_NOTICE + "\n")

    def _read_line(self) -> str:
        try:
            line = self._input.readline()
        except OSError as exc:
            raise OracleInputError(f"read error: {exc}") from exc
        # A final line cut off by EOF counts as unread.
        if not line.endswith("\n"):
            raise OracleInputError("read error: EOF")
        if self._cancel_token is not None:
            self._cancel_token.raise_if_cancelled()
        return line

    def _write(self, text: str) -> None:
        self._output.write(text)
        self._output.flush()


def parse_answer(raw: str) -> bool | None:
    """Map one line of input to True (prefer first), False (prefer second) or None.

    Raises :class:`SortAborted` for a quit command.
    """
    normalized = raw.strip().lower()
    if normalized in PREFER_A:
        return True
    if normalized in PREFER_B:
        return False
    if normalized in QUIT:
        raise SortAborted("Quitting.")
    return None


__all__ = ["ConsoleOracle", "parse_answer"]
