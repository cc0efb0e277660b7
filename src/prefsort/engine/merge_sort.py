"""Comparator-driven top-down merge sort.

File: src/prefsort/engine/merge_sort.py

The sort knows nothing about where answers come from. Every pairwise decision
is delegated to a :class:`~prefsort.engine.oracle.DecisionOracle` (or a plain
``prefer(a, b) -> bool`` callable) and trusted as ground truth: no answer is
cached, and no comparison is skipped by transitivity.

Public API:
    merge_sort(items, prefer, *, cancel_token=None) -> list[str]
    sort_items(items, oracle, *, cancel_token=None, logger=None) -> Ranking
    max_comparisons(n) -> int
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from prefsort.engine.oracle import CountingOracle, DecisionOracle, as_oracle

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from prefsort.utils.concurrency import CancellationToken


@dataclass(frozen=True, slots=True)
class Ranking:
    """Final order, most preferred first. Rank ``i`` is ``items[i - 1]``."""

    items: tuple[str, ...]
    comparisons: int = 0

    def __len__(self) -> int:
        return len(self.items)


def merge_sort(
    items: Sequence[str],
    prefer: DecisionOracle | Callable[[str, str], bool],
    *,
    cancel_token: CancellationToken | None = None,
) -> list[str]:
    """Return a new list of ``items`` ordered by the oracle's preferences.

    Parameters
    ----------
    items:
        Items to rank. Never mutated.
    prefer:
        Oracle deciding whether its first argument ranks above its second.
    cancel_token:
        Checked before every oracle call; a fired token raises
        :class:`~prefsort.engine.oracle.SortCancelled`.
    """
    return _sort(list(items), as_oracle(prefer), cancel_token)


def _sort(
    items: list[str],
    oracle: DecisionOracle,
    cancel_token: CancellationToken | None,
) -> list[str]:
    if len(items) <= 1:
        return list(items)
    mid = len(items) // 2
    left = _sort(items[:mid], oracle, cancel_token)
    right = _sort(items[mid:], oracle, cancel_token)
    return _merge(left, right, oracle, cancel_token)


def _merge(
    left: list[str],
    right: list[str],
    oracle: DecisionOracle,
    cancel_token: CancellationToken | None,
) -> list[str]:
    out: list[str] = []
    i = j = 0
    while i < len(left) and j < len(right):
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        if oracle.ask(left[i], right[j]):
            out.append(left[i])
            i += 1
        else:
            out.append(right[j])
            j += 1
    # Remainders are already ordered within their half.
    out.extend(left[i:])
    out.extend(right[j:])
    return out


def max_comparisons(n: int) -> int:
    """Worst-case number of oracle calls ``merge_sort`` issues for ``n`` items."""
    if n < 0:
        raise ValueError("n must be >= 0")
    if n <= 1:
        return 0
    mid = n // 2
    return max_comparisons(mid) + max_comparisons(n - mid) + n - 1


def sort_items(
    items: Sequence[str],
    oracle: DecisionOracle | Callable[[str, str], bool],
    *,
    cancel_token: CancellationToken | None = None,
    logger: Any | None = None,
) -> Ranking:
    """Rank ``items`` with ``oracle`` and return an immutable :class:`Ranking`."""
    log = logger if logger is not None else structlog.get_logger(__name__)
    counting = CountingOracle(as_oracle(oracle), logger=log)
    started = time.monotonic()
    log.debug("sort.started", items=len(items), max_comparisons=max_comparisons(len(items)))

    ordered = merge_sort(items, counting, cancel_token=cancel_token)

    log.info(
        "sort.completed",
        items=len(ordered),
        comparisons=counting.count,
        elapsed_seconds=round(time.monotonic() - started, 3),
    )
    return Ranking(items=tuple(ordered), comparisons=counting.count)


__all__ = ["Ranking", "max_comparisons", "merge_sort", "sort_items"]
