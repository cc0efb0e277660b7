"""Ranking engine: merge sort over a pairwise decision oracle."""

from prefsort.engine.console_oracle import ConsoleOracle, parse_answer
from prefsort.engine.merge_sort import Ranking, max_comparisons, merge_sort, sort_items
from prefsort.engine.oracle import (
    ComparisonRequest,
    CountingOracle,
    DecisionOracle,
    FunctionOracle,
    OracleInputError,
    PrefsortError,
    ReplyAlreadySent,
    SortAborted,
    SortCancelled,
    SortSessionError,
)

__all__ = [
    "ComparisonRequest",
    "ConsoleOracle",
    "CountingOracle",
    "DecisionOracle",
    "FunctionOracle",
    "OracleInputError",
    "PrefsortError",
    "Ranking",
    "ReplyAlreadySent",
    "SortAborted",
    "SortCancelled",
    "SortSessionError",
    "max_comparisons",
    "merge_sort",
    "parse_answer",
    "sort_items",
]
