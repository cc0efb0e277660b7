"""
prefsort — rank a list by answering pairwise "which do you prefer?" questions.

File: src/prefsort/__init__.py

Purpose
- Package root. Exposes the version and the small engine surface that
  embedding code needs: ``sort_items``, ``merge_sort`` and the oracle types.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).
- Must not import Textual; the TUI is loaded lazily by ``prefsort.ui.tui``.
"""

from prefsort.engine import (
    ConsoleOracle,
    DecisionOracle,
    FunctionOracle,
    OracleInputError,
    PrefsortError,
    Ranking,
    SortAborted,
    SortCancelled,
    max_comparisons,
    merge_sort,
    sort_items,
)

__version__ = "0.1.0"

__all__ = [
    "ConsoleOracle",
    "DecisionOracle",
    "FunctionOracle",
    "OracleInputError",
    "PrefsortError",
    "Ranking",
    "SortAborted",
    "SortCancelled",
    "__version__",
    "max_comparisons",
    "merge_sort",
    "sort_items",
]
