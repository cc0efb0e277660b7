"""Process entrypoint for ``prefsort``.

Runs the CLI and turns whatever comes back, a return code, ``SystemExit``
from argparse or an escaped exception, into one of the :class:`ExitCode`
values. Only internal errors print a traceback.
"""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class ExitCode(IntEnum):
    """Deterministic process exit-code contract."""

    SUCCESS = 0
    FAILURE = 1
    CONFIG_ERROR = 2
    INTERNAL_ERROR = 4


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Entrypoint used by ``python -m prefsort`` and the ``prefsort`` script."""

    try:
        from prefsort.ui.cli import run_cli

        code: object = run_cli(argv)
    except SystemExit as exc:
        # argparse: 0 after --help/--version, 2 on a usage error
        code = exc.code
    except KeyboardInterrupt:
        print("Quitting.", file=sys.stderr)
        return int(ExitCode.SUCCESS)
    except Exception as exc:  # noqa: BLE001 - process boundary
        exit_code = classify_exception(exc)
        if exit_code is ExitCode.INTERNAL_ERROR:
            traceback.print_exception(exc, file=sys.stderr)
        else:
            print(f"error: {str(exc).strip() or type(exc).__name__}", file=sys.stderr)
        return int(exit_code)

    if code is None:
        return int(ExitCode.SUCCESS)
    try:
        return int(ExitCode(code))
    except ValueError:
        if isinstance(code, str) and code.strip():
            print(code.strip(), file=sys.stderr)
        return int(ExitCode.INTERNAL_ERROR)


def classify_exception(exc: BaseException) -> ExitCode:
    """Map an escaped exception to an exit code.

    Config errors exit 2; prefsort's own errors and OS-level I/O failures
    exit 1. Explicit ``raise ... from`` causes are followed, so a wrapped
    config error still exits 2. Anything else is an internal error.
    """
    from prefsort.config import ConfigLoadError, ConfigValidationError
    from prefsort.engine.oracle import PrefsortError

    current: BaseException | None = exc
    while current is not None:
        if isinstance(current, (ConfigLoadError, ConfigValidationError)):
            return ExitCode.CONFIG_ERROR
        if isinstance(current, (PrefsortError, OSError)):
            return ExitCode.FAILURE
        current = current.__cause__
    return ExitCode.INTERNAL_ERROR


__all__ = ["ExitCode", "classify_exception", "cli_entrypoint"]
