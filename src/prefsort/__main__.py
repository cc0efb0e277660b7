"""Module entrypoint for ``python -m prefsort``."""

from __future__ import annotations

from prefsort.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
