"""Shared pytest configuration for prefsort tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from prefsort.observability.logging import configure_structlog, shutdown_logging

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True, scope="session")
def _route_structlog_through_stdlib() -> None:
    configure_structlog()


@pytest.fixture(autouse=True)
def _drain_logging() -> Iterator[None]:
    yield
    shutdown_logging()
