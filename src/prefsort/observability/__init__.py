"""Public observability primitives: structured logging."""

from prefsort.observability.logging import (
    LoggingConfig,
    LoggingHandle,
    configure_structlog,
    get_active_logging_handle,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "LoggingConfig",
    "LoggingHandle",
    "configure_structlog",
    "get_active_logging_handle",
    "setup_logging",
    "shutdown_logging",
]
