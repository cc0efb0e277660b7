"""Structured logging setup: queue-backed JSON-lines sinks with structlog routing.

Both the sorter and relay threads log, and the TUI owns the terminal while a
ranking runs. Records are therefore pushed through a ``QueueHandler`` and
written by a ``QueueListener`` to a JSON-lines file and, in console mode
only, to stderr. ``structlog`` loggers are routed through stdlib logging so
their key/value pairs land in the ``fields`` object of each line.
"""

from __future__ import annotations

import atexit
import json
import logging
import logging.handlers
import queue
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Final

import structlog

# Attributes every LogRecord carries; anything else on a record is an extra.
_RECORD_ATTRS: Final[frozenset[str]] = frozenset(vars(logging.makeLogRecord({}))) | {
    "asctime",
    "message",
}

_active_lock = threading.Lock()
_active: LoggingHandle | None = None


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Configuration for queue-backed structured logging."""

    level: int | str = "WARNING"
    log_file: Path | str | None = None
    log_to_stderr: bool = True
    logger_name: str = "prefsort"
    queue_size: int = 4096


def _record_fields(record: logging.LogRecord) -> dict[str, object]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record, keys sorted, UTC millisecond timestamps."""

    converter = time.gmtime
    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, object] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        fields = _record_fields(record)
        if fields:
            line["fields"] = fields
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=repr)


class _ConsoleFormatter(logging.Formatter):
    """Short ``level logger: message key=value`` lines for stderr."""

    def format(self, record: logging.LogRecord) -> str:
        pairs = "".join(f" {key}={value}" for key, value in sorted(_record_fields(record).items()))
        return f"{record.levelname.lower()} {record.name}: {record.getMessage()}{pairs}"


class LoggingHandle:
    """An installed logging pipeline; :meth:`shutdown` is idempotent."""

    def __init__(
        self,
        logger: logging.Logger,
        entry: logging.handlers.QueueHandler,
        listener: logging.handlers.QueueListener,
        log_path: Path | None = None,
    ) -> None:
        self.logger = logger
        self.log_path = log_path
        self._entry = entry
        self._listener = listener
        self._lock = threading.Lock()
        self._closed = False

    @property
    def is_shutdown(self) -> bool:
        return self._closed

    def shutdown(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._listener.stop()  # writes out everything still queued
            self.logger.removeHandler(self._entry)
            for handler in (self._entry, *self._listener.handlers):
                handler.close()
            self._closed = True


def setup_logging(config: LoggingConfig | None = None) -> LoggingHandle:
    """Install logging for one prefsort run, replacing any active setup."""
    config = config or LoggingConfig()
    level = _level_number(config.level)
    if config.queue_size <= 0:
        raise ValueError("queue_size must be > 0")
    shutdown_logging()

    log_path = Path(config.log_file) if config.log_file else None
    sinks = _open_sinks(log_path, to_stderr=config.log_to_stderr)
    for sink in sinks:
        sink.setLevel(level)

    records: queue.Queue[logging.LogRecord] = queue.Queue(maxsize=config.queue_size)
    entry = logging.handlers.QueueHandler(records)
    listener = logging.handlers.QueueListener(records, *sinks, respect_handler_level=True)

    logger = logging.getLogger(config.logger_name)
    for stale in list(logger.handlers):
        logger.removeHandler(stale)
        stale.close()
    logger.setLevel(level)
    logger.propagate = False
    logger.addHandler(entry)
    listener.start()

    configure_structlog()

    global _active
    handle = LoggingHandle(logger, entry, listener, log_path=log_path)
    with _active_lock:
        _active = handle
    return handle


def configure_structlog() -> None:
    """Route structlog events through stdlib logging (key/values become record extras)."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.format_exc_info,
            structlog.stdlib.render_to_log_kwargs,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def shutdown_logging(handle: LoggingHandle | None = None) -> None:
    """Drain the queue and close all sinks of ``handle`` (default: the active one)."""
    global _active
    with _active_lock:
        target = handle if handle is not None else _active
        if target is _active:
            _active = None
    if target is not None:
        target.shutdown()


def get_active_logging_handle() -> LoggingHandle | None:
    """Return the currently active handle, if one exists."""
    with _active_lock:
        return _active


def _open_sinks(log_path: Path | None, *, to_stderr: bool) -> list[logging.Handler]:
    sinks: list[logging.Handler] = []
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_sink = logging.FileHandler(log_path, encoding="utf-8")
        file_sink.setFormatter(_JsonLineFormatter())
        sinks.append(file_sink)
    if to_stderr:
        stderr_sink = logging.StreamHandler(sys.stderr)
        stderr_sink.setFormatter(_ConsoleFormatter())
        sinks.append(stderr_sink)
    return sinks or [logging.NullHandler()]


def _level_number(value: int | str) -> int:
    if isinstance(value, int):
        return value
    try:
        return logging.getLevelNamesMapping()[value.strip().upper()]
    except KeyError:
        raise ValueError(f"unsupported logging level {value!r}") from None


atexit.register(shutdown_logging)


__all__ = [
    "LoggingConfig",
    "LoggingHandle",
    "configure_structlog",
    "get_active_logging_handle",
    "setup_logging",
    "shutdown_logging",
]
