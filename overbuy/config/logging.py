"""Structured logging configuration and initialization."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import TYPE_CHECKING, TextIO, cast, override

if TYPE_CHECKING:
    from collections.abc import Iterator

    from overbuy.config.settings import LogLevel

# Identifier of the duplicate check currently being served, if any.
check_run_id: ContextVar[str | None] = ContextVar("check_run_id", default=None)

_RECORD_BUILTIN_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__,
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "check_run_id": check_run_id.get(),
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_trace"] = self.formatStack(record.stack_info)

        reserved = set(payload)
        record_dict = cast("dict[str, object]", record.__dict__)
        for key, value in record_dict.items():
            if key in _RECORD_BUILTIN_ATTRS or key.startswith("_"):
                continue
            # `extra` keys may not shadow the core fields above.
            target = f"extra_{key}" if key in reserved else key
            payload[target] = value

        return json.dumps(payload, default=str)


def init_logging(level: LogLevel, *, stream: TextIO | None = None) -> None:
    """Route all records through one JSON handler at the requested level."""
    handler = logging.StreamHandler(sys.stdout if stream is None else stream)
    handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # pytest's capture handler must survive re-initialization.
    for existing in root_logger.handlers[:]:
        if type(existing).__name__ != "LogCaptureHandler":
            root_logger.removeHandler(existing)

    root_logger.addHandler(handler)


@contextmanager
def bind_check_run_id(run_id: str) -> Iterator[None]:
    """Attach `run_id` to every record logged inside the block."""
    token = check_run_id.set(run_id)
    try:
        yield
    finally:
        check_run_id.reset(token)
