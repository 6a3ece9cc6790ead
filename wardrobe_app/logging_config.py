"""Structured JSON logging with per-request correlation ids.

Every wardrobe component logs through the standard :mod:`logging` module.
Structured fields travel in ``extra`` and are rendered by
:class:`JsonFormatter`; :func:`redact_for_log` keeps user ids and raw image
content out of the output.
"""

from __future__ import annotations

import contextlib
import contextvars
import dataclasses
import json
import logging
import os
import re
import uuid
from typing import Any, Dict, Iterator, Optional

CORRELATION_ID: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else on a record came from ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

SENSITIVE_KEYS = frozenset({"user_id", "image_url", "image_bytes", "content", "upload_name"})

_HEX_BLOB = re.compile(r"^[a-fA-F0-9]{32,}$")


def _scrub_text(value: str) -> str:
    if value.startswith("data:"):
        return "[redacted-data-url]"
    if _HEX_BLOB.match(value):
        return f"{value[:8]}..."
    return value


def redact_for_log(payload: Any) -> Any:
    """Return a JSON-friendly copy of ``payload`` without identifiers or image data."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _scrub_text(payload)
    if isinstance(payload, (bytes, bytearray)):
        return f"[{len(payload)} bytes]"
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in SENSITIVE_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        return redact_for_log(dataclasses.asdict(payload))
    if isinstance(payload, (list, tuple, set, frozenset)):
        return [redact_for_log(value) for value in payload]
    return str(payload)


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", message),
            "message": message,
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in entry
        }
        entry.update(redact_for_log(extras))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Send root logging to stderr as JSON; ``LOG_LEVEL`` picks the default level."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO"), handlers=[handler], force=True)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation id for the block and restore the previous one on exit.

    Nested blocks without an explicit id keep the enclosing id; a block with
    no id and no enclosing id gets a fresh one.
    """

    token = CORRELATION_ID.set(correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with redacted structured ``fields`` and the active correlation id."""

    correlation_id = fields.pop("correlation_id", None) or CORRELATION_ID.get()
    exc_info = fields.pop("exc_info", None)
    extra = {"event": event, "correlation_id": correlation_id}
    extra.update(redact_for_log(fields))
    logger.log(level, event, exc_info=exc_info, extra=extra)


@contextlib.contextmanager
def operation_context(name: str, **attributes: Any) -> Iterator[str]:
    """Run a named operation under one correlation id, logging start and end at DEBUG."""

    logger = logging.getLogger("wardrobe.operations")
    with correlation_context(attributes.pop("correlation_id", None)) as scoped_id:
        log_event(logger, logging.DEBUG, "operation_started", operation=name, **attributes)
        yield scoped_id
        log_event(logger, logging.DEBUG, "operation_completed", operation=name)


__all__ = [
    "CORRELATION_ID",
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
