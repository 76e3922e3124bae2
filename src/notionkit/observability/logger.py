"""JSON-lines logging for the ``notionkit`` logger tree.

All SDK modules log through children of the ``notionkit`` logger.  That
root gets exactly one handler whose :class:`StructuredFormatter` renders
each record as one JSON object per line, e.g.::

    {"ts": "2025-07-01T12:00:00.123+00:00", "level": "WARNING",
     "logger": "notionkit.transport", "message": "429 received, retrying",
     "method": "POST", "path": "/data_sources/abc/query", "attempt": 1}

Call-site context goes in ``extra={"extra_fields": {...}}``::

    log = get_logger("notionkit.files")
    log.debug("upload sent", extra={"extra_fields": {"upload_id": "fu_1"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any

ROOT_LOGGER = "notionkit"


class StructuredFormatter(logging.Formatter):
    """Render a record as a single-line JSON object.

    Keys ``ts`` (record creation time, ISO-8601 UTC), ``level``, ``logger``
    and ``message`` are always present.  The record's ``extra_fields``
    mapping is merged in without overriding them.  When the record carries
    an exception, its traceback is stored under ``exception`` and, for SDK
    errors, the machine-readable code under ``error_code``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "ts": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in (getattr(record, "extra_fields", None) or {}).items():
            entry.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            error = record.exc_info[1]
            entry["exception"] = self.formatException(record.exc_info)
            code = getattr(error, "code", None)
            if isinstance(code, str):
                entry["error_code"] = str(getattr(code, "value", code))
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


# Flipped once the root handler is attached.
_root_configured = False


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def get_logger(name: str = ROOT_LOGGER, *, stream: IO[str] | None = None) -> logging.Logger:
    """Return the logger *name*, attaching the root handler on first use.

    The ``notionkit`` root does not propagate to the application's root
    logger and starts at ``WARNING``.  *stream* (default ``sys.stderr``)
    only matters on the call that attaches the handler.
    """
    global _root_configured

    if not _root_configured:
        root = logging.getLogger(ROOT_LOGGER)
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        root.setLevel(logging.WARNING)
        root.propagate = False
        _root_configured = True
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """Set the level of the ``notionkit`` root, e.g. ``logging.INFO`` or ``"debug"``."""
    get_logger().setLevel(_resolve_level(level))
