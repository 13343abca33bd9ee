"""Structured logging for the ``cblite`` logger tree.

Log sites attach client context (method, url, status, database, direction)
through ``extra={"extra_fields": {...}}``; the JSON formatter merges it into
the record. Nothing here runs on import; applications opt in with
``configure_logging()``.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from .transport import get_request_id

LOGGER_NAME = "cblite"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_entry.update({k: v for k, v in extra_fields.items() if v is not None})

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Plain text with ``extra_fields`` appended as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict) and extra_fields:
            line += " " + " ".join(f"{k}={v}" for k, v in extra_fields.items())
        return line


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach one handler to the ``cblite`` logger and stop propagation.

    ``level`` and ``log_format`` fall back to ``LOG_LEVEL`` and ``LOG_FORMAT``
    (``json`` or ``text``). The root logger is left alone.
    """
    log_format = (log_format or os.environ.get("LOG_FORMAT") or "json").strip().lower()
    level_str = (level or os.environ.get("LOG_LEVEL") or "INFO").strip().upper()
    resolved_level = getattr(logging, level_str, logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved_level)
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(resolved_level)
    handler.setFormatter(JSONFormatter() if log_format == "json" else TextFormatter())
    logger.addHandler(handler)

    return logger
