"""Structured logging utilities.

This module provides JSON-formatted logging with per-form context, so
the log lines emitted while one address form is open can be grouped.

Notes:
- Address text typed by users may be personal data; log counts and
  codes, not the typed text itself.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Iterator
from typing import MutableMapping
from typing import Optional

# Context variable for form correlation
form_id: ContextVar[str] = ContextVar("form_id", default="")


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        current_form = getattr(record, "form_id", None) or form_id.get()
        if current_form:
            log_data["form_id"] = current_form

        if record.levelno >= logging.WARNING:
            log_data["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        if hasattr(record, "context") and isinstance(record.context, dict):
            log_data["context"] = record.context

        return json.dumps(log_data, default=str)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that merges adapter context into each record."""

    def process(
        self,
        msg: str,
        kwargs: MutableMapping[str, Any],
    ) -> tuple[str, MutableMapping[str, Any]]:
        """Attach adapter context under the ``context`` record attribute.

        The current form id is stamped on the record too, so it survives
        handlers that format after the form context has been reset.
        """
        extra = dict(kwargs.get("extra") or {})
        context = dict(self.extra or {})
        context.update(extra.pop("context", {}) or {})
        if context:
            extra["context"] = context
        current_form = form_id.get()
        if current_form:
            extra.setdefault("form_id", current_form)
        kwargs["extra"] = extra
        return msg, kwargs


def configure_logging(level: Optional[str] = None) -> None:
    """Configure structured logging on the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to
               LOG_LEVEL environment variable or INFO.
    """
    log_level: str = level or os.getenv("LOG_LEVEL") or "INFO"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredLogFormatter())
    root_logger.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> ContextLogger:
    """Get a context-aware logger.

    Args:
        name: Logger name (typically __name__).
        **extra: Additional context to include in all log messages.

    Returns:
        A ContextLogger instance.
    """
    logger = logging.getLogger(name)
    return ContextLogger(logger, extra)


def set_form_context(current_form: Optional[str] = None) -> None:
    """Set the form id included in subsequent log lines."""
    if current_form:
        form_id.set(current_form)


def clear_form_context() -> None:
    """Clear the form id after a form unmounts."""
    form_id.set("")


@contextmanager
def form_context(current_form: str) -> Iterator[None]:
    """Scope the form id to a block, restoring the previous id afterwards."""
    token = form_id.set(current_form)
    try:
        yield
    finally:
        form_id.reset(token)
