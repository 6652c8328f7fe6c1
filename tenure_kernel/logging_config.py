"""
Structured logging (``tenure_kernel.logging_config``).

Every record under the ``tenure`` logger namespace is rendered as one
JSON object per line:

    {"ts": ..., "level": ..., "logger": ..., "message": <event name>,
     <LogContext fields>, <extra fields>, <exception fields>}

Messages are snake_case event names (``employee_reconciled``); the data
travels in ``extra``.  Run-scoped identifiers (run id, legajo) are carried
by ``LogContext`` so call sites do not have to repeat them.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

LOGGER_NAMESPACE = "tenure"


# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------


_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"tenure_log_{name}", default=None)
    for name in ("correlation_id", "run_id", "legajo", "producer")
}


class LogContext:
    """Context-local fields stamped on every log record.

    Backed by ``contextvars``, so values set in the scheduler thread never
    leak into another thread.
    """

    FIELDS = tuple(_CONTEXT_VARS)

    @staticmethod
    def set(**fields: str | None) -> None:
        """Set the given fields; None values are ignored."""
        for name, value in fields.items():
            if value is not None:
                _CONTEXT_VARS[name].set(value)

    @staticmethod
    def get_all() -> dict[str, str]:
        return {
            name: value
            for name, var in _CONTEXT_VARS.items()
            if (value := var.get()) is not None
        }

    @staticmethod
    def clear() -> None:
        for var in _CONTEXT_VARS.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """Set fields for the duration of a ``with`` block."""
        tokens = [
            (_CONTEXT_VARS[name], _CONTEXT_VARS[name].set(value))
            for name, value in fields.items()
            if value is not None
        ]
        try:
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else came in through ``extra``.
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # Structured attributes set by TenureEngineError subclasses
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for name, value in vars(record).items():
            if name not in _RESERVED:
                entry.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            entry.update(_exception_fields(record.exc_info[1]))
            entry["traceback"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=_json_default)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_setup_lock = threading.Lock()
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Logger ``tenure.<name>``."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach one JSON handler to the ``tenure`` logger.

    Only the first call has an effect until ``reset_logging()``.
    """
    global _configured
    with _setup_lock:
        if _configured:
            return
        _configured = True

        target = handler or logging.StreamHandler(stream or sys.stderr)
        target.setFormatter(StructuredFormatter())

        root = logging.getLogger(LOGGER_NAMESPACE)
        root.setLevel(level)
        root.propagate = False
        root.addHandler(target)


def reset_logging() -> None:
    """Drop handlers and allow reconfiguration.  Tests only."""
    global _configured
    with _setup_lock:
        _configured = False
        root = logging.getLogger(LOGGER_NAMESPACE)
        root.handlers.clear()
        root.setLevel(logging.WARNING)
