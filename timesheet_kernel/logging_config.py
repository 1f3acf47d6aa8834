"""
Structured JSON logging for the timesheet policy packages.

Every record leaving the ``timesheet_kernel`` logger tree is rendered as
a single JSON object per line.  Evaluation-scoped fields (correlation id,
tenant, actor, week start) live in ``LogContext`` and are merged into
each line while bound.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import dataclasses
import json
import logging
import sys
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_EMPTY: Mapping[str, str] = MappingProxyType({})

_context: ContextVar[Mapping[str, str]] = ContextVar(
    "timesheet_log_context", default=_EMPTY
)


class LogContext:
    """Evaluation-scoped fields merged into every structured log line.

    One ``ContextVar`` holds an immutable mapping, so each thread and each
    asyncio task sees its own fields.
    """

    FIELDS = ("correlation_id", "tenant_id", "actor_id", "week_start")

    @classmethod
    def _merged(cls, fields: Mapping[str, str | None]) -> Mapping[str, str]:
        unknown = sorted(set(fields) - set(cls.FIELDS))
        if unknown:
            raise TypeError(f"Unknown log context field(s): {', '.join(unknown)}")
        merged = dict(_context.get())
        merged.update((k, v) for k, v in fields.items() if v is not None)
        return MappingProxyType(merged)

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Merge the non-None ``fields`` into the current context."""
        _context.set(cls._merged(fields))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set(_EMPTY)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[None]:
        """Merge ``fields`` for the body of a ``with`` block, then restore."""
        token = _context.set(cls._merged(fields))
        try:
            yield
        finally:
            _context.reset(token)


# ---------------------------------------------------------------------------
# JSON rendering
# ---------------------------------------------------------------------------

_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message", "asctime", "taskName",
}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # TimesheetPolicyError subclasses keep their payload as public attributes
    for name, value in vars(exc).items():
        if not name.startswith("_") and name != "code":
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Header, bound context, ``extra`` fields, then exception details."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Logger tree
# ---------------------------------------------------------------------------

ROOT_LOGGER_NAME = "timesheet_kernel"

_installed: logging.Handler | None = None
_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Child logger of ``timesheet_kernel`` (``get_logger("engines.x")``)."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> logging.Handler:
    """Attach one JSON handler to the ``timesheet_kernel`` logger.

    Repeated calls leave the first configuration in place and return the
    handler it installed.
    """
    global _installed
    with _lock:
        if _installed is None:
            _installed = handler or logging.StreamHandler(stream or sys.stderr)
            _installed.setFormatter(StructuredFormatter())
            root = logging.getLogger(ROOT_LOGGER_NAME)
            root.setLevel(level)
            root.propagate = False
            root.addHandler(_installed)
        return _installed


def reset_logging() -> None:
    """Detach the installed handler and restore propagation. Test helper."""
    global _installed
    with _lock:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        if _installed is not None:
            root.removeHandler(_installed)
            _installed = None
        root.setLevel(logging.NOTSET)
        root.propagate = True
