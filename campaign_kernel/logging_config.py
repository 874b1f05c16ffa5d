"""
Structured JSON logging for the campaign kernel.

Every record is one JSON line.  Request-scoped fields held in
``LogContext`` (the project under evaluation, the acting user, the
correlation and trace ids of the sweep or request) are merged into each
line, so an engine trace can be tied back to the project whose state it
decided without the engines knowing about logging at all.

Usage:
    configure_logging(level=logging.INFO)

    with LogContext.bind_project(project, correlation_id=sweep_id):
        decision = lifecycle.derive_state(project, contributions, now)
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
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any
from uuid import UUID

from campaign_kernel.exceptions import CampaignKernelError

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_EMPTY: Mapping[str, str] = MappingProxyType({})

_context: ContextVar[Mapping[str, str]] = ContextVar("campaign_log_context", default=_EMPTY)


class LogContext:
    """Async-safe holder for request-scoped log fields.

    The scheduler or request handler sets these before calling into the
    engines, so every trace record carries the project under evaluation.
    Values are stored as strings; ids of any type are accepted.
    """

    FIELDS = ("correlation_id", "project_id", "actor_id", "trace_id")

    @classmethod
    def set(
        cls,
        *,
        correlation_id: Any = None,
        project_id: Any = None,
        actor_id: Any = None,
        trace_id: Any = None,
    ) -> None:
        """Set context fields. Only non-None values are updated."""
        _context.set(cls._merged(
            correlation_id=correlation_id,
            project_id=project_id,
            actor_id=actor_id,
            trace_id=trace_id,
        ))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set(_EMPTY)

    @classmethod
    @contextmanager
    def bind(cls, **fields: Any) -> Iterator[type["LogContext"]]:
        """Set fields for the duration of a block, then restore the outer ones."""
        unknown = set(fields) - set(cls.FIELDS)
        if unknown:
            raise TypeError(f"Unknown log context fields: {sorted(unknown)}")
        token = _context.set(cls._merged(**fields))
        try:
            yield cls
        finally:
            _context.reset(token)

    @classmethod
    def bind_project(cls, project: Any, **fields: Any):
        """``bind`` with ``project_id`` taken from a project entity."""
        return cls.bind(project_id=project.id, **fields)

    @staticmethod
    def _merged(**fields: Any) -> Mapping[str, str]:
        merged = dict(_context.get())
        merged.update({k: str(v) for k, v in fields.items() if v is not None})
        return MappingProxyType(merged)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


class _JSONEncoder(json.JSONEncoder):
    """Encode amounts, instants, windows, enums and engine results."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (UUID, Decimal)):
            return str(obj)
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, timedelta):
            return obj.total_seconds()
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
        if isinstance(obj, (set, frozenset)):
            return sorted(obj, key=str)
        return super().default(obj)


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }

        for key, val in vars(record).items():
            if key not in _STDLIB_KEYS and key not in payload:
                payload[key] = val

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, cls=_JSONEncoder, default=str)

    @staticmethod
    def _exception_fields(exc: BaseException) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        # Kernel errors carry a machine-readable code plus their lookup keys
        if isinstance(exc, CampaignKernelError):
            fields["exc_code"] = exc.code
            for key, val in vars(exc).items():
                if not key.startswith("_"):
                    fields[f"exc_{key}"] = val
        return fields


# ---------------------------------------------------------------------------
# Logger factory
# ---------------------------------------------------------------------------

_LOGGER_PREFIX = "campaign_kernel"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the campaign_kernel namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Configure the campaign_kernel logger hierarchy (idempotent)."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(level)
    root_logger.propagate = False

    h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    h.setFormatter(StructuredFormatter())
    root_logger.addHandler(h)


def reset_logging() -> None:
    """Reset logging configuration. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
    logger.propagate = True
