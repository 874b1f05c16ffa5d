"""
campaign_engines.tracer -- Engine invocation tracer emitting CAMPAIGN_ENGINE_TRACE.

Responsibility:
    Provide a lightweight decorator (``@traced_engine``) that wraps pure
    engine invocations with structured trace logging.  The trace captures
    engine_name, engine_version, input_fingerprint (deterministic SHA-256
    hash of selected inputs), and duration_ms.  When the engine takes a
    ``project`` argument its id is stamped on the record as project_id,
    unless ``LogContext`` already carries one.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Does NOT introduce I/O into engines; emits a log record only.

Invariants enforced:
    - Fingerprints are deterministic: _canonicalize produces stable strings
      for Decimal, datetime, enums, dataclasses and containers; dict keys
      are sorted; the hash is SHA-256 truncated to 16 hex chars.
    - The decorator never mutates inputs and never alters the result.

Failure modes:
    - Fingerprint fields not bound in the call are recorded as "null".
    - Fingerprinted arguments passed as one-shot iterators (generators)
      are materialized into tuples before the engine runs, so the
      fingerprint never records an object address and the engine still
      sees every item.
    - Exceptions raised by the wrapped engine propagate unchanged and no
      trace record is emitted for that call.

Usage:
    from campaign_engines.tracer import traced_engine

    @traced_engine("payout", "1.0", fingerprint_fields=("contributions", "payouts"))
    def reconcile(self, project, contributions, payouts):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Iterable, Iterator
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from campaign_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")


def _canonicalize(value: Any) -> str:
    """Produce a stable string representation of a value for fingerprinting."""
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, Decimal)):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _canonicalize({
            f.name: getattr(value, f.name) for f in dataclasses.fields(value)
        })
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (set, frozenset)):
        return _canonicalize(sorted(value, key=_canonicalize))
    if isinstance(value, Iterable) and not isinstance(value, (bytes, Iterator)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """Compute a deterministic SHA-256 fingerprint of selected input fields.

    Only the fields listed in fingerprint_fields are included.  Missing
    fields are recorded as "null".  The result is a 16-char hex prefix.
    """
    parts: list[str] = []
    for field in fingerprint_fields:
        val = arguments.get(field)
        parts.append(f"{field}={_canonicalize(val)}")
    canonical = "|".join(parts)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator that emits CAMPAIGN_ENGINE_TRACE for pure engine invocations.

    Args:
        engine_name: Engine identifier (e.g., "ledger").
        engine_version: Engine version (e.g., "1.0").
        fingerprint_fields: Parameter names to include in the input
            fingerprint hash.  Positional and keyword arguments are both
            bound against the wrapped function's signature.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = signature.bind_partial(*args, **kwargs)
            # One-shot iterators are read once here and handed on as tuples
            for field in fingerprint_fields:
                if isinstance(bound.arguments.get(field), Iterator):
                    bound.arguments[field] = tuple(bound.arguments[field])
            args, kwargs = bound.args, bound.kwargs
            fp = (
                compute_input_fingerprint(fingerprint_fields, dict(bound.arguments))
                if fingerprint_fields else ""
            )
            project = bound.arguments.get("project")

            t0 = time.monotonic()
            result = func(*args, **kwargs)
            duration_ms = round((time.monotonic() - t0) * 1000, 2)

            _logger.debug(
                "CAMPAIGN_ENGINE_TRACE",
                extra={
                    "trace_type": "CAMPAIGN_ENGINE_TRACE",
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fp,
                    "duration_ms": duration_ms,
                    "function": func.__qualname__,
                    "project_id": getattr(project, "id", None),
                },
            )
            return result

        return wrapper

    return decorator
