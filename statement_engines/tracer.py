"""
statement_engines.tracer -- Engine invocation tracer emitting STATEMENT_ENGINE_TRACE.

Responsibility:
    ``@traced_engine`` wraps a pure engine entry point and emits one
    structured trace record per call: engine name and version, a
    fingerprint of the selected inputs, duration, and an optional summary
    of the result supplied by the engine itself.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Does NOT introduce I/O into engines; emits a log record only.

Invariants enforced:
    - Fingerprints are deterministic: dict keys and set members are sorted,
      rule sets contribute only their checksum, account records only their
      code and amounts.  SHA-256 truncated to 16 hex chars.
    - The decorator never mutates arguments or the result.

Failure modes:
    - Fingerprint fields not bound by the call are recorded as "null".
    - Exceptions from the engine propagate untouched; no trace is emitted
      for a failed call.

Usage:
    from statement_engines.tracer import traced_engine

    @traced_engine("classifier", "1.0", fingerprint_fields=("rules",))
    def classify(records, rules):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Mapping
from decimal import Decimal
from typing import Any

from statement_kernel.logging_config import get_logger
from statement_kernel.models.account import AccountRecord

_logger = get_logger("engines.tracer")

TRACE_TYPE = "STATEMENT_ENGINE_TRACE"


def _canonicalize(value: Any) -> str:
    """Stable text form of an engine argument."""
    if value is None:
        return "null"
    checksum = getattr(value, "checksum", None)
    if isinstance(checksum, str) and checksum:
        return f"checksum:{checksum}"
    if isinstance(value, AccountRecord):
        closing = "-" if value.closing_balance is None else str(value.closing_balance)
        return (
            f"{value.code}:{value.debit}:{value.credit}:"
            f"{value.opening_balance}:{closing}"
        )
    if isinstance(value, (str, int, float, Decimal)):
        return str(value)
    if isinstance(value, Mapping):
        return "{" + ",".join(
            f"{k}:{_canonicalize(v)}" for k, v in sorted(value.items())
        ) + "}"
    if isinstance(value, (set, frozenset)):
        return "{" + ",".join(sorted(_canonicalize(v) for v in value)) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return repr(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """Deterministic 16-char hash of the named arguments."""
    canonical = "|".join(
        f"{name}={_canonicalize(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
    summarize: Callable[[Any], Mapping[str, Any]] | None = None,
) -> Callable:
    """Decorator that emits STATEMENT_ENGINE_TRACE for pure engine invocations.

    Args:
        engine_name: Engine identifier (e.g., "classifier").
        engine_version: Engine version (e.g., "1.0").
        fingerprint_fields: Parameter names (positional or keyword) to
            include in the input fingerprint hash.
        summarize: Optional function turning the engine result into extra
            trace fields (counts, percentages).
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fingerprint = compute_input_fingerprint(
                    fingerprint_fields, bound.arguments,
                )

            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

            trace: dict[str, Any] = {
                "trace_type": TRACE_TYPE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "input_fingerprint": fingerprint,
                "duration_ms": elapsed_ms,
                "function": func.__qualname__,
            }
            if summarize is not None:
                trace.update(summarize(result))
            _logger.info(TRACE_TYPE, extra=trace)
            return result

        return wrapper

    return decorator
