"""
envelope_engines.tracer -- ENVELOPE_ENGINE_TRACE records for engine calls.

Responsibility:
    ``@traced_engine`` wraps a pure engine method and, after it returns,
    logs one debug record with the engine name and version, the call's
    duration and a fingerprint of the arguments that identify the
    computation (the period, the budget, the scope), so two traces with
    the same fingerprint describe the same question.

Architecture position:
    Engines -- support for the pure calculation layer.  Reads arguments and
    logs; never touches the result or the inputs.

Invariants enforced:
    - Fingerprints are stable across processes: every value is reduced to a
      canonical string (sets sorted, mappings sorted by key, enums by
      value) before hashing with SHA-256, truncated to 16 hex chars.
    - Positional and keyword calls fingerprint identically.

Usage:
    @traced_engine("carryover", "1.0", fingerprint_fields=("target",))
    def resolve(self, budget, allocations, transactions, target):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from envelope_kernel.logging_config import get_logger

logger = get_logger("engines.tracer")

TRACE_TYPE = "ENVELOPE_ENGINE_TRACE"


@functools.singledispatch
def canonicalize(value: Any) -> str:
    """Canonical string form of a fingerprinted argument."""
    return str(value)


@canonicalize.register(type(None))
def _(value) -> str:
    return "null"


@canonicalize.register(Enum)
def _(value) -> str:
    return str(value.value)


@canonicalize.register(Mapping)
def _(value) -> str:
    items = sorted((str(k), canonicalize(v)) for k, v in value.items())
    return "{" + ",".join(f"{k}:{v}" for k, v in items) + "}"


@canonicalize.register(list)
@canonicalize.register(tuple)
def _(value) -> str:
    return "[" + ",".join(canonicalize(v) for v in value) + "]"


@canonicalize.register(set)
@canonicalize.register(frozenset)
def _(value) -> str:
    return "{" + ",".join(sorted(canonicalize(v) for v in value)) + "}"


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """SHA-256 prefix over ``field=value`` pairs; absent fields hash as null."""
    canonical = "|".join(
        f"{name}={canonicalize(arguments.get(name))}" for name in fingerprint_fields
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorate an engine method so each call emits ENVELOPE_ENGINE_TRACE.

    Args:
        engine_name: Engine identifier, e.g. "carryover".
        engine_version: Bumped whenever the engine's results can change.
        fingerprint_fields: Parameter names hashed into input_fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            started = time.monotonic()
            result = func(*args, **kwargs)
            elapsed_ms = round((time.monotonic() - started) * 1000, 2)

            if logger.isEnabledFor(logging.DEBUG):
                fingerprint = ""
                if fingerprint_fields:
                    bound = signature.bind_partial(*args, **kwargs)
                    fingerprint = compute_input_fingerprint(fingerprint_fields, bound.arguments)
                logger.debug(TRACE_TYPE, extra={
                    "trace_type": TRACE_TYPE,
                    "engine_name": engine_name,
                    "engine_version": engine_version,
                    "input_fingerprint": fingerprint,
                    "duration_ms": elapsed_ms,
                    "function": func.__qualname__,
                })
            return result

        return wrapper

    return decorator
