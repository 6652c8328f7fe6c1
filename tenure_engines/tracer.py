"""
Trace logging for pure engine calls.

``@traced_engine`` logs one ``TENURE_ENGINE_TRACE`` debug record per call
with the engine name and version, the elapsed time, and a fingerprint of
the keyword inputs named in ``fingerprint_fields``.  Two calls with equal
inputs share a fingerprint, which makes repeated plans easy to spot in
the logs.

    @traced_engine("reconciliation_planner", "1.0", fingerprint_fields=("current",))
    def plan_reconciliation(*, current, catalog, decision, owned_concept_type):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import json
import logging
import time
from collections.abc import Callable
from enum import Enum
from typing import Any

from tenure_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

FINGERPRINT_LENGTH = 16


def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    return repr(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: dict[str, Any],
) -> str:
    """Hex SHA-256 prefix over the named keyword inputs (absent ones as null)."""
    selected = {name: kwargs.get(name) for name in fingerprint_fields}
    canonical = json.dumps(selected, sort_keys=True, default=_encode, ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed = time.perf_counter() - started

            if _logger.isEnabledFor(logging.DEBUG):
                _logger.debug(
                    "TENURE_ENGINE_TRACE",
                    extra={
                        "engine_name": engine_name,
                        "engine_version": engine_version,
                        "input_fingerprint": (
                            compute_input_fingerprint(fingerprint_fields, kwargs)
                            if fingerprint_fields else ""
                        ),
                        "duration_ms": round(elapsed * 1000, 2),
                    },
                )
            return result

        return wrapper

    return decorator
