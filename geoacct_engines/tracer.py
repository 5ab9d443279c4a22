"""
ENGINE_TRACE records for the calculation engines.

Each decorated engine call logs one ``ENGINE_TRACE`` record at INFO naming
the engine, its version, the elapsed time and a short fingerprint of the
inputs chosen by the decorator. Two calls with the same fingerprint fields
produce the same fingerprint, so a report figure that changed between runs
can be traced to a change in inputs rather than in the arithmetic.

    @traced_engine("depreciation", "1.0", fingerprint_fields=("value", "as_of_date"))
    def compute_accumulated_depreciation(value, useful_life_years, acquisition_date, as_of_date):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import json
import time
from collections.abc import Callable, Mapping
from dataclasses import asdict, is_dataclass
from datetime import date
from enum import Enum
from typing import Any

from geoacct_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

FINGERPRINT_LENGTH = 16


def _plain(value: Any) -> Any:
    """Reduce a value to JSON-native types with a stable rendering."""
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, Mapping):
        return {str(_plain(k)): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, Enum):
        return _plain(value.value)
    if isinstance(value, date):
        return value.isoformat()
    if value is None or isinstance(value, (str, bool)):
        return value
    # int, Decimal and anything else: its str form
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """SHA-256 prefix of the named arguments; absent names hash as null."""
    selected = [[name, _plain(arguments.get(name))] for name in fingerprint_fields]
    canonical = json.dumps(selected, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)
        trace_fields = {
            "trace_type": "ENGINE_TRACE",
            "engine_name": engine_name,
            "engine_version": engine_version,
            "function": func.__qualname__,
        }

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                call = signature.bind_partial(*args, **kwargs)
                fingerprint = compute_input_fingerprint(fingerprint_fields, call.arguments)

            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = (time.perf_counter() - started) * 1000

            _logger.info("ENGINE_TRACE", extra={
                **trace_fields,
                "input_fingerprint": fingerprint,
                "duration_ms": round(elapsed_ms, 2),
            })
            return result

        return wrapper

    return decorator
