"""
Structured JSON logging for geoacct.

Every record under the ``geoacct`` logger is written as one JSON object per
line. Fields bound through :class:`LogContext` (the asset or project a
posting concerns, the caller's correlation id) are merged into each record,
as are any ``extra=`` keys passed by the caller.

Posting failures are logged with ``exc_info``; when the exception is a
:class:`~geoacct_kernel.exceptions.GeoAcctError` its machine code and public
attributes are flattened into ``exc_*`` keys so a log search can filter on
``exc_code == "UNBALANCED_POSTING"`` without parsing tracebacks.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

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
from uuid import UUID

NAMESPACE = "geoacct"

CONTEXT_FIELDS = frozenset({"correlation_id", "actor_id", "asset_id", "project_id"})

_EMPTY: Mapping[str, str] = MappingProxyType({})
_bound: ContextVar[Mapping[str, str]] = ContextVar("geoacct_log_fields", default=_EMPTY)


def _check_fields(fields: Mapping[str, Any]) -> None:
    unknown = set(fields) - CONTEXT_FIELDS
    if unknown:
        raise KeyError(f"Unknown log context field: {sorted(unknown)[0]}")


def _merged(fields: Mapping[str, Any]) -> Mapping[str, str]:
    current = dict(_bound.get())
    current.update({k: str(v) for k, v in fields.items() if v is not None})
    return MappingProxyType(current)


class LogContext:
    """
    Per-task log fields (thread and asyncio safe).

    The bound fields live in a single ContextVar as a read-only mapping, so
    a nested :meth:`bind` restores the outer mapping wholesale on exit.
    """

    @staticmethod
    def set(**fields: str | None) -> None:
        """Bind fields until cleared. ``None`` values leave a field untouched."""
        _check_fields(fields)
        _bound.set(_merged(fields))

    @staticmethod
    def get_all() -> dict[str, str]:
        return dict(_bound.get())

    @staticmethod
    def clear() -> None:
        _bound.set(_EMPTY)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[type["LogContext"]]:
        """Bind fields for the duration of a ``with`` block."""
        _check_fields(fields)
        token = _bound.set(_merged(fields))
        try:
            yield LogContext
        finally:
            _bound.reset(token)


# Attributes every LogRecord carries; anything else came in through extra=.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _jsonable(value: Any) -> Any:
    # Money and identifiers go out as strings so no precision is lost.
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for name, value in vars(exc).items():
        if name.startswith("_") or name in ("args", "code"):
            continue
        fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, then context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_bound.get(),
        }
        for name, value in vars(record).items():
            if name in _RECORD_ATTRS:
                continue
            entry.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            entry.update(_exception_fields(record.exc_info[1]))
            entry["traceback"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=_jsonable)


def get_logger(name: str) -> logging.Logger:
    """Return ``geoacct.<name>``."""
    return logging.getLogger(f"{NAMESPACE}.{name}")


_state_lock = threading.Lock()
_installed: logging.Handler | None = None


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``geoacct`` logger.

    Only the first call has any effect; later calls (the engine factory
    calls this on every ``init_engine_from_url``) return immediately.
    Records do not propagate to the root logger.
    """
    global _installed
    with _state_lock:
        if _installed is not None:
            return
        _installed = handler or logging.StreamHandler(stream or sys.stderr)
        _installed.setFormatter(StructuredFormatter())

        logger = logging.getLogger(NAMESPACE)
        logger.setLevel(level)
        logger.propagate = False
        logger.addHandler(_installed)


def reset_logging() -> None:
    """Detach all handlers so the next ``configure_logging`` call takes effect. Tests only."""
    global _installed
    with _state_lock:
        _installed = None
        logger = logging.getLogger(NAMESPACE)
        logger.handlers.clear()
        logger.setLevel(logging.WARNING)
