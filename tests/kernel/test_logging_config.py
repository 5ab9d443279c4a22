"""Tests for the structured logging system (geoacct_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from geoacct_kernel.domain.entry_types import EntryKind
from geoacct_kernel.exceptions import UnbalancedPostingError
from geoacct_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "geoacct.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("posted", extra={"legs": 4, "event_type": "asset.disposal"})

        record = _parse_log(stream)
        assert record["legs"] == 4
        assert record["event_type"] == "asset.disposal"

    def test_domain_values_serialized_as_strings(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        uid = uuid4()
        get_logger("test").info("values", extra={
            "asset": uid,
            "amount": Decimal("20000000.00"),
            "as_of": date(2024, 3, 1),
            "kind": EntryKind.CREDIT,
        })

        record = _parse_log(stream)
        assert record["asset"] == str(uid)
        assert record["amount"] == "20000000.00"
        assert record["as_of"] == "2024-03-01"
        assert record["kind"] == "credit"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="abc-123", asset_id="asset-9")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["asset_id"] == "asset-9"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "project_id" not in record

    def test_geoacct_exception_fields_extracted(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise UnbalancedPostingError("asset.disposal", "10.00", "9.00")
        except UnbalancedPostingError:
            get_logger("test").error("posting_failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "UnbalancedPostingError"
        assert record["exc_code"] == "UNBALANCED_POSTING"
        assert record["exc_event"] == "asset.disposal"
        assert record["exc_debits"] == "10.00"
        assert "traceback" in record

    def test_debug_filtered_at_info_level(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _parse_all_logs(stream)
        assert [r["message"] for r in logs] == ["first", "second"]


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", project_id="p")
        assert LogContext.get_all() == {"correlation_id": "x", "project_id": "p"}

    def test_unknown_field_rejected(self):
        with pytest.raises(KeyError):
            LogContext.set(event_id="nope")

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(correlation_id="outer")
        with LogContext.bind(correlation_id="inner"):
            assert LogContext.get_all()["correlation_id"] == "inner"
        assert LogContext.get_all()["correlation_id"] == "outer"

    def test_bind_restores_none(self):
        with LogContext.bind(asset_id="temp"):
            assert LogContext.get_all()["asset_id"] == "temp"
        assert "asset_id" not in LogContext.get_all()


class TestConfigureLogging:
    """Tests for initialization."""

    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)
        assert len(logging.getLogger("geoacct").handlers) == 1

    def test_get_logger_returns_child(self):
        assert get_logger("modules.assets.service").name == "geoacct.modules.assets.service"

    def test_logger_hierarchy(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        get_logger("deep.nested.module").debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["logger"] == "geoacct.deep.nested.module"
