"""JSON log lines, context binding and one-time setup of the ``tenure`` logger."""

import json
import logging
from datetime import date
from io import StringIO
from uuid import uuid4

import pytest

from tenure_kernel.exceptions import UpdateError
from tenure_kernel.logging_config import (
    LOGGER_NAMESPACE,
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _fresh_logging_setup():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    # Back to the suite-wide configuration from conftest
    configure_logging(level=logging.DEBUG)


@pytest.fixture
def json_lines():
    """Configure logging into a buffer; calling the fixture value returns parsed lines."""
    buffer = StringIO()
    handler = logging.StreamHandler(buffer)
    handler.setFormatter(StructuredFormatter())

    def read() -> list[dict]:
        return [json.loads(raw) for raw in buffer.getvalue().splitlines() if raw]

    read.handler = handler
    return read


# ---------------------------------------------------------------------------
# Record rendering
# ---------------------------------------------------------------------------


class TestRecordRendering:

    def test_one_json_object_per_record(self, json_lines):
        configure_logging(handler=json_lines.handler)
        log = get_logger("sweep")
        log.info("sweep_started")
        log.info("sweep_finished")

        first, second = json_lines()
        assert first["message"] == "sweep_started"
        assert second["message"] == "sweep_finished"
        assert first["level"] == "INFO"
        assert first["logger"] == "tenure.sweep"
        assert first["ts"].endswith("+00:00")

    def test_dates_and_uuids_in_extra(self, json_lines):
        configure_logging(handler=json_lines.handler)
        run = uuid4()
        get_logger("sweep").info(
            "sweep_started", extra={"as_of": date(2025, 6, 15), "run": run, "eligible": 3},
        )

        (line,) = json_lines()
        assert line["as_of"] == "2025-06-15"
        assert line["run"] == str(run)
        assert line["eligible"] == 3

    def test_error_attributes_flattened(self, json_lines):
        configure_logging(handler=json_lines.handler)
        try:
            raise UpdateError(7, "HTTP 500")
        except UpdateError:
            get_logger("sweep").exception("update_failed")

        (line,) = json_lines()
        assert line["exc_type"] == "UpdateError"
        assert line["exc_code"] == "UPDATE_FAILED"
        assert line["exc_legajo"] == 7
        assert line["exc_reason"] == "HTTP 500"
        assert "Traceback" in line["traceback"]


# ---------------------------------------------------------------------------
# Context fields
# ---------------------------------------------------------------------------


class TestContextFields:

    def test_bound_fields_stamped_on_records(self, json_lines):
        configure_logging(handler=json_lines.handler)
        with LogContext.bind(run_id="run-1", legajo="42"):
            get_logger("sweep").info("employee_reconciled")
        get_logger("sweep").info("sweep_finished")

        inside, outside = json_lines()
        assert (inside["run_id"], inside["legajo"]) == ("run-1", "42")
        assert "legajo" not in outside

    def test_nested_bind_restores_outer_value(self):
        LogContext.set(run_id="outer")
        with LogContext.bind(run_id="inner", legajo="1"):
            assert LogContext.get_all() == {"run_id": "inner", "legajo": "1"}
        assert LogContext.get_all() == {"run_id": "outer"}

    def test_none_values_are_ignored(self):
        LogContext.set(run_id="r", legajo=None)
        assert LogContext.get_all() == {"run_id": "r"}

    def test_clear_drops_everything(self):
        LogContext.set(correlation_id="c", producer="scheduler")
        LogContext.clear()
        assert LogContext.get_all() == {}


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


class TestSetup:

    def test_second_call_is_a_no_op(self, json_lines):
        configure_logging(handler=json_lines.handler)
        late = logging.StreamHandler(StringIO())
        configure_logging(handler=late)
        handlers = logging.getLogger(LOGGER_NAMESPACE).handlers
        assert json_lines.handler in handlers
        assert late not in handlers

    def test_records_below_level_are_dropped(self, json_lines):
        configure_logging(level=logging.WARNING, handler=json_lines.handler)
        log = get_logger("sweep")
        log.info("not_written")
        log.warning("written")
        assert [line["message"] for line in json_lines()] == ["written"]
