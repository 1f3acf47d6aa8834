"""
Tests for structured JSON logging (timesheet_kernel/logging_config.py).

Covers:
- Line shape: header fields, extras, domain values, exception payloads
- LogContext: merge, bind/restore, field validation
- Context flowing through a pipeline evaluation
- configure_logging / reset_logging lifecycle
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from timesheet_kernel.domain import (
    DisplayScope,
    OwnershipScope,
    SummaryState,
    TenantContext,
    TimesheetRecord,
    WeeklySummary,
    WeekWindow,
)
from timesheet_kernel.exceptions import UnknownJurisdictionRuleError
from timesheet_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)
from timesheet_services import TimesheetPolicyPipeline


@pytest.fixture
def stream():
    """A StringIO wired to the timesheet_kernel logger through configure_logging."""
    buffer = StringIO()
    handler = logging.StreamHandler(buffer)
    configure_logging(handler=handler, level=logging.DEBUG)
    yield buffer
    reset_logging()


def _lines(buffer: StringIO) -> list[dict]:
    return [json.loads(line) for line in buffer.getvalue().splitlines() if line]


def _emit(buffer: StringIO, message: str, **extra) -> dict:
    get_logger("test").info(message, extra=extra)
    return _lines(buffer)[-1]


# ---------------------------------------------------------------------------
# Line shape
# ---------------------------------------------------------------------------


class TestLineShape:

    def test_header_fields(self, stream):
        line = _emit(stream, "hello")
        assert line["level"] == "INFO"
        assert line["message"] == "hello"
        assert line["logger"] == "timesheet_kernel.test"
        assert line["ts"].endswith("+00:00")

    def test_extra_fields_flattened(self, stream):
        line = _emit(stream, "evaluated", candidate_count=2, alert_kind="violation")
        assert (line["candidate_count"], line["alert_kind"]) == (2, "violation")

    def test_domain_values(self, stream):
        line = _emit(
            stream, "values",
            week_start=date(2024, 6, 9),
            hours=Decimal("12.50"),
            ownership=OwnershipScope.MINE,
            ids=frozenset({3, 1}),
            window=WeekWindow(date(2024, 6, 9)),
            scope=DisplayScope(),
        )
        assert line["week_start"] == "2024-06-09"
        assert line["hours"] == "12.50"
        assert line["ownership"] == "mine"
        assert line["ids"] == [1, 3]
        assert line["window"] == {"start": "2024-06-09"}
        assert line["scope"] == {"ownership": "all", "validation": "all"}

    def test_header_not_overwritten_by_extra(self, stream):
        line = _emit(stream, "msg", level="x")
        assert line["level"] == "INFO"

    def test_only_enabled_levels_written(self):
        buffer = StringIO()
        configure_logging(handler=logging.StreamHandler(buffer), level=logging.WARNING)
        logger = get_logger("test")
        logger.info("skipped")
        logger.warning("kept")
        assert [line["message"] for line in _lines(buffer)] == ["kept"]


class TestExceptionPayload:

    def test_plain_exception(self, stream):
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("test").error("failed", exc_info=True)

        line = _lines(stream)[-1]
        assert line["exc_type"] == "ValueError"
        assert line["exc_message"] == "boom"
        assert "exc_code" not in line
        assert "Traceback" in line["traceback"]

    def test_policy_error_fields(self, stream):
        try:
            raise UnknownJurisdictionRuleError("ny_daily", ("ca_daily_double_time",))
        except UnknownJurisdictionRuleError:
            get_logger("test").error("rule_error", exc_info=True)

        line = _lines(stream)[-1]
        assert line["exc_code"] == "UNKNOWN_JURISDICTION_RULE"
        assert line["exc_rule_id"] == "ny_daily"
        assert line["exc_available"] == ["ca_daily_double_time"]


# ---------------------------------------------------------------------------
# LogContext
# ---------------------------------------------------------------------------


class TestLogContext:

    def test_empty_by_default(self, stream):
        assert LogContext.get_all() == {}
        line = _emit(stream, "bare")
        assert not set(LogContext.FIELDS) & set(line)

    def test_set_merges_and_skips_none(self):
        LogContext.set(tenant_id="t-ca")
        LogContext.set(week_start="2024-06-09", tenant_id=None)
        assert LogContext.get_all() == {"tenant_id": "t-ca", "week_start": "2024-06-09"}

    def test_context_written_to_lines(self, stream):
        LogContext.set(correlation_id="abc-123", actor_id="7")
        line = _emit(stream, "msg")
        assert (line["correlation_id"], line["actor_id"]) == ("abc-123", "7")

    def test_bind_restores_previous_values(self):
        LogContext.set(tenant_id="outer")
        with LogContext.bind(tenant_id="inner", week_start="2024-06-09"):
            assert LogContext.get_all() == {"tenant_id": "inner", "week_start": "2024-06-09"}
        assert LogContext.get_all() == {"tenant_id": "outer"}

    def test_bind_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(correlation_id="temp"):
                raise RuntimeError("inside")
        assert LogContext.get_all() == {}

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError, match="rule_id"):
            LogContext.set(rule_id="ca")
        with pytest.raises(TypeError):
            with LogContext.bind(shift="night"):
                pass

    def test_clear(self):
        LogContext.set(correlation_id="c", tenant_id="t", actor_id="a", week_start="w")
        assert len(LogContext.get_all()) == len(LogContext.FIELDS)
        LogContext.clear()
        assert LogContext.get_all() == {}


class TestPipelineContext:

    def test_engine_lines_carry_tenant_and_week(self, stream, default_pack):
        tenant = TenantContext(region="US", state="CA", week_start="monday", tenant_id="t-ca")
        summary = SummaryState.loaded(WeeklySummary(workweek_start=date(2026, 1, 19)))
        records = [TimesheetRecord(1, 10, "2026-01-20", 13, view_permission=True)]

        TimesheetPolicyPipeline(default_pack).evaluate(records, tenant, summary)

        traces = [line for line in _lines(stream) if line["message"] == "TIMESHEET_ENGINE_TRACE"]
        assert traces
        for line in traces:
            assert line["tenant_id"] == "t-ca"
            assert line["week_start"] == "2026-01-19"
        assert LogContext.get_all() == {}


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestConfigureLogging:

    def test_second_call_keeps_first_handler(self):
        first = logging.StreamHandler(StringIO())
        assert configure_logging(handler=first) is first
        assert configure_logging(handler=logging.StreamHandler(StringIO())) is first
        assert logging.getLogger("timesheet_kernel").handlers == [first]

    def test_installs_structured_formatter(self):
        handler = configure_logging(stream=StringIO())
        assert isinstance(handler.formatter, StructuredFormatter)

    def test_reset_detaches_and_restores_propagation(self):
        configure_logging(stream=StringIO())
        reset_logging()
        root = logging.getLogger("timesheet_kernel")
        assert root.handlers == []
        assert root.propagate is True

    def test_child_logger_names(self):
        assert get_logger("engines.visibility").name == "timesheet_kernel.engines.visibility"
