"""
Shared fixtures for the timesheet policy test suite.

Everything here is pure: no database, no network, no clock.  The week
of 2024-06-09 (a Sunday) is used as the canonical displayed week.
"""

from datetime import date
from decimal import Decimal

import pytest

from timesheet_config import PolicyPack, get_active_config
from timesheet_kernel.domain import (
    SummaryState,
    TenantContext,
    WeeklySummary,
    WeekWindow,
)
from timesheet_kernel.logging_config import LogContext, reset_logging

WEEK_OF = date(2024, 6, 9)


@pytest.fixture(autouse=True)
def _isolate_logging():
    """Keep structured logging configuration from leaking between tests."""
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def week_window() -> WeekWindow:
    return WeekWindow(WEEK_OF)


@pytest.fixture
def ca_tenant() -> TenantContext:
    return TenantContext(region="US", state="CA", week_start="sunday", tenant_id="t-ca")


@pytest.fixture
def ny_tenant() -> TenantContext:
    return TenantContext(region="US", state="NY", week_start="sunday", tenant_id="t-ny")


@pytest.fixture
def loaded_summary():
    """Factory for a loaded ``SummaryState`` with a given double-time total."""

    def _make(
        overtime_hours_2x: Decimal | str = "1.5",
        workweek_start: date | None = WEEK_OF,
        policy_key: str | None = "US-CA",
    ) -> SummaryState:
        return SummaryState.loaded(WeeklySummary(
            regular_hours=Decimal("40"),
            overtime_hours=Decimal("4"),
            overtime_hours_2x=Decimal(str(overtime_hours_2x)),
            workweek_start=workweek_start,
            policy_key=policy_key,
        ))

    return _make


@pytest.fixture(scope="session")
def default_pack() -> PolicyPack:
    return get_active_config()
