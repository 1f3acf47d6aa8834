"""
Pure domain layer.

Value objects and coercion helpers for the timesheet policy pipeline,
with NO dependencies on I/O, clock, or network.

All domain objects are immutable and deterministic.
"""

from timesheet_kernel.domain.coercion import (
    MAX_HOURS,
    ZERO_HOURS,
    coerce_hours,
    coerce_optional_int,
    normalize_work_date,
)
from timesheet_kernel.domain.timesheet_types import (
    BannerSeverity,
    DailyKey,
    DailyTotal,
    DateOvertime,
    DisplayScope,
    InfoAlert,
    Jurisdiction,
    NoAlert,
    OvertimeCandidate,
    OwnershipScope,
    PolicyAlert,
    PolicyBanner,
    PolicyKey,
    SummaryState,
    SummaryStatus,
    TenantContext,
    TimesheetRecord,
    ValidationScope,
    ViolationAlert,
    ViolationRow,
    WeeklySummary,
    WeekStart,
    WeekWindow,
)

__all__ = [
    "MAX_HOURS",
    "ZERO_HOURS",
    "BannerSeverity",
    "DailyKey",
    "DailyTotal",
    "DateOvertime",
    "DisplayScope",
    "InfoAlert",
    "Jurisdiction",
    "NoAlert",
    "OvertimeCandidate",
    "OwnershipScope",
    "PolicyAlert",
    "PolicyBanner",
    "PolicyKey",
    "SummaryState",
    "SummaryStatus",
    "TenantContext",
    "TimesheetRecord",
    "ValidationScope",
    "ViolationAlert",
    "ViolationRow",
    "WeeklySummary",
    "WeekStart",
    "WeekWindow",
    "coerce_hours",
    "coerce_optional_int",
    "normalize_work_date",
]
