"""
Policy Alert Resolver Engine (``timesheet_engines.policy_alert``).

Responsibility
--------------
Combine tenant jurisdiction, the server weekly summary and locally
detected overtime candidates into one advisory ``PolicyAlert`` for the
insights panel.

Two sources, one contract: **the server value gates; the local value
only labels.**  The weekly summary's double-time total decides *whether*
an alert fires; local candidates only pinpoint *which days* it refers
to, because the summary endpoint has no day-level breakdown.

Architecture position
---------------------
**Engines layer** -- pure functional core.  The summary fetch is an
external collaborator observed only through ``SummaryState``.

Decision table (first match wins)
---------------------------------
1. Not a single-week view, or tenant outside the rule's jurisdiction
   -> ``NoAlert``.
2. Summary idle / loading / error / absent -> ``NoAlert`` (fail closed).
3. Server double-time total <= 0 -> ``NoAlert``, whatever the candidates.
4. No week anchor (summary ``workweek_start`` nor fallback) -> ``NoAlert``.
5. No in-week candidate matches a known daily total -> ``InfoAlert``.
6. Otherwise -> ``ViolationAlert`` with one row per matched candidate.

Rows are per technician-day, not per date: two technicians over the
threshold on the same day yield two rows sharing a ``work_date``, each
carrying that technician's own total.  Callers that need one figure per
date use ``merge_candidates_by_date`` from ``overtime_rules``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from timesheet_engines.jurisdiction import CA_DAILY_DOUBLE_TIME
from timesheet_engines.tracer import traced_engine
from timesheet_kernel.domain.coercion import ZERO_HOURS
from timesheet_kernel.domain.timesheet_types import (
    DailyKey,
    DailyTotal,
    InfoAlert,
    Jurisdiction,
    NoAlert,
    OvertimeCandidate,
    PolicyAlert,
    SummaryState,
    TenantContext,
    ViolationAlert,
    ViolationRow,
    WeekWindow,
)
from timesheet_kernel.logging_config import get_logger

logger = get_logger("engines.policy_alert")

DAY_DETAIL_UNAVAILABLE_MESSAGE = "violation detected but day-level detail unavailable"


def _suppressed(reason: str) -> NoAlert:
    logger.debug("policy_alert_suppressed", extra={"reason": reason})
    return NoAlert()


@traced_engine(
    "policy_alert",
    "1.0",
    fingerprint_fields=(
        "tenant", "summary_state", "jurisdiction", "fallback_window", "single_week_view",
    ),
)
def resolve_policy_alert(
    *,
    tenant: TenantContext | None,
    summary_state: SummaryState,
    candidates: Iterable[OvertimeCandidate],
    daily_totals: Mapping[DailyKey, DailyTotal],
    jurisdiction: Jurisdiction = CA_DAILY_DOUBLE_TIME,
    fallback_window: WeekWindow | None = None,
    single_week_view: bool = True,
) -> PolicyAlert:
    """Resolve the daily double-time alert for the displayed week.

    Args:
        tenant: Active tenant context.
        summary_state: Load state and payload of the server weekly summary.
        candidates: ``evaluate_overtime`` output over the policy-visible set.
        daily_totals: ``aggregate_daily`` output over the policy-visible set.
        jurisdiction: Where the rule applies (default US/CA).
        fallback_window: Displayed week, used when the summary has no
            ``workweek_start``.
        single_week_view: False when the calendar shows a month/day view.
    """
    if not single_week_view:
        return _suppressed("not_single_week_view")
    if not jurisdiction.matches(tenant):
        return _suppressed("jurisdiction_mismatch")
    if not summary_state.is_available:
        return _suppressed(f"summary_{summary_state.status.value}")

    summary = summary_state.summary
    if summary.overtime_hours_2x <= ZERO_HOURS:
        return _suppressed("server_double_time_zero")

    window = WeekWindow(summary.workweek_start) if summary.workweek_start else fallback_window
    if window is None:
        return _suppressed("no_week_anchor")

    rows: list[ViolationRow] = []
    for candidate in candidates:
        if not window.contains(candidate.work_date):
            continue
        total = daily_totals.get(candidate.key)
        if total is None:
            continue
        rows.append(ViolationRow(
            work_date=candidate.work_date,
            excess_hours=candidate.excess_hours,
            total_hours=total.hours,
            technician_id=candidate.technician_id,
        ))

    if not rows:
        logger.info("policy_alert_day_detail_unavailable", extra={
            "week_start": window.start,
            "server_double_time_hours": summary.overtime_hours_2x,
        })
        return InfoAlert(message=DAY_DETAIL_UNAVAILABLE_MESSAGE)

    logger.info("policy_alert_violation", extra={
        "week_start": window.start,
        "server_double_time_hours": summary.overtime_hours_2x,
        "row_count": len(rows),
    })
    return ViolationAlert(rows=tuple(rows))
