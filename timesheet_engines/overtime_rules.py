"""
Daily Overtime Rule Engine (``timesheet_engines.overtime_rules``).

Responsibility
--------------
Threshold arithmetic for daily overtime rules such as California's
double time after 12 hours in a day:

* ``evaluate_overtime`` -- candidate technician-days inside one week
  window whose total exceeds the threshold.
* ``merge_candidates_by_date`` -- candidate excess summed per calendar
  day across technicians, rounded to the hundredth.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.
Jurisdiction-agnostic: callers decide whether a rule is actionable for
a tenant (see ``timesheet_engines.jurisdiction``).

Invariants enforced
-------------------
* Only totals dated inside ``[window.start, window.start + 7)`` count.
* Strict comparison: a total equal to the threshold is not excess.
* Output sorted by ``(work_date, technician_id)``; same inputs give the
  same tuple on every call.

Failure modes
-------------
* ``InvalidThresholdError`` (a ``ValueError``) for a negative,
  non-finite or unparsable threshold, or one above ``MAX_HOURS``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from timesheet_engines.tracer import traced_engine
from timesheet_kernel.domain.coercion import MAX_HOURS, ZERO_HOURS
from timesheet_kernel.domain.timesheet_types import (
    DailyKey,
    DailyTotal,
    DateOvertime,
    OvertimeCandidate,
    WeekWindow,
)
from timesheet_kernel.exceptions import InvalidThresholdError
from timesheet_kernel.logging_config import get_logger

logger = get_logger("engines.overtime_rules")

DEFAULT_DAILY_DOUBLE_TIME_THRESHOLD = Decimal("12")

_HUNDREDTH = Decimal("0.01")


def _as_threshold(threshold: Decimal | int | float | str) -> Decimal:
    if isinstance(threshold, bool):
        raise InvalidThresholdError(threshold)
    try:
        value = threshold if isinstance(threshold, Decimal) else Decimal(str(threshold))
    except InvalidOperation:
        raise InvalidThresholdError(threshold) from None
    if not value.is_finite() or not ZERO_HOURS <= value <= MAX_HOURS:
        raise InvalidThresholdError(threshold)
    return value


@traced_engine(
    "overtime_rules", "1.0", fingerprint_fields=("week_window", "threshold"),
)
def evaluate_overtime(
    daily_totals: Mapping[DailyKey, DailyTotal],
    week_window: WeekWindow,
    threshold: Decimal | int | float | str = DEFAULT_DAILY_DOUBLE_TIME_THRESHOLD,
) -> tuple[OvertimeCandidate, ...]:
    """Emit a candidate for each in-window technician-day above ``threshold``.

    Args:
        daily_totals: Output of ``aggregate_daily`` over the policy-visible set.
        week_window: The single week being evaluated.
        threshold: Daily hours limit; excess is ``total - threshold``.

    Returns:
        Candidates with ``excess_hours > 0``, sorted by date then technician.
    """
    limit = _as_threshold(threshold)

    candidates: list[OvertimeCandidate] = []
    for total in daily_totals.values():
        if not week_window.contains(total.work_date):
            continue
        excess = total.hours - limit
        if excess > ZERO_HOURS:
            candidates.append(OvertimeCandidate(
                technician_id=total.technician_id,
                work_date=total.work_date,
                excess_hours=excess,
                total_hours=total.hours,
            ))

    candidates.sort(key=lambda c: (c.work_date, c.technician_id))

    logger.debug("overtime_candidates_evaluated", extra={
        "week_start": week_window.start,
        "threshold": limit,
        "candidate_count": len(candidates),
    })
    return tuple(candidates)


def merge_candidates_by_date(
    candidates: Iterable[OvertimeCandidate],
) -> tuple[DateOvertime, ...]:
    """Sum candidate excess per day across technicians, rounded half-up to 0.01."""
    per_date: dict[date, Decimal] = {}
    for candidate in candidates:
        per_date[candidate.work_date] = (
            per_date.get(candidate.work_date, ZERO_HOURS) + candidate.excess_hours
        )

    return tuple(
        DateOvertime(
            work_date=day,
            excess_hours=excess.quantize(_HUNDREDTH, rounding=ROUND_HALF_UP),
        )
        for day, excess in sorted(per_date.items())
    )
