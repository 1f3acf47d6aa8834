"""
Daily Aggregation Engine (``timesheet_engines.daily_aggregation``).

Responsibility
--------------
Group policy-visible records by ``(technician, calendar day)`` and sum
worked hours per group.

Architecture position
---------------------
**Engines layer** -- pure functional core.  Single linear pass, no I/O.

Invariants enforced
-------------------
* "What is a day" is the record's own ``work_date`` with any time of
  day discarded -- never a value derived from start/end instants.
* Records without a parseable date or technician are excluded from every
  group.
* Unparsable, non-finite, negative or out-of-range hours contribute
  zero; the record id is still listed in ``source_ids``.
* Result ordering follows first appearance in the input.

Failure modes
-------------
* None.  Malformed records never abort the batch.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from timesheet_engines.tracer import traced_engine
from timesheet_kernel.domain.coercion import ZERO_HOURS
from timesheet_kernel.domain.timesheet_types import DailyKey, DailyTotal, TimesheetRecord
from timesheet_kernel.logging_config import get_logger

logger = get_logger("engines.daily_aggregation")


@traced_engine("daily_aggregation", "1.0")
def aggregate_daily(
    policy_visible: Iterable[TimesheetRecord],
) -> dict[DailyKey, DailyTotal]:
    """Sum hours per ``(technician_id, work_date)`` over the policy-visible set."""
    hours: dict[DailyKey, Decimal] = {}
    sources: dict[DailyKey, list[int]] = {}
    undated = 0
    unassigned = 0

    for record in policy_visible:
        work_date = record.normalized_date
        if work_date is None:
            undated += 1
            continue
        if record.technician_id is None:
            unassigned += 1
            continue

        key = DailyKey(record.technician_id, work_date)
        hours[key] = hours.get(key, ZERO_HOURS) + record.hours
        sources.setdefault(key, []).append(record.record_id)

    if undated or unassigned:
        logger.info("daily_aggregation_skipped_records", extra={
            "undated_records": undated,
            "unassigned_records": unassigned,
        })

    return {
        key: DailyTotal(
            technician_id=key.technician_id,
            work_date=key.work_date,
            hours=total,
            source_ids=tuple(sources[key]),
        )
        for key, total in hours.items()
    }
