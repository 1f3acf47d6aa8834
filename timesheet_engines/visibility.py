"""
Visibility Filter Engine (``timesheet_engines.visibility``).

Responsibility
--------------
Reduce raw timesheet records to the *policy-visible set*: the records the
current user may see according to the server-computed permission flag.

Architecture position
---------------------
**Engines layer** -- pure functional core.  This is the single authority
boundary of the pipeline: every downstream engine receives this output
and never re-derives visibility.

Invariants enforced
-------------------
* Keeps exactly the records whose ``view_permission is True``.
* A missing flag (``None``) is NOT visible (fail-closed).
* Stable: output preserves input order; inputs are never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable

from timesheet_engines.tracer import traced_engine
from timesheet_kernel.domain.timesheet_types import TimesheetRecord
from timesheet_kernel.logging_config import get_logger

logger = get_logger("engines.visibility")


def is_policy_visible(record: TimesheetRecord) -> bool:
    return record.view_permission is True


@traced_engine("visibility", "1.0")
def filter_visible(records: Iterable[TimesheetRecord]) -> tuple[TimesheetRecord, ...]:
    """Return the policy-visible subsequence of ``records``."""
    visible: list[TimesheetRecord] = []
    dropped = 0
    missing_flag = 0

    for record in records:
        if is_policy_visible(record):
            visible.append(record)
            continue
        dropped += 1
        if record.view_permission is None:
            missing_flag += 1

    logger.debug("visibility_filtered", extra={
        "kept": len(visible),
        "dropped": dropped,
        "missing_permission_flag": missing_flag,
    })
    return tuple(visible)
