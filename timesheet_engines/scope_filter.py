"""
Display Scope Filter Engine (``timesheet_engines.scope_filter``).

Responsibility
--------------
Apply the user's cosmetic narrowing on top of the policy-visible set to
produce the *display set* used for rendering only:

* ownership scope -- ``mine`` / ``others`` / ``all``
* validation scope -- ``ai_flagged`` / ``over_cap`` / ``all``

Also builds the two caller-side inputs the filter needs: the ownership
predicate for the signed-in user and the over-daily-cap id set.

Architecture position
---------------------
**Engines layer** -- pure functional core.  Takes the policy-visible set
from ``timesheet_engines.visibility``; it is never given raw records.

Invariants enforced
-------------------
* Ownership is applied first, then validation; the scopes intersect.
* The result is always a subsequence of the input (never widens).
* Inputs are never mutated.

Failure modes
-------------
* ``ValueError`` if a scope value is not a known ``OwnershipScope`` /
  ``ValidationScope`` (programming error).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Set
from decimal import Decimal

from timesheet_engines.tracer import traced_engine
from timesheet_kernel.domain.timesheet_types import (
    DailyKey,
    DailyTotal,
    DisplayScope,
    OwnershipScope,
    TimesheetRecord,
    ValidationScope,
)
from timesheet_kernel.logging_config import get_logger

logger = get_logger("engines.scope_filter")

OwnershipPredicate = Callable[[TimesheetRecord], bool]

DEFAULT_DAILY_HOUR_CAP = Decimal("12")


def _owned_by_nobody(record: TimesheetRecord) -> bool:
    return False


@traced_engine("scope_filter", "1.0", fingerprint_fields=("scope",))
def apply_scope(
    policy_visible: Iterable[TimesheetRecord],
    scope: DisplayScope = DisplayScope(),
    over_cap_ids: Set[int] = frozenset(),
    is_owned_by_user: OwnershipPredicate | None = None,
) -> tuple[TimesheetRecord, ...]:
    """Narrow the policy-visible set to the display set.

    Without an ownership predicate no record counts as owned, so ``mine``
    yields nothing and ``others`` keeps everything.
    """
    ownership = OwnershipScope(scope.ownership)
    validation = ValidationScope(scope.validation)
    owned = is_owned_by_user or _owned_by_nobody

    scoped = tuple(policy_visible)
    received = len(scoped)

    if ownership == OwnershipScope.MINE:
        scoped = tuple(r for r in scoped if owned(r))
    elif ownership == OwnershipScope.OTHERS:
        scoped = tuple(r for r in scoped if not owned(r))

    if validation == ValidationScope.AI_FLAGGED:
        scoped = tuple(r for r in scoped if r.ai_flagged)
    elif validation == ValidationScope.OVER_CAP:
        scoped = tuple(r for r in scoped if r.record_id in over_cap_ids)

    logger.debug("display_scope_applied", extra={
        "ownership_scope": ownership.value,
        "validation_scope": validation.value,
        "received": received,
        "displayed": len(scoped),
    })
    return scoped


def owned_by_user(user_id: int | None, email: str | None = None) -> OwnershipPredicate:
    """Ownership predicate for the signed-in user.

    The technician's linked account id is compared first; the email is a
    fallback only when either side lacks an id. With no user at all,
    nothing is owned.
    """
    if user_id is None and not email:
        return _owned_by_nobody

    def predicate(record: TimesheetRecord) -> bool:
        if record.owner_user_id is not None and user_id is not None:
            return record.owner_user_id == user_id
        if record.owner_email and email:
            return record.owner_email == email
        return False

    return predicate


@traced_engine("over_cap", "1.0", fingerprint_fields=("cap",))
def over_cap_ids(
    daily_totals: Mapping[DailyKey, DailyTotal],
    cap: Decimal = DEFAULT_DAILY_HOUR_CAP,
) -> frozenset[int]:
    """Ids of every record contributing to a technician-day strictly above ``cap``."""
    ids: set[int] = set()
    for total in daily_totals.values():
        if total.hours > cap:
            ids.update(total.source_ids)
    return frozenset(ids)
