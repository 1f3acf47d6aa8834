"""
Week Anchor Resolver Engine (``timesheet_engines.week_anchor``).

Responsibility
--------------
Normalise a tenant-configured week-start preference ("sunday",
"Monday", "mon", ``WeekStart.SATURDAY``...) into a single weekday index
used by every other component, and anchor seven-day windows on it.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO clock reads.

Invariants enforced
-------------------
* Indexes follow ``date.weekday()`` numbering: ``calendar.MONDAY == 0``
  through ``calendar.SUNDAY == 6``.
* Total function: unrecognised or missing input resolves to
  ``DEFAULT_WEEK_START`` (Sunday).

Failure modes
-------------
* None.  Every input resolves to an index.
"""

from __future__ import annotations

import calendar
from datetime import date

from timesheet_engines.tracer import traced_engine
from timesheet_kernel.domain.timesheet_types import WeekStart, WeekWindow

DEFAULT_WEEK_START = WeekStart.SUNDAY

_WEEKDAY_INDEX: dict[WeekStart, int] = {
    WeekStart.MONDAY: calendar.MONDAY,
    WeekStart.TUESDAY: calendar.TUESDAY,
    WeekStart.WEDNESDAY: calendar.WEDNESDAY,
    WeekStart.THURSDAY: calendar.THURSDAY,
    WeekStart.FRIDAY: calendar.FRIDAY,
    WeekStart.SATURDAY: calendar.SATURDAY,
    WeekStart.SUNDAY: calendar.SUNDAY,
}

_ABBREVIATIONS: dict[str, WeekStart] = {label.value[:3]: label for label in WeekStart}


def parse_week_start(preference: object) -> WeekStart | None:
    """Match a week-start label, or None when it is not recognised."""
    if isinstance(preference, WeekStart):
        return preference
    if not isinstance(preference, str):
        return None
    text = preference.strip().lower()
    try:
        return WeekStart(text)
    except ValueError:
        return _ABBREVIATIONS.get(text)


@traced_engine("week_anchor", "1.0", fingerprint_fields=("week_start_preference",))
def resolve_week_anchor(week_start_preference: object = None) -> int:
    """Resolve a week-start preference to a ``date.weekday()`` index.

    Falls back to Sunday for anything unrecognised.
    """
    label = parse_week_start(week_start_preference) or DEFAULT_WEEK_START
    return _WEEKDAY_INDEX[label]


def week_window_for(day: date, week_start_preference: object = None) -> WeekWindow:
    """The tenant week containing ``day``."""
    return WeekWindow.anchored_at(
        day, resolve_week_anchor(week_start_preference=week_start_preference)
    )
