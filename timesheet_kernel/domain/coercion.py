"""
Coercion -- tolerant normalisation of raw record fields.

Responsibility:
    Turns the loosely-typed values that arrive from the REST collaborator
    (numeric strings, floats, ISO date or datetime strings) into the
    ``Decimal`` hours and ``date`` keys used by the engines.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Malformed input never raises: hours fall back to zero, dates to None.
    - Hours are always finite, non-negative and at most ``MAX_HOURS``.
    - Floats are converted through ``str()`` so 0.1 stays 0.1.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

ZERO_HOURS = Decimal("0")

# Upper bound for a single hours value; anything larger is treated as malformed.
MAX_HOURS = Decimal("1000000")


def coerce_hours(value: Any) -> Decimal:
    """Coerce a raw ``hours_worked`` value to a finite non-negative Decimal.

    Unparsable, non-finite, boolean and missing values become zero.
    Negative values clamp to zero. Values above ``MAX_HOURS`` (such as
    ``"1e999999999"``) are malformed and also become zero, so sums of
    coerced hours never overflow the decimal context.
    """
    if value is None or isinstance(value, bool):
        return ZERO_HOURS

    if isinstance(value, Decimal):
        candidate = value
    elif isinstance(value, int):
        candidate = Decimal(value)
    elif isinstance(value, float):
        candidate = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return ZERO_HOURS
        try:
            candidate = Decimal(text)
        except InvalidOperation:
            return ZERO_HOURS
    else:
        return ZERO_HOURS

    if not candidate.is_finite():
        return ZERO_HOURS
    if candidate < ZERO_HOURS or candidate > MAX_HOURS:
        return ZERO_HOURS
    return candidate


def normalize_work_date(value: Any) -> date | None:
    """Return the calendar day for a raw ``date`` field, or None.

    Accepts ``date``, ``datetime`` (time of day discarded), and ISO 8601
    date or datetime strings. Anything else is unparsable.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def coerce_optional_int(value: Any) -> int | None:
    """Integer identifiers arrive as ints or numeric strings; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
