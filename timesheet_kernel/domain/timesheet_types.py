"""
Timesheet Policy Types (``timesheet_kernel.domain.timesheet_types``).

Responsibility
--------------
Frozen dataclass value objects for the visibility-and-overtime pipeline:
timesheet records, tenant context, week windows, daily totals, overtime
candidates, the server weekly summary, and the ``PolicyAlert`` sum type.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.  Consumed by
every engine in ``timesheet_engines`` and by the pipeline service.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* Derived hour fields use ``Decimal``.
* ``WeekWindow`` is always exactly seven days, half-open.
* ``PolicyAlert`` is exactly one of ``NoAlert | InfoAlert | ViolationAlert``.
* A record with no permission flag carries ``view_permission=None``; it is
  never defaulted to True here.

Failure modes
-------------
* ``WeekWindow`` construction with a non-date start raises ``TypeError``.
* ``WeekWindow.anchored_at`` with a weekday outside 0-6 raises ``ValueError``.
* ``TimesheetRecord.from_payload`` raises ``KeyError`` / ``ValueError``
  when the record ``id`` is missing or not an integer.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Literal, NamedTuple

from timesheet_kernel.domain.coercion import (
    ZERO_HOURS,
    coerce_hours,
    coerce_optional_int,
    normalize_work_date,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class WeekStart(str, Enum):
    """Human week-start labels a tenant may configure."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class OwnershipScope(str, Enum):
    """Ownership narrowing for the display set."""
    MINE = "mine"
    OTHERS = "others"
    ALL = "all"


class ValidationScope(str, Enum):
    """Validation narrowing for the display set."""
    ALL = "all"
    AI_FLAGGED = "ai_flagged"
    OVER_CAP = "over_cap"

    @classmethod
    def _missing_(cls, value: object) -> ValidationScope | None:
        # Accept the UI spellings: "aiFlagged", "overcap", "over-cap".
        if not isinstance(value, str):
            return None
        squashed = value.strip().lower().replace("_", "").replace("-", "")
        for member in cls:
            if member.value.replace("_", "") == squashed:
                return member
        return None


class SummaryStatus(str, Enum):
    """Load state of the server weekly summary."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class BannerSeverity(str, Enum):
    WARNING = "warning"
    INFO = "info"


class PolicyKey(str, Enum):
    """Canonical jurisdiction labels shared with the summary endpoint."""
    US_CA = "US-CA"
    US_NY = "US-NY"
    US_FLSA = "US-FLSA"
    NON_US = "NON-US"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimesheetRecord:
    """One unit of logged work, as received from the REST collaborator.

    ``work_date`` and ``hours_worked`` are kept as received; use
    ``normalized_date`` and ``hours`` for the coerced values.
    """
    record_id: int
    technician_id: int | None
    work_date: date | datetime | str | None
    hours_worked: Decimal | int | float | str | None = None
    ai_flagged: bool = False
    view_permission: bool | None = None
    owner_user_id: int | None = None
    owner_email: str | None = None

    @property
    def normalized_date(self) -> date | None:
        return normalize_work_date(self.work_date)

    @property
    def hours(self) -> Decimal:
        return coerce_hours(self.hours_worked)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TimesheetRecord:
        """Build a record from the timesheet JSON shape.

        The permission flag is read from ``permissions.can_view`` or a flat
        ``view_permission``. Anything that is not a real boolean is treated
        as absent.
        """
        if "permissions" in payload:
            permissions = payload.get("permissions")
            raw_permission = (
                permissions.get("can_view") if isinstance(permissions, Mapping) else None
            )
        else:
            raw_permission = payload.get("view_permission")

        technician = payload.get("technician")
        if not isinstance(technician, Mapping):
            technician = {}

        email = technician.get("email")
        return cls(
            record_id=int(payload["id"]),
            technician_id=coerce_optional_int(payload.get("technician_id")),
            work_date=payload.get("date"),
            hours_worked=payload.get("hours_worked"),
            ai_flagged=bool(payload.get("ai_flagged", False)),
            view_permission=raw_permission if isinstance(raw_permission, bool) else None,
            owner_user_id=coerce_optional_int(technician.get("user_id")),
            owner_email=email if isinstance(email, str) and email else None,
        )


@dataclass(frozen=True)
class TenantContext:
    """Per-tenant jurisdiction and calendar configuration."""
    region: str | None = None
    state: str | None = None
    policy_key: str | None = None
    week_start: str | None = None
    tenant_id: str | None = None

    @property
    def normalized_region(self) -> str:
        return _normalize_upper(self.region)

    @property
    def normalized_state(self) -> str:
        return _normalize_upper(self.state)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TenantContext:
        tenant_id = payload.get("tenant_id", payload.get("id"))
        return cls(
            region=_optional_str(payload.get("region")),
            state=_optional_str(payload.get("state")),
            policy_key=_optional_str(payload.get("policy_key")),
            week_start=_optional_str(payload.get("week_start")),
            tenant_id=str(tenant_id) if tenant_id is not None else None,
        )


@dataclass(frozen=True)
class Jurisdiction:
    """Region/state pair an overtime rule applies to.

    ``state=None`` matches any state within the region.
    """
    region: str
    state: str | None = None

    def matches(self, tenant: TenantContext | None) -> bool:
        if tenant is None:
            return False
        if tenant.normalized_region != _normalize_upper(self.region):
            return False
        if self.state is None:
            return True
        return tenant.normalized_state == _normalize_upper(self.state)


@dataclass(frozen=True)
class WeeklySummary:
    """Server-computed payroll summary for one workweek.

    Only ``overtime_hours_2x``, ``workweek_start`` and ``policy_key`` are
    read by the pipeline; the rest is carried for display.
    """
    regular_hours: Decimal = ZERO_HOURS
    overtime_hours: Decimal = ZERO_HOURS
    overtime_rate: Decimal = Decimal("1.5")
    overtime_hours_2x: Decimal = ZERO_HOURS
    workweek_start: date | None = None
    policy_key: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> WeeklySummary:
        """Parse the summary JSON. The backend names the 2x total ``overtime_hours_2_0``."""
        raw_2x = payload.get("overtime_hours_2x", payload.get("overtime_hours_2_0"))
        raw_rate = payload.get("overtime_rate")
        return cls(
            regular_hours=coerce_hours(payload.get("regular_hours")),
            overtime_hours=coerce_hours(payload.get("overtime_hours")),
            overtime_rate=coerce_hours(raw_rate) if raw_rate is not None else Decimal("1.5"),
            overtime_hours_2x=coerce_hours(raw_2x),
            workweek_start=normalize_work_date(payload.get("workweek_start")),
            policy_key=_optional_str(payload.get("policy_key")),
        )


@dataclass(frozen=True)
class SummaryState:
    """Weekly summary as observed by the pipeline: a load status plus payload."""
    status: SummaryStatus = SummaryStatus.IDLE
    summary: WeeklySummary | None = None

    @property
    def is_available(self) -> bool:
        return self.status == SummaryStatus.LOADED and self.summary is not None

    @classmethod
    def idle(cls) -> SummaryState:
        return cls(SummaryStatus.IDLE)

    @classmethod
    def loading(cls) -> SummaryState:
        return cls(SummaryStatus.LOADING)

    @classmethod
    def loaded(cls, summary: WeeklySummary) -> SummaryState:
        return cls(SummaryStatus.LOADED, summary)

    @classmethod
    def failed(cls) -> SummaryState:
        return cls(SummaryStatus.ERROR)


@dataclass(frozen=True)
class DisplayScope:
    """User-chosen cosmetic filters for the display set."""
    ownership: OwnershipScope = OwnershipScope.ALL
    validation: ValidationScope = ValidationScope.ALL


# ---------------------------------------------------------------------------
# Week window
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WeekWindow:
    """Half-open seven-day span ``[start, start + 7)``."""
    start: date

    LENGTH: ClassVar[timedelta] = timedelta(days=7)

    def __post_init__(self) -> None:
        if isinstance(self.start, datetime):
            object.__setattr__(self, "start", self.start.date())
        elif not isinstance(self.start, date):
            raise TypeError(
                f"WeekWindow start must be a date, got {type(self.start).__name__}"
            )

    @property
    def end(self) -> date:
        """Exclusive end: the day after the last day in the window."""
        return self.start + self.LENGTH

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end

    def days(self) -> tuple[date, ...]:
        return tuple(self.start + timedelta(days=offset) for offset in range(7))

    @classmethod
    def anchored_at(cls, day: date, first_weekday: int) -> WeekWindow:
        """The window containing ``day`` whose start falls on ``first_weekday``.

        ``first_weekday`` uses ``date.weekday()`` numbering (Monday == 0).
        """
        if not 0 <= first_weekday <= 6:
            raise ValueError(f"first_weekday must be in 0..6, got {first_weekday}")
        if isinstance(day, datetime):
            day = day.date()
        offset = (day.weekday() - first_weekday) % 7
        return cls(day - timedelta(days=offset))

    @classmethod
    def starting(cls, value: date | datetime | str | None) -> WeekWindow | None:
        """Window starting at a parsed date, or None when ``value`` is unparsable."""
        start = normalize_work_date(value)
        return cls(start) if start is not None else None


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


class DailyKey(NamedTuple):
    """Grouping key for daily aggregation."""
    technician_id: int
    work_date: date


@dataclass(frozen=True)
class DailyTotal:
    """Sum of policy-visible hours for one technician on one day.

    ``source_ids`` lists contributing record ids in input order, including
    records whose hours were malformed and counted as zero.
    """
    technician_id: int
    work_date: date
    hours: Decimal
    source_ids: tuple[int, ...] = field(default_factory=tuple)

    @property
    def key(self) -> DailyKey:
        return DailyKey(self.technician_id, self.work_date)


@dataclass(frozen=True)
class OvertimeCandidate:
    """A technician-day whose total exceeded the daily threshold."""
    technician_id: int
    work_date: date
    excess_hours: Decimal
    total_hours: Decimal

    @property
    def key(self) -> DailyKey:
        return DailyKey(self.technician_id, self.work_date)


@dataclass(frozen=True)
class DateOvertime:
    """Candidate excess summed across technicians for one calendar day."""
    work_date: date
    excess_hours: Decimal


# ---------------------------------------------------------------------------
# PolicyAlert sum type
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ViolationRow:
    work_date: date
    excess_hours: Decimal
    total_hours: Decimal
    technician_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.work_date.isoformat(),
            "excess_hours": str(self.excess_hours),
            "total_hours": str(self.total_hours),
            "technician_id": self.technician_id,
        }


@dataclass(frozen=True)
class NoAlert:
    kind: ClassVar[Literal["none"]] = "none"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind}


@dataclass(frozen=True)
class InfoAlert:
    message: str

    kind: ClassVar[Literal["info"]] = "info"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class ViolationAlert:
    rows: tuple[ViolationRow, ...]

    kind: ClassVar[Literal["violation"]] = "violation"

    def __post_init__(self) -> None:
        if not self.rows:
            raise ValueError("ViolationAlert requires at least one row")

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "rows": [row.to_dict() for row in self.rows]}


PolicyAlert = NoAlert | InfoAlert | ViolationAlert


@dataclass(frozen=True)
class PolicyBanner:
    """Jurisdiction banner shown above the calendar."""
    severity: BannerSeverity
    title: str
    message: str
    cta_label: str | None = None
    cta_target: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "severity": self.severity.value,
            "title": self.title,
            "message": self.message,
        }
        if self.cta_label is not None:
            payload["cta"] = {"label": self.cta_label, "to": self.cta_target}
        return payload


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _normalize_upper(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().upper()


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None
