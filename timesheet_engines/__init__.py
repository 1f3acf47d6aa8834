"""
Module: timesheet_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    pipeline engines.  This is the canonical import surface for the
    services layer.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import timesheet_kernel (and sibling engine modules).
    MUST NOT import timesheet_config or timesheet_services.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Week anchors and dates are passed in as explicit parameters.
    - Determinism: identical inputs always produce identical outputs.
    - Visibility authority: only ``filter_visible`` looks at permission
      flags; every other engine takes its output.

Audit relevance:
    Engine entry points are wrapped with ``@traced_engine`` (see
    ``timesheet_engines.tracer``), emitting TIMESHEET_ENGINE_TRACE log
    records with engine name, version, input fingerprint and duration.

Usage:
    from timesheet_engines import (
        filter_visible, apply_scope, aggregate_daily,
        evaluate_overtime, resolve_policy_alert, resolve_week_anchor,
    )
"""

from timesheet_engines.daily_aggregation import aggregate_daily
from timesheet_engines.jurisdiction import (
    CA_DAILY_DOUBLE_TIME,
    POLICY_BANNER_STRINGS,
    derive_policy_key,
    effective_policy_key,
    jurisdiction_matches,
    resolve_policy_banner,
)
from timesheet_engines.overtime_rules import (
    DEFAULT_DAILY_DOUBLE_TIME_THRESHOLD,
    evaluate_overtime,
    merge_candidates_by_date,
)
from timesheet_engines.policy_alert import (
    DAY_DETAIL_UNAVAILABLE_MESSAGE,
    resolve_policy_alert,
)
from timesheet_engines.scope_filter import (
    DEFAULT_DAILY_HOUR_CAP,
    apply_scope,
    over_cap_ids,
    owned_by_user,
)
from timesheet_engines.tracer import compute_input_fingerprint, traced_engine
from timesheet_engines.visibility import filter_visible, is_policy_visible
from timesheet_engines.week_anchor import (
    DEFAULT_WEEK_START,
    parse_week_start,
    resolve_week_anchor,
    week_window_for,
)

__all__ = [
    "CA_DAILY_DOUBLE_TIME",
    "DAY_DETAIL_UNAVAILABLE_MESSAGE",
    "DEFAULT_DAILY_DOUBLE_TIME_THRESHOLD",
    "DEFAULT_DAILY_HOUR_CAP",
    "DEFAULT_WEEK_START",
    "POLICY_BANNER_STRINGS",
    "aggregate_daily",
    "apply_scope",
    "compute_input_fingerprint",
    "derive_policy_key",
    "effective_policy_key",
    "evaluate_overtime",
    "filter_visible",
    "is_policy_visible",
    "jurisdiction_matches",
    "merge_candidates_by_date",
    "over_cap_ids",
    "owned_by_user",
    "parse_week_start",
    "resolve_policy_alert",
    "resolve_policy_banner",
    "resolve_week_anchor",
    "traced_engine",
    "week_window_for",
]
