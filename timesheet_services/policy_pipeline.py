"""
timesheet_services.policy_pipeline -- End-to-end visibility and overtime evaluation.

Responsibility:
    Wire the pure engines together for one rendered week:
    visibility -> daily aggregation -> over-cap ids -> display scope,
    and in parallel visibility -> daily aggregation -> overtime candidates
    -> policy alert.  The configured ``PolicyPack`` supplies the rule
    threshold, jurisdiction, daily cap and default week start.

Architecture position:
    Services -- orchestration over engines + kernel + config.
    Holds no mutable state between calls; memoisation is the caller's
    choice via ``timesheet_services.evaluation_cache``.

Invariants enforced:
    - Visibility is applied exactly once, before every other stage.
    - Candidates and the alert are computed from the policy-visible set,
      never from the display set, so scope toggles cannot change them.
    - Identical inputs produce an identical ``PipelineResult``.

Failure modes:
    - ``UnknownJurisdictionRuleError`` at construction when ``rule_id`` is
      not in the pack.
    - Everything else (missing permissions, bad hours, unloaded summary)
      is an ordinary empty or suppressed result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date

from timesheet_config.schema import DailyOvertimeRule, PolicyPack
from timesheet_engines.daily_aggregation import aggregate_daily
from timesheet_engines.jurisdiction import effective_policy_key, resolve_policy_banner
from timesheet_engines.overtime_rules import evaluate_overtime, merge_candidates_by_date
from timesheet_engines.policy_alert import resolve_policy_alert
from timesheet_engines.scope_filter import OwnershipPredicate, apply_scope, over_cap_ids
from timesheet_engines.visibility import filter_visible
from timesheet_engines.week_anchor import parse_week_start, week_window_for
from timesheet_kernel.domain.timesheet_types import (
    DailyKey,
    DailyTotal,
    DateOvertime,
    DisplayScope,
    OvertimeCandidate,
    PolicyAlert,
    PolicyBanner,
    SummaryState,
    TenantContext,
    TimesheetRecord,
    WeekStart,
    WeekWindow,
)
from timesheet_kernel.logging_config import LogContext

_logger = logging.getLogger("timesheet_services.policy_pipeline")

DEFAULT_RULE_ID = "ca_daily_double_time"


@dataclass(frozen=True)
class PipelineResult:
    """Everything the timesheet view renders for one evaluation."""

    policy_visible: tuple[TimesheetRecord, ...]
    display_set: tuple[TimesheetRecord, ...]
    daily_totals: Mapping[DailyKey, DailyTotal]
    over_cap_ids: frozenset[int]
    week_window: WeekWindow | None
    candidates: tuple[OvertimeCandidate, ...]
    candidates_by_date: tuple[DateOvertime, ...]
    alert: PolicyAlert
    banner: PolicyBanner | None
    policy_key: str | None


class TimesheetPolicyPipeline:
    """Evaluate visibility, display scope and the overtime alert for a week.

    Usage:
        pack = get_active_config()
        pipeline = TimesheetPolicyPipeline(pack)
        result = pipeline.evaluate(
            records, tenant, SummaryState.loaded(summary),
            scope=DisplayScope(OwnershipScope.MINE),
            is_owned_by_user=owned_by_user(user_id=7),
            view_date=date(2024, 6, 12),
        )
    """

    def __init__(self, pack: PolicyPack, rule_id: str = DEFAULT_RULE_ID):
        self._pack = pack
        self._rule = pack.rule(rule_id)

    @property
    def pack(self) -> PolicyPack:
        return self._pack

    @property
    def rule(self) -> DailyOvertimeRule:
        return self._rule

    def week_start_for(self, tenant: TenantContext | None) -> WeekStart:
        """Tenant preference when recognised, else the pack default."""
        preference = tenant.week_start if tenant is not None else None
        return parse_week_start(preference) or self._pack.default_week_start

    def week_window(
        self,
        tenant: TenantContext | None,
        summary_state: SummaryState,
        view_date: date | None,
    ) -> WeekWindow | None:
        """Summary week when the server reports one, else the week around ``view_date``."""
        if summary_state.is_available and summary_state.summary.workweek_start:
            return WeekWindow(summary_state.summary.workweek_start)
        if view_date is None:
            return None
        return week_window_for(view_date, week_start_preference=self.week_start_for(tenant))

    def evaluate(
        self,
        records: Iterable[TimesheetRecord],
        tenant: TenantContext | None,
        summary_state: SummaryState,
        scope: DisplayScope = DisplayScope(),
        is_owned_by_user: OwnershipPredicate | None = None,
        view_date: date | None = None,
        single_week_view: bool = True,
    ) -> PipelineResult:
        window = self.week_window(tenant, summary_state, view_date)
        with LogContext.bind(
            tenant_id=tenant.tenant_id if tenant is not None else None,
            week_start=window.start.isoformat() if window else None,
        ):
            return self._evaluate(
                records, tenant, summary_state, window,
                scope, is_owned_by_user, single_week_view,
            )

    def _evaluate(
        self,
        records: Iterable[TimesheetRecord],
        tenant: TenantContext | None,
        summary_state: SummaryState,
        window: WeekWindow | None,
        scope: DisplayScope,
        is_owned_by_user: OwnershipPredicate | None,
        single_week_view: bool,
    ) -> PipelineResult:
        policy_visible = filter_visible(records)
        daily_totals = aggregate_daily(policy_visible)
        capped = over_cap_ids(daily_totals, cap=self._pack.daily_hour_cap)
        display_set = apply_scope(
            policy_visible,
            scope=scope,
            over_cap_ids=capped,
            is_owned_by_user=is_owned_by_user,
        )

        if window is None:
            candidates: tuple[OvertimeCandidate, ...] = ()
        else:
            candidates = evaluate_overtime(
                daily_totals,
                week_window=window,
                threshold=self._rule.daily_threshold_hours,
            )

        alert = resolve_policy_alert(
            tenant=tenant,
            summary_state=summary_state,
            candidates=candidates,
            daily_totals=daily_totals,
            jurisdiction=self._rule.jurisdiction,
            fallback_window=window,
            single_week_view=single_week_view,
        )

        result = PipelineResult(
            policy_visible=policy_visible,
            display_set=display_set,
            daily_totals=daily_totals,
            over_cap_ids=capped,
            week_window=window,
            candidates=candidates,
            candidates_by_date=merge_candidates_by_date(candidates),
            alert=alert,
            banner=resolve_policy_banner(tenant),
            policy_key=effective_policy_key(
                tenant, summary_state.summary if summary_state.is_available else None,
            ),
        )

        _logger.info("timesheet_policy_evaluated", extra={
            "config_set_id": self._pack.config_id,
            "rule_id": self._rule.rule_id,
            "week_start": window.start if window else None,
            "visible_count": len(policy_visible),
            "display_count": len(display_set),
            "candidate_count": len(candidates),
            "alert_kind": alert.kind,
        })
        return result
