"""
Hypothesis-based property tests for the evaluation pipeline.

Properties checked:
- Visibility output is exactly the subsequence of records whose flag is True
- The display set never widens the policy-visible set
- Candidates and the alert do not depend on the display scope
- A zero server double-time total always yields NoAlert (the gate wins)
- Identical inputs give identical results
- The strict 12-hour threshold boundary
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from timesheet_engines.daily_aggregation import aggregate_daily
from timesheet_engines.overtime_rules import evaluate_overtime
from timesheet_engines.policy_alert import resolve_policy_alert
from timesheet_engines.scope_filter import apply_scope, owned_by_user
from timesheet_engines.visibility import filter_visible
from timesheet_kernel.domain import (
    DisplayScope,
    NoAlert,
    OvertimeCandidate,
    OwnershipScope,
    SummaryState,
    TenantContext,
    TimesheetRecord,
    ValidationScope,
    WeeklySummary,
    WeekWindow,
)
from timesheet_services import TimesheetPolicyPipeline

WEEK_START = date(2024, 6, 9)
WEEK = WeekWindow(WEEK_START)
CA = TenantContext(region="US", state="CA", week_start="sunday")

_SETTINGS = settings(
    max_examples=150,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

raw_hours = st.one_of(
    st.decimals(min_value=0, max_value=24, places=2, allow_nan=False, allow_infinity=False),
    st.integers(min_value=-4, max_value=24),
    st.floats(min_value=0, max_value=24, allow_nan=False, allow_infinity=False),
    st.sampled_from(["abc", "", None, "7.5", "NaN", "1e999999999", "9e999999"]),
)

permission = st.sampled_from([True, False, None])

scopes = st.builds(
    DisplayScope,
    ownership=st.sampled_from(list(OwnershipScope)),
    validation=st.sampled_from(list(ValidationScope)),
)


@composite
def records(draw, max_size=25):
    count = draw(st.integers(min_value=0, max_value=max_size))
    result = []
    for record_id in range(1, count + 1):
        offset = draw(st.integers(min_value=-2, max_value=9))
        result.append(TimesheetRecord(
            record_id=record_id,
            technician_id=draw(st.sampled_from([1, 2, 3, None])),
            work_date=WEEK_START + timedelta(days=offset),
            hours_worked=draw(raw_hours),
            ai_flagged=draw(st.booleans()),
            view_permission=draw(permission),
            owner_user_id=draw(st.sampled_from([7, 8, None])),
        ))
    return result


@composite
def candidates(draw):
    count = draw(st.integers(min_value=0, max_value=10))
    return tuple(
        OvertimeCandidate(
            technician_id=draw(st.integers(min_value=1, max_value=5)),
            work_date=WEEK_START + timedelta(days=draw(st.integers(min_value=0, max_value=6))),
            excess_hours=Decimal("1"),
            total_hours=Decimal("13"),
        )
        for _ in range(count)
    )


def _loaded(overtime_2x: Decimal) -> SummaryState:
    return SummaryState.loaded(WeeklySummary(
        overtime_hours_2x=overtime_2x, workweek_start=WEEK_START,
    ))


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestVisibilityProperties:

    @_SETTINGS
    @given(batch=records())
    def test_exact_true_subsequence(self, batch):
        visible = filter_visible(batch)
        assert list(visible) == [r for r in batch if r.view_permission is True]


class TestScopeProperties:

    @_SETTINGS
    @given(batch=records(), scope=scopes, over_cap=st.frozensets(st.integers(1, 30)))
    def test_never_widens(self, batch, scope, over_cap):
        visible = filter_visible(batch)
        displayed = apply_scope(
            visible,
            scope=scope,
            over_cap_ids=over_cap,
            is_owned_by_user=owned_by_user(7),
        )
        visible_ids = [r.record_id for r in visible]
        displayed_ids = [r.record_id for r in displayed]
        assert set(displayed_ids) <= set(visible_ids)
        assert displayed_ids == [i for i in visible_ids if i in set(displayed_ids)]


class TestScopeIndependence:

    @_SETTINGS
    @given(batch=records(), scope=scopes, overtime_2x=st.sampled_from(["0", "1.5"]))
    def test_candidates_and_alert_ignore_scope(self, default_pack, batch, scope, overtime_2x):
        pipeline = TimesheetPolicyPipeline(default_pack)
        state = _loaded(Decimal(overtime_2x))
        scoped = pipeline.evaluate(batch, CA, state, scope=scope, is_owned_by_user=owned_by_user(7))
        unscoped = pipeline.evaluate(batch, CA, state)
        assert scoped.candidates == unscoped.candidates
        assert scoped.alert == unscoped.alert
        assert scoped.policy_visible == unscoped.policy_visible


class TestServerGate:

    @_SETTINGS
    @given(found=candidates())
    def test_zero_server_total_always_no_alert(self, found):
        totals = {
            c.key: aggregate_daily([TimesheetRecord(
                record_id=1, technician_id=c.technician_id, work_date=c.work_date,
                hours_worked="13", view_permission=True,
            )])[c.key]
            for c in found
        }
        alert = resolve_policy_alert(
            tenant=CA,
            summary_state=_loaded(Decimal("0")),
            candidates=found,
            daily_totals=totals,
        )
        assert alert == NoAlert()

    @_SETTINGS
    @given(found=candidates(), status=st.sampled_from([
        SummaryState.idle(), SummaryState.loading(), SummaryState.failed(),
    ]))
    def test_unloaded_summary_always_no_alert(self, found, status):
        alert = resolve_policy_alert(
            tenant=CA, summary_state=status, candidates=found, daily_totals={},
        )
        assert alert == NoAlert()


class TestDeterminism:

    @_SETTINGS
    @given(batch=records(), scope=scopes)
    def test_idempotent(self, default_pack, batch, scope):
        pipeline = TimesheetPolicyPipeline(default_pack)
        first = pipeline.evaluate(batch, CA, _loaded(Decimal("1")), scope=scope)
        second = pipeline.evaluate(batch, CA, _loaded(Decimal("1")), scope=scope)
        assert first == second


class TestThresholdBoundary:

    @_SETTINGS
    @given(hundredths=st.integers(min_value=0, max_value=1200))
    def test_strictly_above_threshold(self, hundredths):
        hours = Decimal("12") + Decimal(hundredths) / Decimal("100") - Decimal("6")
        totals = aggregate_daily([TimesheetRecord(
            record_id=1, technician_id=1, work_date=WEEK_START,
            hours_worked=hours, view_permission=True,
        )])
        found = evaluate_overtime(totals, week_window=WEEK)
        if hours > Decimal("12"):
            (candidate,) = found
            assert candidate.excess_hours == hours - Decimal("12")
        else:
            assert found == ()
