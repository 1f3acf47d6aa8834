"""
timesheet_services.evaluation_cache -- Caller-owned memoisation of pipeline results.

Responsibility:
    Re-rendering the same week with the same inputs should not re-run the
    engines.  ``EvaluationCache`` stores ``PipelineResult`` objects under
    an ``EvaluationKey`` of (week start, display scope, input fingerprint)
    with bounded LRU eviction.

Architecture position:
    Services -- optional helper.  Engines never own or consult a cache;
    a cache instance lives exactly as long as the caller that created it.

Invariants enforced:
    - The input fingerprint covers records, tenant, summary state, the
      rule and the view flags, so any change to them misses the cache.
    - Size never exceeds ``max_entries``; the least recently used entry
      is evicted first.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable, Sequence
from datetime import date
from typing import NamedTuple

from timesheet_engines.tracer import compute_input_fingerprint
from timesheet_kernel.domain.timesheet_types import (
    DisplayScope,
    SummaryState,
    TenantContext,
    TimesheetRecord,
)
from timesheet_services.policy_pipeline import PipelineResult, TimesheetPolicyPipeline

_logger = logging.getLogger("timesheet_services.evaluation_cache")

_KEY_FIELDS = (
    "records", "tenant", "summary_state", "rule", "view_date",
    "single_week_view", "owner_key",
)


class EvaluationKey(NamedTuple):
    week_start: date | None
    scope: DisplayScope
    input_fingerprint: str


def evaluation_key(
    pipeline: TimesheetPolicyPipeline,
    records: Sequence[TimesheetRecord],
    tenant: TenantContext | None,
    summary_state: SummaryState,
    scope: DisplayScope = DisplayScope(),
    view_date: date | None = None,
    single_week_view: bool = True,
    owner_key: Hashable | None = None,
) -> EvaluationKey:
    """Build the cache key for one ``TimesheetPolicyPipeline.evaluate`` call.

    ``owner_key`` identifies whoever the ownership predicate answers for
    (a user id, say); predicates themselves cannot be fingerprinted.

    ``records`` must be a sequence; a one-shot iterator raises ``TypeError``.
    """
    if not isinstance(records, Sequence):
        raise TypeError(
            f"records must be a sequence, got {type(records).__name__}"
        )
    window = pipeline.week_window(tenant, summary_state, view_date)
    fingerprint = compute_input_fingerprint(_KEY_FIELDS, {
        "records": tuple(records),
        "tenant": tenant,
        "summary_state": summary_state,
        "rule": pipeline.rule,
        "view_date": view_date,
        "single_week_view": single_week_view,
        "owner_key": owner_key,
    })
    return EvaluationKey(
        week_start=window.start if window else None,
        scope=scope,
        input_fingerprint=fingerprint,
    )


class EvaluationCache:
    """Bounded LRU cache of pipeline results.

    Usage:
        cache = EvaluationCache(max_entries=32)
        records = list(fetch_records(week))
        key = evaluation_key(pipeline, records, tenant, state, scope, view_date)
        result = cache.get_or_compute(
            key, lambda: pipeline.evaluate(records, tenant, state, scope, view_date=view_date),
        )
    """

    def __init__(self, max_entries: int = 64):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._max_entries = max_entries
        self._entries: OrderedDict[EvaluationKey, PipelineResult] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get_or_compute(
        self,
        key: EvaluationKey,
        compute: Callable[[], PipelineResult],
    ) -> PipelineResult:
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return cached
            self.misses += 1

        result = compute()

        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                _logger.debug("evaluation_cache_evicted", extra={
                    "week_start": evicted.week_start,
                    "input_fingerprint": evicted.input_fingerprint,
                })
        return result

    def invalidate(self, week_start: date | None = None) -> int:
        """Drop entries for ``week_start``, or everything when omitted.

        Returns the number of entries removed.
        """
        with self._lock:
            if week_start is None:
                removed = len(self._entries)
                self._entries.clear()
            else:
                stale = [k for k in self._entries if k.week_start == week_start]
                for k in stale:
                    del self._entries[k]
                removed = len(stale)
        _logger.debug("evaluation_cache_invalidated", extra={
            "week_start": week_start, "removed": removed,
        })
        return removed
