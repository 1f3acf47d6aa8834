#!/usr/bin/env python3
"""
Run the timesheet policy pipeline over a JSON scenario and print the result.

The scenario file mirrors the REST payloads the timesheet view receives:

    {
      "tenant":  {"region": "US", "state": "CA", "week_start": "sunday"},
      "summary": {"status": "loaded", "overtime_hours_2_0": 1.5,
                  "workweek_start": "2024-06-09"},
      "records": [{"id": 1, "technician_id": 3, "date": "2024-06-12",
                   "hours_worked": 13.5, "permissions": {"can_view": true}}],
      "view_date": "2024-06-12",
      "scope": {"ownership": "all", "validation": "all"},
      "user":  {"id": 7, "email": "tech@example.com"}
    }

Without ``--input`` the built-in California scenario is used.

Usage:
    python3 scripts/demo_policy_pipeline.py
    python3 scripts/demo_policy_pipeline.py --input week.json
    python3 scripts/demo_policy_pipeline.py --input week.json --config-set default --log
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

DEFAULT_SCENARIO: dict[str, Any] = {
    "tenant": {"region": "US", "state": "CA", "week_start": "sunday", "tenant_id": "demo"},
    "summary": {
        "status": "loaded",
        "regular_hours": 40,
        "overtime_hours": 4,
        "overtime_hours_2_0": 1.5,
        "workweek_start": "2024-06-09",
        "policy_key": "US-CA",
    },
    "records": [
        {"id": 1, "technician_id": 3, "date": "2024-06-12", "hours_worked": 8,
         "permissions": {"can_view": True}, "technician": {"user_id": 7}},
        {"id": 2, "technician_id": 3, "date": "2024-06-12", "hours_worked": 5.5,
         "permissions": {"can_view": True}, "technician": {"user_id": 7}},
        {"id": 3, "technician_id": 4, "date": "2024-06-13", "hours_worked": 14,
         "permissions": {"can_view": False}},
        {"id": 4, "technician_id": 4, "date": "2024-06-14", "hours_worked": 9,
         "ai_flagged": True, "permissions": {"can_view": True}},
    ],
    "view_date": "2024-06-12",
    "scope": {"ownership": "all", "validation": "all"},
    "user": {"id": 7},
}


def _summary_state(payload: dict[str, Any] | None):
    from timesheet_kernel.domain import SummaryState, SummaryStatus, WeeklySummary

    if payload is None:
        return SummaryState.idle()
    status = SummaryStatus(payload.get("status", "loaded"))
    if status != SummaryStatus.LOADED:
        return SummaryState(status)
    return SummaryState.loaded(WeeklySummary.from_payload(payload))


def _render(result) -> dict[str, Any]:
    return {
        "policy_key": result.policy_key,
        "week_start": result.week_window.start.isoformat() if result.week_window else None,
        "policy_visible_ids": [r.record_id for r in result.policy_visible],
        "display_ids": [r.record_id for r in result.display_set],
        "over_cap_ids": sorted(result.over_cap_ids),
        "candidates_by_date": [
            {"date": c.work_date.isoformat(), "excess_hours": str(c.excess_hours)}
            for c in result.candidates_by_date
        ],
        "alert": result.alert.to_dict(),
        "banner": result.banner.to_dict() if result.banner else None,
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Timesheet overtime policy pipeline demo")
    parser.add_argument("--input", type=Path, help="Scenario JSON file")
    parser.add_argument("--config-set", default="default", help="Policy configuration set")
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Override configuration sets directory")
    parser.add_argument("--log", action="store_true",
                        help="Emit structured JSON logs to stderr")
    args = parser.parse_args()

    if args.log:
        from timesheet_kernel.logging_config import configure_logging

        configure_logging(level=logging.DEBUG)
    else:
        logging.disable(logging.CRITICAL)

    from timesheet_config import get_active_config
    from timesheet_engines import owned_by_user
    from timesheet_kernel.domain import (
        DisplayScope,
        OwnershipScope,
        TenantContext,
        TimesheetRecord,
        ValidationScope,
    )
    from timesheet_kernel.exceptions import TimesheetPolicyError
    from timesheet_services import TimesheetPolicyPipeline

    if args.input:
        with open(args.input) as f:
            scenario = json.load(f)
    else:
        scenario = DEFAULT_SCENARIO

    try:
        pack = get_active_config(args.config_set, config_dir=args.config_dir)
    except TimesheetPolicyError as exc:
        print(f"[{exc.code}] {exc}", file=sys.stderr)
        return 1

    scope_payload = scenario.get("scope") or {}
    scope = DisplayScope(
        ownership=OwnershipScope(scope_payload.get("ownership", "all")),
        validation=ValidationScope(scope_payload.get("validation", "all")),
    )
    user = scenario.get("user") or {}
    view_date = scenario.get("view_date")

    pipeline = TimesheetPolicyPipeline(pack)
    result = pipeline.evaluate(
        [TimesheetRecord.from_payload(r) for r in scenario.get("records", [])],
        TenantContext.from_payload(scenario.get("tenant") or {}),
        _summary_state(scenario.get("summary")),
        scope=scope,
        is_owned_by_user=owned_by_user(user.get("id"), user.get("email")),
        view_date=date.fromisoformat(view_date) if view_date else None,
        single_week_view=scenario.get("single_week_view", True),
    )

    print(json.dumps(_render(result), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
