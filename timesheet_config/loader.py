"""
Configuration Loader (``timesheet_config.loader``).

Responsibility
--------------
Loads a policy YAML file and parses it into the frozen dataclasses of
``timesheet_config.schema``.  Runtime callers go through
``timesheet_config.get_active_config()`` rather than calling this directly.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Hour values are parsed as ``Decimal`` via ``str()``; YAML floats never
  leak into arithmetic.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Bad values  -> ``ValueError`` / ``decimal.InvalidOperation`` propagate.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from timesheet_config.schema import DailyOvertimeRule, PolicyPack
from timesheet_kernel.domain.timesheet_types import Jurisdiction, WeekStart

POLICY_FILE_NAME = "policy.yaml"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file and return its contents as a dict."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level YAML must be a mapping")
    return data


def parse_hours(value: Any) -> Decimal:
    """Parse an hours value from YAML (int, float or string)."""
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse hours from {value!r}")
    return Decimal(str(value))


def parse_jurisdiction(data: dict[str, Any]) -> Jurisdiction:
    state = data.get("state")
    return Jurisdiction(
        region=str(data["region"]),
        state=str(state) if state is not None else None,
    )


def parse_rule(data: dict[str, Any]) -> DailyOvertimeRule:
    """Parse a ``DailyOvertimeRule`` from a dict."""
    return DailyOvertimeRule(
        rule_id=str(data["rule_id"]),
        policy_key=str(data["policy_key"]),
        jurisdiction=parse_jurisdiction(data["jurisdiction"]),
        daily_threshold_hours=parse_hours(data["daily_threshold_hours"]),
        description=str(data.get("description", "")),
    )


def parse_policy_pack(data: dict[str, Any]) -> PolicyPack:
    """Parse a full ``PolicyPack`` (checksum included) from a dict."""
    return PolicyPack(
        config_id=str(data["config_id"]),
        version=int(data["version"]),
        default_week_start=WeekStart(str(data.get("default_week_start", "sunday")).strip().lower()),
        daily_hour_cap=parse_hours(data.get("daily_hour_cap", 12)),
        rules=tuple(parse_rule(r) for r in data.get("rules", ())),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization; identical data, identical hash."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
