"""
Policy pack validation.

Checks a parsed ``PolicyPack`` before it is handed to runtime callers.
A pack with errors MUST NOT be returned by ``get_active_config``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal

from timesheet_config.schema import PolicyPack
from timesheet_kernel.domain.coercion import MAX_HOURS


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` is ``True`` only when ``errors`` is empty.  Warnings do
    not block loading but should be reviewed.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_policy_pack(pack: PolicyPack) -> ConfigValidationResult:
    result = ConfigValidationResult()

    _validate_rule_uniqueness(pack, result)
    _validate_thresholds(pack, result)
    _validate_jurisdictions(pack, result)

    if not pack.rules:
        result.add_warning(f"{pack.config_id}: no overtime rules defined")

    return result


def _validate_rule_uniqueness(pack: PolicyPack, result: ConfigValidationResult) -> None:
    for rule_id, count in Counter(pack.rule_ids).items():
        if count > 1:
            result.add_error(f"Duplicate rule_id '{rule_id}' ({count} definitions)")


def _validate_thresholds(pack: PolicyPack, result: ConfigValidationResult) -> None:
    if not pack.daily_hour_cap.is_finite() or pack.daily_hour_cap < Decimal("0"):
        result.add_error(f"daily_hour_cap must be non-negative, got {pack.daily_hour_cap}")

    for rule in pack.rules:
        hours = rule.daily_threshold_hours
        if not hours.is_finite() or hours < Decimal("0"):
            result.add_error(
                f"Rule '{rule.rule_id}': daily_threshold_hours must be non-negative, got {hours}"
            )
        elif hours > MAX_HOURS:
            result.add_error(
                f"Rule '{rule.rule_id}': daily_threshold_hours {hours} exceeds {MAX_HOURS}"
            )
        elif hours > Decimal("24"):
            result.add_warning(
                f"Rule '{rule.rule_id}': daily_threshold_hours {hours} exceeds a calendar day"
            )


def _validate_jurisdictions(pack: PolicyPack, result: ConfigValidationResult) -> None:
    seen: dict[tuple[str, str | None], str] = {}
    for rule in pack.rules:
        region = rule.jurisdiction.region.strip().upper()
        if not region:
            result.add_error(f"Rule '{rule.rule_id}': jurisdiction region is empty")
            continue
        state = rule.jurisdiction.state.strip().upper() if rule.jurisdiction.state else None
        key = (region, state)
        if key in seen:
            result.add_warning(
                f"Rule '{rule.rule_id}' shadows '{seen[key]}' for jurisdiction {region}/{state}"
            )
        else:
            seen[key] = rule.rule_id
