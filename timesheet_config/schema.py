"""
Policy pack schema.

Defines the human-authored, reviewable configuration for the overtime
advisory pipeline.  YAML files are parsed into these types by the
loader, checked by the validator, and returned by ``get_active_config``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from timesheet_kernel.domain.timesheet_types import Jurisdiction, TenantContext, WeekStart
from timesheet_kernel.exceptions import UnknownJurisdictionRuleError

# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DailyOvertimeRule:
    """A jurisdiction's daily hours threshold (e.g. CA double time after 12h)."""

    rule_id: str
    policy_key: str
    jurisdiction: Jurisdiction
    daily_threshold_hours: Decimal
    description: str = ""


# ---------------------------------------------------------------------------
# Pack
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PolicyPack:
    """Validated runtime configuration for one configuration set."""

    config_id: str
    version: int
    default_week_start: WeekStart
    daily_hour_cap: Decimal
    rules: tuple[DailyOvertimeRule, ...]
    checksum: str = ""

    @property
    def rule_ids(self) -> tuple[str, ...]:
        return tuple(rule.rule_id for rule in self.rules)

    def rule(self, rule_id: str) -> DailyOvertimeRule:
        for rule in self.rules:
            if rule.rule_id == rule_id:
                return rule
        raise UnknownJurisdictionRuleError(rule_id, self.rule_ids)

    def rule_for(self, tenant: TenantContext | None) -> DailyOvertimeRule | None:
        """First rule whose jurisdiction covers the tenant, if any."""
        for rule in self.rules:
            if rule.jurisdiction.matches(tenant):
                return rule
        return None
