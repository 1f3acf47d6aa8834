"""
Jurisdiction Engine (``timesheet_engines.jurisdiction``).

Responsibility
--------------
Tenant jurisdiction helpers shared by the alert resolver and the UI:

* ``derive_policy_key`` -- canonical ``US-CA`` / ``US-NY`` / ``US-FLSA`` /
  ``NON-US`` label from region and state codes.
* ``effective_policy_key`` -- label to display (summary, then tenant,
  then derived).
* ``jurisdiction_matches`` -- whether a rule is actionable for a tenant.
* ``resolve_policy_banner`` -- the "Policy active" / "Set State" banner.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O.

Invariants enforced
-------------------
* Region and state comparisons are trimmed and case-insensitive.
* Non-US tenants never get a banner.
"""

from __future__ import annotations

from timesheet_kernel.domain.timesheet_types import (
    BannerSeverity,
    Jurisdiction,
    PolicyBanner,
    PolicyKey,
    TenantContext,
    WeeklySummary,
)

CA_DAILY_DOUBLE_TIME = Jurisdiction(region="US", state="CA")

POLICY_BANNER_STRINGS = {
    "warning_title": "Policy Alert",
    "warning_message": (
        "Your tenant is set to US region, but no state is configured. "
        "Set the state to apply the correct overtime policy."
    ),
    "cta_label": "Set State",
    "cta_target": "/billing",
    "info_title": "Policy",
    "info_message_prefix": "Policy active:",
}

_US_STATE_KEYS = {
    "CA": PolicyKey.US_CA,
    "NY": PolicyKey.US_NY,
}


def _normalize_upper(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().upper()


def derive_policy_key(region: str | None, state: str | None) -> PolicyKey:
    """Canonical policy label for a region/state pair.

    Also understands the legacy ``region="US-CA"`` shape.
    """
    region_code = _normalize_upper(region)
    state_code = _normalize_upper(state)

    if not region_code:
        return PolicyKey.NON_US
    if region_code == "US" and state_code:
        return _US_STATE_KEYS.get(state_code, PolicyKey.US_FLSA)
    if region_code == "US" or region_code.startswith("US-"):
        return _US_STATE_KEYS.get(region_code[3:], PolicyKey.US_FLSA)
    return PolicyKey.NON_US


def effective_policy_key(
    tenant: TenantContext | None,
    summary: WeeklySummary | None = None,
) -> str | None:
    """Label to show for the active policy; the server summary wins."""
    if summary is not None and summary.policy_key and summary.policy_key.strip():
        return summary.policy_key.strip()
    if tenant is None:
        return None
    if tenant.policy_key and tenant.policy_key.strip():
        return tenant.policy_key.strip()
    return derive_policy_key(tenant.region, tenant.state).value


def jurisdiction_matches(
    tenant: TenantContext | None,
    jurisdiction: Jurisdiction = CA_DAILY_DOUBLE_TIME,
) -> bool:
    return jurisdiction.matches(tenant)


def resolve_policy_banner(tenant: TenantContext | None) -> PolicyBanner | None:
    """Banner for US tenants: a warning when no state is set, else the active policy."""
    if tenant is None or tenant.normalized_region != "US":
        return None

    if not tenant.normalized_state:
        return PolicyBanner(
            severity=BannerSeverity.WARNING,
            title=POLICY_BANNER_STRINGS["warning_title"],
            message=POLICY_BANNER_STRINGS["warning_message"],
            cta_label=POLICY_BANNER_STRINGS["cta_label"],
            cta_target=POLICY_BANNER_STRINGS["cta_target"],
        )

    policy_key = effective_policy_key(tenant)
    return PolicyBanner(
        severity=BannerSeverity.INFO,
        title=POLICY_BANNER_STRINGS["info_title"],
        message=f"{POLICY_BANNER_STRINGS['info_message_prefix']} {policy_key}",
    )
