"""
Typed Exception Hierarchy for the Timesheet Policy Kernel.

===============================================================================
SCOPE
===============================================================================

The evaluation pipeline is a pure computation layer. Business outcomes
(record not visible, alert suppressed, jurisdiction mismatch, malformed
hours) are ordinary return values and are NEVER raised.

Exceptions exist only for programming and configuration errors:
  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    TimesheetPolicyError (base)
    |
    +-- ConfigurationError
    |   +-- PolicyConfigNotFoundError
    |   +-- InvalidPolicyConfigError
    |   +-- UnknownJurisdictionRuleError
    |
    +-- InvalidThresholdError (also a ValueError)

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Config          | POLICY_CONFIG_NOT_FOUND     | Config set directory / file missing
                | INVALID_POLICY_CONFIG       | YAML content fails validation
                | UNKNOWN_JURISDICTION_RULE   | Rule id not present in the pack
----------------|-----------------------------|-----------------------------------------
Engine          | INVALID_THRESHOLD           | Negative or non-finite hour threshold

===============================================================================
HANDLING PATTERN
===============================================================================

    try:
        pack = get_active_config("default")
    except PolicyConfigNotFoundError as e:
        log.error("missing policy pack", extra={"config_set": e.config_set})
    except InvalidPolicyConfigError as e:
        log.error("bad policy pack", extra={"errors": e.errors})
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path


class TimesheetPolicyError(Exception):
    """
    Base exception for all timesheet policy errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "TIMESHEET_POLICY_ERROR"


# Configuration exceptions


class ConfigurationError(TimesheetPolicyError):
    """Base exception for policy configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class PolicyConfigNotFoundError(ConfigurationError):
    """No configuration set exists at the expected location."""

    code: str = "POLICY_CONFIG_NOT_FOUND"

    def __init__(self, config_set: str, path: Path):
        self.config_set = config_set
        self.path = str(path)
        super().__init__(
            f"Policy configuration set '{config_set}' not found at {path}"
        )


class InvalidPolicyConfigError(ConfigurationError):
    """Configuration content failed validation."""

    code: str = "INVALID_POLICY_CONFIG"

    def __init__(self, config_set: str, errors: list[str]):
        self.config_set = config_set
        self.errors = list(errors)
        super().__init__(
            f"Policy configuration set '{config_set}' is invalid:\n"
            + "\n".join(f"  - {e}" for e in self.errors)
        )


class UnknownJurisdictionRuleError(ConfigurationError):
    """Requested rule id is not defined in the active pack."""

    code: str = "UNKNOWN_JURISDICTION_RULE"

    def __init__(self, rule_id: str, available: tuple[str, ...] = ()):
        self.rule_id = rule_id
        self.available = available
        super().__init__(
            f"Unknown jurisdiction rule '{rule_id}'"
            + (f" (available: {', '.join(available)})" if available else "")
        )


# Engine argument exceptions


class InvalidThresholdError(TimesheetPolicyError, ValueError):
    """Hour threshold is negative, out of range or not a finite number."""

    code: str = "INVALID_THRESHOLD"

    def __init__(self, threshold: Decimal | float | int | str):
        self.threshold = str(threshold)
        super().__init__(
            f"Hour threshold must be a finite number between 0 and 1000000, got {threshold!r}"
        )
