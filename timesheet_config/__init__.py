"""
timesheet_config -- single public entrypoint for overtime policy configuration.

Responsibility:
    Provides the ONLY way to obtain policy configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``PolicyPack``: jurisdiction
    rules, daily thresholds, the default week start and the daily hour cap.

Architecture position:
    Configuration -- YAML-driven, validated before use.
    This package sits above ``timesheet_kernel`` and beside
    ``timesheet_engines``.  Engines MUST NEVER import from
    ``timesheet_config``; the services layer reads the pack and passes
    plain values (threshold, jurisdiction, cap) into the engines.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Validation before use: a pack with validation errors is never returned.
    - Deterministic checksum: same YAML content, same ``PolicyPack.checksum``.

Failure modes:
    - ``PolicyConfigNotFoundError`` -- the requested set or its policy file
      does not exist.
    - ``InvalidPolicyConfigError`` -- malformed YAML, missing keys, bad
      values, or validator errors.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``TIMESHEET_CONFIG_TRACE`` log entry with config_id, version, checksum
    and rule count, tying each advisory alert to the configuration that
    produced it.
"""

from __future__ import annotations

from decimal import InvalidOperation
from pathlib import Path

import yaml

from timesheet_config.loader import POLICY_FILE_NAME, load_yaml_file, parse_policy_pack
from timesheet_config.schema import DailyOvertimeRule, PolicyPack
from timesheet_config.validator import ConfigValidationResult, validate_policy_pack
from timesheet_kernel.exceptions import InvalidPolicyConfigError, PolicyConfigNotFoundError
from timesheet_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

__all__ = [
    "ConfigValidationResult",
    "DailyOvertimeRule",
    "PolicyPack",
    "get_active_config",
]


def get_active_config(
    config_set: str = "default",
    config_dir: Path | None = None,
) -> PolicyPack:
    """The ONLY public configuration entrypoint.

    Non-goals:
        - This function does NOT cache packs across calls; callers hold
          the returned pack for as long as they need it.

    Args:
        config_set: Name of the subdirectory under the sets directory.
        config_dir: Override path to configuration sets directory.
            Defaults to timesheet_config/sets/.

    Raises:
        PolicyConfigNotFoundError: If the set directory or policy file is missing.
        InvalidPolicyConfigError: If the file cannot be parsed or fails validation.
    """
    sets_dir = Path(config_dir) if config_dir is not None else _DEFAULT_CONFIG_DIR
    policy_file = sets_dir / config_set / POLICY_FILE_NAME
    if not policy_file.is_file():
        raise PolicyConfigNotFoundError(config_set, policy_file)

    try:
        pack = parse_policy_pack(load_yaml_file(policy_file))
    except (yaml.YAMLError, KeyError, TypeError, ValueError, InvalidOperation) as exc:
        raise InvalidPolicyConfigError(config_set, [f"{type(exc).__name__}: {exc}"]) from exc

    validation = validate_policy_pack(pack)
    for warning in validation.warnings:
        _logger.warning("policy_config_warning", extra={
            "config_set": config_set, "warning": warning,
        })
    if not validation.is_valid:
        raise InvalidPolicyConfigError(config_set, validation.errors)

    _logger.info(
        "TIMESHEET_CONFIG_TRACE",
        extra={
            "trace_type": "TIMESHEET_CONFIG_TRACE",
            "config_set_id": pack.config_id,
            "config_set_version": pack.version,
            "checksum": pack.checksum,
            "default_week_start": pack.default_week_start.value,
            "rule_count": len(pack.rules),
        },
    )

    return pack
