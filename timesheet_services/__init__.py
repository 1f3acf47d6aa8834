"""
timesheet_services -- orchestration over the pure pipeline engines.

``TimesheetPolicyPipeline`` runs one evaluation end to end from a
``PolicyPack``; ``EvaluationCache`` is an optional, caller-owned memo.
"""

from timesheet_services.evaluation_cache import (
    EvaluationCache,
    EvaluationKey,
    evaluation_key,
)
from timesheet_services.policy_pipeline import (
    DEFAULT_RULE_ID,
    PipelineResult,
    TimesheetPolicyPipeline,
)

__all__ = [
    "DEFAULT_RULE_ID",
    "EvaluationCache",
    "EvaluationKey",
    "PipelineResult",
    "TimesheetPolicyPipeline",
    "evaluation_key",
]
