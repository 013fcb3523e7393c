from .batch import (
    BatchReport,
    BatchSummary,
    JobRaised,
    JobResult,
    JobSucceeded,
    JobValidationFailed,
    ValidationResult,
)
from .merge import (
    MERGE_CSV_HEADER,
    MergeJob,
    MergeOutcomeRecord,
    MergeReconcileRequest,
    MergeSkill,
    outcome_description,
)
from .skills import SkillRecordRejection, SkillValidationRecord, ensure_skill_request

__all__ = [
    "BatchReport",
    "BatchSummary",
    "JobRaised",
    "JobResult",
    "JobSucceeded",
    "JobValidationFailed",
    "ValidationResult",
    "MERGE_CSV_HEADER",
    "MergeJob",
    "MergeOutcomeRecord",
    "MergeReconcileRequest",
    "MergeSkill",
    "outcome_description",
    "SkillRecordRejection",
    "SkillValidationRecord",
    "ensure_skill_request",
]
