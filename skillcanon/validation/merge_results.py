from __future__ import annotations

import logging
from typing import Sequence

from skillcanon.schemas import MergeJob, MergeOutcomeRecord, ValidationResult

logger = logging.getLogger(__name__)

BLANK_ID_LABEL = "<blank>"


def _join(ids: Sequence[str]) -> str:
    return ", ".join(skill_id or BLANK_ID_LABEL for skill_id in ids)


def _missing_reason(input_ids: list[str], output_ids: list[str]) -> str | None:
    present = set(output_ids)
    missing = [skill_id for skill_id in input_ids if skill_id not in present]
    if not missing:
        return None
    return (
        f"Missing skills in output: {_join(missing)} "
        f"(Expected: {_join(input_ids)}, Got: {_join(output_ids)})"
    )


def _invalid_target_reason(input_ids: list[str], records: Sequence[MergeOutcomeRecord]) -> str | None:
    valid = set(input_ids)
    violations: list[tuple[str, str]] = []
    for record in records:
        target = record.merge_target
        if target is None:
            continue
        if target not in valid:
            violations.append((record.skill_id, target))
    if not violations:
        return None
    details = ", ".join(f"Skill {skill_id} -> '{target}'" for skill_id, target in violations)
    return f"Invalid merge targets found: {details}. Valid targets are: {_join(input_ids)}"


def _unknown_ids_reason(input_ids: list[str], output_ids: list[str]) -> str | None:
    valid = set(input_ids)
    unknown: list[str] = []
    for skill_id in output_ids:
        if skill_id not in valid and skill_id not in unknown:
            unknown.append(skill_id)
    if not unknown:
        return None
    return f"Unknown skills in output: {_join(unknown)} (Expected only: {_join(input_ids)})"


def validate_merge_result(
    job: MergeJob,
    records: Sequence[MergeOutcomeRecord],
    *,
    reject_unknown_ids: bool = True,
) -> ValidationResult:
    """Reconcile a parsed merge answer against the job that produced it.

    Every skill id of the job must appear in the answer, and every non-blank
    merge target must be one of the job's own skill ids. All violations are
    collected into a single reason. With ``reject_unknown_ids`` the answer
    may not introduce skill ids the job never sent.
    """
    input_ids = job.skill_ids
    output_ids = [record.skill_id for record in records]

    reasons = [
        _missing_reason(input_ids, output_ids),
        _invalid_target_reason(input_ids, records),
    ]
    if reject_unknown_ids:
        reasons.append(_unknown_ids_reason(input_ids, output_ids))

    failures = [reason for reason in reasons if reason]
    if not failures:
        return ValidationResult.passed()

    reason = "; ".join(failures)
    logger.debug("merge_result_invalid domain=%s cluster=%s reason=%s", job.domain, job.cluster, reason)
    return ValidationResult.failed(reason)
