from __future__ import annotations

from typing import Any, Iterable

from skillcanon.schemas import SkillRecordRejection, SkillValidationRecord, ValidationResult
from skillcanon.taxonomy import TaxonomyProvider


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _check_clusters(record: dict[str, Any], taxonomy: TaxonomyProvider) -> str | None:
    clusters = record.get("clusters")
    if clusters is None:
        return None
    if not isinstance(clusters, list):
        return "clusters must be a list of integers"
    # bool is an int subclass; true/false are not cluster ids.
    if any(isinstance(item, bool) or not isinstance(item, int) for item in clusters):
        return "clusters must contain integers only"
    unknown = [item for item in clusters if not taxonomy.has_cluster(item)]
    if unknown:
        return f"Invalid cluster ID(s): {', '.join(str(item) for item in unknown)}"
    if len(set(clusters)) != len(clusters):
        return "clusters must be unique"
    if clusters != sorted(clusters):
        return "clusters must be in ascending order"
    if clusters and record.get("is_valid") is False:
        return "clusters must be empty when is_valid is false"
    return None


def validate_skill_record(record: Any, taxonomy: TaxonomyProvider) -> ValidationResult:
    if not isinstance(record, dict):
        return ValidationResult.failed("record is not a JSON object")
    for key in ("original_input", "canonical_name"):
        if not _non_empty_string(record.get(key)):
            return ValidationResult.failed(f"{key} must be a non-empty string")
    for key in ("is_valid", "requires_review"):
        if not isinstance(record.get(key), bool):
            return ValidationResult.failed(f"{key} must be a boolean")
    review_reason = record.get("review_reason")
    if review_reason is not None and not isinstance(review_reason, str):
        return ValidationResult.failed("review_reason must be a string")
    cluster_error = _check_clusters(record, taxonomy)
    if cluster_error:
        return ValidationResult.failed(cluster_error)
    return ValidationResult.passed()


def partition_skill_records(
    records: Iterable[Any],
    taxonomy: TaxonomyProvider,
) -> tuple[list[SkillValidationRecord], list[SkillRecordRejection]]:
    """Split parsed records into accepted models and per-record rejections."""
    accepted: list[SkillValidationRecord] = []
    rejected: list[SkillRecordRejection] = []
    for index, record in enumerate(records):
        result = validate_skill_record(record, taxonomy)
        if result.ok:
            accepted.append(SkillValidationRecord.from_raw(record))
            continue
        original = record.get("original_input") if isinstance(record, dict) else None
        rejected.append(
            SkillRecordRejection(
                index=index,
                original_input=original if isinstance(original, str) else None,
                reason=result.reason or "invalid record",
            )
        )
    return accepted, rejected
