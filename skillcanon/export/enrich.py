from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from skillcanon.schemas import SkillValidationRecord
from skillcanon.taxonomy import TaxonomyProvider

SKILL_CSV_HEADER = (
    "Original Input",
    "Canonical Name",
    "Is Valid",
    "Requires Review",
    "Review Reason",
    "Clusters",
    "Cluster Names",
    "Domain IDs",
    "Domain Names",
)

MULTI_VALUE_SEPARATOR = "; "


def _join(values: Iterable[object]) -> str:
    return MULTI_VALUE_SEPARATOR.join(str(value) for value in values)


@dataclass(slots=True)
class EnrichedSkillRow:
    original_input: str
    canonical_name: str
    is_valid: bool
    requires_review: bool
    review_reason: str
    clusters: list[int] = field(default_factory=list)
    cluster_names: list[str] = field(default_factory=list)
    domain_ids: list[int] = field(default_factory=list)
    domain_names: list[str] = field(default_factory=list)

    def as_csv_row(self) -> list[str]:
        return [
            self.original_input,
            self.canonical_name,
            str(self.is_valid).lower(),
            str(self.requires_review).lower(),
            self.review_reason,
            _join(self.clusters),
            _join(self.cluster_names),
            _join(self.domain_ids),
            _join(self.domain_names),
        ]


def enrich_record(record: SkillValidationRecord, taxonomy: TaxonomyProvider) -> EnrichedSkillRow:
    row = EnrichedSkillRow(
        original_input=record.original_input,
        canonical_name=record.canonical_name,
        is_valid=record.is_valid,
        requires_review=record.requires_review,
        review_reason=record.review_reason,
        clusters=list(record.clusters),
    )
    for cluster_id in record.clusters:
        info = taxonomy.cluster(cluster_id)
        if info is None:
            continue
        row.cluster_names.append(info.cluster_name)
        if info.domain_id not in row.domain_ids:
            row.domain_ids.append(info.domain_id)
        if info.domain_name not in row.domain_names:
            row.domain_names.append(info.domain_name)
    return row


def enrich(records: Iterable[SkillValidationRecord], taxonomy: TaxonomyProvider) -> list[EnrichedSkillRow]:
    """Denormalise validation records against the taxonomy for export."""
    return [enrich_record(record, taxonomy) for record in records]
