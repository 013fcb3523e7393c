from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from skillcanon.ai.prompts import SKILL_MERGE, SKILL_VALIDATION, load_prompt
from skillcanon.ai.types import GenerationClient, ResponseEnvelope
from skillcanon.batch.runner import BatchJobRunner, GenerateFn
from skillcanon.parsing.envelope import extract_text
from skillcanon.parsing.fenced import parse_fenced
from skillcanon.schemas import (
    JobResult,
    MergeJob,
    MergeSkill,
    SkillRecordRejection,
    SkillValidationRecord,
    ensure_skill_request,
)
from skillcanon.storage.interactions import InteractionStore, record_safely
from skillcanon.taxonomy import TaxonomyProvider, get_default_taxonomy
from skillcanon.validation import partition_skill_records

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SkillValidationOutcome:
    records: list[SkillValidationRecord] = field(default_factory=list)
    rejections: list[SkillRecordRejection] = field(default_factory=list)
    interaction_id: int | None = None
    content_found: bool = True


def validate_skills(
    skills: Any,
    *,
    client: GenerationClient,
    taxonomy: TaxonomyProvider | None = None,
    store: InteractionStore | None = None,
    prompt: str | None = None,
) -> SkillValidationOutcome:
    """Canonicalise a batch of free-text skill labels.

    Raises TypeError/ValueError for a malformed request, GenerationTransportError
    when the call fails and MalformedContent when the answer is not valid JSON.
    Individual records that fail validation are returned as rejections.
    """
    request = ensure_skill_request(skills)
    taxonomy = taxonomy or get_default_taxonomy()
    envelope = client.generate(prompt or load_prompt(SKILL_VALIDATION), request)
    interaction_id = record_safely(store, request, envelope)

    text = extract_text(envelope)
    if text is None:
        logger.info("skill_validation_no_content skills=%s", len(request))
        return SkillValidationOutcome(interaction_id=interaction_id, content_found=False)

    accepted, rejected = partition_skill_records(parse_fenced(text, "json"), taxonomy)
    for rejection in rejected:
        logger.warning(
            "skill_record_rejected index=%s input=%r reason=%s",
            rejection.index,
            rejection.original_input,
            rejection.reason,
        )
    if len(accepted) + len(rejected) != len(request):
        logger.warning("skill_validation_count_mismatch sent=%s received=%s", len(request), len(accepted) + len(rejected))
    return SkillValidationOutcome(records=accepted, rejections=rejected, interaction_id=interaction_id)


def merge_generator(
    client: GenerationClient,
    *,
    store: InteractionStore | None = None,
    prompt: str | None = None,
) -> GenerateFn:
    system_prompt = prompt or load_prompt(SKILL_MERGE)

    def generate(job: MergeJob) -> ResponseEnvelope:
        payload = job.prompt_payload()
        envelope = client.generate(system_prompt, payload)
        record_safely(store, payload, envelope)
        return envelope

    return generate


def _answer_envelope(answer_text: str) -> ResponseEnvelope:
    return {"candidates": [{"content": {"parts": [{"text": answer_text}]}}]}


def reconcile_merge_answer(job: MergeJob, answer_text: str, *, reject_unknown_ids: bool = True) -> JobResult:
    """Check an already produced merge answer against its job without calling the model."""
    runner = BatchJobRunner(lambda _job: _answer_envelope(answer_text), reject_unknown_ids=reject_unknown_ids)
    return runner.run_job(job)


def group_skills_by_cluster(rows: Iterable[Mapping[str, Any]]) -> dict[int, list[MergeSkill]]:
    """Group flat skill rows (skill_id, canonical_name or skill_name, cluster_id) by cluster.

    Rows explicitly marked ``is_valid: false`` are left out.
    """
    grouped: dict[int, list[MergeSkill]] = defaultdict(list)
    for row in rows:
        if row.get("is_valid") is False:
            continue
        name = row.get("canonical_name") or row.get("skill_name")
        if row.get("cluster_id") is None or row.get("skill_id") is None or not name:
            logger.warning("skill_row_skipped row=%s", dict(row))
            continue
        grouped[int(row["cluster_id"])].append(MergeSkill(skill_id=row["skill_id"], skill_name=str(name)))
    return dict(grouped)


def build_merge_jobs(
    skills_by_cluster: Mapping[int, Sequence[MergeSkill]],
    *,
    taxonomy: TaxonomyProvider | None = None,
    max_skills: int = 150,
) -> list[MergeJob]:
    """Build one merge job per (domain, cluster) in taxonomy order, skipping empty clusters."""
    taxonomy = taxonomy or get_default_taxonomy()
    jobs: list[MergeJob] = []
    for domain in taxonomy.domains():
        for cluster_id, cluster_name in domain.clusters.items():
            skills = list(skills_by_cluster.get(cluster_id) or [])
            if not skills:
                logger.debug("merge_cluster_skipped cluster_id=%s reason=no_valid_skills", cluster_id)
                continue
            unique: dict[str, MergeSkill] = {}
            for skill in skills:
                unique.setdefault(skill.skill_id, skill)
            jobs.append(
                MergeJob(
                    domain=domain.domain_name,
                    cluster=cluster_name,
                    skills=tuple(unique.values())[:max_skills],
                    domain_id=domain.domain_id,
                    cluster_id=cluster_id,
                )
            )
    unknown = sorted(set(skills_by_cluster) - _known_cluster_ids(taxonomy))
    if unknown:
        logger.warning("merge_clusters_unknown cluster_ids=%s", unknown)
    return jobs


def _known_cluster_ids(taxonomy: TaxonomyProvider) -> set[int]:
    return {cluster_id for domain in taxonomy.domains() for cluster_id in domain.clusters}
