from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from skillcanon.ai.factory import get_generation_client
from skillcanon.core.config import settings
from skillcanon.core.rate_limit import rate_limit
from skillcanon.core.security import require_api_key
from skillcanon.errors import GenerationTransportError, MalformedContent
from skillcanon.export import enrich
from skillcanon.schemas import JobSucceeded, JobValidationFailed, MergeReconcileRequest
from skillcanon.services.skills_service import reconcile_merge_answer, validate_skills
from skillcanon.storage import get_interaction_store
from skillcanon.taxonomy import get_default_taxonomy

logger = logging.getLogger(__name__)

router = APIRouter()


class SkillValidationRequest(BaseModel):
    skills: list[str] = Field(min_length=1, max_length=500)


@router.post("/skills/validate")
@rate_limit()
def skills_validate(
    request: Request,
    payload: SkillValidationRequest,
    _: None = Depends(require_api_key),
):
    taxonomy = get_default_taxonomy()
    try:
        client = get_generation_client()
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    try:
        outcome = validate_skills(
            payload.skills,
            client=client,
            taxonomy=taxonomy,
            store=get_interaction_store() if settings.interactions_enabled else None,
        )
    except GenerationTransportError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"message": str(exc), "kind": exc.kind},
        ) from exc
    except MalformedContent as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "preview": exc.preview},
        ) from exc

    rows = enrich(outcome.records, taxonomy)
    return {
        "content_found": outcome.content_found,
        "interaction_id": outcome.interaction_id,
        "records": [record.model_dump() for record in outcome.records],
        "rows": [
            {
                "original_input": row.original_input,
                "canonical_name": row.canonical_name,
                "cluster_names": row.cluster_names,
                "domain_ids": row.domain_ids,
                "domain_names": row.domain_names,
            }
            for row in rows
        ],
        "rejections": [rejection.model_dump() for rejection in outcome.rejections],
    }


@router.post("/merge/reconcile")
def merge_reconcile(payload: MergeReconcileRequest, _: None = Depends(require_api_key)):
    result = reconcile_merge_answer(
        payload.job,
        payload.answer_text,
        reject_unknown_ids=settings.merge_reject_unknown_ids,
    )
    body = {"status": result.status, "domain": result.domain, "cluster": result.cluster}
    if isinstance(result, JobSucceeded):
        body["records"] = [record.model_dump() | {"outcome": record.outcome_label} for record in result.records]
    elif isinstance(result, JobValidationFailed):
        body["reason"] = result.reason
    else:
        logger.warning("merge_reconcile_raised kind=%s message=%s", result.kind, result.message)
        body["reason"] = result.message
    return body
