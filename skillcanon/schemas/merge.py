from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

OUTCOME_KEEP = 1
OUTCOME_MERGE = 2
OUTCOME_UNCERTAIN = 3

_OUTCOME_DESCRIPTIONS = {
    OUTCOME_KEEP: "Keep as canonical",
    OUTCOME_MERGE: "Merge with another skill",
    OUTCOME_UNCERTAIN: "Uncertain - needs review",
}

MERGE_CSV_HEADER = ("skill_id", "outcome_id", "merge_with_skill_id", "reason")


def outcome_description(outcome_id: int) -> str:
    return _OUTCOME_DESCRIPTIONS.get(outcome_id, "Unknown outcome")


def _to_int(value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


class MergeSkill(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill_id: str
    skill_name: str

    @field_validator("skill_id", mode="before")
    @classmethod
    def _coerce_skill_id(cls, value: Any) -> str:
        text = str(value).strip() if value is not None else ""
        if not text:
            raise ValueError("skill_id must not be blank")
        return text


class MergeJob(BaseModel):
    """One unit of merge work: the valid skills of a single domain/cluster pair."""

    model_config = ConfigDict(frozen=True)

    domain: str
    cluster: str
    skills: tuple[MergeSkill, ...]
    domain_id: int | None = None
    cluster_id: int | None = None

    @model_validator(mode="after")
    def _validate_skill_ids(self) -> "MergeJob":
        if not self.skills:
            raise ValueError("Merge job must contain at least one skill")
        ids = [skill.skill_id for skill in self.skills]
        if len(set(ids)) != len(ids):
            raise ValueError("skill_id values must be unique within a merge job")
        return self

    @property
    def skill_ids(self) -> list[str]:
        return [skill.skill_id for skill in self.skills]

    def prompt_payload(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "sub_domain": self.cluster,
            "skills": [{"skill_id": skill.skill_id, "skill_name": skill.skill_name} for skill in self.skills],
        }


class MergeOutcomeRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill_id: str
    outcome_id: int = 0
    merge_with_skill_id: str = ""
    reason: str = ""

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "MergeOutcomeRecord":
        return cls(
            skill_id=str(row.get("skill_id") or "").strip(),
            outcome_id=_to_int(row.get("outcome_id")),
            merge_with_skill_id=str(row.get("merge_with_skill_id") or ""),
            reason=str(row.get("reason") or ""),
        )

    @property
    def merge_target(self) -> str | None:
        target = self.merge_with_skill_id.strip()
        return target or None

    @property
    def outcome_label(self) -> str:
        return outcome_description(self.outcome_id)

    def as_csv_row(self) -> list[str]:
        return [self.skill_id, str(self.outcome_id), self.merge_with_skill_id.strip(), self.reason]


class MergeReconcileRequest(BaseModel):
    job: MergeJob
    answer_text: str = Field(default="", max_length=500_000)
