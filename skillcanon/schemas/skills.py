from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SkillValidationRecord(BaseModel):
    original_input: str
    canonical_name: str
    is_valid: bool
    requires_review: bool
    review_reason: str = ""
    clusters: list[int] = Field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "SkillValidationRecord":
        """Build from a record that already passed validate_skill_record."""
        return cls(
            original_input=raw["original_input"],
            canonical_name=raw["canonical_name"],
            is_valid=raw["is_valid"],
            requires_review=raw["requires_review"],
            review_reason=str(raw.get("review_reason") or ""),
            clusters=list(raw.get("clusters") or []),
        )


class SkillRecordRejection(BaseModel):
    index: int
    original_input: str | None = None
    reason: str


def ensure_skill_request(skills: Any) -> list[str]:
    if skills is None or not isinstance(skills, list):
        raise TypeError("Skills must be a list of strings")
    if not skills:
        raise ValueError("Skills list cannot be empty")
    if not all(isinstance(skill, str) for skill in skills):
        raise TypeError("All skills must be strings")
    return list(skills)
