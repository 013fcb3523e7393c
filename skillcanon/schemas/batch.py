from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Union

from .merge import MergeOutcomeRecord

JobStatus = Literal["succeeded", "validation_failed", "raised"]


@dataclass(frozen=True, slots=True)
class ValidationResult:
    ok: bool
    reason: str | None = None

    @classmethod
    def passed(cls) -> "ValidationResult":
        return cls(ok=True, reason=None)

    @classmethod
    def failed(cls, reason: str) -> "ValidationResult":
        return cls(ok=False, reason=reason)


@dataclass(frozen=True, slots=True)
class JobSucceeded:
    domain: str
    cluster: str
    skills_count: int
    records: tuple[MergeOutcomeRecord, ...]
    elapsed_s: float = 0.0
    status: JobStatus = "succeeded"


@dataclass(frozen=True, slots=True)
class JobValidationFailed:
    domain: str
    cluster: str
    skills_count: int
    reason: str
    elapsed_s: float = 0.0
    status: JobStatus = "validation_failed"


@dataclass(frozen=True, slots=True)
class JobRaised:
    domain: str
    cluster: str
    skills_count: int
    message: str
    kind: str
    elapsed_s: float = 0.0
    status: JobStatus = "raised"


JobResult = Union[JobSucceeded, JobValidationFailed, JobRaised]


@dataclass(slots=True)
class BatchReport:
    results: list[JobResult] = field(default_factory=list)
    started_at: datetime | None = None
    finished_at: datetime | None = None
    interrupted: bool = False

    def __len__(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> list[JobSucceeded]:
        return [result for result in self.results if isinstance(result, JobSucceeded)]


@dataclass(slots=True)
class BatchSummary:
    succeeded: int = 0
    validation_failed: int = 0
    raised: int = 0
    total_skills: int = 0
    failures_by_reason: list[tuple[str, int]] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return self.succeeded + self.validation_failed + self.raised

    @property
    def failed(self) -> int:
        return self.validation_failed + self.raised

    @property
    def success_rate(self) -> float:
        if not self.attempted:
            return 0.0
        return round(self.succeeded / self.attempted * 100, 1)
