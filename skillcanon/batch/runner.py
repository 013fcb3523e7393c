from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Iterable

from skillcanon.ai.types import ResponseEnvelope
from skillcanon.errors import GenerationTransportError, MalformedContent
from skillcanon.parsing.envelope import extract_text
from skillcanon.parsing.fenced import parse_fenced
from skillcanon.schemas import (
    BatchReport,
    JobRaised,
    JobResult,
    JobSucceeded,
    JobValidationFailed,
    MergeJob,
    MergeOutcomeRecord,
)
from skillcanon.validation import validate_merge_result

logger = logging.getLogger(__name__)

NO_CONTENT_REASON = "No CSV content found in response"

GenerateFn = Callable[[MergeJob], ResponseEnvelope]


class BatchJobRunner:
    """Run merge jobs one at a time and record one JobResult per job.

    A job ends in exactly one of three states: succeeded, validation_failed
    or raised. No failure stops the batch. ``should_stop`` is polled before
    each job and a KeyboardInterrupt ends the run; results recorded so far
    are kept and the report is flagged as interrupted.
    """

    def __init__(
        self,
        generate: GenerateFn,
        *,
        delay_s: float = 0.0,
        reject_unknown_ids: bool = True,
        sleep: Callable[[float], None] = time.sleep,
        should_stop: Callable[[], bool] | None = None,
        on_result: Callable[[MergeJob, JobResult], None] | None = None,
    ) -> None:
        if delay_s < 0:
            raise ValueError("delay_s must not be negative")
        self._generate = generate
        self._delay_s = delay_s
        self._reject_unknown_ids = reject_unknown_ids
        self._sleep = sleep
        self._should_stop = should_stop
        self._on_result = on_result

    def run_job(self, job: MergeJob) -> JobResult:
        started = time.perf_counter()
        common = {"domain": job.domain, "cluster": job.cluster, "skills_count": len(job.skills)}

        def elapsed() -> float:
            return round(time.perf_counter() - started, 3)

        try:
            envelope = self._generate(job)
            text = extract_text(envelope)
            if text is None or not text.strip():
                return JobValidationFailed(reason=NO_CONTENT_REASON, elapsed_s=elapsed(), **common)

            rows = parse_fenced(text, "csv")
            records = tuple(MergeOutcomeRecord.from_row(row) for row in rows)
            verdict = validate_merge_result(job, records, reject_unknown_ids=self._reject_unknown_ids)
            if not verdict.ok:
                return JobValidationFailed(reason=verdict.reason or "validation failed", elapsed_s=elapsed(), **common)
            return JobSucceeded(records=records, elapsed_s=elapsed(), **common)
        except MalformedContent as exc:
            return JobValidationFailed(reason=f"{exc}. CSV content: {exc.preview}", elapsed_s=elapsed(), **common)
        except GenerationTransportError as exc:
            return JobRaised(message=str(exc), kind=exc.kind, elapsed_s=elapsed(), **common)
        except Exception as exc:  # noqa: BLE001 - one failing cluster must not stop the batch
            logger.exception("merge_job_exception domain=%s cluster=%s", job.domain, job.cluster)
            return JobRaised(message=str(exc), kind=type(exc).__name__, elapsed_s=elapsed(), **common)

    def _log_result(self, result: JobResult) -> None:
        if isinstance(result, JobSucceeded):
            logger.info(
                "merge_job_succeeded domain=%s cluster=%s skills=%s elapsed_s=%.2f",
                result.domain,
                result.cluster,
                result.skills_count,
                result.elapsed_s,
            )
        elif isinstance(result, JobValidationFailed):
            logger.warning(
                "merge_job_validation_failed domain=%s cluster=%s reason=%s",
                result.domain,
                result.cluster,
                result.reason,
            )
        else:
            logger.warning(
                "merge_job_raised domain=%s cluster=%s kind=%s message=%s",
                result.domain,
                result.cluster,
                result.kind,
                result.message,
            )

    def run(self, jobs: Iterable[MergeJob]) -> BatchReport:
        job_list = list(jobs)
        report = BatchReport(started_at=datetime.now(timezone.utc))
        try:
            for index, job in enumerate(job_list):
                if self._should_stop is not None and self._should_stop():
                    report.interrupted = True
                    logger.info("batch_stopped completed=%s total=%s", len(report), len(job_list))
                    break

                result = self.run_job(job)
                report.results.append(result)
                self._log_result(result)
                if self._on_result is not None:
                    try:
                        self._on_result(job, result)
                    except Exception:  # noqa: BLE001
                        logger.exception("batch_result_hook_failed domain=%s cluster=%s", job.domain, job.cluster)

                if self._delay_s > 0 and index < len(job_list) - 1:
                    self._sleep(self._delay_s)
        except KeyboardInterrupt:
            report.interrupted = True
            logger.warning("batch_interrupted completed=%s total=%s", len(report), len(job_list))
        report.finished_at = datetime.now(timezone.utc)
        return report
