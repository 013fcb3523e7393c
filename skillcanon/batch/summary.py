from __future__ import annotations

from collections import Counter

from skillcanon.schemas import BatchReport, BatchSummary, JobRaised, JobSucceeded, JobValidationFailed

_REASON_PREVIEW_CHARS = 80


def _short(text: str, limit: int = _REASON_PREVIEW_CHARS) -> str:
    return text if len(text) <= limit else f"{text[: limit - 3]}..."


def summarise(report: BatchReport) -> BatchSummary:
    summary = BatchSummary()
    reasons: Counter[str] = Counter()
    for result in report.results:
        summary.total_skills += result.skills_count
        if isinstance(result, JobSucceeded):
            summary.succeeded += 1
        elif isinstance(result, JobValidationFailed):
            summary.validation_failed += 1
            reasons[result.reason] += 1
        else:
            summary.raised += 1
            reasons[result.message] += 1
    summary.failures_by_reason = reasons.most_common()
    return summary


def format_report(report: BatchReport, summary: BatchSummary | None = None, *, top_reasons: int = 5) -> list[str]:
    """Render the post-run summary and error analysis as printable lines."""
    summary = summary or summarise(report)
    lines = ["RESULTS SUMMARY:"]
    lines.append(f"  Successfully processed: {summary.succeeded} clusters")
    lines.append(f"  Validation failures: {summary.validation_failed} clusters")
    lines.append(f"  Exceptions: {summary.raised} clusters")
    lines.append(f"  Total skills processed: {summary.total_skills} skills")
    lines.append(f"  Total clusters attempted: {summary.attempted}")
    if report.started_at and report.finished_at:
        duration = (report.finished_at - report.started_at).total_seconds()
        lines.append(f"  Duration: {duration:.2f} seconds")
    if report.interrupted:
        lines.append("  Run was interrupted before all clusters were processed.")
    if summary.failed:
        lines.append(f"Success Rate: {summary.success_rate}%")

    validation_failures = [r for r in report.results if isinstance(r, JobValidationFailed)]
    exceptions = [r for r in report.results if isinstance(r, JobRaised)]
    if not validation_failures and not exceptions:
        lines.append("No errors occurred.")
        return lines

    if validation_failures:
        lines.append(f"VALIDATION FAILURES ({len(validation_failures)}):")
        for index, failure in enumerate(validation_failures, start=1):
            lines.append(f"{index}. {failure.domain} -> {failure.cluster}")
            lines.append(f"   Reason: {failure.reason}")
            lines.append(f"   Skills: {failure.skills_count}")

    if exceptions:
        lines.append(f"EXCEPTIONS ({len(exceptions)}):")
        for index, failure in enumerate(exceptions, start=1):
            lines.append(f"{index}. {failure.domain} -> {failure.cluster}")
            lines.append(f"   Error: {failure.message}")
            lines.append(f"   Kind: {failure.kind}")
            lines.append(f"   Skills: {failure.skills_count}")

    lines.append("Most common error messages:")
    for message, count in summary.failures_by_reason[:top_reasons]:
        lines.append(f"  {count}x: {_short(message)}")
    return lines
