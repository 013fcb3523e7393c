from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
from pathlib import Path

import sentry_sdk

from skillcanon.ai.factory import get_generation_client
from skillcanon.batch import BatchJobRunner, format_report, summarise
from skillcanon.core.config import settings
from skillcanon.export import merge_output_filename, merge_records_to_csv, write_csv
from skillcanon.schemas import JobResult, JobSucceeded, MergeJob
from skillcanon.services.skills_service import build_merge_jobs, group_skills_by_cluster, merge_generator
from skillcanon.storage import get_interaction_store

logger = logging.getLogger("skillcanon.scripts.run_skills_merge")


def _load_rows(path: Path) -> list[dict]:
    with path.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    if not isinstance(raw, list):
        raise SystemExit(f"Expected a JSON array of skill rows in '{path}'")
    return [row for row in raw if isinstance(row, dict)]


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the per-cluster skills merge over a skill export.")
    parser.add_argument("--input", required=True, help="JSON array of {skill_id, canonical_name, cluster_id, is_valid}")
    parser.add_argument("--out-dir", default=settings.export_dir, help="Directory for merge CSV files")
    parser.add_argument("--delay", type=float, default=settings.batch_delay_s, help="Seconds to wait between clusters")
    parser.add_argument("--max-skills", type=int, default=settings.batch_max_skills_per_cluster)
    parser.add_argument("--model", default=None, help="Override GEMINI_MODEL")
    parser.add_argument("--no-thinking", action="store_true", help="Disable thinking mode for the model")
    parser.add_argument(
        "--allow-unknown-ids",
        action="store_true",
        help="Accept answers that mention skill ids the cluster never sent.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(message)s")
    if settings.sentry_dsn:
        sentry_sdk.init(dsn=settings.sentry_dsn)

    jobs = build_merge_jobs(group_skills_by_cluster(_load_rows(Path(args.input))), max_skills=args.max_skills)
    if not jobs:
        print("No clusters with valid skills found.")
        return 0

    client = get_generation_client(model=args.model, thinking_mode=False if args.no_thinking else None)
    store = get_interaction_store() if settings.interactions_enabled else None
    out_dir = Path(args.out_dir)

    stop_requested = False

    def _request_stop(signum, frame):
        nonlocal stop_requested
        _ = frame
        logger.warning("batch_stop_requested signal=%s", signum)
        stop_requested = True

    signal.signal(signal.SIGTERM, _request_stop)

    def _on_result(job: MergeJob, result: JobResult) -> None:
        print(f"  {job.domain} -> {job.cluster}: {result.status.upper()} ({result.elapsed_s:.2f}s)")
        if isinstance(result, JobSucceeded):
            write_csv(out_dir / merge_output_filename(job), merge_records_to_csv(result.records))

    print(f"Processing {len(jobs)} clusters, {sum(len(job.skills) for job in jobs)} skills")
    runner = BatchJobRunner(
        merge_generator(client, store=store),
        delay_s=args.delay,
        reject_unknown_ids=settings.merge_reject_unknown_ids and not args.allow_unknown_ids,
        should_stop=lambda: stop_requested,
        on_result=_on_result,
    )
    report = runner.run(jobs)

    for line in format_report(report, summarise(report)):
        print(line)
    return 130 if report.interrupted else 0


if __name__ == "__main__":
    sys.exit(main())
