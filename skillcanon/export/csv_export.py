from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Iterable, Sequence

from skillcanon.schemas import MERGE_CSV_HEADER, MergeJob, MergeOutcomeRecord

from .enrich import SKILL_CSV_HEADER, EnrichedSkillRow

logger = logging.getLogger(__name__)


def _to_csv(header: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def skills_to_csv(rows: Iterable[EnrichedSkillRow]) -> str:
    return _to_csv(SKILL_CSV_HEADER, (row.as_csv_row() for row in rows))


def merge_records_to_csv(records: Iterable[MergeOutcomeRecord]) -> str:
    return _to_csv(MERGE_CSV_HEADER, (record.as_csv_row() for record in records))


def merge_output_filename(job: MergeJob) -> str:
    if job.domain_id is not None and job.cluster_id is not None:
        return f"skills_details_domain_{job.domain_id}_cluster_{job.cluster_id}.csv"
    slug = "".join(ch if ch.isalnum() else "_" for ch in f"{job.domain}_{job.cluster}".lower())
    return f"skills_details_{slug.strip('_')}.csv"


def write_csv(path: str | Path, text: str) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text, encoding="utf-8")
    logger.info("csv_written path=%s bytes=%s", out_path, len(text.encode("utf-8")))
    return out_path
