from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from skillcanon.core.config import settings
from skillcanon.export import enrich, skills_to_csv, write_csv
from skillcanon.storage import InteractionStore, historical_results, interaction_results, validation_statistics
from skillcanon.taxonomy import get_default_taxonomy
from skillcanon.validation import partition_skill_records

logger = logging.getLogger("skillcanon.scripts.export_skills_csv")


def _results_from_file(path: Path) -> list:
    with path.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    return raw if isinstance(raw, list) else [raw]


def _results_from_store(count: int | None) -> list:
    store = InteractionStore()
    try:
        if count is None:
            return historical_results(store)
        results: list = []
        for interaction in store.latest(count):
            results.extend(interaction_results(interaction))
        return results
    finally:
        store.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Export skill validation results as an enriched CSV.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="JSON file with skill validation records")
    source.add_argument("--latest", type=int, help="Combine the N most recent stored interactions")
    source.add_argument("--all", action="store_true", help="Use every successful stored interaction")
    parser.add_argument("--out", default=None, help="Output CSV path")
    parser.add_argument("--stats", action="store_true", help="Print validation statistics")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(message)s")

    results = _results_from_file(Path(args.input)) if args.input else _results_from_store(None if args.all else args.latest)
    if not results:
        print("No skill validation results found.")
        return 1

    taxonomy = get_default_taxonomy()
    accepted, rejected = partition_skill_records(results, taxonomy)
    for rejection in rejected:
        logger.warning("export_record_skipped index=%s reason=%s", rejection.index, rejection.reason)

    out = args.out or str(
        Path(settings.export_dir) / f"skills_validation_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    )
    path = write_csv(out, skills_to_csv(enrich(accepted, taxonomy)))
    print(f"Exported {len(accepted)} records to {path} ({len(rejected)} skipped)")

    if args.stats:
        print(json.dumps(validation_statistics(results), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
