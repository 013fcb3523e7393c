from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from skillcanon.ai.factory import get_generation_client
from skillcanon.core.config import settings
from skillcanon.errors import SkillCanonError
from skillcanon.services.skills_service import validate_skills
from skillcanon.storage import get_interaction_store


def _load_skills(path: Path) -> list:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return [line.strip() for line in text.splitlines() if line.strip()]


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate and canonicalise a list of skill labels.")
    parser.add_argument("--input", required=True, help="JSON array of strings, or a text file with one skill per line")
    parser.add_argument("--model", default=None, help="Override GEMINI_MODEL")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(message)s")

    skills = _load_skills(Path(args.input))
    store = get_interaction_store() if settings.interactions_enabled else None
    try:
        outcome = validate_skills(skills, client=get_generation_client(model=args.model), store=store)
    except SkillCanonError as exc:
        print(f"Skill validation failed: {exc}", file=sys.stderr)
        return 1

    print(json.dumps([record.model_dump() for record in outcome.records], indent=2, ensure_ascii=False))
    if outcome.rejections:
        print(f"{len(outcome.rejections)} record(s) rejected:", file=sys.stderr)
        for rejection in outcome.rejections:
            print(f"  #{rejection.index} {rejection.original_input!r}: {rejection.reason}", file=sys.stderr)
    if outcome.interaction_id is not None:
        print(f"Stored as interaction {outcome.interaction_id}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
