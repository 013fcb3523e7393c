from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from skillcanon.core.config import settings
from skillcanon.core.generation_config import load_generation_config

SKILL_VALIDATION = "skill_validation"
SKILL_MERGE = "skill_merge"

_DEFAULT_PROMPTS_DIR = Path(__file__).resolve().parents[1] / "prompts"


def _prompts_dir() -> Path:
    return Path(settings.prompts_dir) if settings.prompts_dir else _DEFAULT_PROMPTS_DIR


@lru_cache(maxsize=8)
def load_prompt(prompt_type: str) -> str:
    """Return the system prompt text configured for a prompt type."""
    filename = load_generation_config().prompt_file(prompt_type)
    if not filename:
        raise ValueError(f"Unknown prompt type '{prompt_type}'")
    path = _prompts_dir() / str(filename)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read prompt '{path}': {exc}") from exc
    if not text.strip():
        raise RuntimeError(f"Prompt file '{path}' is empty")
    return text
