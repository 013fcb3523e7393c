from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    ai_provider: str
    gemini_api_key: str | None
    gemini_model: str
    gemini_timeout_s: float
    gemini_max_retries: int
    gemini_max_output_tokens: int
    gemini_thinking_mode: bool
    batch_delay_s: float
    batch_max_skills_per_cluster: int
    merge_reject_unknown_ids: bool
    interactions_enabled: bool
    interactions_db_path: str
    taxonomy_path: str | None
    prompts_dir: str | None
    export_dir: str
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None


settings = Settings(
    ai_provider=(_get_env("AI_PROVIDER", "gemini") or "gemini").strip().lower(),
    gemini_api_key=_get_env("GEMINI_API_KEY"),
    gemini_model=(_get_env("GEMINI_MODEL", "gemini-2.5-pro") or "gemini-2.5-pro").strip(),
    gemini_timeout_s=_get_env_float("GEMINI_TIMEOUT_S", 120.0),
    gemini_max_retries=_get_env_int("GEMINI_MAX_RETRIES", 2),
    gemini_max_output_tokens=_get_env_int("GEMINI_MAX_OUTPUT_TOKENS", 50_000),
    gemini_thinking_mode=_get_env_bool("GEMINI_THINKING_MODE", True),
    batch_delay_s=max(0.0, _get_env_float("BATCH_DELAY_S", 1.0)),
    batch_max_skills_per_cluster=_get_env_int("BATCH_MAX_SKILLS_PER_CLUSTER", 150),
    merge_reject_unknown_ids=_get_env_bool("MERGE_REJECT_UNKNOWN_IDS", True),
    interactions_enabled=_get_env_bool("INTERACTIONS_ENABLED", True),
    interactions_db_path=_get_env("INTERACTIONS_DB_PATH", "data/interactions.db") or "data/interactions.db",
    taxonomy_path=_get_env("TAXONOMY_PATH"),
    prompts_dir=_get_env("PROMPTS_DIR"),
    export_dir=_get_env("EXPORT_DIR", "data/exports") or "data/exports",
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "10/minute") or "10/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
)

if settings.batch_max_skills_per_cluster < 1:
    raise RuntimeError("BATCH_MAX_SKILLS_PER_CLUSTER must be at least 1.")
