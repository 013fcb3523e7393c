from skillcanon.ai.config import load_ai_config
from skillcanon.ai.types import GenerationClient

from skillcanon.ai.providers.gemini_provider import GeminiProvider


def get_generation_client(*, model: str | None = None, thinking_mode: bool | None = None) -> GenerationClient:
    cfg = load_ai_config(model=model, thinking_mode=thinking_mode)

    if cfg.provider == "gemini":
        return GeminiProvider(
            model=cfg.model,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            max_output_tokens=cfg.max_output_tokens,
            thinking_mode=cfg.thinking_mode,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
