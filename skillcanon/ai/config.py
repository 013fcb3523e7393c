from dataclasses import dataclass

from skillcanon.core.config import settings


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    timeout_s: float
    max_retries: int
    max_output_tokens: int
    thinking_mode: bool


def load_ai_config(*, model: str | None = None, thinking_mode: bool | None = None) -> AIConfig:
    return AIConfig(
        provider=settings.ai_provider,
        model=(model or settings.gemini_model).strip(),
        timeout_s=settings.gemini_timeout_s,
        max_retries=settings.gemini_max_retries,
        max_output_tokens=settings.gemini_max_output_tokens,
        thinking_mode=settings.gemini_thinking_mode if thinking_mode is None else thinking_mode,
    )
