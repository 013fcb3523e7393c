from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from skillcanon.ai.types import ResponseEnvelope
from skillcanon.core.config import settings
from skillcanon.core.generation_config import load_generation_config
from skillcanon.errors import GenerationTransportError

logger = logging.getLogger(__name__)


class GeminiProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        timeout_s: float = 120.0,
        max_retries: int = 2,
        max_output_tokens: int = 50_000,
        thinking_mode: bool = True,
        temperature: Optional[float] = None,
    ):
        self._model = model
        self._max_output_tokens = max_output_tokens
        self._thinking_mode = thinking_mode
        self._temperature = temperature
        key = (api_key or settings.gemini_api_key or "").strip()
        if not key:
            raise RuntimeError("GEMINI_API_KEY is missing")

        self._client = genai.Client(
            api_key=key,
            http_options=types.HttpOptions(
                timeout=int(timeout_s * 1000),
                retry_options=types.HttpRetryOptions(attempts=max(1, max_retries + 1)),
            ),
        )

    @property
    def model(self) -> str:
        return self._model

    def _generation_config(self, prompt: str) -> types.GenerateContentConfig:
        generation = load_generation_config()
        temperature = self._temperature
        if temperature is None:
            temperature = generation.default_temperature
        thinking_config = None
        if not self._thinking_mode:
            override = generation.tuning(self._model).temp_when_thinking_disabled
            if override is not None:
                temperature = override
            thinking_config = types.ThinkingConfig(thinking_budget=0)

        return types.GenerateContentConfig(
            system_instruction=prompt,
            max_output_tokens=self._max_output_tokens,
            temperature=temperature,
            thinking_config=thinking_config,
        )

    def generate(self, prompt: str, payload: Any) -> ResponseEnvelope:
        contents = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=contents,
                config=self._generation_config(prompt),
            )
        except genai_errors.APIError as exc:
            logger.warning("gemini_api_error model=%s code=%s: %s", self._model, exc.code, exc.message)
            raise GenerationTransportError(
                str(exc.message or exc), kind="api_error", status_code=exc.code
            ) from exc
        except httpx.TimeoutException as exc:
            logger.warning("gemini_timeout model=%s: %s", self._model, exc)
            raise GenerationTransportError(f"Gemini request timed out: {exc}", kind="timeout") from exc
        except httpx.HTTPError as exc:
            logger.warning("gemini_network_error model=%s: %s", self._model, exc)
            raise GenerationTransportError(f"Gemini request failed: {exc}", kind="network") from exc

        return response.model_dump(mode="json", exclude_none=True)
