from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

GENERATION_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "generation.yaml"


@dataclass(frozen=True)
class ModelTuning:
    temp_when_thinking_disabled: float | None = None


@dataclass(frozen=True)
class GenerationConfig:
    """Typed view of config/generation.yaml."""

    default_temperature: float = 0.1
    prompts: Mapping[str, str] = field(default_factory=dict)
    models: Mapping[str, ModelTuning] = field(default_factory=dict)

    def prompt_file(self, prompt_type: str) -> str | None:
        return self.prompts.get(prompt_type)

    def tuning(self, model: str) -> ModelTuning:
        return self.models.get(model) or ModelTuning()


def _section(raw: dict[str, Any], name: str, path: Path) -> dict[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise RuntimeError(f"Invalid generation config '{path}': '{name}' must be a mapping.")
    return value


def parse_generation_config(raw: Any, path: Path = GENERATION_CONFIG_PATH) -> GenerationConfig:
    if not isinstance(raw, dict):
        raise RuntimeError(f"Invalid generation config '{path}': expected a top-level mapping.")
    defaults = _section(raw, "defaults", path)
    models: dict[str, ModelTuning] = {}
    for model, tuning in _section(raw, "models", path).items():
        tuning = tuning or {}
        if not isinstance(tuning, dict):
            raise RuntimeError(f"Invalid generation config '{path}': model '{model}' must be a mapping.")
        override = tuning.get("temp_when_thinking_disabled")
        models[str(model)] = ModelTuning(None if override is None else float(override))
    return GenerationConfig(
        default_temperature=float(defaults.get("temperature", 0.1)),
        prompts=MappingProxyType({str(k): str(v) for k, v in _section(raw, "prompts", path).items()}),
        models=MappingProxyType(models),
    )


@lru_cache(maxsize=1)
def load_generation_config(path: Path = GENERATION_CONFIG_PATH) -> GenerationConfig:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RuntimeError(f"Failed to read generation config '{path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in generation config '{path}': {exc}") from exc
    return parse_generation_config(raw, path)
