from __future__ import annotations

from typing import Any, Callable, Mapping

TextStrategy = Callable[[Any], "str | None"]


def _first(value: Any) -> Any:
    if isinstance(value, (list, tuple)) and value:
        return value[0]
    return None


def _candidate_text(candidate: Any) -> str | None:
    if not isinstance(candidate, Mapping):
        return None
    content = candidate.get("content")
    if not isinstance(content, Mapping):
        return None
    part = _first(content.get("parts"))
    if not isinstance(part, Mapping):
        return None
    text = part.get("text")
    if text is None:
        return None
    return str(text)


def _from_data_candidates(envelope: Any) -> str | None:
    if not isinstance(envelope, Mapping):
        return None
    data = envelope.get("data")
    if not isinstance(data, Mapping):
        return None
    return _candidate_text(_first(data.get("candidates")))


def _from_candidates(envelope: Any) -> str | None:
    if not isinstance(envelope, Mapping):
        return None
    return _candidate_text(_first(envelope.get("candidates")))


def _from_bare_candidate(envelope: Any) -> str | None:
    return _candidate_text(envelope)


# Tried in order; add new envelope shapes by appending a strategy.
TEXT_STRATEGIES: tuple[TextStrategy, ...] = (
    _from_data_candidates,
    _from_candidates,
    _from_bare_candidate,
)


def extract_text(envelope: Any, strategies: tuple[TextStrategy, ...] = TEXT_STRATEGIES) -> str | None:
    """Return the generated text payload of a response envelope, or None when absent."""
    for strategy in strategies:
        text = strategy(envelope)
        if text is not None:
            return text
    return None
