from __future__ import annotations

PREVIEW_MAX_CHARS = 200


def truncate_preview(text: str | None, max_chars: int = PREVIEW_MAX_CHARS) -> str:
    value = text or ""
    if len(value) <= max_chars:
        return value
    return f"{value[: max_chars - 3]}..."


class SkillCanonError(RuntimeError):
    """Base class for data and transport problems caught at the job boundary."""


class MalformedContent(SkillCanonError):
    def __init__(self, message: str, *, preview: str = ""):
        super().__init__(message)
        self.preview = truncate_preview(preview)


class GenerationTransportError(SkillCanonError):
    def __init__(self, message: str, *, kind: str = "network", status_code: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
