from __future__ import annotations

import csv
import io
import json
import re
from typing import Any, Literal

from skillcanon.errors import MalformedContent

ParseMode = Literal["json", "csv"]

_LEADING_FENCE_RE = re.compile(r"^```[A-Za-z0-9_+.-]*[ \t]*(?:\r?\n)?")
_TRAILING_FENCE_RE = re.compile(r"(?:\r?\n)?[ \t]*```\s*$")


def strip_code_fence(text: str | None) -> str:
    cleaned = (text or "").strip()
    cleaned = _LEADING_FENCE_RE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def _parse_json(cleaned: str) -> list[Any]:
    # Model answers that are not JSON at all are treated as empty, not as errors.
    if not cleaned.startswith(("[", "{")):
        return []
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedContent(f"JSON parsing error: {exc.msg} at line {exc.lineno}", preview=cleaned) from exc
    if isinstance(parsed, dict):
        return [parsed]
    return list(parsed)


def _parse_csv(cleaned: str) -> list[dict[str, str]]:
    if not cleaned:
        return []
    reader = csv.reader(io.StringIO(cleaned), strict=True)
    try:
        rows = [row for row in reader if any(cell.strip() for cell in row)]
    except csv.Error as exc:
        raise MalformedContent(f"CSV parsing error: {exc}", preview=cleaned) from exc
    if not rows:
        return []

    header = [name.strip() for name in rows[0]]
    if not any(header) or len(set(header)) != len(header):
        raise MalformedContent("CSV parsing error: missing or duplicate header names", preview=cleaned)

    last = len(header) - 1
    records: list[dict[str, str]] = []
    for row in rows[1:]:
        if len(row) > len(header):
            # Unquoted commas in the trailing free-text column split it into extra cells.
            row = row[:last] + [",".join(row[last:])]
        padded = row + [""] * (len(header) - len(row))
        records.append(dict(zip(header, padded)))
    return records


def parse_fenced(text: str | None, mode: ParseMode = "json") -> list[Any]:
    """Strip markdown code fences from a model answer and parse it as JSON or CSV.

    JSON answers that do not start with ``[`` or ``{`` yield an empty list.
    Unparseable content raises :class:`MalformedContent` with a short preview.
    """
    cleaned = strip_code_fence(text)
    if mode == "json":
        return _parse_json(cleaned)
    if mode == "csv":
        return _parse_csv(cleaned)
    raise ValueError(f"Unsupported parse mode '{mode}'. Supported modes: json, csv")
