from __future__ import annotations

import json
import re

from pydantic import ValidationError

from ..models.transcribe import AnalysisResult

_FENCE = "```"
# Opening fence plus an optional language tag on the same line.
_OPENING_FENCE_RE = re.compile(r"^```[\w+.-]*[ \t]*\n?")


class ParseError(ValueError):
    """Model output did not contain a parseable analysis object."""


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith(_FENCE):
        cleaned = _OPENING_FENCE_RE.sub("", cleaned, count=1)
        if cleaned.endswith(_FENCE):
            cleaned = cleaned[: -len(_FENCE)]
    return cleaned


def extract_analysis(response: str) -> AnalysisResult:
    """Parse the JSON object out of a text-generation response.

    The whole (optionally fenced) text must be one JSON object; prose around
    it is not tolerated. Raises ParseError otherwise.
    """
    cleaned = strip_code_fence(response or "")
    try:
        obj = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON: {e.msg} at line {e.lineno} column {e.colno}") from e
    if not isinstance(obj, dict):
        raise ParseError(f"expected a JSON object, got {type(obj).__name__}")
    try:
        return AnalysisResult.model_validate(obj)
    except ValidationError as e:
        raise ParseError(f"unexpected analysis fields: {e.error_count()} error(s)") from e
