"""Helpers for pulling JSON out of model replies."""

import json
import re
from typing import Any

from ..core.errors import UnparseableOutputError

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")


def strip_fences(raw: str) -> str:
    """Remove a surrounding markdown code fence."""
    return _FENCE_END.sub("", _FENCE_START.sub("", raw.strip())).strip()


def _loads(raw: str, block: re.Pattern[str], expected: type) -> Any:
    cleaned = strip_fences(raw)
    try:
        value = json.loads(cleaned)
    except json.JSONDecodeError:
        match = block.search(cleaned)
        if not match:
            raise UnparseableOutputError(f"no JSON found in reply: {raw[:80]!r}")
        try:
            value = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise UnparseableOutputError(f"invalid JSON in reply: {e}") from e

    if not isinstance(value, expected):
        raise UnparseableOutputError(
            f"expected a JSON {expected.__name__}, got {type(value).__name__}"
        )
    return value


def extract_json_object(raw: str) -> dict[str, Any]:
    """Parse a JSON object, falling back to the first {...} block."""
    return _loads(raw, re.compile(r"\{[\s\S]*?\}"), dict)


def extract_json_array(raw: str) -> list[Any]:
    """Parse a JSON array, falling back to the outermost [...] block."""
    return _loads(raw, re.compile(r"\[[\s\S]*\]"), list)
