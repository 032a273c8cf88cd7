from __future__ import annotations

import json
import logging
import re
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

OBJECT_RE = re.compile(r"\{[\s\S]*\}")
ARRAY_RE = re.compile(r"\[[\s\S]*\]")
FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)

T = TypeVar("T")


def extract_json_object(text: str, fallback: T) -> dict[str, Any] | T:
    """Parse the outermost {...} span of model output, or return fallback."""
    parsed = _extract(text, OBJECT_RE)
    if isinstance(parsed, dict):
        return parsed
    logger.warning("No usable JSON object in model output (%s chars).", len(text))
    return fallback


def extract_json_array(text: str, fallback: T) -> list[Any] | T:
    """Parse the outermost [...] span of model output, or return fallback."""
    parsed = _extract(text, ARRAY_RE)
    if isinstance(parsed, list):
        return parsed
    logger.warning("No usable JSON array in model output (%s chars).", len(text))
    return fallback


def _extract(text: str, pattern: re.Pattern[str]) -> Any:
    cleaned = FENCE_RE.sub("", text)
    match = pattern.search(cleaned)
    if match is None:
        return None
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        logger.debug("JSON decode failed: %s", exc)
        return None
