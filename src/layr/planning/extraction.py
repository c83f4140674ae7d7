"""Recover a JSON object from free-form model output.

Models wrap JSON in prose, code fences or slightly broken syntax. The
extractor tries a fixed sequence of strategies and stops at the first one
that yields a candidate; the parser then makes one repair pass at most.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from layr.errors import PlanParseError

logger = logging.getLogger(__name__)

_JSON_FENCE_RE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL)
_ANY_FENCE_RE = re.compile(r"```(?:[A-Za-z0-9_+-]*\n)?(.*?)```", re.DOTALL)
_OBJECT_SPAN_RE = re.compile(r"\{.*\}", re.DOTALL)

# Ordered rewrite rules, applied once each
REPAIR_RULES: list[tuple[re.Pattern[str], str]] = [
    # trailing commas before a closing bracket or brace
    (re.compile(r",(\s*[}\]])"), r"\1"),
    # missing commas between adjacent objects or arrays
    (re.compile(r"}(\s*){"), r"},\1{"),
    (re.compile(r"](\s*)\["), r"],\1["),
    # unquoted object keys
    (re.compile(r"([{,]\s*)([a-zA-Z_][a-zA-Z0-9_]*)\s*:"), r'\1"\2":'),
]


def extract_json_candidate(text: str) -> str | None:
    """Locate the most likely JSON object in model output.

    Strategies, in order:
    1. a fenced block tagged ``json``
    2. any fenced block whose content is wrapped in braces
    3. the span from the first ``{`` to the last ``}``
    4. the whole text, if it parses as JSON outright

    Returns:
        The candidate text, or None when no strategy applies.
    """
    match = _JSON_FENCE_RE.search(text)
    if match:
        logger.debug("Found JSON in tagged code block")
        return match.group(1).strip()

    for fence in _ANY_FENCE_RE.finditer(text):
        content = fence.group(1).strip()
        if content.startswith("{") and content.endswith("}"):
            logger.debug("Found JSON in generic code block")
            return content

    match = _OBJECT_SPAN_RE.search(text)
    if match:
        logger.debug("Found JSON object span")
        return match.group(0)

    stripped = text.strip()
    try:
        json.loads(stripped)
    except ValueError:
        return None
    logger.debug("Entire response is valid JSON")
    return stripped


def repair_json(text: str) -> str:
    """Apply each repair rule once, in order."""
    for pattern, replacement in REPAIR_RULES:
        text = pattern.sub(replacement, text)
    return text


def parse_plan_payload(text: str) -> dict[str, Any]:
    """Extract, parse and if needed repair a JSON object from model output.

    Raises:
        PlanParseError: If no candidate is found, or the candidate still
            fails to parse after one repair pass, or it is not an object.
    """
    candidate = extract_json_candidate(text)
    if candidate is None:
        raise PlanParseError("No JSON object found in response", raw_text=text)

    try:
        data = json.loads(candidate)
    except ValueError as first_error:
        logger.warning("JSON parse error, attempting repair: %s", first_error)
        try:
            data = json.loads(repair_json(candidate))
        except ValueError as e:
            raise PlanParseError(
                f"Response is not valid JSON after repair: {e}", raw_text=text
            ) from e
        logger.info("Repaired malformed JSON response")

    if not isinstance(data, dict):
        raise PlanParseError("Response JSON is not an object", raw_text=text)
    return data
