"""
Best-effort structured output parsing for LLM replies.

Models are asked for JSON but wrap it in prose or code fences often
enough that a strict parser would fail most turns. extract_json takes
the greedy span from the first "{" to the last "}" and parses that.
Two separate JSON objects in one reply therefore fail to parse, and the
caller treats that like any other unparseable reply.
"""
import json
import re
from typing import Any, Dict, Optional

from symposium.core.logging_config import get_logger

logger = get_logger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

COUNTING_KEYWORDS = ("how many", "count", "total number", "number of")


def extract_json(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Pull a JSON object out of free-form model text.

    Returns:
        The parsed object, or None if no object could be parsed
    """
    if not text:
        return None

    match = _JSON_OBJECT.search(text)
    if not match:
        return None

    try:
        data = json.loads(match.group(0))
    except ValueError as e:
        logger.debug(f"Could not parse JSON from model reply: {e}")
        return None

    return data if isinstance(data, dict) else None


def is_counting_query(message: str) -> bool:
    """Whether a message asks for a count or total."""
    lowered = (message or "").lower()
    return any(keyword in lowered for keyword in COUNTING_KEYWORDS)
