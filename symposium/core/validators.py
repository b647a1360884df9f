"""
Input Validators - Sanitization and validation utilities.

Validation helpers return (is_valid, error) tuples; routes turn a failed
check into a ValidationError for the client.
"""
import re
from typing import Iterable, Optional, Tuple

from symposium.core.logging_config import get_logger

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 20000

KNOWN_CONSULTANT_TYPES = {"pure_llm", "standard", "airtable", "perplexity"}

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")
_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


def sanitize_message(message: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """
    Sanitize a chat message.

    Removes null bytes, trims surrounding whitespace, collapses runs of
    blank lines and truncates to max_length. Line structure is kept since
    consultants receive markdown.
    """
    if not message:
        return ""

    cleaned = message.replace("\x00", "").strip()
    cleaned = cleaned.replace("\r\n", "\n")
    cleaned = _EXCESS_BLANK_LINES.sub("\n\n", cleaned)

    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]

    return cleaned


def validate_message(message: str) -> Tuple[bool, str, Optional[str]]:
    """
    Full validation and sanitization of a message.

    Returns:
        Tuple of (is_valid, sanitized_message, error_message)
    """
    if not message or not message.strip():
        return False, "", "Message cannot be empty"

    if len(message) > MAX_MESSAGE_LENGTH:
        return False, "", f"Message too long (max {MAX_MESSAGE_LENGTH} characters)"

    sanitized = sanitize_message(message)
    if not sanitized:
        return False, "", "Message cannot be empty after sanitization"

    return True, sanitized, None


def validate_consultant_type(consultant_type: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Check a consultant type tag; None means "use the default"."""
    if consultant_type is None or consultant_type in KNOWN_CONSULTANT_TYPES:
        return True, None
    return False, (
        f"Invalid consultant_type: {consultant_type}. "
        f"Must be one of: {sorted(KNOWN_CONSULTANT_TYPES)}"
    )


def validate_tag_color(color: str) -> Tuple[bool, Optional[str]]:
    """Tag colours are #rrggbb hex strings."""
    if _HEX_COLOR.match(color or ""):
        return True, None
    return False, f"Invalid color: {color}. Expected a hex value like #4f46e5"


def validate_required_fields(config: dict, required: Iterable[str]) -> Tuple[bool, Optional[str]]:
    """Check that every required API configuration key has a non-empty value."""
    missing = [name for name in required if not str(config.get(name) or "").strip()]
    if missing:
        logger.warning(f"API configuration missing fields: {missing}")
        return False, f"Missing required configuration fields: {', '.join(missing)}"
    return True, None
