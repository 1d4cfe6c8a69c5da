import html
import re
from typing import Any, Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def strip_control_chars(value: Optional[str]) -> Optional[str]:
    """Remove non-printable control characters from free-text input, keeping newlines and tabs"""
    if value is None:
        return None
    return re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", value)


def clean_text(value: Any, max_length: int = 2000) -> Optional[str]:
    """
    Normalize free-text input before it is stored.

    Args:
        value: Input value (None passes through)
        max_length: Maximum allowed length after trimming

    Raises:
        ValueError: If input exceeds max_length
    """
    if value is None:
        return None

    value = strip_control_chars(str(value).strip())

    if len(value) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    return value or None
