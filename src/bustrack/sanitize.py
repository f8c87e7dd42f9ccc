"""Helpers that turn untrusted XML attribute values into safe Python values.

Every function here accepts ``None`` and never raises.
"""

import math
import re
from typing import Optional

# Reasonable max length for stop/route names
MAX_TEXT_LENGTH = 500

# ASCII control characters, keeping tab, newline and carriage return
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

# Leading numeric prefix, e.g. "12.5" out of "12.5km"
_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"[+-]?\d+")

# Integers with more significant digits than this fall back to the default
MAX_INT_DIGITS = 18

_HEX_COLOR = re.compile(r"[0-9a-fA-F]{6}")


def sanitize_text(raw: Optional[str]) -> str:
    """Strip control characters and surrounding whitespace, cap the length."""
    if not raw:
        return ""
    return _CONTROL_CHARS.sub("", raw).strip()[:MAX_TEXT_LENGTH]


def safe_float(raw: Optional[str], default: float = 0.0) -> float:
    """
    Parse a float, falling back to ``default``.

    Args:
        raw: Attribute value, possibly None.
        default: Returned for missing, non-numeric, NaN or infinite values.

    Returns:
        The parsed value of the leading numeric prefix, or ``default``.
    """
    if not raw:
        return default
    match = _FLOAT_PREFIX.match(raw.lstrip())
    if not match:
        return default
    try:
        value = float(match.group(0))
    except (ValueError, OverflowError):
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return value


def safe_int(raw: Optional[str], default: int = 0) -> int:
    """Parse a base-10 integer prefix ("3.7" -> 3), falling back to ``default``.

    Values with more than MAX_INT_DIGITS significant digits also fall back.
    """
    if not raw:
        return default
    match = _INT_PREFIX.match(raw.lstrip())
    if not match:
        return default
    digits = match.group(0)
    if len(digits.lstrip("+-").lstrip("0")) > MAX_INT_DIGITS:
        return default
    return int(digits, 10)


def safe_bool(raw: Optional[str]) -> bool:
    """The feed spells booleans as "true"; anything else is False."""
    return raw == "true"


def sanitize_color(raw: Optional[str], default: str) -> str:
    """Return a six-digit hex color (no leading '#'), or ``default``."""
    color = sanitize_text(raw)
    if _HEX_COLOR.fullmatch(color):
        return color
    return default
