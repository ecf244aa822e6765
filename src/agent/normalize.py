"""Value normalization for loosely-typed command input.

Values arrive either as text fragments pulled out of a command or as JSON from the caller, so every
helper accepts `Any` and never raises.
"""

from __future__ import annotations

import math
import re
from typing import Any

TRUTHY_WORDS: frozenset[str] = frozenset({"true", "yes", "y", "on", "approved"})
FALSY_WORDS: frozenset[str] = frozenset({"false", "no", "n", "off", "denied"})

# Decimal or exponent notation only; Python's float() would also take "nan", "inf" and "1_000".
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", flags=re.ASCII)


def normalize_text(text: str | None) -> str:
    """Lower-case and trim command text for keyword matching."""

    return (text or "").strip().lower()


def trim_or_none(value: Any) -> Any:
    """Trim strings (blank becomes `None`); pass other values through unchanged."""

    if value is None:
        return None
    if not isinstance(value, str):
        return value

    trimmed = value.strip()
    return trimmed or None


def parse_number(value: Any, fallback: float | int | None = None) -> float | int | None:
    """Parse a finite number, returning `fallback` for anything else.

    Integral values come back as `int` so that `"1200"` and `1200` compare equal to `1200`.
    """

    if value is None or isinstance(value, bool):
        return fallback

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not _NUMBER_RE.fullmatch(text):
            return fallback
        number = float(text)
    else:
        return fallback

    if not math.isfinite(number):
        return fallback
    if number.is_integer():
        return int(number)
    return number


def to_boolean(value: Any) -> bool | None:
    """Interpret common yes/no words; `None` when the value is not boolean-like."""

    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUTHY_WORDS:
            return True
        if normalized in FALSY_WORDS:
            return False
    return None
