"""Standard sanitizers.

Like validators, they receive the stringified value; unlike validators, they
return the new value, which may not be a string (to_int, to_boolean...)."""

from __future__ import annotations

import re
from typing import Any

from .validators import FLOAT_PATTERN

_LEADING_INT_RE = re.compile(r"^\s*[-+]?\d+")

_ESCAPES = {
    "&": "&amp;",
    '"': "&quot;",
    "'": "&#x27;",
    "<": "&lt;",
    ">": "&gt;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#96;",
}


def blacklist(value: str, chars: str) -> str:
    """Remove every character found in ``chars``."""
    return "".join(char for char in value if char not in chars)


def whitelist(value: str, chars: str) -> str:
    """Keep only characters found in ``chars``."""
    return "".join(char for char in value if char in chars)


def escape(value: str) -> str:
    """Replace HTML-sensitive characters with entities."""
    return "".join(_ESCAPES.get(char, char) for char in value)


def unescape(value: str) -> str:
    # &amp; last so "&amp;lt;" becomes "&lt;" and not "<"
    for char, entity in _ESCAPES.items():
        if char != "&":
            value = value.replace(entity, char)
    return value.replace("&amp;", "&")


def trim(value: str, chars: str | None = None) -> str:
    return value.strip(chars)


def ltrim(value: str, chars: str | None = None) -> str:
    return value.lstrip(chars)


def rtrim(value: str, chars: str | None = None) -> str:
    return value.rstrip(chars)


def to_int(value: str, radix: int = 10) -> int | None:
    """Parse the leading integer of a string, None when there is none."""
    try:
        return int(value.strip(), radix)
    except ValueError:
        pass
    if radix != 10:
        return None
    match = _LEADING_INT_RE.match(value)
    return int(match.group()) if match else None


def to_float(value: str) -> float | None:
    if not FLOAT_PATTERN.match(value):
        return None
    return float(value)


def to_boolean(value: str, strict: bool = False) -> bool:
    """Strict: only "1" and "true" are True. Loose: anything but "0", "false" and ""."""
    if strict:
        return value in ("1", "true")
    return value not in ("0", "false", "")


def to_lower_case(value: str) -> str:
    return value.lower()


def to_upper_case(value: str) -> str:
    return value.upper()


def to_array(value: Any) -> list[Any]:
    """Wrap a raw value in a list; None becomes an empty list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
