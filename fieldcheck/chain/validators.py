"""Standard validators.

Every validator takes the field value already converted to a string (see
``to_string``) followed by its own arguments, and returns a bool. Chains
apply them to each element when the field value is a list."""

from __future__ import annotations

import json
import re
import uuid
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
from typing import Any
from urllib.parse import urlparse

Options = Mapping[str, Any] | None

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*\.[a-zA-Z]{2,}$"
)
INT_PATTERN = re.compile(r"^[-+]?(?:0|[1-9]\d*)$")
INT_LEADING_ZEROES_PATTERN = re.compile(r"^[-+]?\d+$")
FLOAT_PATTERN = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?$")
NUMERIC_PATTERN = re.compile(r"^[-+]?(?:\d*\.)?\d+$")
NUMERIC_NO_SYMBOLS_PATTERN = re.compile(r"^\d+$")
UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


def to_string(value: Any) -> str:
    """Convert a request value to the string form validators operate on."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _opt(options: Options, key: str, default: Any = None) -> Any:
    if not options:
        return default
    return options.get(key, default)


def _in_range(number: float, options: Options) -> bool:
    minimum = _opt(options, "min")
    maximum = _opt(options, "max")
    lt = _opt(options, "lt")
    gt = _opt(options, "gt")
    return (
        (minimum is None or number >= minimum)
        and (maximum is None or number <= maximum)
        and (lt is None or number < lt)
        and (gt is None or number > gt)
    )


def contains(value: str, elem: Any, options: Options = None) -> bool:
    """Check the string contains ``elem`` at least ``min_occurrences`` times."""
    needle = str(elem)
    haystack = value
    if _opt(options, "ignore_case", False):
        needle = needle.lower()
        haystack = haystack.lower()
    return haystack.count(needle) >= _opt(options, "min_occurrences", 1)


def equals(value: str, comparison: Any) -> bool:
    return value == str(comparison)


def is_alpha(value: str) -> bool:
    return value.isascii() and value.isalpha()


def is_alphanumeric(value: str) -> bool:
    return value.isascii() and value.isalnum()


def is_boolean(value: str, options: Options = None) -> bool:
    """Accept "true"/"false"/"1"/"0"; loose mode also accepts yes/no in any case."""
    if value in ("true", "false", "1", "0"):
        return True
    if _opt(options, "loose", False):
        return value.lower() in ("true", "false", "yes", "no")
    return False


def is_email(value: str) -> bool:
    return len(value) <= 254 and EMAIL_PATTERN.match(value) is not None


def is_empty(value: str, options: Options = None) -> bool:
    if _opt(options, "ignore_whitespace", False):
        return value.strip() == ""
    return value == ""


def is_float(value: str, options: Options = None) -> bool:
    """Check for a float, optionally bounded by min/max/lt/gt."""
    if not FLOAT_PATTERN.match(value):
        return False
    return _in_range(float(value), options)


def is_in(value: str, values: Iterable[Any]) -> bool:
    if isinstance(values, (str, bytes)):
        return value in values
    return value in [to_string(candidate) for candidate in values]


def is_int(value: str, options: Options = None) -> bool:
    """Check for an integer, optionally bounded by min/max/lt/gt.

    Leading zeroes are allowed unless ``allow_leading_zeroes`` is False.
    """
    pattern = INT_LEADING_ZEROES_PATTERN if _opt(options, "allow_leading_zeroes", True) else INT_PATTERN
    if not pattern.match(value):
        return False
    return _in_range(int(value), options)


def is_iso8601(value: str, options: Options = None) -> bool:
    """Check for an ISO 8601 date or datetime."""
    if not value:
        return False
    parser: Callable[[str], Any] = date.fromisoformat if _opt(options, "date_only", False) else datetime.fromisoformat
    try:
        parser(value.replace("Z", "+00:00") if value.endswith("Z") else value)
    except ValueError:
        return False
    return True


def is_json(value: str, options: Options = None) -> bool:
    """Check the string parses as JSON; primitives only count with allow_primitives."""
    try:
        parsed = json.loads(value)
    except ValueError:
        return False
    return _opt(options, "allow_primitives", False) or isinstance(parsed, (dict, list))


def is_length(value: str, options: Options = None) -> bool:
    length = len(value)
    maximum = _opt(options, "max")
    return length >= _opt(options, "min", 0) and (maximum is None or length <= maximum)


def is_lowercase(value: str) -> bool:
    return value == value.lower()


def is_numeric(value: str, options: Options = None) -> bool:
    pattern = NUMERIC_NO_SYMBOLS_PATTERN if _opt(options, "no_symbols", False) else NUMERIC_PATTERN
    return pattern.match(value) is not None


def is_uppercase(value: str) -> bool:
    return value == value.upper()


def is_url(value: str, options: Options = None) -> bool:
    """Check for an absolute URL with an allowed protocol and a host."""
    protocols = _opt(options, "protocols", ("http", "https", "ftp"))
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    if parsed.scheme not in protocols or not parsed.hostname:
        return False
    if _opt(options, "require_tld", True) and "." not in parsed.hostname:
        return False
    return not any(char.isspace() for char in value)


def is_uuid(value: str, version: int | str | None = None) -> bool:
    if not UUID_PATTERN.match(value):
        return False
    if version in (None, "all"):
        return True
    return uuid.UUID(value).version == int(version)


def parse_flags(flags: str | int) -> int:
    """Convert regex flag letters (i, m, s, x) to ``re`` flags; ints pass through.

    Raises:
        ValueError: If a letter is not a supported flag
    """
    if not isinstance(flags, str):
        return flags
    unknown = [letter for letter in flags if letter not in _REGEX_FLAGS]
    if unknown:
        raise ValueError(f"Unsupported regex flag(s) {''.join(unknown)!r}, expected any of 'imsx'")
    return sum(_REGEX_FLAGS[letter] for letter in flags)


def matches(value: str, pattern: str | re.Pattern[str], flags: str | int = 0) -> bool:
    """Search the string for ``pattern``.

    ``flags`` may be an int of ``re`` flags or a string of letters (i, m, s, x).
    """
    flags = parse_flags(flags)
    regex = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, flags)
    return regex.search(value) is not None


def not_empty(value: str) -> bool:
    return value != ""
