"""Field path parsing and value selection.

Paths use dots for keys, brackets for list indices and ``*`` as a wildcard:
``user.emails[0]``, ``items.*.name``, ``tags[*]``. The empty path selects the
whole location."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

from ..request import Location, Request
from .context import FieldInstance

WILDCARD = "*"

_TOKEN_RE = re.compile(r"([^.\[\]]+)|\[([^\]]*)\]")

Segment = str | int


def parse_path(path: str) -> list[Segment]:
    """Split a field path into key and index segments.

    Args:
        path: Field path such as ``items[0].name`` or ``items.*.name``

    Returns:
        Segments; bracketed digits become ints, ``*`` stays a string
    """
    segments: list[Segment] = []
    for match in _TOKEN_RE.finditer(path):
        key, bracketed = match.groups()
        if key is not None:
            segments.append(key)
        elif bracketed.isdigit():
            segments.append(int(bracketed))
        else:
            segments.append(bracketed.strip("'\""))
    return segments


def format_path(segments: list[Segment]) -> str:
    """Inverse of parse_path for concrete (wildcard-free) segments."""
    path = ""
    for segment in segments:
        if isinstance(segment, int):
            path += f"[{segment}]"
        else:
            path = f"{path}.{segment}" if path else segment
    return path


def _lookup(data: Any, segment: Segment) -> tuple[bool, Any]:
    if isinstance(data, Mapping):
        key = str(segment)
        if key in data:
            return True, data[key]
        return False, None
    if isinstance(data, list):
        if isinstance(segment, str) and not segment.isdigit():
            return False, None
        index = int(segment)
        if 0 <= index < len(data):
            return True, data[index]
    return False, None


def _expand(data: Any, segments: list[Segment], prefix: list[Segment]) -> Iterator[tuple[list[Segment], Any, bool]]:
    if not segments:
        yield prefix, data, True
        return

    head, rest = segments[0], segments[1:]
    if head == WILDCARD:
        if isinstance(data, Mapping):
            keys: list[Segment] = list(data.keys())
        elif isinstance(data, list):
            keys = list(range(len(data)))
        else:
            return
        for key in keys:
            yield from _expand(_lookup(data, key)[1], rest, [*prefix, key])
        return

    found, child = _lookup(data, head)
    if found:
        yield from _expand(child, rest, [*prefix, head])
    elif WILDCARD not in rest:
        # Missing fields still produce an instance so "exists"-style checks can fail
        yield [*prefix, *segments], None, False


def select_fields(request: Request, fields: list[str], locations: list[Location]) -> list[FieldInstance]:
    """Select every value matching ``fields`` in each of ``locations``.

    Args:
        request: Request to read from
        fields: Field path patterns
        locations: Locations to search, in order

    Returns:
        One instance per concrete path and location, deduplicated
    """
    instances: list[FieldInstance] = []
    seen: set[tuple[str, str]] = set()

    for location in locations:
        container = request.get_location(location)
        for field_path in fields:
            pattern = field_path.lower() if location == "headers" else field_path
            for segments, value, exists in _expand(container, parse_path(pattern), []):
                path = format_path(segments)
                if (location, path) in seen:
                    continue
                seen.add((location, path))
                instances.append(
                    FieldInstance(
                        location=location,
                        path=path,
                        original_path=field_path,
                        value=value,
                        exists=exists,
                        segments=segments,
                    )
                )
    return instances


def write_value(request: Request, instance: FieldInstance, value: Any) -> None:
    """Write a sanitized value back into the request.

    Intermediate containers are created as dicts when missing.
    """
    if not instance.segments:
        request.set_location(instance.location, value)
        return

    container = request.get_location(instance.location)
    for segment in instance.segments[:-1]:
        found, child = _lookup(container, segment)
        if not found:
            if not isinstance(container, MutableMapping):
                return
            child = {}
            container[str(segment)] = child
        container = child

    last = instance.segments[-1]
    if isinstance(container, list) and isinstance(last, int) and last < len(container):
        container[last] = value
    elif isinstance(container, MutableMapping):
        container[str(last)] = value
