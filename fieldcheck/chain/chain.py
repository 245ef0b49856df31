"""Fluent builder for validation chains.

A chain only queues steps; nothing is validated until ``run`` is awaited.

Usage:
    chain = body("email").trim().is_email().with_message("bad email").bail()
    result = await chain.run(request)
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from ..request import VALID_LOCATIONS, Location, Request
from . import sanitizers, validators
from .context import Context, OptionalOptions
from .items import (
    Bail,
    Condition,
    ContextItem,
    CustomSanitizer,
    CustomValidation,
    CustomValidator,
    ExistenceValidation,
    Sanitization,
    StandardValidation,
    Validation,
)
from .result import ResultWithContext
from .runner import ContextRunner


def _merge_options(options: Mapping[str, Any] | None, overrides: dict[str, Any]) -> dict[str, Any] | None:
    if not options and not overrides:
        return None
    return {**(options or {}), **overrides}


class ValidationChain:
    """Queue of validators, sanitizers and modifiers for one or more fields."""

    def __init__(self, fields: list[str], locations: list[Location], message: Any = None):
        """Create a chain.

        Args:
            fields: Field paths to validate
            locations: Request locations to search, in order
            message: Default error message for every validator in the chain
        """
        self.fields = list(fields)
        self.locations = list(locations)
        self.message = message
        self.items: list[ContextItem] = []
        self.optional_options: OptionalOptions | None = None
        self._negate_next = False

    def __repr__(self) -> str:
        return f"ValidationChain(fields={self.fields!r}, locations={self.locations!r}, items={len(self.items)})"

    def build(self) -> Context:
        """Create a fresh context for one run."""
        return Context(
            fields=list(self.fields),
            locations=list(self.locations),
            message=self.message,
            optional=self.optional_options,
            items=list(self.items),
        )

    async def run(self, request: Request, dry_run: bool = False) -> ResultWithContext:
        """Run every queued step against ``request``.

        Args:
            request: Request to validate
            dry_run: Do not write sanitized values back nor record the run on the request

        Returns:
            ResultWithContext with this chain's errors
        """
        return await ContextRunner(self.build()).run(request, dry_run=dry_run)

    # === Modifiers ===

    def if_(self, condition: ValidationChain | CustomValidator) -> ValidationChain:
        """Only continue the chain when ``condition`` passes."""
        self.items.append(Condition(condition=condition))
        return self

    def not_(self) -> ValidationChain:
        """Negate the next validator."""
        self._negate_next = True
        return self

    def with_message(self, message: Any) -> ValidationChain:
        """Set the error message of the last validator added."""
        for item in reversed(self.items):
            if isinstance(item, Validation):
                item.message = message
                break
        return self

    def bail(self) -> ValidationChain:
        """Stop running the chain if any previous validator failed."""
        self.items.append(Bail())
        return self

    def optional(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        """Skip validators when the field is absent.

        Args:
            options: Mapping with ``nullable`` and/or ``check_falsy``
            **kwargs: Same keys as ``options``, taking precedence
        """
        merged = _merge_options(options, kwargs) or {}
        self.optional_options = OptionalOptions(
            nullable=bool(merged.get("nullable", False)),
            check_falsy=bool(merged.get("check_falsy", False)),
        )
        return self

    # === Internal helpers ===

    def _add_validation(self, item: Validation) -> ValidationChain:
        item.negated = self._negate_next
        self._negate_next = False
        self.items.append(item)
        return self

    def _add_standard(self, name: str, validator: Any, *options: Any) -> ValidationChain:
        return self._add_validation(StandardValidation(name=name, validator=validator, options=options))

    def _add_sanitizer(self, name: str, sanitizer: Any, *options: Any, custom: bool = False) -> ValidationChain:
        self.items.append(Sanitization(name=name, sanitizer=sanitizer, options=options, custom=custom))
        return self

    # === Validators ===

    def custom(self, validator: CustomValidator) -> ValidationChain:
        """Add a custom validator ``fn(value, meta)``, sync or async."""
        return self._add_validation(CustomValidation(name="custom", validator=validator))

    def exists(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        """Check the field is present.

        ``check_null`` also rejects None, ``check_falsy`` rejects any falsy value.
        """
        merged = _merge_options(options, kwargs) or {}
        return self._add_validation(
            ExistenceValidation(
                check_null=bool(merged.get("check_null", False)),
                check_falsy=bool(merged.get("check_falsy", False)),
            )
        )

    def is_array(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        """Check the raw value is a list, optionally with min/max length."""
        merged = _merge_options(options, kwargs) or {}

        def _is_array(value: Any, meta: Any) -> bool:
            if not isinstance(value, list):
                return False
            return len(value) >= merged.get("min", 0) and len(value) <= merged.get("max", len(value))

        return self._add_validation(CustomValidation(name="is_array", validator=_is_array))

    def is_object(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        """Check the raw value is a mapping; non-strict also accepts lists."""
        strict = (_merge_options(options, kwargs) or {}).get("strict", True)

        def _is_object(value: Any, meta: Any) -> bool:
            return isinstance(value, Mapping) or (not strict and isinstance(value, list))

        return self._add_validation(CustomValidation(name="is_object", validator=_is_object))

    def is_string(self) -> ValidationChain:
        return self._add_validation(
            CustomValidation(name="is_string", validator=lambda value, meta: isinstance(value, str))
        )

    def contains(self, elem: Any, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        return self._add_standard("contains", validators.contains, elem, _merge_options(options, kwargs))

    def equals(self, comparison: Any) -> ValidationChain:
        return self._add_standard("equals", validators.equals, comparison)

    def is_alpha(self) -> ValidationChain:
        return self._add_standard("is_alpha", validators.is_alpha)

    def is_alphanumeric(self) -> ValidationChain:
        return self._add_standard("is_alphanumeric", validators.is_alphanumeric)

    def is_boolean(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        return self._add_standard("is_boolean", validators.is_boolean, _merge_options(options, kwargs))

    def is_email(self) -> ValidationChain:
        return self._add_standard("is_email", validators.is_email)

    def is_empty(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        return self._add_standard("is_empty", validators.is_empty, _merge_options(options, kwargs))

    def is_float(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        """Check for a float; options: min, max, lt, gt."""
        return self._add_standard("is_float", validators.is_float, _merge_options(options, kwargs))

    def is_in(self, values: Iterable[Any]) -> ValidationChain:
        return self._add_standard("is_in", validators.is_in, values if isinstance(values, str) else list(values))

    def is_int(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        """Check for an integer; options: min, max, lt, gt, allow_leading_zeroes."""
        return self._add_standard("is_int", validators.is_int, _merge_options(options, kwargs))

    def is_iso8601(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        return self._add_standard("is_iso8601", validators.is_iso8601, _merge_options(options, kwargs))

    def is_json(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        return self._add_standard("is_json", validators.is_json, _merge_options(options, kwargs))

    def is_length(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        """Check the string length; options: min (default 0), max."""
        return self._add_standard("is_length", validators.is_length, _merge_options(options, kwargs))

    def is_lowercase(self) -> ValidationChain:
        return self._add_standard("is_lowercase", validators.is_lowercase)

    def is_numeric(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        return self._add_standard("is_numeric", validators.is_numeric, _merge_options(options, kwargs))

    def is_uppercase(self) -> ValidationChain:
        return self._add_standard("is_uppercase", validators.is_uppercase)

    def is_url(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidationChain:
        """Check for an absolute URL; options: protocols, require_tld."""
        return self._add_standard("is_url", validators.is_url, _merge_options(options, kwargs))

    def is_uuid(self, version: int | str | None = None) -> ValidationChain:
        return self._add_standard("is_uuid", validators.is_uuid, version)

    def matches(self, pattern: str | re.Pattern[str], flags: str | int = 0) -> ValidationChain:
        """Check the value matches a regular expression (searched, not anchored).

        Raises:
            ValueError: If ``flags`` holds an unsupported flag letter
        """
        return self._add_standard("matches", validators.matches, pattern, validators.parse_flags(flags))

    def not_empty(self) -> ValidationChain:
        return self._add_standard("not_empty", validators.not_empty)

    # === Sanitizers ===

    def custom_sanitizer(self, sanitizer: CustomSanitizer) -> ValidationChain:
        """Replace the value with ``fn(value, meta)``, sync or async."""
        return self._add_sanitizer("custom_sanitizer", sanitizer, custom=True)

    def default(self, default_value: Any) -> ValidationChain:
        """Replace missing, None or empty-string values with ``default_value``."""

        def _default(value: Any, meta: Any) -> Any:
            return default_value if value is None or value == "" else value

        return self._add_sanitizer("default", _default, custom=True)

    def to_array(self) -> ValidationChain:
        return self._add_sanitizer("to_array", lambda value, meta: sanitizers.to_array(value), custom=True)

    def blacklist(self, chars: str) -> ValidationChain:
        return self._add_sanitizer("blacklist", sanitizers.blacklist, chars)

    def whitelist(self, chars: str) -> ValidationChain:
        return self._add_sanitizer("whitelist", sanitizers.whitelist, chars)

    def escape(self) -> ValidationChain:
        return self._add_sanitizer("escape", sanitizers.escape)

    def unescape(self) -> ValidationChain:
        return self._add_sanitizer("unescape", sanitizers.unescape)

    def trim(self, chars: str | None = None) -> ValidationChain:
        return self._add_sanitizer("trim", sanitizers.trim, chars)

    def ltrim(self, chars: str | None = None) -> ValidationChain:
        return self._add_sanitizer("ltrim", sanitizers.ltrim, chars)

    def rtrim(self, chars: str | None = None) -> ValidationChain:
        return self._add_sanitizer("rtrim", sanitizers.rtrim, chars)

    def to_boolean(self, strict: bool = False) -> ValidationChain:
        return self._add_sanitizer("to_boolean", sanitizers.to_boolean, strict)

    def to_float(self) -> ValidationChain:
        return self._add_sanitizer("to_float", sanitizers.to_float)

    def to_int(self, radix: int = 10) -> ValidationChain:
        return self._add_sanitizer("to_int", sanitizers.to_int, radix)

    def to_lower_case(self) -> ValidationChain:
        return self._add_sanitizer("to_lower_case", sanitizers.to_lower_case)

    def to_upper_case(self) -> ValidationChain:
        return self._add_sanitizer("to_upper_case", sanitizers.to_upper_case)


def _normalize_fields(fields: str | Iterable[str] | None) -> list[str]:
    if fields is None:
        return [""]
    if isinstance(fields, str):
        return [fields]
    return list(fields) or [""]


def check(
    fields: str | Iterable[str] | None = None,
    locations: Iterable[Location] = VALID_LOCATIONS,
    message: Any = None,
) -> ValidationChain:
    """Create a chain for ``fields`` searched in ``locations``.

    Args:
        fields: One path, several paths, or None for the whole location
        locations: Where to look, defaults to every location
        message: Default error message for the chain
    """
    return ValidationChain(_normalize_fields(fields), list(locations), message)


def body(fields: str | Iterable[str] | None = None, message: Any = None) -> ValidationChain:
    return check(fields, ["body"], message)


def cookie(fields: str | Iterable[str] | None = None, message: Any = None) -> ValidationChain:
    return check(fields, ["cookies"], message)


def header(fields: str | Iterable[str] | None = None, message: Any = None) -> ValidationChain:
    return check(fields, ["headers"], message)


def param(fields: str | Iterable[str] | None = None, message: Any = None) -> ValidationChain:
    return check(fields, ["params"], message)


def query(fields: str | Iterable[str] | None = None, message: Any = None) -> ValidationChain:
    return check(fields, ["query"], message)
