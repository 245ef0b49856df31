"""Registry of rule identifiers usable as schema keys.

Each rule is tagged as a validator or a sanitizer. Only validators accept the
``if``, ``negated``, ``error_message`` and ``bail`` modifiers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ..chain.chain import ValidationChain


class RuleKind(Enum):
    """Capability class of a rule"""

    VALIDATOR = "validator"
    SANITIZER = "sanitizer"


@dataclass(frozen=True)
class RuleSpec:
    """A schema rule and the chain method it queues."""

    name: str
    kind: RuleKind
    invoke: Callable[..., ValidationChain]

    @property
    def accepts_modifiers(self) -> bool:
        return self.kind is RuleKind.VALIDATOR


def _specs(kind: RuleKind, *methods: Callable[..., ValidationChain]) -> list[RuleSpec]:
    return [RuleSpec(name=method.__name__, kind=kind, invoke=method) for method in methods]


RULES: dict[str, RuleSpec] = {
    spec.name: spec
    for spec in [
        *_specs(
            RuleKind.VALIDATOR,
            ValidationChain.contains,
            ValidationChain.custom,
            ValidationChain.equals,
            ValidationChain.exists,
            ValidationChain.is_alpha,
            ValidationChain.is_alphanumeric,
            ValidationChain.is_array,
            ValidationChain.is_boolean,
            ValidationChain.is_email,
            ValidationChain.is_empty,
            ValidationChain.is_float,
            ValidationChain.is_in,
            ValidationChain.is_int,
            ValidationChain.is_iso8601,
            ValidationChain.is_json,
            ValidationChain.is_length,
            ValidationChain.is_lowercase,
            ValidationChain.is_numeric,
            ValidationChain.is_object,
            ValidationChain.is_string,
            ValidationChain.is_uppercase,
            ValidationChain.is_url,
            ValidationChain.is_uuid,
            ValidationChain.matches,
            ValidationChain.not_empty,
        ),
        *_specs(
            RuleKind.SANITIZER,
            ValidationChain.blacklist,
            ValidationChain.custom_sanitizer,
            ValidationChain.default,
            ValidationChain.escape,
            ValidationChain.ltrim,
            ValidationChain.rtrim,
            ValidationChain.to_array,
            ValidationChain.to_boolean,
            ValidationChain.to_float,
            ValidationChain.to_int,
            ValidationChain.to_lower_case,
            ValidationChain.to_upper_case,
            ValidationChain.trim,
            ValidationChain.unescape,
            ValidationChain.whitelist,
        ),
    ]
}


def get_rule(name: object) -> RuleSpec | None:
    """Look up a rule by schema key, None when unknown."""
    if not isinstance(name, str):
        return None
    return RULES.get(name)
