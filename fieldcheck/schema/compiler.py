"""Schema compiler.

Turns a mapping of field name -> rule configuration into one validation chain
per field, plus a batch ``run`` executing all chains concurrently.

Usage:
    compiled = check_schema({
        "age": {"in": "body", "is_int": {"options": {"min": 0}}, "to_int": True},
        "email": {"in": ["body", "query"], "is_email": {"error_message": "bad email", "bail": True}},
    })
    results = await compiled.run(request)
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..chain.chain import ValidationChain, check
from ..chain.result import ResultWithContext
from ..errors import SchemaError, UnknownRuleError
from ..logging_config import TRACE, get_logger
from ..request import VALID_LOCATIONS, Location, Request
from ..settings import get_settings
from .models import OptionalConfig, RuleOptions
from .rules import RuleSpec, get_rule

logger = get_logger(__name__)

# Never treated as rule names
RESERVED_KEYS = frozenset({"error_message", "in"})
OPTIONAL_KEY = "optional"

UNKNOWN_RULE = "unknown_rule"
INVALID_RULE_ARGUMENTS = "invalid_rule_arguments"
NO_VALID_LOCATIONS = "no_valid_locations"

Schema = Mapping[str, Mapping[str, Any]]


@dataclass(frozen=True)
class SchemaDiagnostic:
    """A non-fatal problem found while compiling a schema."""

    field: str
    code: str
    message: str
    rule: str | None = None


@dataclass
class CompiledSchema:
    """Chains compiled from a schema, in schema key order."""

    chains: list[ValidationChain]
    diagnostics: list[SchemaDiagnostic] = field(default_factory=list)

    def __iter__(self) -> Iterator[ValidationChain]:
        return iter(self.chains)

    def __len__(self) -> int:
        return len(self.chains)

    def __getitem__(self, index: int) -> ValidationChain:
        return self.chains[index]

    async def run(self, request: Request) -> list[ResultWithContext]:
        """Run every chain against ``request`` concurrently.

        Results come back in chain order whatever order the runs finish in.
        Exceptions raised by a chain propagate to the caller.
        """
        return list(await asyncio.gather(*(chain.run(request) for chain in self.chains)))


def resolve_locations(value: Any, defaults: Iterable[Location]) -> list[Location]:
    """Resolve the ``in`` entry of a field into valid locations.

    Args:
        value: None, a single location, or a list of locations
        defaults: Used when ``value`` names no location at all

    Returns:
        Valid locations in order, without duplicates. Invalid names are
        dropped silently, which can leave the list empty.
    """
    if isinstance(value, (list, tuple)):
        requested = list(value)
    else:
        requested = [value] if value else []

    chosen = requested or list(defaults)

    resolved: list[Location] = []
    for location in chosen:
        if location in VALID_LOCATIONS and location not in resolved:
            resolved.append(location)
    return resolved


def _parse_rule_options(field_name: str, rule: str, value: Any) -> RuleOptions:
    if value is True or not isinstance(value, Mapping):
        return RuleOptions()
    try:
        return RuleOptions.model_validate(dict(value))
    except PydanticValidationError as e:
        raise SchemaError(f"Invalid configuration for rule '{rule}' of field '{field_name}': {e}") from e


def _argument_problem(rule: RuleSpec, arguments: list[Any]) -> str | None:
    """Queue the rule on a scratch chain so bad arguments never reach the real one."""
    try:
        rule.invoke(ValidationChain([], []), *arguments)
    except (TypeError, ValueError) as e:
        return str(e)
    return None


def _apply_optional(field_name: str, chain: ValidationChain, value: Any) -> None:
    if value is True or not isinstance(value, Mapping):
        chain.optional()
        return
    try:
        config = OptionalConfig.model_validate(dict(value))
    except PydanticValidationError as e:
        raise SchemaError(f"Invalid 'optional' configuration of field '{field_name}': {e}") from e
    chain.optional(config.options)


def dispatch_rules(
    field_name: str,
    config: Mapping[str, Any],
    chain: ValidationChain,
    diagnostics: list[SchemaDiagnostic],
) -> None:
    """Queue every rule of a field configuration onto its chain, in key order.

    Validator rules apply their modifiers in a fixed order: ``if``, negation,
    the rule itself, its error message, then bail.

    Args:
        field_name: Field the configuration belongs to
        config: The field's configuration mapping
        chain: Chain to queue rules on
        diagnostics: Receives an entry for each unknown or misconfigured rule
    """
    for key, value in config.items():
        # An empty mapping still enables the rule with default options
        if key in RESERVED_KEYS or (not value and not isinstance(value, Mapping)):
            continue

        if key == OPTIONAL_KEY:
            _apply_optional(field_name, chain, value)
            continue

        rule = get_rule(key)
        if rule is None:
            logger.warning(f"fieldcheck: a validator/sanitizer with name {key} does not exist")
            diagnostics.append(
                SchemaDiagnostic(
                    field=field_name,
                    code=UNKNOWN_RULE,
                    message=f"Unknown validator/sanitizer '{key}'",
                    rule=str(key),
                )
            )
            continue

        options = _parse_rule_options(field_name, key, value)
        arguments = options.arguments()

        problem = _argument_problem(rule, arguments)
        if problem is not None:
            logger.warning(f"fieldcheck: invalid arguments for {key} on field {field_name}: {problem}")
            diagnostics.append(
                SchemaDiagnostic(
                    field=field_name,
                    code=INVALID_RULE_ARGUMENTS,
                    message=f"Invalid arguments for '{key}': {problem}",
                    rule=key,
                )
            )
            continue

        with_modifiers = rule.accepts_modifiers and value is not True

        if with_modifiers and options.if_:
            chain.if_(options.if_)
        if with_modifiers and options.negated:
            chain.not_()

        rule.invoke(chain, *arguments)

        if with_modifiers and options.error_message:
            chain.with_message(options.error_message)
        if with_modifiers and options.bail:
            chain.bail()

        logger.log(TRACE, f"Queued {rule.kind.value} '{key}' on field '{field_name}'")


def check_schema(
    schema: Schema,
    default_locations: Iterable[Location] | None = None,
    *,
    strict: bool | None = None,
) -> CompiledSchema:
    """Compile a schema into validation chains.

    Args:
        schema: Mapping of field path -> field configuration
        default_locations: Locations for fields without ``in``; defaults to the
            configured default (every location)
        strict: Raise on unknown rule names or unusable rule arguments instead
            of only warning; defaults to the ``strict_rules`` setting

    Returns:
        CompiledSchema with one chain per field, in schema order

    Raises:
        SchemaError: If the schema or a field configuration is not a mapping
        UnknownRuleError: In strict mode, if any rule name is unknown
        SchemaError: In strict mode, if a rule cannot take its arguments
    """
    if not isinstance(schema, Mapping):
        raise SchemaError(f"Schema must be a mapping of field names, got {type(schema).__name__}")

    settings = get_settings()
    defaults = list(default_locations) if default_locations is not None else settings.default_locations
    if strict is None:
        strict = settings.strict_rules

    chains: list[ValidationChain] = []
    diagnostics: list[SchemaDiagnostic] = []

    for field_name, config in schema.items():
        if not isinstance(field_name, str):
            raise SchemaError(f"Schema keys must be field paths, got {field_name!r}")
        if not isinstance(config, Mapping):
            raise SchemaError(f"Schema for field '{field_name}' must be a mapping, got {type(config).__name__}")

        locations = resolve_locations(config.get("in"), defaults)
        if not locations:
            # Not a warning: the field simply never matches anything
            logger.debug(f"Field '{field_name}' has no valid location and will never be found")
            diagnostics.append(
                SchemaDiagnostic(
                    field=field_name,
                    code=NO_VALID_LOCATIONS,
                    message="No valid location to read the field from",
                )
            )

        chain = check(field_name, locations, config.get("error_message"))
        dispatch_rules(field_name, config, chain, diagnostics)
        chains.append(chain)

    if strict:
        unknown = [diagnostic for diagnostic in diagnostics if diagnostic.code == UNKNOWN_RULE]
        if unknown:
            raise UnknownRuleError(unknown)
        invalid = [diagnostic for diagnostic in diagnostics if diagnostic.code == INVALID_RULE_ARGUMENTS]
        if invalid:
            raise SchemaError("; ".join(f"{d.field}: {d.message}" for d in invalid))

    return CompiledSchema(chains=chains, diagnostics=diagnostics)
