"""Schema compilation: declarative field rules -> validation chains."""

from __future__ import annotations

from .compiler import CompiledSchema, SchemaDiagnostic, check_schema, dispatch_rules, resolve_locations
from .rules import RULES, RuleKind, RuleSpec, get_rule

__all__ = [
    "RULES",
    "CompiledSchema",
    "RuleKind",
    "RuleSpec",
    "SchemaDiagnostic",
    "check_schema",
    "dispatch_rules",
    "get_rule",
    "resolve_locations",
]
