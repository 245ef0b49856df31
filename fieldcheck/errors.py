"""Exception classes for fieldcheck.

Schema problems raise at compile time, request problems are reported
through results and only raise when asked to.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .chain.context import FieldValidationError
    from .schema.compiler import SchemaDiagnostic


class FieldcheckError(Exception):
    """Base exception for fieldcheck errors."""

    pass


class SchemaError(FieldcheckError):
    """Raised when a schema is structurally malformed (not a mapping, etc.)."""

    pass


class UnknownRuleError(SchemaError):
    """Raised in strict mode when a schema names rules that do not exist."""

    def __init__(self, diagnostics: list[SchemaDiagnostic]):
        self.diagnostics = diagnostics
        names = ", ".join(f"{d.field}.{d.rule}" for d in diagnostics)
        super().__init__(f"Unknown validators/sanitizers in schema: {names}")


class RequestValidationError(FieldcheckError):
    """Raised by Result.throw() when a request failed validation."""

    def __init__(self, errors: list[FieldValidationError]):
        self.errors = errors
        super().__init__(f"Request validation failed with {len(errors)} error(s)")

    def to_dict(self) -> dict[str, Any]:
        """Convert errors to a JSON-serializable payload."""
        return {"errors": [error.to_dict() for error in self.errors]}
