"""Validation results."""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import RequestValidationError
from ..request import Request
from .context import Context, FieldValidationError


@dataclass
class Result:
    """Errors produced by one or more chain runs"""

    errors: list[FieldValidationError]

    def is_empty(self) -> bool:
        """True when validation passed."""
        return not self.errors

    def array(self, only_first_error: bool = False) -> list[FieldValidationError]:
        """Return errors in order, optionally only the first one per field path."""
        if not only_first_error:
            return list(self.errors)
        return list(self.mapped().values())

    def mapped(self) -> dict[str, FieldValidationError]:
        """Map each field path to its first error."""
        mapped: dict[str, FieldValidationError] = {}
        for error in self.errors:
            mapped.setdefault(error.path, error)
        return mapped

    def throw(self) -> None:
        """Raise RequestValidationError if there are errors."""
        if self.errors:
            raise RequestValidationError(list(self.errors))


@dataclass
class ResultWithContext(Result):
    """Result of a single chain run, with the context it ran in"""

    context: Context


def validation_result(request: Request) -> Result:
    """Collect the errors of every chain that ran against ``request``.

    Args:
        request: A request previously passed to chain or schema runs

    Returns:
        Result with errors in run order
    """
    return Result(errors=[error for context in request.contexts for error in context.errors])
