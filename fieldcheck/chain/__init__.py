"""Validation chain engine.

Builds chains of validators and sanitizers and runs them against requests."""

from __future__ import annotations

from .chain import ValidationChain, body, check, cookie, header, param, query
from .context import Context, FieldInstance, FieldValidationError, Meta, OptionalOptions
from .result import Result, ResultWithContext, validation_result

__all__ = [
    "Context",
    "FieldInstance",
    "FieldValidationError",
    "Meta",
    "OptionalOptions",
    "Result",
    "ResultWithContext",
    "ValidationChain",
    "body",
    "check",
    "cookie",
    "header",
    "param",
    "query",
    "validation_result",
]
