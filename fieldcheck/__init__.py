"""
fieldcheck - declarative request validation and sanitization.

Compile a schema into validation chains and run them against a request:

    from fieldcheck import Request, check_schema, validation_result

    compiled = check_schema({"age": {"in": "body", "is_int": True}})
    await compiled.run(request)
    validation_result(request).throw()
"""

from __future__ import annotations

from .chain import (
    FieldValidationError,
    Meta,
    Result,
    ResultWithContext,
    ValidationChain,
    body,
    check,
    cookie,
    header,
    param,
    query,
    validation_result,
)
from .errors import FieldcheckError, RequestValidationError, SchemaError, UnknownRuleError
from .request import VALID_LOCATIONS, Location, Request
from .schema import CompiledSchema, RuleKind, SchemaDiagnostic, check_schema

__version__ = "1.0.0"

__all__ = [
    "VALID_LOCATIONS",
    "CompiledSchema",
    "FieldValidationError",
    "FieldcheckError",
    "Location",
    "Meta",
    "Request",
    "RequestValidationError",
    "Result",
    "ResultWithContext",
    "RuleKind",
    "SchemaDiagnostic",
    "SchemaError",
    "UnknownRuleError",
    "ValidationChain",
    "body",
    "check",
    "check_schema",
    "cookie",
    "header",
    "param",
    "query",
    "validation_result",
]
