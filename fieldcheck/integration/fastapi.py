"""
FastAPI integration.

Runs a compiled schema as a route dependency and turns validation failures
into an HTTP error.

Usage:
    from fieldcheck.integration.fastapi import schema_dependency

    validate_user = schema_dependency({"email": {"in": "body", "is_email": True, "trim": True}})

    @router.post("/users")
    async def create_user(validated: Request = Depends(validate_user)):
        ...
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Iterable
from typing import Any
from urllib.parse import parse_qsl

from fastapi import HTTPException, status
from fastapi import Request as HTTPRequest

from ..chain.result import validation_result
from ..logging_config import get_logger
from ..request import Location, Request
from ..schema.compiler import Schema, check_schema
from ..settings import get_settings

logger = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _group_items(items: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Collapse repeated keys (``?tag=a&tag=b``) into lists."""
    grouped: dict[str, Any] = {}
    for key, value in items:
        if key not in grouped:
            grouped[key] = value
        elif isinstance(grouped[key], list):
            grouped[key].append(value)
        else:
            grouped[key] = [grouped[key], value]
    return grouped


async def from_starlette(request: HTTPRequest) -> Request:
    """Build a fieldcheck Request from an incoming Starlette/FastAPI request.

    JSON and urlencoded form bodies are parsed; any other body is ignored.

    Raises:
        HTTPException: 400 if a JSON or form body cannot be decoded
    """
    body: Any = {}
    raw = await request.body()
    content_type = request.headers.get("content-type", "")

    if raw and "application/json" in content_type:
        try:
            body = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON format") from None
    elif raw and FORM_CONTENT_TYPE in content_type:
        try:
            form = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid form encoding") from None
        body = _group_items(parse_qsl(form, keep_blank_values=True))

    return Request(
        body=body,
        cookies=dict(request.cookies),
        headers=dict(request.headers),
        params=dict(request.path_params),
        query=_group_items(request.query_params.multi_items()),
    )


def schema_dependency(
    schema: Schema,
    default_locations: Iterable[Location] | None = None,
) -> Callable[[HTTPRequest], Awaitable[Request]]:
    """Create a FastAPI dependency validating requests against ``schema``.

    The schema is compiled once. On success the dependency returns the
    fieldcheck Request, carrying sanitized values; on failure it raises an
    HTTPException with the configured status code and the error list.
    """
    compiled = check_schema(schema, default_locations)

    async def dependency(request: HTTPRequest) -> Request:
        validation_request = await from_starlette(request)
        await compiled.run(validation_request)

        result = validation_result(validation_request)
        if not result.is_empty():
            logger.info(f"Validation failed for {request.url.path}: {len(result.errors)} error(s)")
            raise HTTPException(
                status_code=get_settings().error_status_code,
                detail={"errors": [error.to_dict() for error in result.array()]},
            )
        return validation_request

    return dependency
