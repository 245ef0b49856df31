"""Tests for Result and validation_result aggregation."""

from __future__ import annotations

import pytest

from fieldcheck.chain import body, query, validation_result
from fieldcheck.chain.context import FieldValidationError
from fieldcheck.chain.result import Result
from fieldcheck.errors import RequestValidationError
from fieldcheck.request import Request


def _error(path: str, msg: str) -> FieldValidationError:
    return FieldValidationError(location="body", path=path, value=None, msg=msg)


class TestResult:
    def test_empty_result(self):
        result = Result(errors=[])

        assert result.is_empty()
        assert result.array() == []
        assert result.mapped() == {}
        result.throw()

    def test_mapped_keeps_first_error_per_path(self):
        result = Result(errors=[_error("a", "first"), _error("a", "second"), _error("b", "other")])

        mapped = result.mapped()

        assert list(mapped) == ["a", "b"]
        assert mapped["a"].msg == "first"

    def test_array_only_first_error(self):
        result = Result(errors=[_error("a", "first"), _error("a", "second"), _error("b", "other")])

        assert len(result.array()) == 3
        assert [error.msg for error in result.array(only_first_error=True)] == ["first", "other"]

    def test_throw_raises_with_errors(self):
        result = Result(errors=[_error("a", "bad")])

        with pytest.raises(RequestValidationError) as exc_info:
            result.throw()

        assert exc_info.value.errors == result.errors
        assert exc_info.value.to_dict() == {
            "errors": [{"type": "field", "location": "body", "path": "a", "value": None, "msg": "bad"}]
        }


class TestValidationResult:
    @pytest.mark.asyncio
    async def test_aggregates_every_chain_run(self):
        request = Request(body={"age": "x"}, query={"page": "y"})

        await body("age").is_int().run(request)
        await query("page").is_int().run(request)

        result = validation_result(request)

        assert [(error.location, error.path) for error in result.errors] == [("body", "age"), ("query", "page")]

    @pytest.mark.asyncio
    async def test_dry_runs_are_not_aggregated(self):
        request = Request(body={"age": "x"})

        await body("age").is_int().run(request, dry_run=True)

        assert validation_result(request).is_empty()
