"""Pydantic models for the per-rule configuration objects of a schema."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RuleOptions(BaseModel):
    """Configuration of one rule entry when it is not the literal ``True``.

    ``if``, ``negated``, ``error_message`` and ``bail`` are only honored for
    validator rules; sanitizers read ``options`` alone.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, arbitrary_types_allowed=True)

    options: Any = None
    error_message: Any = None
    negated: bool = False
    bail: bool = False
    if_: Any = Field(default=None, alias="if")

    @field_validator("negated", "bail", mode="before")
    @classmethod
    def parse_flag(cls, v: Any) -> bool:
        """Flags follow plain truthiness, like the rule entries themselves."""
        return bool(v)

    def arguments(self) -> list[Any]:
        """Positional arguments for the rule method.

        A list or tuple is spread, any other value is passed as the single
        argument, and a missing value means no arguments.
        """
        if self.options is None:
            return []
        if isinstance(self.options, (list, tuple)):
            return list(self.options)
        return [self.options]


class OptionalConfig(BaseModel):
    """The ``optional`` entry of a field: ``True`` or ``{"options": {...}}``."""

    model_config = ConfigDict(extra="ignore")

    options: dict[str, Any] | None = None
