"""Steps queued on a validation chain.

Items are created while the chain is being built and executed in insertion
order by the ContextRunner. Validation items record errors on the context;
sanitization items replace values; Bail and Condition items stop the run by
raising ChainHalt."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .context import Context, FieldInstance, Meta
from .selection import write_value
from .validators import to_string

if TYPE_CHECKING:
    from ..request import Request
    from .chain import ValidationChain

CustomValidator = Callable[[Any, Meta], Any]
CustomSanitizer = Callable[[Any, Meta], Any]


class ChainHalt(Exception):
    """Stops the remaining items of a chain run."""

    pass


def _meta(request: Request, instance: FieldInstance) -> Meta:
    return Meta(request=request, location=instance.location, path=instance.path)


class ContextItem(ABC):
    """Abstract base class for chain steps"""

    @abstractmethod
    async def run(self, context: Context, request: Request, dry_run: bool) -> None:
        """Execute this step for every relevant field instance.

        Args:
            context: Context of the current run
            request: Request being validated
            dry_run: When True, nothing is written back to the request
        """
        pass


class Validation(ContextItem):
    """Base for steps that can be negated and carry their own message."""

    name: str
    negated: bool
    message: Any


@dataclass
class StandardValidation(Validation):
    """Runs a string validator from fieldcheck.chain.validators."""

    name: str
    validator: Callable[..., bool]
    options: tuple[Any, ...] = ()
    negated: bool = False
    message: Any = None

    async def run(self, context: Context, request: Request, dry_run: bool) -> None:
        for instance in context.get_data(required_only=True):
            values = instance.value if isinstance(instance.value, list) and instance.value else [instance.value]
            for value in values:
                if self.validator(to_string(value), *self.options) == self.negated:
                    context.add_error(self.message, instance, _meta(request, instance))
                    break


@dataclass
class CustomValidation(Validation):
    """Runs a user callable ``fn(value, meta)``.

    Raising fails the check (the exception text becomes the message unless the
    step has its own). A falsy synchronous return fails; an awaitable is awaited
    and only fails by raising.
    """

    name: str
    validator: CustomValidator
    negated: bool = False
    message: Any = None

    async def run(self, context: Context, request: Request, dry_run: bool) -> None:
        for instance in context.get_data(required_only=True):
            meta = _meta(request, instance)
            try:
                result = self.validator(instance.value, meta)
                if inspect.isawaitable(result):
                    await result
                    continue
            except Exception as err:
                if not self.negated:
                    context.add_error(self.message or str(err), instance, meta)
                continue

            failed = bool(result) if self.negated else not result
            if failed:
                context.add_error(self.message, instance, meta)


@dataclass
class ExistenceValidation(Validation):
    """Checks the field is present; see ValidationChain.exists for options."""

    name: str = "exists"
    check_null: bool = False
    check_falsy: bool = False
    negated: bool = False
    message: Any = None

    async def run(self, context: Context, request: Request, dry_run: bool) -> None:
        for instance in context.get_data(required_only=True):
            if self.check_falsy:
                exists = instance.exists and bool(instance.value)
            elif self.check_null:
                exists = instance.exists and instance.value is not None
            else:
                exists = instance.exists
            if exists == self.negated:
                context.add_error(self.message, instance, _meta(request, instance))


@dataclass
class Sanitization(ContextItem):
    """Replaces each value, element-wise for lists, and writes it back.

    Standard sanitizers get the stringified value and skip missing fields;
    custom sanitizers get the raw value and ``meta`` and may be async.
    """

    name: str
    sanitizer: Callable[..., Any]
    options: tuple[Any, ...] = ()
    custom: bool = False

    async def _sanitize(self, value: Any, meta: Meta) -> Any:
        if not self.custom:
            return self.sanitizer(to_string(value), *self.options)
        result = self.sanitizer(value, meta)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def run(self, context: Context, request: Request, dry_run: bool) -> None:
        for instance in context.get_data():
            if not instance.exists and not self.custom:
                continue
            meta = _meta(request, instance)
            if isinstance(instance.value, list) and not self.custom:
                new_value: Any = [await self._sanitize(value, meta) for value in instance.value]
            else:
                new_value = await self._sanitize(instance.value, meta)

            if not instance.exists and new_value is None:
                continue
            instance.value = new_value
            instance.exists = True
            if not dry_run:
                write_value(request, instance, new_value)


@dataclass
class Bail(ContextItem):
    """Stops the chain when any error was recorded so far."""

    async def run(self, context: Context, request: Request, dry_run: bool) -> None:
        if context.errors:
            raise ChainHalt()


@dataclass
class Condition(ContextItem):
    """Stops the chain unless the condition holds.

    A chain condition holds when a dry run of it yields no errors; a callable
    condition follows the custom validator rules for every field instance.
    """

    condition: ValidationChain | CustomValidator

    async def run(self, context: Context, request: Request, dry_run: bool) -> None:
        from .chain import ValidationChain

        if isinstance(self.condition, ValidationChain):
            result = await self.condition.run(request, dry_run=True)
            if not result.is_empty():
                raise ChainHalt()
            return

        probe = Context(fields=context.fields, locations=context.locations)
        probe.add_field_instances(context.get_data(required_only=True))
        await CustomValidation(name="if", validator=self.condition).run(probe, request, dry_run=True)
        if probe.errors:
            raise ChainHalt()
