"""Per-run validation context.

A chain describes its field, locations and queued items once; every run
builds a fresh Context from that description so a chain can be reused across
requests without leaking errors between them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..request import Location, Request

if TYPE_CHECKING:
    from .items import ContextItem

DEFAULT_MESSAGE = "Invalid value"


@dataclass
class OptionalOptions:
    """What counts as "absent" for an optional field.

    By default only missing fields are skipped. ``nullable`` also skips
    ``None`` and ``check_falsy`` skips any falsy value ("", 0, False, ...).
    """

    nullable: bool = False
    check_falsy: bool = False


@dataclass
class Meta:
    """Passed to custom validators, custom sanitizers and dynamic messages."""

    request: Request
    location: Location
    path: str


@dataclass
class FieldInstance:
    """One concrete value selected from a request for a field pattern."""

    location: Location
    path: str
    original_path: str
    value: Any
    exists: bool
    segments: list[str | int] = field(default_factory=list)


@dataclass
class FieldValidationError:
    """A failed validation for one field instance."""

    location: Location
    path: str
    value: Any
    msg: Any
    type: str = "field"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        return {
            "type": self.type,
            "location": self.location,
            "path": self.path,
            "value": self.value,
            "msg": self.msg,
        }


@dataclass
class Context:
    """State of a single chain run against a single request."""

    fields: list[str]
    locations: list[Location]
    message: Any = None
    optional: OptionalOptions | None = None
    items: list[ContextItem] = field(default_factory=list)
    instances: list[FieldInstance] = field(default_factory=list)
    errors: list[FieldValidationError] = field(default_factory=list)

    def add_field_instances(self, instances: list[FieldInstance]) -> None:
        """Register the values selected from the request."""
        self.instances.extend(instances)

    def get_data(self, required_only: bool = False) -> list[FieldInstance]:
        """Return the instances a step should operate on.

        When the same path was searched in several locations, instances that
        exist win; if none exists, only the first one is kept so a missing
        field is reported once.

        Args:
            required_only: Drop instances that the optional() settings skip

        Returns:
            Instances in selection order
        """
        by_path: dict[str, list[FieldInstance]] = {}
        for instance in self.instances:
            by_path.setdefault(instance.path, []).append(instance)

        selected: list[FieldInstance] = []
        for instances in by_path.values():
            existing = [instance for instance in instances if instance.exists]
            selected.extend(existing or instances[:1])

        if required_only:
            selected = [instance for instance in selected if not self._is_skipped(instance)]
        return selected

    def _is_skipped(self, instance: FieldInstance) -> bool:
        if self.optional is None:
            return False
        if not instance.exists:
            return True
        if self.optional.check_falsy:
            return not instance.value
        if self.optional.nullable:
            return instance.value is None
        return False

    def add_error(self, message: Any, instance: FieldInstance, meta: Meta) -> None:
        """Record a failure for an instance.

        Message precedence: the step's own message, then the chain message,
        then the default. Callable messages receive ``(value, meta)``.
        """
        msg = message or self.message or DEFAULT_MESSAGE
        if callable(msg):
            msg = msg(instance.value, meta)

        self.errors.append(
            FieldValidationError(
                location=instance.location,
                path=instance.path,
                value=instance.value,
                msg=msg,
            )
        )
