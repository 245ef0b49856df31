"""Executes a chain's queued items against a request."""

from __future__ import annotations


from ..logging_config import get_logger
from ..request import Request
from .context import Context
from .items import ChainHalt
from .result import ResultWithContext
from .selection import select_fields

logger = get_logger(__name__)


class ContextRunner:
    """Runs the items of a freshly built context, in insertion order."""

    def __init__(self, context: Context) -> None:
        self.context = context

    async def run(self, request: Request, dry_run: bool = False) -> ResultWithContext:
        """Select the field values and run every item over them.

        Args:
            request: Request to validate
            dry_run: Do not write sanitized values back or record the context

        Returns:
            ResultWithContext holding this run's errors
        """
        context = self.context
        context.add_field_instances(select_fields(request, context.fields, context.locations))

        for item in context.items:
            try:
                await item.run(context, request, dry_run)
            except ChainHalt:
                logger.debug(f"Chain for {context.fields} halted at {type(item).__name__}")
                break

        if not dry_run:
            request.contexts.append(context)

        return ResultWithContext(errors=list(context.errors), context=context)
