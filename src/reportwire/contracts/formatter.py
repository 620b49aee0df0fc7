"""
Formatter Protocol - Contract for constructed formatters.

A formatter subscribes to run events at construction time and renders
them to its own stream. The only thing the lifecycle layer needs from a
constructed formatter is its ``finished`` hook.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

# Zero-argument async teardown registered once per formatter
CleanupAction = Callable[[], Awaitable[None]]


@runtime_checkable
class FormatterProtocol(Protocol):
    """Contract for formatters built by ``FormatterBuilder``.

    Example:
        class DotsFormatter(Formatter):
            def __init__(self, context: FormatterContext) -> None:
                super().__init__(context)
                context.event_bus.on(self._on_step, topic="test_step.finished")

            def _on_step(self, event: Event) -> None:
                self.log(".")
    """

    async def finished(self) -> None:
        """Called once after the run completes.

        Must flush any buffered output and await the context cleanup
        before returning.
        """
        ...
