"""
Formatter base class and construction context.

Every built-in formatter is constructed from a single ``FormatterContext``
so they all observe the same construction contract. Subclasses subscribe
to the event bus in ``__init__`` and write through ``self.log``.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..contracts import CleanupAction, FormatterStream, StreamWriter
from ..events import EventBus, EventDataCollector
from ..support import SupportCodeLibrary

__all__ = ["Formatter", "FormatterContext", "colors_enabled"]


@dataclass(frozen=True)
class FormatterContext:
    """Everything a built-in formatter is constructed with.

    Attributes:
        env: Snapshot of environment variables
        cwd: Working directory of the run
        event_bus: Shared run event source
        event_data_collector: Shared cache of test case attempts
        parsed_options: Options bundle from configuration, verbatim
        log: Write function bound to this formatter's stream
        stream: This formatter's output stream
        cleanup: Releases the stream (no-op for stdout)
        support_code_library: Support code registry of the run
    """

    env: Mapping[str, str]
    cwd: Path
    event_bus: EventBus
    event_data_collector: EventDataCollector
    parsed_options: Mapping[str, Any]
    log: StreamWriter
    stream: FormatterStream
    cleanup: CleanupAction
    support_code_library: SupportCodeLibrary


def colors_enabled(
    stream: FormatterStream,
    env: Mapping[str, str],
    options: Mapping[str, Any],
) -> bool:
    """Decide whether ANSI colors should be written to a stream.

    Lookup order:
    1. Explicit ``colors_enabled`` option
    2. NO_COLOR / FORCE_COLOR environment variables
    3. Whether the stream is a terminal
    """
    if "colors_enabled" in options:
        return bool(options["colors_enabled"])
    if env.get("NO_COLOR"):
        return False
    if env.get("FORCE_COLOR") not in (None, "", "0"):
        return True
    isatty = getattr(stream, "isatty", None)
    return bool(isatty()) if callable(isatty) else False


class Formatter:
    """Base class for built-in formatters."""

    # Short description shown when listing formatters
    documentation: str = ""

    def __init__(self, context: FormatterContext) -> None:
        self.env = context.env
        self.cwd = context.cwd
        self.event_bus = context.event_bus
        self.event_data_collector = context.event_data_collector
        self.parsed_options = context.parsed_options
        self.log = context.log
        self.stream = context.stream
        self.support_code_library = context.support_code_library
        self.colors_enabled = colors_enabled(context.stream, context.env, context.parsed_options)
        self._cleanup = context.cleanup

    async def finished(self) -> None:
        """Flush pending output and release the stream."""
        await self._cleanup()
