"""
Formatter plugins - Formatters whose construction is delegated.

A plugin formatter is a plain function rather than a Formatter subclass.
It receives a ``PluginFormatterContext``, subscribes to the events it
cares about, and may return a cleanup callable.

Example (in ``my_formatter.py``):
    from reportwire.plugins import FormatterPlugin

    def _formatter(ctx):
        ctx.on("test_case.finished", lambda event: ctx.write("case done\\n"))

    default = FormatterPlugin(name="case-counter", formatter=_formatter)
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..contracts import FormatterStream, StreamWriter
from ..events import Handler

__all__ = ["FormatterPlugin", "PluginFormatterContext"]


@dataclass(frozen=True)
class PluginFormatterContext:
    """What a plugin formatter function is called with.

    Attributes:
        on: Subscribe ``(topic, handler)`` to run events
        options: Options bundle (or the plugin's slice of it)
        stream: Output stream
        write: Write function bound to the stream
        directory: Directory holding the output file (None for stdout)
        logger: Logger bound to the plugin name
    """

    on: Callable[[str, Handler], Callable[[], None]]
    options: Mapping[str, Any]
    stream: FormatterStream
    write: StreamWriter
    directory: Path | None
    logger: Any


@dataclass(frozen=True)
class FormatterPlugin:
    """Formatter implemented by a plugin.

    Attributes:
        name: Plugin identifier used in logs and errors
        formatter: Called once with a PluginFormatterContext; may be async
            and may return a cleanup callable
        options_key: Key of the options bundle to pass instead of the whole bundle
    """

    name: str
    formatter: Callable[[PluginFormatterContext], Any]
    options_key: str | None = None
