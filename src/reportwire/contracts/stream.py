"""
Stream Protocol - Contract for formatter output destinations.

``sys.stdout`` satisfies it as-is. File targets are wrapped in
``FileStream``, which adds an awaitable ``close``.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

# Write function bound once per stream
StreamWriter = Callable[[str], Any]


@runtime_checkable
class FormatterStream(Protocol):
    """Writable text destination for one formatter."""

    def write(self, text: str) -> Any:
        """Write text to the destination."""
        ...

    def isatty(self) -> bool:
        """True when the destination is an interactive terminal."""
        ...
