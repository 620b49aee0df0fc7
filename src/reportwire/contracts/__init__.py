"""
Contracts (Protocols) for reportwire.

These protocols define the interfaces that formatters and output streams
must satisfy. Using Protocol enables structural subtyping - no inheritance
required.
"""

from .formatter import CleanupAction, FormatterProtocol
from .stream import FormatterStream, StreamWriter

__all__ = [
    "CleanupAction",
    "FormatterProtocol",
    "FormatterStream",
    "StreamWriter",
]
