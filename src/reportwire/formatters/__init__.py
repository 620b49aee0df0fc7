"""
Formatters - Built-in formatters and the machinery to pick and build them.

Example:
    from reportwire.formatters import resolve_implementation, FormatterBuilder

    implementation = await resolve_implementation("progress", cwd)
    formatter = FormatterBuilder.build(implementation.formatter_class, context)
"""

from .base import Formatter, FormatterContext, colors_enabled
from .builder import FormatterBuilder
from .builtins import (
    JsonFormatter,
    ProgressBarFormatter,
    ProgressFormatter,
    SummaryFormatter,
    format_summary,
)
from .capability import FALLBACK_SPECIFIER, INTERACTIVE_SPECIFIER, select_specifier
from .registry import FormatterRegistry, builtin_formatters
from .resolve import (
    BuiltinFormatter,
    PluginFormatter,
    ResolvedImplementation,
    resolve_implementation,
)

__all__ = [
    # Base
    "Formatter",
    "FormatterContext",
    "colors_enabled",
    # Built-ins
    "JsonFormatter",
    "ProgressBarFormatter",
    "ProgressFormatter",
    "SummaryFormatter",
    "format_summary",
    # Registry
    "FormatterRegistry",
    "builtin_formatters",
    # Selection and construction
    "FALLBACK_SPECIFIER",
    "INTERACTIVE_SPECIFIER",
    "select_specifier",
    "BuiltinFormatter",
    "PluginFormatter",
    "ResolvedImplementation",
    "resolve_implementation",
    "FormatterBuilder",
]
