"""
Formatter Registry - Maps built-in formatter names to classes.

The resolver checks the registry first; anything not registered here is
treated as a module or file to import.
"""

from .base import Formatter
from .builtins import (
    JsonFormatter,
    ProgressBarFormatter,
    ProgressFormatter,
    SummaryFormatter,
)

__all__ = ["FormatterRegistry", "builtin_formatters"]


class FormatterRegistry:
    """Registry of built-in formatter classes.

    Example:
        registry = FormatterRegistry()
        registry.register("progress", ProgressFormatter)

        formatter_class = registry.get("progress")
    """

    def __init__(self) -> None:
        # name -> Formatter subclass
        self._formatters: dict[str, type[Formatter]] = {}

    def register(self, name: str, formatter_class: type[Formatter]) -> None:
        """Register a built-in formatter.

        Args:
            name: Specifier users write (e.g., 'progress', 'json')
            formatter_class: Formatter subclass constructed from a context

        Raises:
            TypeError: If formatter_class is not a Formatter subclass
        """
        if not (isinstance(formatter_class, type) and issubclass(formatter_class, Formatter)):
            raise TypeError(f"{formatter_class!r} is not a Formatter subclass")
        self._formatters[name] = formatter_class

    def unregister(self, name: str) -> type[Formatter] | None:
        """Unregister a formatter."""
        return self._formatters.pop(name, None)

    def get(self, name: str) -> type[Formatter] | None:
        return self._formatters.get(name)

    def available_formats(self) -> list[str]:
        """List registered names in registration order."""
        return list(self._formatters.keys())

    def descriptions(self) -> dict[str, str]:
        """Name -> one-line documentation for each formatter."""
        return {name: cls.documentation for name, cls in self._formatters.items()}

    def clear(self) -> None:
        self._formatters.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._formatters


def _create_builtin_registry() -> FormatterRegistry:
    registry = FormatterRegistry()
    registry.register("progress", ProgressFormatter)
    registry.register("progress-bar", ProgressBarFormatter)
    registry.register("summary", SummaryFormatter)
    registry.register("json", JsonFormatter)
    return registry


# Global registry instance
builtin_formatters = _create_builtin_registry()
