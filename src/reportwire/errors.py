"""
Errors raised while wiring formatters to a test run.

Initialization errors are fatal: they propagate out of
``initialize_formatters`` and abort the run before any test executes.
``CleanupError`` is raised by the shutdown operation after every cleanup
action has settled.
"""

__all__ = [
    "CleanupError",
    "ConstructionError",
    "FormatterError",
    "ResolutionError",
    "StreamProvisionError",
]


class FormatterError(Exception):
    """Base class for formatter layer errors."""

    pass


class ResolutionError(FormatterError):
    """Raised when a specifier names no built-in formatter or loadable plugin."""

    def __init__(self, specifier: str, reason: str | None = None) -> None:
        self.specifier = specifier
        self.reason = reason
        message = f"Cannot resolve formatter '{specifier}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class StreamProvisionError(FormatterError):
    """Raised when a formatter output target cannot be opened."""

    def __init__(self, target: str, reason: str | None = None) -> None:
        self.target = target
        self.reason = reason
        message = f"Cannot open formatter output '{target}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ConstructionError(FormatterError):
    """Raised when a formatter rejects its construction context."""

    def __init__(self, specifier: str, reason: str | None = None) -> None:
        self.specifier = specifier
        self.reason = reason
        message = f"Failed to construct formatter '{specifier}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class CleanupError(FormatterError):
    """Raised when one or more formatter cleanup actions failed.

    Attributes:
        errors: Every failure, in cleanup registration order
    """

    def __init__(self, errors: list[BaseException]) -> None:
        self.errors = list(errors)
        details = "; ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(
            f"{len(self.errors)} formatter cleanup action(s) failed: {details}"
        )
