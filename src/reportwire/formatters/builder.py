"""
Formatter Builder - Constructs built-in formatters from a context.

Handles:
- Constructing the formatter class with the shared context
- Wrapping constructor failures in ConstructionError
- Verifying the result exposes the ``finished`` hook
"""

import structlog

from ..contracts import FormatterProtocol
from ..errors import ConstructionError
from .base import Formatter, FormatterContext

__all__ = ["FormatterBuilder"]

logger = structlog.get_logger(__name__)


class FormatterBuilder:
    """Builds ready-to-use formatter instances.

    Example:
        formatter = FormatterBuilder.build(ProgressFormatter, context)
        cleanups.append(formatter.finished)
    """

    @staticmethod
    def build(formatter_class: type[Formatter], context: FormatterContext) -> FormatterProtocol:
        """Construct a formatter.

        Args:
            formatter_class: Built-in formatter class
            context: Construction context for this formatter

        Returns:
            Constructed formatter

        Raises:
            ConstructionError: If the constructor rejects the context
        """
        name = formatter_class.__name__
        try:
            formatter = formatter_class(context)
        except Exception as e:
            raise ConstructionError(name, str(e)) from e

        if not isinstance(formatter, FormatterProtocol):
            raise ConstructionError(name, "missing finished() hook")

        logger.debug("formatter_built", formatter=name)
        return formatter
