"""
reportwire - Formatter wiring for test runs.

Initializes the formatters that render a running test session, routes
each one to stdout or its own file, and shuts them all down together.

Example:
    from reportwire import (
        EventBus,
        EventDataCollector,
        FormatterConfiguration,
        PluginManager,
        SupportCodeLibrary,
        initialize_formatters,
    )

    bus = EventBus()
    plugins = PluginManager(bus)
    shutdown = await initialize_formatters(
        env=os.environ,
        cwd=Path.cwd(),
        stdout=sys.stdout,
        on_stream_error=on_error,
        event_bus=bus,
        event_data_collector=EventDataCollector(bus),
        configuration=FormatterConfiguration.from_formats(["progress", "json:out.json"]),
        support_code_library=SupportCodeLibrary(),
        plugin_manager=plugins,
    )
    await run_tests(bus)
    await plugins.cleanup()
    await shutdown()
"""

from .config import FormatterConfiguration
from .errors import (
    CleanupError,
    ConstructionError,
    FormatterError,
    ResolutionError,
    StreamProvisionError,
)
from .events import Event, EventBus, EventDataCollector
from .formatters import Formatter, FormatterContext, builtin_formatters
from .lifecycle import initialize_formatters
from .plugins import FormatterPlugin, PluginManager
from .support import SupportCodeLibrary

__version__ = "0.1.0"

__all__ = [
    "CleanupError",
    "ConstructionError",
    "Event",
    "EventBus",
    "EventDataCollector",
    "Formatter",
    "FormatterConfiguration",
    "FormatterContext",
    "FormatterError",
    "FormatterPlugin",
    "PluginManager",
    "ResolutionError",
    "StreamProvisionError",
    "SupportCodeLibrary",
    "builtin_formatters",
    "initialize_formatters",
]
