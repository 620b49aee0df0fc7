"""
Lifecycle - Formatter initialization and orderly shutdown.

Example:
    from reportwire.lifecycle import initialize_formatters

    plugins = PluginManager(bus)
    shutdown = await initialize_formatters(
        env=os.environ,
        cwd=Path.cwd(),
        stdout=sys.stdout,
        on_stream_error=mark_run_failed,
        event_bus=bus,
        event_data_collector=EventDataCollector(bus),
        configuration=FormatterConfiguration.from_env(),
        support_code_library=SupportCodeLibrary(),
        plugin_manager=plugins,
    )
    await run_tests(bus)
    await plugins.cleanup()
    await shutdown()
"""

from .initialize import STDOUT_TARGET, Resolver, Shutdown, StreamOpener, initialize_formatters

__all__ = [
    "STDOUT_TARGET",
    "Resolver",
    "Shutdown",
    "StreamOpener",
    "initialize_formatters",
]
