"""
Plugin Manager - Hosts plugin formatters.

Plugins never see a FormatterContext; the manager builds the narrower
PluginFormatterContext, runs the plugin's formatter function, and keeps
whatever cleanup it returns.
"""

import inspect
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import structlog

from ..contracts import FormatterStream, StreamWriter
from ..errors import ConstructionError
from ..events import EventBus, Handler
from .plugin import FormatterPlugin, PluginFormatterContext

__all__ = ["PluginManager"]


class PluginManager:
    """Initializes plugin formatters and owns their teardown.

    Example:
        manager = PluginManager(event_bus)
        await manager.init_formatter(plugin, options, stream, stream.write, directory)
        ...
        await manager.cleanup()
    """

    def __init__(self, event_bus: EventBus, logger: Any = None) -> None:
        self._event_bus = event_bus
        self._logger = logger or structlog.get_logger(__name__)
        self._cleanups: list[Callable[[], Any]] = []
        self._unsubscribers: list[Callable[[], None]] = []
        self._initialized: list[str] = []

    @property
    def initialized(self) -> list[str]:
        """Names of plugins initialized so far, in order."""
        return list(self._initialized)

    async def init_formatter(
        self,
        plugin: FormatterPlugin,
        options: Mapping[str, Any],
        stream: FormatterStream,
        write: StreamWriter,
        directory: Path | None = None,
    ) -> None:
        """Run a plugin's formatter function against one stream.

        Raises:
            ConstructionError: If the plugin's formatter function fails
        """
        context = PluginFormatterContext(
            on=self._subscribe,
            options=self._select_options(plugin, options),
            stream=stream,
            write=write,
            directory=directory,
            logger=self._logger.bind(plugin=plugin.name),
        )

        try:
            result = plugin.formatter(context)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise ConstructionError(plugin.name, str(e)) from e

        if callable(result):
            self._cleanups.append(result)

        self._initialized.append(plugin.name)
        self._logger.debug("plugin_formatter_initialized", plugin=plugin.name)

    async def cleanup(self) -> None:
        """Run plugin-returned cleanups in order and drop subscriptions."""
        for cleanup in self._cleanups:
            result = cleanup()
            if inspect.isawaitable(result):
                await result
        self._cleanups.clear()

        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def _subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        unsubscribe = self._event_bus.on(handler, topic=topic)
        self._unsubscribers.append(unsubscribe)
        return unsubscribe

    @staticmethod
    def _select_options(plugin: FormatterPlugin, options: Mapping[str, Any]) -> Mapping[str, Any]:
        if plugin.options_key is None:
            return options
        return options.get(plugin.options_key, {})
