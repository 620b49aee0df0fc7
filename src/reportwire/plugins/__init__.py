"""
Plugins - Formatters whose construction is delegated to a plugin host.

Example:
    from reportwire.plugins import FormatterPlugin, PluginManager

    manager = PluginManager(event_bus)
    await manager.init_formatter(plugin, options, stream, stream.write, None)
"""

from .manager import PluginManager
from .plugin import FormatterPlugin, PluginFormatterContext

__all__ = [
    "FormatterPlugin",
    "PluginFormatterContext",
    "PluginManager",
]
