"""
Formatter initialization and shutdown.

``initialize_formatters`` wires every configured formatter to its output
and returns the single shutdown operation for all of them.

Sequence:
1. Stdout formatter
2. One formatter per file target, in configuration order
3. Caller runs the test run
4. Caller awaits the returned shutdown exactly once

Initialization is strictly sequential. Any failure propagates immediately
and already-opened streams are not rolled back. Shutdown runs every
cleanup concurrently and waits for all of them before reporting failures.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from typing import Any

import structlog

from ..config import FormatterConfiguration
from ..contracts import CleanupAction, FormatterStream
from ..errors import CleanupError
from ..events import EventBus, EventDataCollector
from ..formatters import (
    BuiltinFormatter,
    FormatterBuilder,
    FormatterContext,
    PluginFormatter,
    ResolvedImplementation,
    resolve_implementation,
    select_specifier,
)
from ..plugins import PluginManager
from ..streams import create_stream
from ..support import SupportCodeLibrary

__all__ = ["STDOUT_TARGET", "Resolver", "Shutdown", "StreamOpener", "initialize_formatters"]

STDOUT_TARGET = "stdout"

Resolver = Callable[[str, Path], Awaitable[ResolvedImplementation]]
StreamOpener = Callable[
    [str, Callable[[], None], Path],
    Awaitable[tuple[FormatterStream, Path | None]],
]
Shutdown = Callable[[], Awaitable[None]]


async def _noop() -> None:
    return None


def _closer(stream: FormatterStream) -> CleanupAction:
    """Cleanup that closes a stream, awaiting the close if it is async."""

    async def close() -> None:
        result = stream.close()
        if asyncio.iscoroutine(result):
            await result

    return close


def _is_interactive(stream: FormatterStream) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty()) if callable(isatty) else False


async def initialize_formatters(
    *,
    env: Mapping[str, str],
    cwd: str | Path,
    stdout: FormatterStream,
    on_stream_error: Callable[[], None],
    event_bus: EventBus,
    event_data_collector: EventDataCollector,
    configuration: FormatterConfiguration,
    support_code_library: SupportCodeLibrary,
    plugin_manager: PluginManager,
    logger: Any = None,
    resolve: Resolver = resolve_implementation,
    open_stream: StreamOpener = create_stream,
) -> Shutdown:
    """Initialize the stdout formatter and every file formatter.

    Args:
        env: Environment snapshot handed to formatters
        cwd: Working directory of the run
        stdout: Standard output sink (never closed here)
        on_stream_error: Called when a file stream fails after opening
        event_bus: Shared run event source
        event_data_collector: Shared event data cache
        configuration: Formatter configuration
        support_code_library: Support code registry
        plugin_manager: Host for plugin formatters
        logger: Logger for warnings (defaults to module logger)
        resolve: Implementation resolver
        open_stream: File stream provisioner

    Returns:
        Shutdown operation; await it exactly once after the run

    Raises:
        ResolutionError: A specifier names no formatter
        StreamProvisionError: A file target cannot be opened
        ConstructionError: A formatter rejected its context
    """
    log = logger or structlog.get_logger(__name__)
    cwd = Path(cwd)
    env = dict(env)
    cleanups: list[CleanupAction] = []

    async def initialize_formatter(
        stream: FormatterStream,
        directory: Path | None,
        target: str,
        specifier: str,
    ) -> None:
        specifier = select_specifier(specifier, target, _is_interactive(stream), log)
        implementation = await resolve(specifier, cwd)
        is_stdout = stream is stdout

        if isinstance(implementation, BuiltinFormatter):
            context = FormatterContext(
                env=env,
                cwd=cwd,
                event_bus=event_bus,
                event_data_collector=event_data_collector,
                parsed_options=configuration.options,
                log=stream.write,
                stream=stream,
                cleanup=_noop if is_stdout else _closer(stream),
                support_code_library=support_code_library,
            )
            formatter = FormatterBuilder.build(implementation.formatter_class, context)
            cleanups.append(formatter.finished)
        elif isinstance(implementation, PluginFormatter):
            await plugin_manager.init_formatter(
                implementation.plugin,
                configuration.options,
                stream,
                stream.write,
                directory,
            )
            cleanups.append(_noop if is_stdout else _closer(stream))
        else:
            raise TypeError(f"Unsupported formatter implementation: {implementation!r}")

        log.debug("formatter_initialized", target=target, specifier=specifier)

    await initialize_formatter(stdout, None, STDOUT_TARGET, configuration.stdout)
    for target, specifier in configuration.files.items():
        stream, directory = await open_stream(target, on_stream_error, cwd)
        await initialize_formatter(stream, directory, target, specifier)

    async def shutdown() -> None:
        results = await asyncio.gather(
            *(cleanup() for cleanup in cleanups),
            return_exceptions=True,
        )
        cleanups.clear()

        errors = [r for r in results if isinstance(r, BaseException)]
        for error in errors:
            log.error("formatter_cleanup_failed", error=str(error), error_type=type(error).__name__)
        log.debug("formatters_shutdown", count=len(results), failed=len(errors))

        if errors:
            raise CleanupError(errors)

    return shutdown
