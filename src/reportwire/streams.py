"""
Stream provisioning for file-backed formatter targets.

``create_stream`` maps a target label to a writable ``FileStream``:
- Target resolved against the working directory
- Parent directory created on demand
- Write errors after opening reported through a callback, never raised
"""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import IO, Any

import structlog

from .errors import StreamProvisionError

__all__ = ["FileStream", "create_stream"]


class FileStream:
    """Text file destination owned by exactly one formatter.

    Example:
        stream, directory = await create_stream("reports/out.json", on_error, cwd)
        stream.write("{}")
        await stream.close()
    """

    def __init__(
        self,
        handle: IO[str],
        target: str,
        on_error: Callable[[], None],
        logger: Any = None,
    ) -> None:
        self._handle = handle
        self._target = target
        self._on_error = on_error
        self._logger = logger or structlog.get_logger(__name__)

    @property
    def target(self) -> str:
        return self._target

    @property
    def path(self) -> Path:
        return Path(self._handle.name)

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def write(self, text: str) -> None:
        """Write text; failures go to the error callback."""
        try:
            self._handle.write(text)
        except (OSError, ValueError) as e:
            self._logger.error("formatter_stream_error", target=self._target, error=str(e))
            self._on_error()

    def isatty(self) -> bool:
        return self._handle.isatty()

    async def close(self) -> None:
        """Flush and close the underlying file."""
        await asyncio.to_thread(self._close_sync)
        self._logger.debug("stream_closed", target=self._target)

    def _close_sync(self) -> None:
        self._handle.flush()
        self._handle.close()


async def create_stream(
    target: str,
    on_stream_error: Callable[[], None],
    cwd: str | Path,
    logger: Any = None,
) -> tuple[FileStream, Path]:
    """Open a formatter output file.

    Args:
        target: Target label (path, absolute or relative to cwd)
        on_stream_error: Called when a later write fails
        cwd: Working directory for relative targets
        logger: Optional logger (defaults to module logger)

    Returns:
        (stream, directory) where directory holds the file

    Raises:
        StreamProvisionError: If the file cannot be opened
    """
    log = logger or structlog.get_logger(__name__)
    path = (Path(cwd) / target).resolve()
    directory = path.parent

    try:
        await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)
    except OSError as e:
        # Opening below reports the real failure
        log.warning("formatter_directory_failed", target=target, directory=str(directory), error=str(e))

    try:
        handle = await asyncio.to_thread(path.open, "w", encoding="utf-8")
    except OSError as e:
        raise StreamProvisionError(target, str(e)) from e

    log.debug("stream_opened", target=target, path=str(path))
    return FileStream(handle, target, on_stream_error, log), directory
