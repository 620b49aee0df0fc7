"""Shared test fixtures."""

import tempfile
from pathlib import Path

import pytest

from reportwire.events import EventBus, EventDataCollector
from reportwire.formatters import FormatterContext
from reportwire.support import SupportCodeLibrary


class FakeStream:
    """In-memory formatter stream that records writes and closes."""

    def __init__(self, name: str = "stream", tty: bool = False, fail_close: bool = False):
        self.name = name
        self.tty = tty
        self.fail_close = fail_close
        self.chunks: list[str] = []
        self.closed = False
        self.close_calls = 0

    def write(self, text: str) -> None:
        if self.closed:
            raise ValueError(f"write to closed stream {self.name}")
        self.chunks.append(text)

    def isatty(self) -> bool:
        return self.tty

    async def close(self) -> None:
        self.close_calls += 1
        if self.fail_close:
            raise OSError(f"cannot close {self.name}")
        self.closed = True

    @property
    def text(self) -> str:
        return "".join(self.chunks)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture
def make_stream():
    """Factory for FakeStream instances."""
    return FakeStream


@pytest.fixture
def stdout():
    """Non-interactive stdout stand-in."""
    return FakeStream("stdout")


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def collector(event_bus):
    return EventDataCollector(event_bus)


@pytest.fixture
def make_context(event_bus, collector, temp_dir):
    """Build a FormatterContext around a stream."""

    def factory(stream, cleanup=None, options=None, env=None):
        async def noop():
            return None

        return FormatterContext(
            env=env or {},
            cwd=temp_dir,
            event_bus=event_bus,
            event_data_collector=collector,
            parsed_options=options or {},
            log=stream.write,
            stream=stream,
            cleanup=cleanup or noop,
            support_code_library=SupportCodeLibrary(),
        )

    return factory


async def emit_passing_run(bus: EventBus, cases: int = 1) -> None:
    """Emit a complete run where every case has one passing step."""
    await bus.emit("test_run.started", {"total": cases})
    for i in range(cases):
        case_id = f"case-{i}"
        await bus.emit("test_case.started", {"id": case_id, "name": f"Scenario {i}", "attempt": 0})
        await bus.emit(
            "test_step.finished",
            {"test_case_started_id": case_id, "text": "a step", "status": "passed", "duration": 0.5},
        )
        await bus.emit("test_case.finished", {"test_case_started_id": case_id, "will_be_retried": False})
    await bus.emit("test_run.finished", {"success": True, "duration": 0.5 * cases})


@pytest.fixture
def emit_run():
    """Coroutine function emitting a passing run on a bus."""
    return emit_passing_run
