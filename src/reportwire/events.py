"""
Event Bus - Async pub/sub carrying test-run events to formatters.

The bus is the shared event source every formatter subscribes to.
The runner emits, formatters listen; neither knows about the other.

Usage:
    # Emit events
    await bus.emit("test_step.finished", {"test_case_started_id": "1", "status": "passed"})

    # Subscribe with patterns
    bus.on(handler, topic="test_case.*")        # wildcard
    bus.on(handler)                             # receive all

Run topics:
    test_run.started     {"total": int}
    test_case.started    {"id": str, "name": str, "attempt": int}
    test_step.finished   {"test_case_started_id": str, "text": str, "status": str, "duration": float}
    test_case.finished   {"test_case_started_id": str, "will_be_retried": bool}
    test_run.finished    {"success": bool, "duration": float}
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from fnmatch import fnmatch
from typing import Any

import structlog

__all__ = [
    "Event",
    "EventBus",
    "EventDataCollector",
    "Handler",
    "StepResult",
    "Subscription",
    "TestCaseAttempt",
    "TestStatus",
]

logger = structlog.get_logger(__name__)

# Type alias for handlers
Handler = Callable[["Event"], Any | Coroutine[Any, Any, Any]]


class TestStatus(str, Enum):
    """Outcome of a test step or test case."""

    __test__ = False

    PASSED = "passed"
    SKIPPED = "skipped"
    PENDING = "pending"
    UNDEFINED = "undefined"
    AMBIGUOUS = "ambiguous"
    FAILED = "failed"
    UNKNOWN = "unknown"


# Worst-first ranking used to derive a test case status from its steps
_STATUS_RANK = {
    TestStatus.UNKNOWN: 0,
    TestStatus.PASSED: 1,
    TestStatus.SKIPPED: 2,
    TestStatus.PENDING: 3,
    TestStatus.UNDEFINED: 4,
    TestStatus.AMBIGUOUS: 5,
    TestStatus.FAILED: 6,
}


@dataclass(slots=True, frozen=True)
class Event:
    """Immutable event envelope.

    Attributes:
        topic: What happened ("test_case.started", "test_run.finished")
        data: Payload
        ts: Timestamp (auto-set)
    """
    topic: str
    data: dict = field(default_factory=dict)
    ts: float = field(default_factory=lambda: datetime.now().timestamp())


@dataclass(slots=True)
class Subscription:
    """Single subscription with a topic filter."""
    handler: Handler
    topic: str = "*"

    def matches(self, event: Event) -> bool:
        return fnmatch(event.topic, self.topic)


class EventBus:
    """Async event bus with pattern-based subscriptions.

    Handlers run concurrently. A failing handler is logged and does not
    prevent the others from receiving the event.
    """

    __slots__ = ("_subs", "_logger")

    def __init__(self) -> None:
        self._subs: list[Subscription] = []
        self._logger = logger.bind(component="event_bus")

    def on(self, handler: Handler, *, topic: str = "*") -> Callable[[], None]:
        """Subscribe to events matching a topic pattern.

        Args:
            handler: Async or sync callable receiving Event
            topic: Glob pattern for topic filter

        Returns:
            Unsubscribe function
        """
        sub = Subscription(handler, topic)
        self._subs.append(sub)
        return lambda: self._subs.remove(sub) if sub in self._subs else None

    @property
    def subscriber_count(self) -> int:
        return len(self._subs)

    async def emit(self, topic: str, data: dict | None = None) -> None:
        """Emit an event to all matching subscribers."""
        event = Event(topic, data or {})

        handlers = [s.handler for s in self._subs if s.matches(event)]
        if not handlers:
            return

        async def run_handler(h: Handler) -> None:
            try:
                result = h(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                self._logger.error("handler_error", topic=event.topic, error=str(e))

        await asyncio.gather(*[run_handler(h) for h in handlers])


# ─────────────────────────────────────────────────────────────────────────────
# Event data cache
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class StepResult:
    """Result of one executed step."""
    text: str
    status: TestStatus
    duration: float = 0.0
    message: str | None = None


@dataclass(slots=True)
class TestCaseAttempt:
    """One attempt at running a test case, with its step results."""

    __test__ = False

    id: str
    name: str
    attempt: int = 0
    steps: list[StepResult] = field(default_factory=list)
    finished: bool = False
    will_be_retried: bool = False

    @property
    def status(self) -> TestStatus:
        """Worst status among the steps (UNKNOWN when none ran)."""
        worst = TestStatus.UNKNOWN
        for step in self.steps:
            if _STATUS_RANK[step.status] > _STATUS_RANK[worst]:
                worst = step.status
        return worst

    @property
    def duration(self) -> float:
        return sum(step.duration for step in self.steps)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "attempt": self.attempt,
            "status": self.status.value,
            "will_be_retried": self.will_be_retried,
            "steps": [
                {
                    "text": step.text,
                    "status": step.status.value,
                    "duration": step.duration,
                    **({"message": step.message} if step.message else {}),
                }
                for step in self.steps
            ],
        }


class EventDataCollector:
    """Caches test-case attempts from run events.

    One collector is shared by every formatter so each can render from the
    same view of the run without re-deriving it.

    Example:
        bus = EventBus()
        collector = EventDataCollector(bus)
        ...
        for attempt in collector.get_test_case_attempts():
            print(attempt.name, attempt.status)
    """

    def __init__(self, event_bus: EventBus) -> None:
        self._attempts: dict[str, TestCaseAttempt] = {}
        self.undefined_parameter_types: list[dict[str, Any]] = []
        event_bus.on(self._on_test_case_started, topic="test_case.started")
        event_bus.on(self._on_test_step_finished, topic="test_step.finished")
        event_bus.on(self._on_test_case_finished, topic="test_case.finished")
        event_bus.on(self._on_undefined_parameter_type, topic="undefined_parameter_type")

    def get_test_case_attempt(self, test_case_started_id: str) -> TestCaseAttempt:
        """Get a cached attempt by its test_case.started id.

        Raises:
            KeyError: If no such attempt was started
        """
        return self._attempts[test_case_started_id]

    def get_test_case_attempts(self) -> list[TestCaseAttempt]:
        """Finished attempts in start order."""
        return [a for a in self._attempts.values() if a.finished]

    def _on_test_case_started(self, event: Event) -> None:
        data = event.data
        self._attempts[data["id"]] = TestCaseAttempt(
            id=data["id"],
            name=data.get("name", ""),
            attempt=data.get("attempt", 0),
        )

    def _on_test_step_finished(self, event: Event) -> None:
        data = event.data
        attempt = self._attempts.get(data["test_case_started_id"])
        if attempt is None:
            logger.warning("step_for_unknown_test_case", id=data["test_case_started_id"])
            return
        attempt.steps.append(
            StepResult(
                text=data.get("text", ""),
                status=TestStatus(data.get("status", TestStatus.UNKNOWN.value)),
                duration=data.get("duration", 0.0),
                message=data.get("message"),
            )
        )

    def _on_test_case_finished(self, event: Event) -> None:
        data = event.data
        attempt = self._attempts.get(data["test_case_started_id"])
        if attempt is None:
            logger.warning("finish_for_unknown_test_case", id=data["test_case_started_id"])
            return
        attempt.finished = True
        attempt.will_be_retried = data.get("will_be_retried", False)

    def _on_undefined_parameter_type(self, event: Event) -> None:
        self.undefined_parameter_types.append(dict(event.data))
