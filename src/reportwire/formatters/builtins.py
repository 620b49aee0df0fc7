"""
Built-in Formatters - Default run output implementations.

Provides four standard formats:
- progress: One character per step, summary at the end
- progress-bar: Redrawn bar of finished test cases (terminals only)
- summary: Summary only
- json: Finished test case attempts as a JSON array
"""

import json
from collections import Counter
from typing import Any

from ..events import Event, TestCaseAttempt, TestStatus
from .base import Formatter, FormatterContext

__all__ = [
    "JsonFormatter",
    "ProgressBarFormatter",
    "ProgressFormatter",
    "SummaryFormatter",
    "format_summary",
]

# ANSI color codes
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
DIM = "\033[2m"
RESET = "\033[0m"

STATUS_CHARACTERS = {
    TestStatus.PASSED: ".",
    TestStatus.FAILED: "F",
    TestStatus.SKIPPED: "-",
    TestStatus.UNDEFINED: "U",
    TestStatus.PENDING: "P",
    TestStatus.AMBIGUOUS: "A",
    TestStatus.UNKNOWN: "?",
}

STATUS_COLORS = {
    TestStatus.PASSED: GREEN,
    TestStatus.FAILED: RED,
    TestStatus.SKIPPED: CYAN,
    TestStatus.UNDEFINED: YELLOW,
    TestStatus.PENDING: YELLOW,
    TestStatus.AMBIGUOUS: RED,
    TestStatus.UNKNOWN: DIM,
}


def _colorize(text: str, status: TestStatus, enabled: bool) -> str:
    if not enabled:
        return text
    return f"{STATUS_COLORS[status]}{text}{RESET}"


def _count_line(noun: str, counts: Counter, total: int, colors: bool) -> str:
    plural = noun if total == 1 else f"{noun}s"
    line = f"{total} {plural}"
    parts = [
        _colorize(f"{counts[status]} {status.value}", status, colors)
        for status in STATUS_CHARACTERS
        if counts[status]
    ]
    if parts:
        line += f" ({', '.join(parts)})"
    return line


def format_summary(
    attempts: list[TestCaseAttempt],
    duration: float | None = None,
    colors: bool = False,
) -> str:
    """Format scenario and step counts for a finished run.

    Retried attempts are not counted; only the final attempt of each test
    case contributes.
    """
    final = [a for a in attempts if not a.will_be_retried]
    case_counts = Counter(a.status for a in final)
    step_counts = Counter(step.status for a in final for step in a.steps)

    lines = [
        _count_line("scenario", case_counts, len(final), colors),
        _count_line("step", step_counts, sum(step_counts.values()), colors),
    ]
    if duration is not None:
        minutes, seconds = divmod(duration, 60)
        lines.append(f"{int(minutes)}m{seconds:06.3f}s")
    return "\n".join(lines) + "\n"


class ProgressFormatter(Formatter):
    """One character per finished step, then a summary."""

    documentation = "Prints one character per step, followed by a summary"

    def __init__(self, context: FormatterContext) -> None:
        super().__init__(context)
        self.event_bus.on(self._on_step_finished, topic="test_step.finished")
        self.event_bus.on(self._on_run_finished, topic="test_run.finished")

    def _on_step_finished(self, event: Event) -> None:
        status = TestStatus(event.data.get("status", TestStatus.UNKNOWN.value))
        self.log(_colorize(STATUS_CHARACTERS[status], status, self.colors_enabled))

    def _on_run_finished(self, event: Event) -> None:
        self.log("\n\n")
        self.log(
            format_summary(
                self.event_data_collector.get_test_case_attempts(),
                event.data.get("duration"),
                self.colors_enabled,
            )
        )


class ProgressBarFormatter(Formatter):
    """Redraws a bar of finished test cases; needs an interactive terminal."""

    documentation = "Shows a progress bar of finished test cases (TTY only)"

    width = 40

    def __init__(self, context: FormatterContext) -> None:
        super().__init__(context)
        self.total = 0
        self.done = 0
        self.event_bus.on(self._on_run_started, topic="test_run.started")
        self.event_bus.on(self._on_case_finished, topic="test_case.finished")
        self.event_bus.on(self._on_run_finished, topic="test_run.finished")

    def render_bar(self) -> str:
        filled = self.width * self.done // self.total if self.total else 0
        return f"[{'#' * filled}{'.' * (self.width - filled)}] {self.done}/{self.total}"

    def _on_run_started(self, event: Event) -> None:
        self.total = event.data.get("total", 0)
        self.log(self.render_bar())

    def _on_case_finished(self, event: Event) -> None:
        if event.data.get("will_be_retried"):
            return
        self.done += 1
        self.log("\r" + self.render_bar())

    def _on_run_finished(self, event: Event) -> None:
        self.log("\n\n")
        self.log(
            format_summary(
                self.event_data_collector.get_test_case_attempts(),
                event.data.get("duration"),
                self.colors_enabled,
            )
        )


class SummaryFormatter(Formatter):
    """Summary of the run only."""

    documentation = "Prints a summary once the run has finished"

    def __init__(self, context: FormatterContext) -> None:
        super().__init__(context)
        self.event_bus.on(self._on_run_finished, topic="test_run.finished")

    def _on_run_finished(self, event: Event) -> None:
        self.log(
            format_summary(
                self.event_data_collector.get_test_case_attempts(),
                event.data.get("duration"),
                self.colors_enabled,
            )
        )


class JsonFormatter(Formatter):
    """Finished test case attempts as a JSON array."""

    documentation = "Writes test case attempts as JSON"

    def __init__(self, context: FormatterContext) -> None:
        super().__init__(context)
        self.event_bus.on(self._on_run_finished, topic="test_run.finished")

    def _on_run_finished(self, event: Event) -> None:
        attempts: list[dict[str, Any]] = [
            attempt.to_dict() for attempt in self.event_data_collector.get_test_case_attempts()
        ]
        self.log(json.dumps(attempts, indent=2, ensure_ascii=False, default=str))
