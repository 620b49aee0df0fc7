"""Tests for built-in formatters, the registry and the builder."""

import json

import pytest

from reportwire.errors import ConstructionError
from reportwire.formatters import (
    Formatter,
    FormatterBuilder,
    FormatterRegistry,
    JsonFormatter,
    ProgressBarFormatter,
    ProgressFormatter,
    SummaryFormatter,
    builtin_formatters,
    colors_enabled,
    format_summary,
)


class TestFormatterRegistry:
    """Test registry operations."""

    def test_builtins_registered(self):
        assert builtin_formatters.available_formats() == [
            "progress",
            "progress-bar",
            "summary",
            "json",
        ]
        assert builtin_formatters.get("json") is JsonFormatter

    def test_register_and_unregister(self):
        registry = FormatterRegistry()

        registry.register("dots", ProgressFormatter)

        assert "dots" in registry
        assert registry.unregister("dots") is ProgressFormatter
        assert registry.get("dots") is None

    def test_clear(self):
        registry = FormatterRegistry()
        registry.register("dots", ProgressFormatter)

        registry.clear()

        assert "dots" not in registry
        assert registry.available_formats() == []

    def test_register_rejects_non_formatter(self):
        registry = FormatterRegistry()

        with pytest.raises(TypeError):
            registry.register("bad", dict)

    def test_descriptions(self):
        descriptions = builtin_formatters.descriptions()

        assert "TTY" in descriptions["progress-bar"]


class TestColorsEnabled:
    """Test color decision order."""

    def test_option_wins(self, make_stream):
        assert colors_enabled(make_stream(tty=False), {}, {"colors_enabled": True}) is True

    def test_no_color_env(self, make_stream):
        assert colors_enabled(make_stream(tty=True), {"NO_COLOR": "1"}, {}) is False

    def test_force_color_env(self, make_stream):
        assert colors_enabled(make_stream(tty=False), {"FORCE_COLOR": "1"}, {}) is True

    def test_falls_back_to_tty(self, make_stream):
        assert colors_enabled(make_stream(tty=True), {}, {}) is True
        assert colors_enabled(make_stream(tty=False), {}, {}) is False


class TestFormatterBuilder:
    """Test construction."""

    def test_builds_with_context(self, make_stream, make_context):
        stream = make_stream()
        context = make_context(stream, options={"k": "v"})

        formatter = FormatterBuilder.build(SummaryFormatter, context)

        assert isinstance(formatter, SummaryFormatter)
        assert formatter.stream is stream
        assert formatter.parsed_options == {"k": "v"}
        assert formatter.support_code_library is context.support_code_library

    def test_constructor_failure_wrapped(self, make_stream, make_context):
        class Picky(Formatter):
            def __init__(self, context):
                raise ValueError("needs an option")

        with pytest.raises(ConstructionError) as exc_info:
            FormatterBuilder.build(Picky, make_context(make_stream()))

        assert exc_info.value.specifier == "Picky"
        assert "needs an option" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_finished_awaits_cleanup(self, make_stream, make_context):
        calls = []

        async def cleanup():
            calls.append("cleanup")

        formatter = FormatterBuilder.build(ProgressFormatter, make_context(make_stream(), cleanup))
        await formatter.finished()

        assert calls == ["cleanup"]


class TestBuiltinFormatters:
    """Test rendering of the built-in formatters."""

    @pytest.mark.asyncio
    async def test_progress(self, event_bus, make_stream, make_context, emit_run):
        stream = make_stream()
        ProgressFormatter(make_context(stream))

        await emit_run(event_bus, cases=2)

        assert stream.text.startswith("..\n\n")
        assert "2 scenarios (2 passed)" in stream.text
        assert "2 steps (2 passed)" in stream.text

    @pytest.mark.asyncio
    async def test_progress_colors(self, event_bus, make_stream, make_context, emit_run):
        stream = make_stream()
        ProgressFormatter(make_context(stream, options={"colors_enabled": True}))

        await emit_run(event_bus)

        assert "\033[92m.\033[0m" in stream.text

    @pytest.mark.asyncio
    async def test_progress_bar(self, event_bus, make_stream, make_context, emit_run):
        stream = make_stream(tty=True)
        formatter = ProgressBarFormatter(make_context(stream))

        await emit_run(event_bus, cases=2)

        assert formatter.done == 2
        assert f"\r[{'#' * 40}] 2/2" in stream.text

    @pytest.mark.asyncio
    async def test_summary(self, event_bus, make_stream, make_context, emit_run):
        stream = make_stream()
        SummaryFormatter(make_context(stream))

        await emit_run(event_bus)

        assert stream.text.splitlines()[0] == "1 scenario (1 passed)"

    @pytest.mark.asyncio
    async def test_json(self, event_bus, make_stream, make_context, emit_run):
        stream = make_stream()
        JsonFormatter(make_context(stream))

        await emit_run(event_bus, cases=2)

        data = json.loads(stream.text)
        assert [case["name"] for case in data] == ["Scenario 0", "Scenario 1"]
        assert data[0]["status"] == "passed"


class TestFormatSummary:
    """Test summary text."""

    def test_empty_run(self):
        assert format_summary([]) == "0 scenarios\n0 steps\n"

    def test_duration(self):
        assert format_summary([], duration=75.5).splitlines()[-1] == "1m15.500s"
