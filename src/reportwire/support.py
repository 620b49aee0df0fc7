"""Support code known to the run (step definitions, hooks, parameter types)."""

from dataclasses import dataclass, field

__all__ = ["StepDefinition", "SupportCodeLibrary"]


@dataclass(frozen=True, slots=True)
class StepDefinition:
    id: str
    pattern: str
    uri: str | None = None
    line: int | None = None


@dataclass(frozen=True)
class SupportCodeLibrary:
    """Registry of support code handed to every built-in formatter.

    Formatters that report usage or snippets read from it; the lifecycle
    layer only passes it through.
    """

    step_definitions: tuple[StepDefinition, ...] = ()
    before_hooks: tuple[str, ...] = ()
    after_hooks: tuple[str, ...] = ()
    parameter_types: tuple[str, ...] = field(default=("int", "float", "word", "string"))
