"""
Formatter configuration.

Configuration sources (priority order):
1. Explicit construction / ``from_formats`` (command line)
2. Environment variables (REPORTWIRE_*)
3. Default values

Environment variables:
- REPORTWIRE_FORMAT: Stdout formatter specifier (default: progress)
- REPORTWIRE_FORMAT_FILES: Comma-separated target=specifier pairs
- REPORTWIRE_FORMAT_OPTIONS: JSON object passed to every formatter (default: {})
"""

import json
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

__all__ = ["DEFAULT_STDOUT_FORMAT", "FormatterConfiguration", "split_format_descriptor"]

DEFAULT_STDOUT_FORMAT = "progress"


def _get_env(key: str, default: str) -> str:
    """Get environment variable with REPORTWIRE_ prefix."""
    return os.environ.get(f"REPORTWIRE_{key}", default)


def _get_env_pairs(key: str) -> dict[str, str]:
    """Get ordered target=specifier pairs from an environment variable."""
    pairs: dict[str, str] = {}
    for item in _get_env(key, "").split(","):
        item = item.strip()
        if not item:
            continue
        target, sep, specifier = item.partition("=")
        if not sep or not target.strip() or not specifier.strip():
            raise ValueError(f"Invalid REPORTWIRE_{key} entry: {item!r}")
        pairs[target.strip()] = specifier.strip()
    return pairs


def _get_env_json(key: str) -> dict[str, Any]:
    """Get JSON object environment variable."""
    raw = _get_env(key, "").strip()
    if not raw:
        return {}
    value = json.loads(raw)
    if not isinstance(value, dict):
        raise ValueError(f"REPORTWIRE_{key} must be a JSON object")
    return value


def split_format_descriptor(descriptor: str) -> tuple[str, str | None]:
    """Split ``specifier[:target]`` into its parts.

    Colons that belong to a URL scheme (``file:///...``) or a Windows drive
    letter (``C:\\``) are not treated as the separator.

    Examples:
        >>> split_format_descriptor("json:out/report.json")
        ('json', 'out/report.json')
        >>> split_format_descriptor("json:C:\\\\out.json")
        ('json', 'C:\\\\out.json')
        >>> split_format_descriptor("progress")
        ('progress', None)
    """
    for index, char in enumerate(descriptor):
        if char != ":":
            continue
        if descriptor[index + 1:index + 3] == "//":
            continue
        if index == 1 and descriptor[0].isalpha():
            continue
        specifier, target = descriptor[:index], descriptor[index + 1:]
        if not specifier or not target:
            raise ValueError(f"Invalid format descriptor: {descriptor!r}")
        return specifier, target
    return descriptor, None


@dataclass(frozen=True)
class FormatterConfiguration:
    """Immutable formatter configuration for one run.

    Attributes:
        stdout: Specifier of the formatter writing to standard output
        files: Target label -> specifier for file outputs, in insertion order
        options: Bundle passed verbatim to every formatter
    """

    stdout: str = DEFAULT_STDOUT_FORMAT
    files: Mapping[str, str] = field(default_factory=dict)
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", MappingProxyType(dict(self.files)))
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @classmethod
    def from_env(cls) -> "FormatterConfiguration":
        """Build configuration from REPORTWIRE_* environment variables."""
        return cls(
            stdout=_get_env("FORMAT", DEFAULT_STDOUT_FORMAT),
            files=_get_env_pairs("FORMAT_FILES"),
            options=_get_env_json("FORMAT_OPTIONS"),
        )

    @classmethod
    def from_formats(
        cls,
        formats: Iterable[str],
        options: Mapping[str, Any] | None = None,
    ) -> "FormatterConfiguration":
        """Build configuration from ``specifier[:target]`` descriptors.

        A descriptor without a target (or targeting ``stdout``) sets the
        stdout formatter; the last one wins. A repeated file target keeps
        its first position and takes the last specifier.
        """
        stdout = DEFAULT_STDOUT_FORMAT
        files: dict[str, str] = {}
        for descriptor in formats:
            specifier, target = split_format_descriptor(descriptor)
            if target is None or target == "stdout":
                stdout = specifier
            else:
                files[target] = specifier
        return cls(stdout=stdout, files=files, options=options or {})
