"""
Implementation Resolver - Map a formatter specifier to an implementation.

Lookup order:
1. Built-in name in the formatter registry
2. Python file (absolute, relative to cwd, or ending in .py)
3. Importable module name

A module or file export may pick an attribute with ``:name``; otherwise the
module's ``default`` attribute is used. The export must be a Formatter
subclass (built-in construction path) or a FormatterPlugin (plugin path).
"""

import asyncio
import hashlib
import importlib
import importlib.util
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any

import structlog

from ..errors import ResolutionError
from ..plugins import FormatterPlugin
from .base import Formatter
from .registry import FormatterRegistry, builtin_formatters

__all__ = [
    "BuiltinFormatter",
    "PluginFormatter",
    "ResolvedImplementation",
    "resolve_implementation",
]

logger = structlog.get_logger(__name__)

DEFAULT_EXPORT = "default"


@dataclass(frozen=True)
class BuiltinFormatter:
    """Constructible formatter class."""
    formatter_class: type[Formatter]


@dataclass(frozen=True)
class PluginFormatter:
    """Formatter whose construction is delegated to the plugin manager."""
    plugin: FormatterPlugin


ResolvedImplementation = BuiltinFormatter | PluginFormatter


def _split_export(specifier: str) -> tuple[str, str]:
    """Split ``module:attribute``; drive letters and paths keep their colons."""
    reference, sep, attribute = specifier.rpartition(":")
    if sep and reference and attribute.isidentifier():
        return reference, attribute
    return specifier, DEFAULT_EXPORT


def _is_path(reference: str) -> bool:
    return (
        reference.endswith(".py")
        or reference.startswith(".")
        or "/" in reference
        or "\\" in reference
        or Path(reference).is_absolute()
    )


def _load_file(specifier: str, path: Path) -> ModuleType:
    """Load a formatter module from a file under a unique module name."""
    if not path.is_file():
        raise ResolutionError(specifier, f"no such file: {path}")

    digest = hashlib.sha256(str(path).encode()).hexdigest()[:12]
    module_name = f"_reportwire_formatter_{path.stem}_{digest}"
    if module_name in sys.modules:
        return sys.modules[module_name]

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ResolutionError(specifier, f"failed to create module spec for {path}")

    module = importlib.util.module_from_spec(spec)
    # Register before exec so the module can import itself
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise

    logger.debug("formatter_module_loaded", name=module_name, path=str(path))
    return module


def _load_export(specifier: str, cwd: Path) -> Any:
    reference, attribute = _split_export(specifier)

    try:
        if _is_path(reference):
            module = _load_file(specifier, (cwd / reference).resolve())
        else:
            module = importlib.import_module(reference)
    except ResolutionError:
        raise
    except Exception as e:
        raise ResolutionError(specifier, str(e)) from e

    if not hasattr(module, attribute):
        raise ResolutionError(specifier, f"module has no attribute '{attribute}'")
    return getattr(module, attribute)


def _classify(specifier: str, export: Any) -> ResolvedImplementation:
    if isinstance(export, type) and issubclass(export, Formatter):
        return BuiltinFormatter(export)
    if isinstance(export, FormatterPlugin):
        return PluginFormatter(export)
    raise ResolutionError(
        specifier,
        f"export is neither a Formatter subclass nor a FormatterPlugin: {export!r}",
    )


async def resolve_implementation(
    specifier: str,
    cwd: str | Path,
    registry: FormatterRegistry | None = None,
) -> ResolvedImplementation:
    """Resolve a formatter specifier.

    Args:
        specifier: Built-in name, module name or file path, with optional ``:attribute``
        cwd: Working directory for relative paths
        registry: Built-in registry (defaults to ``builtin_formatters``)

    Returns:
        BuiltinFormatter or PluginFormatter

    Raises:
        ResolutionError: If the specifier names nothing loadable
    """
    if registry is None:
        registry = builtin_formatters

    formatter_class = registry.get(specifier)
    if formatter_class is not None:
        return BuiltinFormatter(formatter_class)

    export = await asyncio.to_thread(_load_export, specifier, Path(cwd))
    implementation = _classify(specifier, export)
    logger.debug(
        "formatter_resolved",
        specifier=specifier,
        kind=type(implementation).__name__,
    )
    return implementation
