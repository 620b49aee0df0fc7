"""Downgrade formatter choice when the destination lacks a capability."""

from typing import Any

import structlog

__all__ = ["FALLBACK_SPECIFIER", "INTERACTIVE_SPECIFIER", "select_specifier"]

INTERACTIVE_SPECIFIER = "progress-bar"
FALLBACK_SPECIFIER = "progress"


def select_specifier(
    specifier: str,
    target: str,
    is_interactive: bool,
    logger: Any = None,
) -> str:
    """Return the specifier to use for a target.

    The interactive progress formatter needs a terminal; against anything
    else it is replaced by the plain progress formatter and one warning
    naming the target is logged.
    """
    if specifier != INTERACTIVE_SPECIFIER or is_interactive:
        return specifier

    log = logger or structlog.get_logger(__name__)
    log.warning(
        "formatter_downgraded",
        message=(
            f"Cannot use '{INTERACTIVE_SPECIFIER}' formatter for output to '{target}' "
            f"as not a TTY. Switching to '{FALLBACK_SPECIFIER}' formatter."
        ),
        target=target,
        requested=specifier,
        fallback=FALLBACK_SPECIFIER,
    )
    return FALLBACK_SPECIFIER
