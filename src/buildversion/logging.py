"""
Logging configuration for buildversion.

Provides a single entry point for configuring structured logging with
structlog. Output goes to stderr so that ``--print`` output on stdout stays
machine-readable.

Level filtering mirrors the tool's two switches rather than a single
threshold:

- errors and warnings are always emitted
- info is suppressed by ``Quiet``
- debug is emitted only with ``Verbose``

``Quiet`` and ``Verbose`` are independent, so ``--quiet --verbose`` shows
debug and error output but no info lines.

Usage:
    from buildversion.logging import configure_logging, get_logger

    configure_logging(quiet=params.quiet, verbose=params.verbose)
    log = get_logger("buildversion")
    log.info("version_resolved", version="1.2.4")
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_configured = False


def _make_level_filter(quiet: bool, verbose: bool) -> Processor:
    """
    Create a processor that drops events according to quiet/verbose.

    Placed first in the chain so dropped events cost nothing further.
    """

    def level_filter(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        level = method_name.lower()
        if level == "debug" and not verbose:
            raise structlog.DropEvent
        if level == "info" and quiet:
            raise structlog.DropEvent
        return event_dict

    return level_filter


def configure_logging(
    quiet: bool = False,
    verbose: bool = False,
    log_format: Literal["console", "json"] = "console",
    force: bool = False,
) -> None:
    """
    Configure structured logging for the run.

    Should be called once, after the command line has been merged.
    Subsequent calls are no-ops unless force=True.

    Args:
        quiet: Suppress informational output
        verbose: Enable debug output
        log_format: ``console`` for human output, ``json`` for CI log capture
        force: Reconfigure even if already configured
    """
    global _configured

    if _configured and not force:
        return

    processors: list[Processor] = [
        _make_level_filter(quiet, verbose),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    _configured = True


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Get a structured logger, optionally pre-bound with context values."""
    if name is not None:
        initial_values.setdefault("logger_name", name)
    return structlog.get_logger(**initial_values)


def is_configured() -> bool:
    """Check if logging has been configured."""
    return _configured


def reset_logging() -> None:
    """Forget the configuration; used by tests between runs."""
    global _configured
    structlog.reset_defaults()
    _configured = False


__all__ = [
    "configure_logging",
    "get_logger",
    "is_configured",
    "reset_logging",
]
