"""Structlog configuration helpers."""

from __future__ import annotations

import logging as std_logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from safecalls.lib.config.settings import SafecallsConfig


def _level_from_verbosity(verbosity: int) -> int:
    if verbosity <= 0:
        return std_logging.WARNING
    if verbosity == 1:
        return std_logging.INFO
    return std_logging.DEBUG


def configure_logging(json_mode: bool = False, verbosity: int = 0) -> None:
    """Configure structlog for the CLI or for an embedding application."""

    level = _level_from_verbosity(verbosity)
    # Log to stderr so diagnostics never mix with command output on stdout.
    handler = std_logging.StreamHandler(sys.stderr)
    handler.setFormatter(std_logging.Formatter("%(message)s"))
    std_logging.basicConfig(level=level, handlers=[handler], force=True)

    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def configure_from_config(
    config: SafecallsConfig,
    *,
    json_mode: bool | None = None,
    extra_verbosity: int = 0,
) -> None:
    """Configure logging from resolved config; CLI flags add to or override it."""

    configure_logging(
        json_mode=config.log_json if json_mode is None else json_mode,
        verbosity=config.verbosity + extra_verbosity,
    )
