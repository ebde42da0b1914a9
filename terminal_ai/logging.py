"""Logging configuration for terminal-ai."""

import logging
import sys
from typing import Optional

import structlog

from terminal_ai.config import LoggingConfig, get_logging_config


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Configure structured logging. Logs go to stderr so they never mix with command output."""
    if config is None:
        config = get_logging_config()

    log_level = getattr(logging, config.level.upper(), logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """Get a logger instance, usually with `__name__` as the name."""
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()
