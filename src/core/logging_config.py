"""Structured logging configuration.

This module initializes a structlog logger with a stable JSON format.
Callers pass the minimum level from their ByteTrieConfig.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL


def get_logger(name: str, log_level: str = DEFAULT_LOG_LEVEL) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.
        log_level: Minimum level name, already validated by the config.

    Returns:
        A structlog logger with structured output.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(log_level)),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name).bind(logger=name)


def _resolve_level(level_name: str) -> int:
    """Map a level name onto its stdlib numeric value."""
    return logging.getLevelName(level_name.upper())
