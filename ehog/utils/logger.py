# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Structured Logging
structlog setup shared by every module. Library code only ever calls
get_logger(); applications that want formatted output call
configure_logging() once at startup.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from ehog.config import get_settings


def _add_lib_info(
    logger: Any, method: str, event_dict: EventDict
) -> EventDict:
    """Inject library name into every log entry."""
    event_dict["lib"] = "ehog"
    return event_dict


def configure_logging(level: str | None = None) -> None:
    """
    Configure structlog for JSON output by default and
    human-readable console output at DEBUG level.

    Args:
        level: Optional override of the configured log level name.
    """
    level_name = (level or get_settings().log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_lib_info,
    ]

    if level_name == "DEBUG":
        processors: list[Processor] = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True)
        ]
    else:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


def get_logger(name: str = "ehog") -> structlog.BoundLogger:
    """
    Return a structlog bound logger.

    Usage:
        log = get_logger(__name__)
        log.debug("patch_extracted", layer_index=3, cols=8, rows=16)
    """
    return structlog.get_logger(name)
