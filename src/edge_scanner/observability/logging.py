"""
Structured logging configuration.

Uses structlog for JSON-formatted logs in production
or colored console output in development.
"""

import logging
import sys
from typing import Optional

import structlog

from edge_scanner.config import get_settings


def setup_logging(
    level: Optional[str] = None,
    format: Optional[str] = None,
) -> None:
    """
    Configure structured logging.

    Args:
        level: Log level (default from settings)
        format: Output format: 'json' or 'console' (default from settings)
    """
    settings = get_settings()
    level = level or settings.log_level
    fmt = format or settings.log_format

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if fmt == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Logs go to stderr so `scan --json` output stays parseable
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
    )
