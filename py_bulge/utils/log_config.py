"""
Logging setup shared by the API and the command line.

All modules log through ``structlog.get_logger()``; this wires structlog to
stdlib logging with the level and renderer taken from settings.
"""

import logging
from typing import Optional

import structlog

from ..config import settings


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure structlog on top of stdlib logging."""
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level
    if log_format is None:
        log_format = "plain" if settings.debug else settings.log_format

    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))
    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "plain"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
