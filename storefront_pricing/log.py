"""Logging setup."""

import logging
from typing import Optional, TextIO

import structlog


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """Configure structlog with JSON rendering and ISO timestamps.

    Logs go to stdout unless ``stream`` is given.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
    )
