"""
Structured logging setup.

Every component logs through structlog with snake_case event names and bound
context (``component``, ``dog_id``, ``user_id``). Call ``configure_logging``
once at process start; library code only calls ``structlog.get_logger``.
"""

import logging
import sys

import structlog

from pawcare.config import LoggingConfig


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Install the stdlib handler and structlog processor chain."""
    config = config or LoggingConfig()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.level),
        force=True,
    )

    renderer: structlog.types.Processor
    if config.format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
