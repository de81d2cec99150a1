"""Logging configuration.

Routes structlog through stdlib logging so that the host application's
handlers and level apply to engine events.
"""

import logging
import sys

import structlog

from variant_engine.infrastructure.config import Settings, settings


def configure_logging(app_settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        app_settings: Settings providing ``log_level`` and ``log_json``
            (module settings when omitted).
    """
    source = app_settings or settings
    level = logging.getLevelName(source.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if source.log_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
