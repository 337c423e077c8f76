"""
Logging Setup - IELTS Band Estimator
band_estimator/logging_config.py

structlog event logging on top of the stdlib root logger. JSON lines in
deployed environments, coloured console output for local work.
"""
import logging
import sys

import structlog

from band_estimator.config import Settings, settings


def configure_logging(config: Settings = settings) -> None:
    level = logging.getLevelName(config.LOG_LEVEL)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    if config.LOG_FORMAT == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
