from __future__ import annotations

import logging
import sys
from typing import Any, Callable, MutableMapping, cast

import structlog

from weather_booking.config import LOG_LEVEL

Processor = Callable[[Any, str, MutableMapping[str, Any]], Any]

# HTTP and SDK libraries used for the room catalog and Stripe calls
QUIET_LOGGERS = ("urllib3", "requests", "stripe", "uvicorn.access")


def _renderer(level: str) -> Processor:
    if level == "INFO":
        return cast(Processor, structlog.processors.JSONRenderer())
    return cast(Processor, structlog.dev.ConsoleRenderer(colors=True))


def setup_logging(level: str = LOG_LEVEL) -> None:
    """
    Configure stdlib logging and structlog for the booking service.

    JSON lines at INFO, colored console output at any other level. Values
    bound with structlog.contextvars (request_id, path and method from
    RequestIDMiddleware) appear on every event logged during a request.

    Args:
        level: Log level name, LOG_LEVEL by default
    """
    logging.basicConfig(
        format="[%(asctime)s] %(levelname)s in %(name)s:%(lineno)d: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        level=level,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _renderer(level),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
