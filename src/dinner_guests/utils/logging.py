"""Logging utilities for dinner-guests.

Nothing in the package logs before ``configure_logging`` has run, so that
structlog's default stdout printer never mixes with the CLI's JSON output.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.types import Processor

from ..config import Settings, get_settings
from ..exceptions import ConfigurationError

# Loggers of libraries that are chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def _renderer(environment: str) -> Processor:
    if environment == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(), exception_formatter=structlog.dev.plain_traceback
    )


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Invalid log level: {name}", details={"log_level": name})
    return level


def configure_logging(log_level: Optional[str] = None, settings: Optional[Settings] = None) -> None:
    """Route structlog through stdlib logging on stderr.

    Args:
        log_level: Optional log level to override settings
        settings: Settings to read level and environment from; the global
            instance when omitted
    """
    settings = settings or get_settings()
    level = _resolve_level(log_level or settings.log_level)

    logging.basicConfig(format="%(message)s", level=level, stream=sys.stderr)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(settings.environment),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger(__name__).debug(
        "Logging configured",
        environment=settings.environment,
        request_timeout=settings.request_timeout,
        branch_timeout=settings.branch_timeout,
    )


def log_exception(
    logger: structlog.BoundLogger,
    exc: BaseException,
    message: str = "An error occurred",
    level: str = "error",
    **kwargs
) -> None:
    """Log exception with context.

    Args:
        logger: Logger to use
        exc: Exception to log
        message: Message to log
        level: Log level
        **kwargs: Additional context
    """
    log_method = getattr(logger, level.lower())
    log_method(
        message,
        error=str(exc),
        error_type=exc.__class__.__name__,
        **kwargs,
    )
