"""Logging configuration for marketgate.

Modules log through ``structlog.get_logger(__name__)``; hosts call
``configure_logging()`` once at startup. Tokens and identity proofs are
never passed to a logger.
"""

import logging
import os
import sys
from typing import Any

import structlog


def get_log_level(environment: str | None = None) -> str:
    """Get log level based on environment."""
    env = (environment or os.getenv("ENVIRONMENT") or "development").lower()

    level_map = {
        "production": "INFO",
        "staging": "INFO",
        "development": "DEBUG",
        "test": "WARNING",
    }

    return os.getenv("LOG_LEVEL", level_map.get(env, "INFO")).upper()


def setup_stdlib_logging(environment: str | None = None) -> None:
    """Configure standard library logging."""
    log_level = get_log_level(environment)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def setup_structlog(environment: str | None = None) -> None:
    """Configure structlog for structured logging."""
    env = (environment or os.getenv("ENVIRONMENT") or "development").lower()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if env in ["production", "staging"]:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(environment: str | None = None) -> None:
    """Configure all logging for the client."""
    setup_stdlib_logging(environment)
    setup_structlog(environment)


__all__ = ("configure_logging", "get_log_level", "setup_stdlib_logging", "setup_structlog")
