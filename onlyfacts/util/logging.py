"""stdlib logging setup.

Application events go through logfire; this covers uvicorn, the database
drivers and the few modules that log with a plain logger.
"""

import logging
import sys

import logfire

from onlyfacts.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty at INFO
QUIET_LOGGERS = ("asyncpg", "sqlalchemy.pool", "uvicorn.access")


def log_level(settings: Settings) -> int:
    if settings.debug:
        return logging.DEBUG
    if settings.environment == "production":
        return logging.WARNING
    return logging.INFO


def setup_logging(settings: Settings) -> None:
    """Configure the root logger.

    Records are written to stdout, and also forwarded to Logfire when a
    token is configured so connection retries show up next to the traces.

    Args:
        settings: Application settings
    """
    level = log_level(settings)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.observability.logfire_token:
        handlers.append(logfire.LogfireLoggingHandler())

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    get_logger(__name__).info(
        "Logging configured: environment=%s, level=%s",
        settings.environment,
        logging.getLevelName(level),
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return logging.getLogger(name)
