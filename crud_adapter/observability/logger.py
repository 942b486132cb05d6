"""
Logger configuration.

Provides a configured root handler and named loggers for the adapter.

Dependencies: logging (stdlib), crud_adapter.configs
System role: Centralized logging configuration
"""

import logging
import sys

from crud_adapter.configs import Settings, get_settings


def configure_logging(level: str = "INFO", echo_sql: bool = False) -> None:
    """
    Configure Python logging with ISO timestamp and structured format.

    Args:
        level: Root log level name (DEBUG, INFO, ...)
        echo_sql: Keep SQLAlchemy engine logging at INFO to show statements
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    # SQLAlchemy is chatty below WARNING unless statements are wanted
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if echo_sql else logging.WARNING
    )
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def configure_logging_from_settings(settings: Settings | None = None) -> None:
    """
    Configure logging from `LOG_LEVEL` and `DB_ECHO_SQL`.

    Args:
        settings: Settings to read; defaults to get_settings()
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, echo_sql=settings.database.echo_sql)


def get_logger(name: str) -> logging.Logger:
    """
    Get configured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        logging.Logger: Configured logger instance
    """
    return logging.getLogger(name)
