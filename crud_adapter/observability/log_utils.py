"""
Logging utilities for safe structured logging.

Record payloads and ids can be arbitrary values; these helpers turn them
into short strings before they reach a log record.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Safely convert any value to a string for logging.

    Lists and dicts are summarized by size rather than dumped, so record
    payloads never end up verbatim in logs.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, str):
            val_str = value
        elif isinstance(value, (list, tuple)):
            val_str = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            val_str = f"dict({len(value)} keys)"
        else:
            val_str = str(value)

        if len(val_str) > max_length:
            return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
        return val_str
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def _safe_context(context: dict[str, Any]) -> dict[str, str]:
    return {key: safe_log_value(val) for key, val in context.items()}


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Arbitrary key-value pairs attached as record extras
    """
    logger.log(level, message, extra=_safe_context(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    level: int = logging.ERROR,
    **context,
) -> None:
    """
    Log an exception with full context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        level: Log level; tracebacks are attached at ERROR and above
        **context: Additional context dict
    """
    safe_context = _safe_context(context)
    safe_context.update({
        "error_type": type(exc).__name__,
        "error_msg": str(exc),
    })
    logger.log(level, message, extra=safe_context, exc_info=level >= logging.ERROR)
