"""
Observability helpers: logging configuration and structured log helpers.
"""

from crud_adapter.observability.logger import (
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)
from crud_adapter.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)

__all__ = [
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "log_with_context",
    "log_exception_with_context",
    "safe_log_value",
]
