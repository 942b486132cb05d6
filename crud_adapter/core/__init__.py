"""
Core domain pieces: the service error taxonomy and ORM error translation.
"""

from crud_adapter.core.exceptions import (
    BadRequest,
    Conflict,
    Forbidden,
    GeneralError,
    NotAuthenticated,
    NotFound,
    ServiceError,
    Timeout,
    Unavailable,
    Unprocessable,
)
from crud_adapter.core.error_handler import translate_error

__all__ = [
    "ServiceError",
    "BadRequest",
    "NotAuthenticated",
    "Forbidden",
    "NotFound",
    "Timeout",
    "Conflict",
    "Unprocessable",
    "GeneralError",
    "Unavailable",
    "translate_error",
]
