"""
Translation of SQLAlchemy errors into service errors.

All adapter operations funnel exceptions through translate_error so
callers only ever see the ServiceError taxonomy for database failures.

Dependencies: sqlalchemy, crud_adapter.core.exceptions
System role: Single ORM-to-service error mapping step
"""

import logging
from typing import NoReturn

from sqlalchemy import exc as sa_exc

from crud_adapter.core.exceptions import (
    BadRequest,
    Conflict,
    GeneralError,
    ServiceError,
    Timeout,
    Unavailable,
)
from crud_adapter.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

# Driver messages for unique violations (postgres, sqlite, mysql)
_UNIQUE_MARKERS = ("unique", "duplicate")


def is_unique_violation(error: sa_exc.IntegrityError) -> bool:
    """
    Check whether an IntegrityError comes from a unique constraint.

    Args:
        error: Wrapped DBAPI integrity error

    Returns:
        True if the driver reports a unique or duplicate key violation
    """
    # asyncpg and psycopg expose the SQLSTATE directly
    sqlstate = getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None)
    if sqlstate == "23505":
        return True
    text = str(error.orig).lower()
    return any(marker in text for marker in _UNIQUE_MARKERS)


def translate_error(error: Exception, **context) -> NoReturn:
    """
    Re-raise an exception as the matching service error.

    Service errors and unknown exceptions are re-raised unchanged; known
    SQLAlchemy errors are wrapped and chained to the original.

    Args:
        error: Exception caught around an ORM call
        **context: Extra logging context (model, id, operation)

    Raises:
        ServiceError: Translated error
        Exception: The original error when no mapping applies
    """
    if isinstance(error, ServiceError):
        raise error

    translated: ServiceError | None = None
    details = {"error_type": type(error).__name__}

    if isinstance(error, sa_exc.IntegrityError):
        if is_unique_violation(error):
            translated = Conflict(str(error.orig), details)
        else:
            translated = BadRequest(str(error.orig), details=details)
    elif isinstance(error, sa_exc.TimeoutError):
        translated = Timeout(str(error), details)
    elif isinstance(error, (sa_exc.OperationalError, sa_exc.InterfaceError)):
        translated = Unavailable(str(error.orig), details)
    elif isinstance(error, (sa_exc.ProgrammingError, sa_exc.InternalError)):
        # Schema and server faults
        translated = GeneralError(str(error.orig), details)
    elif isinstance(error, (sa_exc.DataError, sa_exc.StatementError)):
        translated = BadRequest(str(getattr(error, "orig", None) or error), details=details)
    elif isinstance(error, (sa_exc.ArgumentError, sa_exc.CompileError)):
        translated = BadRequest(str(error), details=details)

    if translated is None:
        log_exception_with_context(logger, "Unhandled database error", error, **context)
        raise error

    level = logging.ERROR if translated.code >= 500 else logging.WARNING
    log_exception_with_context(
        logger,
        f"Database error translated to {translated.name}",
        error,
        level=level,
        **context,
    )
    raise translated from error
