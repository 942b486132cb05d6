"""
Exception hierarchy for the CRUD adapter.

Every error a service call can reject with derives from ServiceError and
carries an HTTP-style status code so callers can map it to a response.

Dependencies: None (pure domain layer)
System role: Service error taxonomy shared by all operations
"""

from typing import Any


class ServiceError(Exception):
    """Base exception for all service errors."""

    code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize service error with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def name(self) -> str:
        """Return the error class name."""
        return type(self).__name__

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize the error for transport.

        Returns:
            dict: name, message, code and details
        """
        return {
            "name": self.name,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


class BadRequest(ServiceError):
    """Raised when the request shape or values are invalid."""

    code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize bad request error.

        Args:
            message: Error message
            field: Field name that caused the failure
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotAuthenticated(ServiceError):
    code = 401


class Forbidden(ServiceError):
    code = 403


class NotFound(ServiceError):
    """Raised when a record cannot be found."""

    code = 404

    @classmethod
    def for_id(cls, id: Any) -> "NotFound":
        """
        Build the error for a missing record id.

        Args:
            id: Primary key value that matched nothing

        Returns:
            NotFound: Error with the id recorded in details
        """
        return cls(f"No record found for id '{id}'", {"id": id})


class Timeout(ServiceError):
    code = 408


class Conflict(ServiceError):
    """Raised when a write collides with an existing record."""

    code = 409


class Unprocessable(ServiceError):
    code = 422


class GeneralError(ServiceError):
    code = 500


class Unavailable(ServiceError):
    """Raised when the database cannot be reached."""

    code = 503
