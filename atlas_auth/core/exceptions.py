"""App-wide exception hierarchy.

This module provides a unified exception system with automatic HTTP status code
mapping and consistent error response formatting. Domain packages
(``atlas_auth.auth.exceptions``, ``atlas_auth.user.exceptions``) derive
their specific errors from the bases defined here.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All custom exceptions inherit from this class and define their own
    status_code and error_type for consistent API responses.
    """

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str = "Internal server error"):
        self.message = message
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        """JSON body returned to the client."""
        return {"type": self.error_type, "error": self.message}


# Authentication errors (401)
class AuthenticationError(AppException):
    """Base class for authentication failures."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


# Conflict errors (409)
class ConflictError(AppException):
    """Base class for resource conflict errors.

    ``field`` names the attribute that collided so clients can highlight
    the matching form input.
    """

    status_code = 409
    error_type = "conflict"

    def __init__(self, message: str = "Resource conflict", field: str | None = None):
        self.field = field
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.field:
            payload["field"] = self.field
        return payload


# Validation errors (400)
class ValidationError(AppException):
    """Base class for validation errors."""

    status_code = 400
    error_type = "validation_error"

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message)


class BadRequestError(ValidationError):
    """Raised for general bad request errors."""

    error_type = "bad_request"

    def __init__(self, message: str = "Bad request"):
        super().__init__(message)


class MissingFieldsError(ValidationError):
    """Raised when required body fields are absent or empty."""

    error_type = "missing_fields"

    def __init__(
        self,
        message: str = "Missing required fields",
        missing: dict[str, bool] | None = None,
    ):
        self.missing = missing or {}
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.missing:
            payload["missing"] = self.missing
        return payload


# Internal errors (500)
class InternalError(AppException):
    """Raised for internal server errors."""

    status_code = 500
    error_type = "internal_error"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
