"""
Base exception classes for the Eventory backend.

Each module should define its own exceptions that inherit from these bases.
Every base carries the HTTP status it maps to, so the API layer can convert
any domain error into the standard failure body without per-route handling.
"""

from typing import Optional, Any


class EventoryError(Exception):
    """
    Base exception for all Eventory errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the API failure body."""
        body: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(EventoryError):
    """Resource not found."""

    status_code = 404


class ValidationError(EventoryError):
    """Input validation failed."""

    status_code = 400


class AuthenticationError(EventoryError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["requiresAuth"] = True
        return body


class AuthorizationError(EventoryError):
    """Authorization failed (insufficient permissions)."""

    status_code = 403


class ExternalServiceError(EventoryError):
    """Error communicating with an external service."""

    status_code = 500

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
