"""
Authentication module exceptions.

These exceptions are raised by the auth module and converted by the API
error handlers into 401 responses with the standard failure body.
"""

from shared.exceptions import AuthenticationError


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when an empty token is handed to the validator."""

    def __init__(self, message: str = "Authentication token missing"):
        super().__init__(message, code="MISSING_TOKEN")


class UnauthenticatedError(AuthenticationError):
    """Raised when no identity could be resolved for a request that needs one."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class SessionExpiredError(AuthenticationError):
    """
    Raised when auth cookies were presented but the session is no longer valid.

    Distinct from UnauthenticatedError so the client can prompt a re-login
    instead of treating the caller as anonymous.
    """

    def __init__(self, message: str = "Session expired. Please log in again."):
        super().__init__(message, code="SESSION_EXPIRED")
