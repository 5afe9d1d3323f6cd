"""
Authentication module.

Works out who is making a request from a session cookie, a bearer token
or the x-user-id header.

Public API:
- IAuthService: Interface for token checks and user lookup
- IIdentityResolver: Interface for per-request identity resolution
- AuthenticatedUser: The resolved caller
- RequestCredentials: Raw credentials extracted from a request
- Auth exceptions: InvalidTokenError, SessionExpiredError, etc.
"""

from .interfaces import IAuthService, IIdentityResolver, IUserRepository
from .models import (
    AuthenticatedUser,
    IdentitySource,
    JWTPayload,
    RequestCredentials,
    SessionTokens,
    UserRecord,
)
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    UnauthenticatedError,
    SessionExpiredError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "IIdentityResolver",
    "IUserRepository",
    # Models
    "AuthenticatedUser",
    "IdentitySource",
    "JWTPayload",
    "RequestCredentials",
    "SessionTokens",
    "UserRecord",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "UnauthenticatedError",
    "SessionExpiredError",
]
