"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import AuthenticatedUser, JWTPayload, RequestCredentials, UserRecord


@runtime_checkable
class IUserRepository(Protocol):
    """Lookup of application users by ID."""

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def validate_token(self, token: str) -> JWTPayload:
        """
        Validate a Supabase JWT locally and return its claims.

        Raises:
            MissingTokenError: If token is empty
            ExpiredTokenError: If token has expired
            InvalidTokenError: If token is malformed or has a bad signature
        """
        ...

    async def verify_with_provider(self, token: str) -> str:
        """
        Ask the identity provider who owns a bearer token.

        Returns:
            The user ID the provider associates with the token

        Raises:
            InvalidTokenError: If the provider rejects the token
        """
        ...

    async def get_user_by_id(self, user_id: str) -> Optional[UserRecord]:
        """
        Get a user by ID from the users table.

        Returns:
            UserRecord if found, None otherwise (including malformed IDs)
        """
        ...


@runtime_checkable
class IIdentityResolver(Protocol):
    """Determines which user, if any, is making a request."""

    async def resolve(self, credentials: RequestCredentials) -> Optional[AuthenticatedUser]:
        """
        Resolve the effective identity of a request.

        Returns:
            The first identity established by session, bearer token or
            x-user-id header (in that order), or None if anonymous

        Raises:
            SessionExpiredError: If auth cookies were presented, the session
                is no longer valid and no other credential resolved a user
        """
        ...
