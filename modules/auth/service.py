"""
Authentication service implementation.

Validates Supabase JWT tokens, checks bearer tokens with the Supabase
identity provider and looks users up in the users table.
"""

import asyncio
import logging
from typing import Optional
import jwt

from shared.config import get_settings
from shared.database import get_supabase_auth_client, get_supabase_client

from .interfaces import IAuthService, IUserRepository
from .models import JWTPayload, UserRecord
from .repository import UserRepository
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
)

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Session cookies carry a Supabase JWT that is verified locally with the
    project's JWT secret. Bearer tokens from non-browser clients are checked
    remotely with the identity provider, bounded by auth_timeout_seconds.
    """

    def __init__(self, users: Optional[IUserRepository] = None):
        self._settings = get_settings()
        self._users = users or UserRepository(get_supabase_client())

    async def validate_token(self, token: str) -> JWTPayload:
        """
        Validate a JWT token and return its claims.

        This implementation validates Supabase JWTs using the JWT secret.
        """
        if not token:
            raise MissingTokenError()

        if not self._settings.supabase_jwt_secret:
            raise InvalidTokenError("Server authentication not configured")

        try:
            # Decode and validate the JWT
            payload = jwt.decode(
                token,
                self._settings.supabase_jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
            return JWTPayload(**payload)

        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e))

    async def verify_with_provider(self, token: str) -> str:
        """
        Exchange a bearer token for a user ID via Supabase Auth.

        The supabase client is synchronous, so the call runs in a worker
        thread and is abandoned after auth_timeout_seconds.
        """
        if not token:
            raise MissingTokenError()

        client = get_supabase_auth_client()
        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(client.auth.get_user, token),
                timeout=self._settings.auth_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("Identity provider timed out while verifying bearer token")
            raise InvalidTokenError("Token verification timed out")
        except Exception as e:
            # supabase-auth raises its own error hierarchy for rejected tokens
            logger.info(f"Identity provider rejected bearer token: {e}")
            raise InvalidTokenError("Invalid or expired token") from e

        user = getattr(response, "user", None)
        if user is None or not getattr(user, "id", None):
            raise InvalidTokenError("Invalid or expired token")
        return str(user.id)

    async def get_user_by_id(self, user_id: str) -> Optional[UserRecord]:
        """Get a user by their ID from the users table."""
        return self._users.get_by_id(user_id)

