"""
Identity resolution.

Decides who is making a request. Credentials are tried in a fixed order and
the first one that names an existing user wins:

1. Supabase session cookie (JWT verified locally)
2. Authorization: Bearer token (verified with the identity provider)
3. x-user-id header, then a user_id field in the request body

Every path ends with a lookup in the users table, which supplies the role.
"""

import logging
from typing import Optional

from shared.config import Settings, get_settings
from shared.exceptions import AuthenticationError

from .interfaces import IAuthService, IIdentityResolver
from .models import AuthenticatedUser, IdentitySource, RequestCredentials, SessionTokens
from .exceptions import SessionExpiredError

logger = logging.getLogger(__name__)


class IdentityResolver(IIdentityResolver):
    """Resolves the effective identity of a request from its credentials."""

    def __init__(self, auth: IAuthService, settings: Optional[Settings] = None):
        self._auth = auth
        self._settings = settings or get_settings()

    async def resolve(self, credentials: RequestCredentials) -> Optional[AuthenticatedUser]:
        session_failed = False

        if credentials.session is not None:
            user, session_failed = await self._from_session(credentials.session)
            if user:
                logger.debug(f"Identity resolved from session cookie: {user.id}")
                return user
        elif credentials.has_auth_cookie:
            # Cookie present but unreadable
            session_failed = True

        if credentials.bearer_token:
            user = await self._from_bearer(credentials.bearer_token)
            if user:
                logger.debug(f"Identity resolved from bearer token: {user.id}")
                return user

        if self._settings.allow_header_identity:
            for claimed_id in (credentials.header_user_id, credentials.body_user_id):
                if not claimed_id:
                    continue
                user = await self._lookup(claimed_id, IdentitySource.HEADER)
                if user:
                    logger.debug(f"Identity resolved from x-user-id: {user.id}")
                    return user

        if session_failed:
            raise SessionExpiredError()
        return None

    async def _from_session(
        self, session: SessionTokens
    ) -> tuple[Optional[AuthenticatedUser], bool]:
        """Returns (user, session_failed)."""
        try:
            payload = await self._auth.validate_token(session.access_token)
        except AuthenticationError as e:
            logger.info(f"Session cookie rejected: {e.message}")
            return None, True

        user = await self._lookup(payload.sub, IdentitySource.SESSION, session.access_token)
        if user is None:
            logger.warning(f"Session user {payload.sub} has no users row")
        return user, False

    async def _from_bearer(self, token: str) -> Optional[AuthenticatedUser]:
        try:
            user_id = await self._auth.verify_with_provider(token)
        except AuthenticationError as e:
            logger.info(f"Bearer token rejected: {e.message}")
            return None
        return await self._lookup(user_id, IdentitySource.BEARER, token)

    async def _lookup(
        self,
        user_id: str,
        source: IdentitySource,
        access_token: Optional[str] = None,
    ) -> Optional[AuthenticatedUser]:
        record = await self._auth.get_user_by_id(user_id)
        if record is None:
            return None
        return AuthenticatedUser(
            id=record.id,
            email=record.email,
            role=record.role,
            source=source,
            access_token=access_token,
        )

