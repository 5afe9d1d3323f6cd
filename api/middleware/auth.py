"""
Authentication dependencies.

Collects the credentials a request carries (Supabase session cookie,
Authorization header, x-user-id header and, where a route opts in, a
user_id field in the JSON body) and hands them to the identity resolver.
"""

import logging
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from shared.config import get_settings
from shared.models import AuthenticatedUser
from modules.auth.cookies import extract_session, has_auth_cookie
from modules.auth.exceptions import SessionExpiredError, UnauthenticatedError
from modules.auth.interfaces import IIdentityResolver
from modules.auth.models import RequestCredentials

from ..dependencies import get_identity_resolver

logger = logging.getLogger(__name__)

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)

USER_ID_HEADER = "x-user-id"


async def _body_user_id(request: Request) -> Optional[str]:
    """user_id from a JSON object body, if there is one."""
    try:
        body = await request.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("user_id"), str):
        return body["user_id"] or None
    return None


async def extract_credentials(
    request: Request,
    bearer: Optional[HTTPAuthorizationCredentials],
    include_body: bool = False,
) -> RequestCredentials:
    """Gather every credential the request carries, without verifying any."""
    cookie_name = get_settings().auth_cookie_name
    cookies = request.cookies

    return RequestCredentials(
        session=extract_session(cookies, cookie_name),
        has_auth_cookie=has_auth_cookie(cookies, cookie_name),
        bearer_token=bearer.credentials if bearer else None,
        header_user_id=request.headers.get(USER_ID_HEADER) or None,
        body_user_id=await _body_user_id(request) if include_body else None,
    )


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    resolver: IIdentityResolver = Depends(get_identity_resolver),
) -> Optional[AuthenticatedUser]:
    """
    Dependency that optionally resolves the caller.

    Use this for endpoints that work with or without authentication.
    A stale session cookie degrades to anonymous here, so public pages
    stay readable until the client signs in again.

    Usage:
        @router.get("/public")
        async def public_route(user: Optional[AuthenticatedUser] = Depends(get_optional_user)):
            ...
    """
    try:
        return await resolver.resolve(await extract_credentials(request, credentials))
    except SessionExpiredError:
        logger.debug("Expired session on optional-auth endpoint, treating as anonymous")
        return None


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    resolver: IIdentityResolver = Depends(get_identity_resolver),
) -> AuthenticatedUser:
    """
    Dependency that requires a resolved caller.

    Raises:
        SessionExpiredError: Auth cookies were sent but the session lapsed
        UnauthenticatedError: No credential identified a user

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    user = await resolver.resolve(await extract_credentials(request, credentials))
    if user is None:
        raise UnauthenticatedError()
    return user


async def get_current_user_with_body_fallback(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    resolver: IIdentityResolver = Depends(get_identity_resolver),
) -> AuthenticatedUser:
    """Like get_current_user, but also accepts user_id in the JSON body."""
    user = await resolver.resolve(
        await extract_credentials(request, credentials, include_body=True)
    )
    if user is None:
        raise UnauthenticatedError()
    return user
