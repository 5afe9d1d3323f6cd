"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from typing import Optional
from pydantic import BaseModel, Field

from shared.models import AuthenticatedUser, IdentitySource, UserRole


class JWTPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    This matches the structure of Supabase Auth JWTs.
    """

    sub: str = Field(..., description="Subject (user ID)")
    email: Optional[str] = Field(None, description="User's email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")
    role: str = Field(default="authenticated", description="Postgres role, not the application role")
    session_id: Optional[str] = Field(None, description="Supabase session ID")

    # Supabase-specific claims
    app_metadata: dict = Field(default_factory=dict)
    user_metadata: dict = Field(default_factory=dict)


class UserRecord(BaseModel):
    """Row of the users table as seen by identity resolution."""

    id: str
    email: str = ""
    role: str = UserRole.EVENT_MANAGER.value


class SessionTokens(BaseModel):
    """Tokens carried by a Supabase session cookie."""

    access_token: str
    refresh_token: Optional[str] = Field(default=None, repr=False)


class RequestCredentials(BaseModel):
    """
    Everything a request offers to prove who it is.

    Extracted once per request by the API layer and handed to the resolver,
    so the resolver never touches framework objects.
    """

    session: Optional[SessionTokens] = None
    has_auth_cookie: bool = False
    bearer_token: Optional[str] = Field(default=None, repr=False)
    header_user_id: Optional[str] = None
    body_user_id: Optional[str] = None


__all__ = [
    "AuthenticatedUser",
    "IdentitySource",
    "JWTPayload",
    "RequestCredentials",
    "SessionTokens",
    "UserRecord",
    "UserRole",
]
