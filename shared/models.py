"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Roles stored in the users table."""

    ADMIN = "admin"
    CONTRACTOR = "contractor"
    EVENT_MANAGER = "event_manager"


class IdentitySource(str, Enum):
    """How the identity of a request was established."""

    SESSION = "session"
    BEARER = "bearer"
    HEADER = "header"


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    Built by the identity resolver from whichever credential succeeded,
    always confirmed against the users table (the role comes from there,
    never from the JWT, whose role claim is just "authenticated").
    """

    id: str = Field(..., description="User ID (UUID from Supabase)")
    email: str = Field(default="", description="User's email address")
    role: str = Field(default=UserRole.EVENT_MANAGER.value, description="Role from the users table")
    source: IdentitySource = Field(..., description="Credential that resolved this identity")
    access_token: Optional[str] = Field(
        default=None, description="Access token when resolved from a session or bearer token", repr=False
    )

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def header_resolved(self) -> bool:
        """True when the identity came from the x-user-id fallback."""
        return self.source == IdentitySource.HEADER
