"""
User-related endpoints.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from shared.models import AuthenticatedUser, IdentitySource
from ..middleware.auth import get_current_user

router = APIRouter()


class CurrentUserResponse(BaseModel):
    """The resolved caller."""

    success: bool = True
    id: str
    email: str
    role: str
    source: IdentitySource


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
) -> CurrentUserResponse:
    """
    Get the current user.

    Requires authentication. source tells which credential identified
    the caller (session, bearer or header).
    """
    return CurrentUserResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        source=user.source,
    )
