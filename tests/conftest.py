"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
import jwt  # PyJWT

from api.dependencies import reset_container
from shared.config import Settings
from shared.models import AuthenticatedUser, IdentitySource, UserRole


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

OWNER_ID = "11111111-1111-1111-1111-111111111111"
DELEGATE_ID = "22222222-2222-2222-2222-222222222222"
STRANGER_ID = "33333333-3333-3333-3333-333333333333"
ADMIN_ID = "44444444-4444-4444-4444-444444444444"


def create_test_token(
    user_id: str = OWNER_ID,
    email: str = "owner@example.com",
    expired: bool = False,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a Supabase-style JWT for authentication.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        expired: If True, creates an expired token
        secret: Signing secret

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def make_user(
    user_id: str = OWNER_ID,
    role: UserRole = UserRole.EVENT_MANAGER,
    source: IdentitySource = IdentitySource.SESSION,
) -> AuthenticatedUser:
    """Build a resolved identity without going through the resolver."""
    return AuthenticatedUser(
        id=user_id,
        email=f"{user_id[:4]}@example.com",
        role=role.value,
        source=source,
    )


@pytest.fixture(autouse=True)
def reset_service_container():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a known JWT secret and no Supabase project."""
    return Settings(
        _env_file=None,
        supabase_url="",
        supabase_jwt_secret=TEST_JWT_SECRET,
        allow_header_identity=True,
        auth_timeout_seconds=0.5,
    )


@pytest.fixture
def owner() -> AuthenticatedUser:
    return make_user(OWNER_ID)


@pytest.fixture
def delegate() -> AuthenticatedUser:
    return make_user(DELEGATE_ID)


@pytest.fixture
def stranger() -> AuthenticatedUser:
    return make_user(STRANGER_ID)


@pytest.fixture
def admin() -> AuthenticatedUser:
    return make_user(ADMIN_ID, role=UserRole.ADMIN)
