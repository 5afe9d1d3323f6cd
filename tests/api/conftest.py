"""
Fixtures for API tests.

The app runs with its real routes, identity resolver and authorization
policy; only the repositories are replaced by in-memory fakes.
"""

import base64
import json

import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import (
    get_event_service,
    get_feature_request_service,
    get_identity_resolver,
    get_vote_service,
)
from modules.auth.exceptions import InvalidTokenError
from modules.auth.models import UserRecord
from modules.auth.resolver import IdentityResolver
from modules.auth.service import AuthService
from modules.authorization.service import AuthorizationService
from modules.events.service import EventService
from modules.feature_requests.service import FeatureRequestService, VoteService

from tests.conftest import ADMIN_ID, DELEGATE_ID, OWNER_ID, STRANGER_ID, create_test_token
from tests.fakes import (
    FakeDelegationRepository,
    FakeEventRepository,
    FakeFeatureRequestRepository,
    FakeStorage,
    FakeUserRepository,
    FakeVoteStore,
)

COOKIE_NAME = "sb-local-auth-token"
EVENT_ID = "event-1"

# Bearer tokens the fake identity provider accepts
BEARER_TOKENS = {"bearer-stranger": STRANGER_ID}


def session_cookie(user_id: str, expired: bool = False) -> str:
    """Cookie value in the base64- format written by the Supabase SSR helpers."""
    session = json.dumps({
        "access_token": create_test_token(user_id=user_id, expired=expired),
        "refresh_token": "refresh-token",
    })
    encoded = base64.urlsafe_b64encode(session.encode()).decode().rstrip("=")
    return f"base64-{encoded}"


async def _verify_bearer(token: str) -> str:
    if token not in BEARER_TOKENS:
        raise InvalidTokenError("Invalid or expired token")
    return BEARER_TOKENS[token]


@pytest.fixture
def users():
    return FakeUserRepository([
        UserRecord(id=OWNER_ID, email="owner@example.com", role="event_manager"),
        UserRecord(id=DELEGATE_ID, email="delegate@example.com", role="event_manager"),
        UserRecord(id=STRANGER_ID, email="stranger@example.com", role="contractor"),
        UserRecord(id=ADMIN_ID, email="admin@example.com", role="admin"),
    ])


@pytest.fixture
def event_repo():
    repo = FakeEventRepository()
    repo.add_event(EVENT_ID, OWNER_ID)
    repo.add_team_member("tm-delegate", owner_id=OWNER_ID, user_id=DELEGATE_ID)
    repo.add_team_member("tm-spare", owner_id=OWNER_ID, user_id="spare-user")
    repo.attach(EVENT_ID, "tm-delegate")
    repo.add_document(EVENT_ID, "doc-1", "event-documents/event-1/plan.pdf")
    return repo


@pytest.fixture
def feature_request_repo():
    return FakeFeatureRequestRepository()


@pytest.fixture
def vote_store():
    return FakeVoteStore()


@pytest.fixture
def app(test_settings, users, event_repo, feature_request_repo, vote_store):
    """Create a fresh app wired to in-memory repositories."""
    with patch("modules.auth.service.get_settings", return_value=test_settings), \
         patch("api.middleware.auth.get_settings", return_value=test_settings):
        auth = AuthService(users=users)
        auth.verify_with_provider = AsyncMock(side_effect=_verify_bearer)
        resolver = IdentityResolver(auth, settings=test_settings)

        authorization = AuthorizationService(FakeDelegationRepository({(DELEGATE_ID, EVENT_ID)}))
        events = EventService(event_repo, authorization, FakeStorage(), signed_url_expires_in=900)
        feature_requests = FeatureRequestService(feature_request_repo, authorization)
        votes = VoteService(feature_requests, vote_store)

        app = create_app()
        app.dependency_overrides[get_identity_resolver] = lambda: resolver
        app.dependency_overrides[get_event_service] = lambda: events
        app.dependency_overrides[get_feature_request_service] = lambda: feature_requests
        app.dependency_overrides[get_vote_service] = lambda: votes
        yield app
        app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def as_session(client: TestClient, user_id: str, expired: bool = False) -> TestClient:
    client.cookies.set(COOKIE_NAME, session_cookie(user_id, expired=expired))
    return client
