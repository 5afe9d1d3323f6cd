"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Every service shares the one service-role Supabase client; access control
is enforced in the services through the authorization module.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from supabase import Client
    from modules.auth.interfaces import IAuthService, IIdentityResolver
    from modules.authorization.interfaces import IAuthorizationService
    from modules.events.interfaces import IEventService
    from modules.feature_requests.interfaces import IFeatureRequestService, IVoteService
    from modules.feature_requests.votes import IVoteStore


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._db: "Client | None" = None
        self._auth_service: "IAuthService | None" = None
        self._identity_resolver: "IIdentityResolver | None" = None
        self._authorization_service: "IAuthorizationService | None" = None
        self._event_service: "IEventService | None" = None
        self._feature_request_service: "IFeatureRequestService | None" = None
        self._vote_store: "IVoteStore | None" = None
        self._vote_service: "IVoteService | None" = None

    @property
    def db(self) -> "Client":
        """Get the service-role Supabase client."""
        if self._db is None:
            from shared.database import get_supabase_client
            self._db = get_supabase_client()
        return self._db

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.repository import UserRepository
            from modules.auth.service import AuthService
            self._auth_service = AuthService(users=UserRepository(self.db))
        return self._auth_service

    @property
    def identity_resolver(self) -> "IIdentityResolver":
        """Get the identity resolver instance."""
        if self._identity_resolver is None:
            from modules.auth.resolver import IdentityResolver
            self._identity_resolver = IdentityResolver(self.auth)
        return self._identity_resolver

    @property
    def authorization(self) -> "IAuthorizationService":
        """Get the authorization service instance."""
        if self._authorization_service is None:
            from modules.authorization.repository import DelegationRepository
            from modules.authorization.service import AuthorizationService
            self._authorization_service = AuthorizationService(DelegationRepository(self.db))
        return self._authorization_service

    @property
    def events(self) -> "IEventService":
        """Get the event service instance."""
        if self._event_service is None:
            from shared.config import get_settings
            from modules.events.repository import EventRepository
            from modules.events.service import EventService
            from modules.events.storage import DocumentStorage
            settings = get_settings()
            self._event_service = EventService(
                repository=EventRepository(self.db),
                authorization=self.authorization,
                storage=DocumentStorage(self.db, settings.documents_bucket),
                signed_url_expires_in=settings.signed_url_expires_in,
            )
        return self._event_service

    @property
    def feature_requests(self) -> "IFeatureRequestService":
        """Get the feature request service instance."""
        if self._feature_request_service is None:
            from modules.feature_requests.repository import FeatureRequestRepository
            from modules.feature_requests.service import FeatureRequestService
            self._feature_request_service = FeatureRequestService(
                repository=FeatureRequestRepository(self.db),
                authorization=self.authorization,
            )
        return self._feature_request_service

    @property
    def vote_store(self) -> "IVoteStore":
        """Get the vote store instance."""
        if self._vote_store is None:
            from modules.feature_requests.votes import SupabaseVoteStore
            self._vote_store = SupabaseVoteStore(self.db)
        return self._vote_store

    @property
    def votes(self) -> "IVoteService":
        """Get the vote service instance."""
        if self._vote_service is None:
            from modules.feature_requests.service import VoteService
            self._vote_service = VoteService(
                feature_requests=self.feature_requests,
                store=self.vote_store,
            )
        return self._vote_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._db = None
        self._auth_service = None
        self._identity_resolver = None
        self._authorization_service = None
        self._event_service = None
        self._feature_request_service = None
        self._vote_store = None
        self._vote_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_identity_resolver() -> "IIdentityResolver":
    """FastAPI dependency for the identity resolver."""
    return get_container().identity_resolver


def get_authorization_service() -> "IAuthorizationService":
    """FastAPI dependency for authorization service."""
    return get_container().authorization


def get_event_service() -> "IEventService":
    """FastAPI dependency for event service."""
    return get_container().events


def get_feature_request_service() -> "IFeatureRequestService":
    """FastAPI dependency for feature request service."""
    return get_container().feature_requests


def get_vote_service() -> "IVoteService":
    """FastAPI dependency for vote service."""
    return get_container().votes
