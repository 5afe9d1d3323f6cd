"""
Feature requests module interface.

The API layer depends on IFeatureRequestService and IVoteService.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    Comment,
    CreateFeatureRequestRequest,
    FeatureRequest,
    FeatureRequestFilters,
    FeatureRequestPage,
    UpdateFeatureRequestRequest,
    VoteResult,
    VoteSummary,
    VoteType,
)


@runtime_checkable
class IFeatureRequestService(Protocol):
    """
    Interface for feature request operations.

    Visibility: admins see every request, owners see their own, everyone
    else sees requests that are public and not rejected.
    """

    async def list_feature_requests(
        self,
        identity: Optional[AuthenticatedUser],
        filters: FeatureRequestFilters,
    ) -> FeatureRequestPage:
        """
        List visible feature requests with pagination.

        Args:
            identity: The caller, or None for anonymous
            filters: Page, search, status/category/user filters and sort
        """
        ...

    async def create_feature_request(
        self,
        identity: AuthenticatedUser,
        request: CreateFeatureRequestRequest,
    ) -> FeatureRequest:
        """Submit a feature request. It starts in 'submitted' status."""
        ...

    async def get_feature_request(
        self,
        identity: Optional[AuthenticatedUser],
        feature_request_id: str,
    ) -> FeatureRequest:
        """
        Get a feature request and count the view.

        Raises:
            FeatureRequestNotFoundError: If it does not exist
            AccessDeniedError: If the caller may not see it
        """
        ...

    async def update_feature_request(
        self,
        identity: AuthenticatedUser,
        feature_request_id: str,
        request: UpdateFeatureRequestRequest,
    ) -> FeatureRequest:
        """
        Update a feature request. Owner or admin.

        Raises:
            InsufficientPermissionsError: If a non-admin changes status or is_featured
        """
        ...

    async def delete_feature_request(
        self,
        identity: AuthenticatedUser,
        feature_request_id: str,
    ) -> None:
        """Delete a feature request. Owner or admin."""
        ...

    async def list_comments(
        self,
        identity: Optional[AuthenticatedUser],
        feature_request_id: str,
    ) -> list[Comment]:
        """List comments on a feature request the caller can read."""
        ...

    async def add_comment(
        self,
        identity: AuthenticatedUser,
        feature_request_id: str,
        content: str,
    ) -> Comment:
        """Comment on a feature request the caller can read."""
        ...


@runtime_checkable
class IVoteService(Protocol):
    """Interface for voting."""

    async def apply_vote(
        self,
        identity: AuthenticatedUser,
        feature_request_id: str,
        vote_type: VoteType,
    ) -> VoteResult:
        """
        Toggle the caller's vote.

        Returns:
            created, removed or updated, with the resulting vote type

        Raises:
            SelfVoteError: If the caller owns the feature request
        """
        ...

    async def get_vote_summary(
        self,
        identity: Optional[AuthenticatedUser],
        feature_request_id: str,
    ) -> VoteSummary:
        """Votes, counts and the caller's own vote (None when anonymous)."""
        ...
