"""
Feature requests service implementation.

Single-row operations load the request, build its ResourceDescriptor and ask
the authorization module; listing filters by visibility in the query.
"""

import logging
import math
from typing import Optional

from shared.models import AuthenticatedUser
from modules.authorization.interfaces import IAuthorizationService
from modules.authorization.models import Operation, ResourceDescriptor, ResourceType

from .interfaces import IFeatureRequestService, IVoteService
from .models import (
    Comment,
    CreateFeatureRequestRequest,
    FeatureRequest,
    FeatureRequestFilters,
    FeatureRequestPage,
    FeatureRequestStatus,
    Pagination,
    UpdateFeatureRequestRequest,
    VoteCounts,
    VoteResult,
    VoteSummary,
    VoteType,
)
from .repository import FeatureRequestRepository
from .votes import IVoteStore
from .exceptions import FeatureRequestNotFoundError, SelfVoteError

logger = logging.getLogger(__name__)

# Fields only admins may change
ADMIN_ONLY_FIELDS = frozenset({"status", "is_featured"})


def describe_feature_request(feature_request: FeatureRequest) -> ResourceDescriptor:
    """Owner may do anything; everyone may read while public and not rejected."""
    return ResourceDescriptor(
        resource_type=ResourceType.FEATURE_REQUEST,
        resource_id=feature_request.id,
        owner_id=feature_request.user_id,
        is_public=feature_request.publicly_visible,
        visibility_scoped=True,
    )


class FeatureRequestService(IFeatureRequestService):
    """Feature request CRUD and comments."""

    def __init__(
        self,
        repository: FeatureRequestRepository,
        authorization: IAuthorizationService,
    ):
        self._repo = repository
        self._authz = authorization

    async def list_feature_requests(
        self,
        identity: Optional[AuthenticatedUser],
        filters: FeatureRequestFilters,
    ) -> FeatureRequestPage:
        items, total = self._repo.list_feature_requests(filters, identity)
        return FeatureRequestPage(
            feature_requests=items,
            pagination=Pagination(
                page=filters.page,
                limit=filters.limit,
                total=total,
                total_pages=math.ceil(total / filters.limit) if total else 0,
            ),
        )

    async def create_feature_request(
        self,
        identity: AuthenticatedUser,
        request: CreateFeatureRequestRequest,
    ) -> FeatureRequest:
        feature_request = self._repo.create_feature_request({
            "user_id": identity.id,
            "title": request.title.strip(),
            "description": request.description.strip(),
            "category_id": request.category_id,
            "priority": request.priority.value,
            "is_public": request.is_public,
            "is_featured": False,
            "status": FeatureRequestStatus.SUBMITTED.value,
            "vote_count": 0,
            "view_count": 0,
        })
        logger.info(f"Feature request {feature_request.id} submitted by {identity.id}")
        return feature_request

    async def get_feature_request(
        self,
        identity: Optional[AuthenticatedUser],
        feature_request_id: str,
    ) -> FeatureRequest:
        feature_request = await self.load_readable(identity, feature_request_id)

        if self._repo.increment_view_count(feature_request):
            return feature_request.model_copy(
                update={"view_count": feature_request.view_count + 1}
            )
        return feature_request

    async def update_feature_request(
        self,
        identity: AuthenticatedUser,
        feature_request_id: str,
        request: UpdateFeatureRequestRequest,
    ) -> FeatureRequest:
        feature_request = self._load(feature_request_id)
        await self._authz.require(
            identity, describe_feature_request(feature_request), Operation.WRITE
        )

        changes = request.model_dump(exclude_unset=True, exclude_none=True, mode="json")
        if ADMIN_ONLY_FIELDS & changes.keys():
            self._authz.require_admin(identity)

        if not changes:
            return feature_request

        updated = self._repo.update_feature_request(feature_request.id, changes)
        if updated is None:
            raise FeatureRequestNotFoundError(feature_request_id)

        new_status = changes.get("status")
        if new_status and new_status != feature_request.status:
            self._repo.record_status_change(
                feature_request.id, feature_request.status, new_status, identity.id
            )

        return updated

    async def delete_feature_request(
        self,
        identity: AuthenticatedUser,
        feature_request_id: str,
    ) -> None:
        feature_request = self._load(feature_request_id)
        await self._authz.require(
            identity, describe_feature_request(feature_request), Operation.WRITE
        )
        self._repo.delete_feature_request(feature_request.id)
        logger.info(f"Feature request {feature_request.id} deleted by {identity.id}")

    # ----- Comments -----

    async def list_comments(
        self,
        identity: Optional[AuthenticatedUser],
        feature_request_id: str,
    ) -> list[Comment]:
        feature_request = await self.load_readable(identity, feature_request_id)
        return self._repo.list_comments(feature_request.id)

    async def add_comment(
        self,
        identity: AuthenticatedUser,
        feature_request_id: str,
        content: str,
    ) -> Comment:
        feature_request = await self.load_readable(identity, feature_request_id)
        return self._repo.create_comment(feature_request.id, identity.id, content.strip())

    # ----- Helpers -----

    async def load_readable(
        self,
        identity: Optional[AuthenticatedUser],
        feature_request_id: str,
    ) -> FeatureRequest:
        """Load a feature request the caller may read, or raise."""
        feature_request = self._load(feature_request_id)
        await self._authz.require(
            identity, describe_feature_request(feature_request), Operation.READ
        )
        return feature_request

    def _load(self, feature_request_id: str) -> FeatureRequest:
        feature_request = self._repo.get_feature_request(feature_request_id)
        if feature_request is None:
            raise FeatureRequestNotFoundError(feature_request_id)
        return feature_request


class VoteService(IVoteService):
    """Voting on feature requests."""

    def __init__(self, feature_requests: FeatureRequestService, store: IVoteStore):
        self._feature_requests = feature_requests
        self._store = store

    async def apply_vote(
        self,
        identity: AuthenticatedUser,
        feature_request_id: str,
        vote_type: VoteType,
    ) -> VoteResult:
        feature_request = await self._feature_requests.load_readable(identity, feature_request_id)

        if feature_request.user_id == identity.id:
            raise SelfVoteError(feature_request.id)

        return await self._store.apply(feature_request.id, identity.id, vote_type)

    async def get_vote_summary(
        self,
        identity: Optional[AuthenticatedUser],
        feature_request_id: str,
    ) -> VoteSummary:
        feature_request = await self._feature_requests.load_readable(identity, feature_request_id)

        votes = await self._store.list_votes(feature_request.id)
        upvotes = sum(1 for vote in votes if vote.vote_type == VoteType.UPVOTE)
        downvotes = len(votes) - upvotes

        user_vote = None
        if identity is not None:
            user_vote = await self._store.get_user_vote(feature_request.id, identity.id)

        return VoteSummary(
            votes=votes,
            vote_counts=VoteCounts(upvotes=upvotes, downvotes=downvotes, total=upvotes - downvotes),
            user_vote=user_vote,
        )
