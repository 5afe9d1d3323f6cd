"""
Feature request API endpoints.

Reads work anonymously for public requests; writes need a resolved caller.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from api.middleware.auth import get_current_user, get_optional_user
from api.dependencies import get_feature_request_service, get_vote_service
from shared.models import AuthenticatedUser

from .interfaces import IFeatureRequestService, IVoteService
from .models import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    VOTE_MESSAGES,
    CommentListResponse,
    CommentResponse,
    CreateCommentRequest,
    CreateFeatureRequestRequest,
    FeatureRequestFilters,
    FeatureRequestListResponse,
    FeatureRequestResponse,
    FeatureRequestStatus,
    SortOrder,
    UpdateFeatureRequestRequest,
    VoteRequest,
    VoteResponse,
    VoteSummaryResponse,
)

router = APIRouter()


@router.get("", response_model=FeatureRequestListResponse)
async def list_feature_requests(
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
    search: Optional[str] = Query(default=None, description="Match in title or description"),
    status: Optional[FeatureRequestStatus] = Query(default=None),
    category_id: Optional[str] = Query(default=None),
    user_id: Optional[str] = Query(default=None, description="Only requests by this user"),
    sort: SortOrder = Query(default=SortOrder.NEWEST),
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: IFeatureRequestService = Depends(get_feature_request_service),
) -> FeatureRequestListResponse:
    """List the feature requests visible to the caller."""
    filters = FeatureRequestFilters(
        page=page,
        limit=limit,
        search=search,
        status=status,
        category_id=category_id,
        user_id=user_id,
        sort=sort,
    )
    result = await service.list_feature_requests(user, filters)
    return FeatureRequestListResponse(**result.model_dump())


@router.post("", response_model=FeatureRequestResponse, status_code=201)
async def create_feature_request(
    request: CreateFeatureRequestRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IFeatureRequestService = Depends(get_feature_request_service),
) -> FeatureRequestResponse:
    """Submit a feature request."""
    created = await service.create_feature_request(user, request)
    return FeatureRequestResponse(**created.model_dump())


@router.get("/{feature_request_id}", response_model=FeatureRequestResponse)
async def get_feature_request(
    feature_request_id: str,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: IFeatureRequestService = Depends(get_feature_request_service),
) -> FeatureRequestResponse:
    """Get a feature request."""
    feature_request = await service.get_feature_request(user, feature_request_id)
    return FeatureRequestResponse(**feature_request.model_dump())


@router.put("/{feature_request_id}", response_model=FeatureRequestResponse)
async def update_feature_request(
    feature_request_id: str,
    request: UpdateFeatureRequestRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IFeatureRequestService = Depends(get_feature_request_service),
) -> FeatureRequestResponse:
    """
    Update a feature request.

    Only admins may change status or featured flag.
    """
    updated = await service.update_feature_request(user, feature_request_id, request)
    return FeatureRequestResponse(**updated.model_dump())


@router.delete("/{feature_request_id}")
async def delete_feature_request(
    feature_request_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IFeatureRequestService = Depends(get_feature_request_service),
) -> dict:
    """Delete a feature request."""
    await service.delete_feature_request(user, feature_request_id)
    return {"success": True, "message": "Feature request deleted successfully"}


@router.post("/{feature_request_id}/vote", response_model=VoteResponse)
async def vote(
    feature_request_id: str,
    request: VoteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IVoteService = Depends(get_vote_service),
) -> VoteResponse:
    """
    Toggle the caller's vote.

    Voting the same way twice removes the vote; voting the other way
    switches it.
    """
    result = await service.apply_vote(user, feature_request_id, request.vote_type)
    return VoteResponse(
        action=result.action,
        vote_type=result.vote_type,
        message=VOTE_MESSAGES[result.action],
    )


@router.get("/{feature_request_id}/vote", response_model=VoteSummaryResponse)
async def get_votes(
    feature_request_id: str,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: IVoteService = Depends(get_vote_service),
) -> VoteSummaryResponse:
    """Vote counts and the caller's own vote."""
    summary = await service.get_vote_summary(user, feature_request_id)
    return VoteSummaryResponse(**summary.model_dump())


@router.get("/{feature_request_id}/comments", response_model=CommentListResponse)
async def list_comments(
    feature_request_id: str,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    service: IFeatureRequestService = Depends(get_feature_request_service),
) -> CommentListResponse:
    """List comments on a feature request."""
    return CommentListResponse(comments=await service.list_comments(user, feature_request_id))


@router.post("/{feature_request_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    feature_request_id: str,
    request: CreateCommentRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IFeatureRequestService = Depends(get_feature_request_service),
) -> CommentResponse:
    """Comment on a feature request."""
    comment = await service.add_comment(user, feature_request_id, request.content)
    return CommentResponse(comment=comment)
