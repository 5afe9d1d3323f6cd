"""
Feature requests module data models.

Users submit feature requests, vote them up or down and discuss them in
comments. Admins move requests through the status workflow.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class FeatureRequestStatus(str, Enum):
    """Feature request workflow status."""

    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    PLANNED = "planned"
    IN_DEVELOPMENT = "in_development"
    COMPLETED = "completed"
    REJECTED = "rejected"


class FeatureRequestPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SortOrder(str, Enum):
    """List ordering."""

    NEWEST = "newest"
    OLDEST = "oldest"
    MOST_VOTED = "most_voted"
    LEAST_VOTED = "least_voted"


class VoteType(str, Enum):
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class VoteAction(str, Enum):
    """What a vote request did to the caller's stored vote."""

    CREATED = "created"
    REMOVED = "removed"
    UPDATED = "updated"


VOTE_MESSAGES = {
    VoteAction.CREATED: "Vote recorded",
    VoteAction.REMOVED: "Vote removed",
    VoteAction.UPDATED: "Vote updated",
}

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100


class FeatureRequest(BaseModel):
    """A feature request row."""

    model_config = ConfigDict(extra="allow")

    id: str
    user_id: str
    title: str
    description: str = ""
    status: str = FeatureRequestStatus.SUBMITTED.value
    priority: Optional[str] = None
    category_id: Optional[str] = None
    is_public: bool = True
    is_featured: bool = False
    vote_count: int = 0
    view_count: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def publicly_visible(self) -> bool:
        """Public and not rejected: what anyone may read."""
        return self.is_public and self.status != FeatureRequestStatus.REJECTED.value


class CreateFeatureRequestRequest(BaseModel):
    """Request to submit a feature request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=3, max_length=200, description="Short summary")
    description: str = Field(..., min_length=1, max_length=5000)
    category_id: Optional[str] = None
    priority: FeatureRequestPriority = FeatureRequestPriority.MEDIUM
    is_public: bool = True


class UpdateFeatureRequestRequest(BaseModel):
    """
    Partial update of a feature request.

    status and is_featured may only be changed by admins.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    category_id: Optional[str] = None
    priority: Optional[FeatureRequestPriority] = None
    is_public: Optional[bool] = None
    status: Optional[FeatureRequestStatus] = None
    is_featured: Optional[bool] = None


class FeatureRequestFilters(BaseModel):
    """Query options for listing feature requests."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    search: Optional[str] = None
    status: Optional[FeatureRequestStatus] = None
    category_id: Optional[str] = None
    user_id: Optional[str] = None
    sort: SortOrder = SortOrder.NEWEST


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class FeatureRequestPage(BaseModel):
    feature_requests: list[FeatureRequest]
    pagination: Pagination


# ----- Votes -----


class Vote(BaseModel):
    """A stored vote."""

    id: Optional[str] = None
    feature_request_id: str
    user_id: str
    vote_type: VoteType
    created_at: Optional[str] = None


class VoteRequest(BaseModel):
    vote_type: VoteType


class VoteResult(BaseModel):
    """Outcome of a vote toggle."""

    action: VoteAction
    vote_type: Optional[VoteType] = Field(
        None, description="The caller's vote after the toggle, null when removed"
    )


class VoteCounts(BaseModel):
    upvotes: int = 0
    downvotes: int = 0
    total: int = Field(0, description="upvotes minus downvotes")


class VoteSummary(BaseModel):
    votes: list[Vote]
    vote_counts: VoteCounts
    user_vote: Optional[VoteType] = None


# ----- Comments -----


class Comment(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    feature_request_id: str
    user_id: str
    content: str
    created_at: Optional[str] = None


class CreateCommentRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    content: str = Field(..., min_length=1, max_length=5000)


# ----- Responses -----


class FeatureRequestResponse(FeatureRequest):
    success: bool = True


class FeatureRequestListResponse(FeatureRequestPage):
    success: bool = True


class VoteResponse(VoteResult):
    success: bool = True
    message: str


class VoteSummaryResponse(VoteSummary):
    success: bool = True


class CommentListResponse(BaseModel):
    success: bool = True
    comments: list[Comment]


class CommentResponse(BaseModel):
    success: bool = True
    comment: Comment
