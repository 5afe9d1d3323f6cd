"""
Feature requests module.

Submission, voting, comments and the admin status workflow.

Public API:
- IFeatureRequestService, IVoteService: Interfaces used by the API layer
- FeatureRequest, VoteSummary and related models
- transition: The vote toggle state machine
- FeatureRequestNotFoundError, SelfVoteError
"""

from .interfaces import IFeatureRequestService, IVoteService
from .models import (
    Comment,
    CreateFeatureRequestRequest,
    FeatureRequest,
    FeatureRequestFilters,
    FeatureRequestStatus,
    SortOrder,
    UpdateFeatureRequestRequest,
    VoteAction,
    VoteResult,
    VoteSummary,
    VoteType,
)
from .votes import IVoteStore, transition
from .exceptions import FeatureRequestNotFoundError, SelfVoteError

__all__ = [
    # Interfaces
    "IFeatureRequestService",
    "IVoteService",
    "IVoteStore",
    # Models
    "Comment",
    "CreateFeatureRequestRequest",
    "FeatureRequest",
    "FeatureRequestFilters",
    "FeatureRequestStatus",
    "SortOrder",
    "UpdateFeatureRequestRequest",
    "VoteAction",
    "VoteResult",
    "VoteSummary",
    "VoteType",
    # Vote state machine
    "transition",
    # Exceptions
    "FeatureRequestNotFoundError",
    "SelfVoteError",
]
