"""
Feature requests module exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class FeatureRequestNotFoundError(NotFoundError):
    """Raised when a feature request is not found."""

    def __init__(self, feature_request_id: str):
        super().__init__(
            "Feature request not found",
            code="FEATURE_REQUEST_NOT_FOUND",
            details={"feature_request_id": feature_request_id},
        )


class SelfVoteError(ValidationError):
    """Raised when a user votes on their own feature request."""

    def __init__(self, feature_request_id: str):
        super().__init__(
            "Cannot vote on your own feature request",
            code="SELF_VOTE",
            details={"feature_request_id": feature_request_id},
        )
