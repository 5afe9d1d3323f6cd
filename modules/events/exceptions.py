"""
Events module exceptions.
"""

from shared.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str):
        super().__init__(
            "Event not found",
            code="EVENT_NOT_FOUND",
            details={"event_id": event_id},
        )


class EventNotDeletableError(ValidationError):
    """Raised when deleting an event that has already started."""

    def __init__(self, event_id: str, status: str):
        super().__init__(
            "Cannot delete event in current status",
            code="EVENT_NOT_DELETABLE",
            details={"event_id": event_id, "status": status},
        )


class EmptyTeamMemberListError(ValidationError):
    """Raised when no team member ids were supplied."""

    def __init__(self):
        super().__init__(
            "teamMemberIds must be a non-empty array",
            code="TEAM_MEMBERS_REQUIRED",
        )


class TeamMembersNotFoundError(NotFoundError):
    """Raised when some team member ids do not exist."""

    def __init__(self, missing_ids: list[str]):
        super().__init__(
            "Some team member IDs were not found",
            code="TEAM_MEMBERS_NOT_FOUND",
            details={"missing_ids": missing_ids},
        )


class ForeignTeamMembersError(AuthorizationError):
    """Raised when attaching team members that belong to another manager."""

    def __init__(self, member_ids: list[str]):
        super().__init__(
            "Some team members do not belong to you",
            code="TEAM_MEMBERS_NOT_OWNED",
            details={"team_member_ids": member_ids},
        )


class DocumentNotFoundError(NotFoundError):
    """Raised when a document does not exist on the given event."""

    def __init__(self, event_id: str, document_id: str):
        super().__init__(
            "Document not found",
            code="DOCUMENT_NOT_FOUND",
            details={"event_id": event_id, "document_id": document_id},
        )
