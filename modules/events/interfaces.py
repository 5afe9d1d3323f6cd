"""
Events module interface.

The API layer depends on IEventService for every event operation.
Each method takes the resolved caller (or None) and enforces access itself.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    AddTeamMembersResult,
    CreateEventRequest,
    CreateTaskRequest,
    Event,
    EventFilters,
    EventPage,
    EventDocument,
    EventTask,
    EventTeamMember,
    SignedDocumentUrl,
    UpdateEventRequest,
)


@runtime_checkable
class IEventService(Protocol):
    """
    Interface for event operations.

    Every method raises EventNotFoundError for unknown events before any
    access check, then UnauthenticatedError or AccessDeniedError when the
    caller may not perform the operation.
    """

    async def list_events(
        self, identity: AuthenticatedUser, filters: EventFilters
    ) -> EventPage:
        """
        List events of one manager, the caller unless filters.user_id says otherwise.

        Raises:
            InsufficientPermissionsError: If a non-admin lists another user's events
        """
        ...

    async def create_event(
        self, identity: AuthenticatedUser, request: CreateEventRequest
    ) -> Event:
        """
        Create an event owned by the caller, in planning (or draft) status.

        Raises:
            InsufficientPermissionsError: If the caller is not an event manager
        """
        ...

    async def update_event(
        self,
        identity: Optional[AuthenticatedUser],
        event_id: str,
        request: UpdateEventRequest,
    ) -> Event:
        """Update the fields that were sent. Owner or admin only."""
        ...

    async def get_event(self, identity: Optional[AuthenticatedUser], event_id: str) -> Event:
        """Get an event. Readable by admins, the owner and the event team."""
        ...

    async def delete_event(self, identity: Optional[AuthenticatedUser], event_id: str) -> None:
        """
        Delete an event. Owner or admin only.

        Raises:
            EventNotDeletableError: If the event is in progress or completed
        """
        ...

    async def list_tasks(
        self, identity: Optional[AuthenticatedUser], event_id: str
    ) -> list[EventTask]:
        """List tasks with team member and contractor assignments."""
        ...

    async def create_task(
        self,
        identity: Optional[AuthenticatedUser],
        event_id: str,
        request: CreateTaskRequest,
    ) -> EventTask:
        """
        Create a task. The event team may create tasks, not only the owner.

        Assignments are best-effort: a failed assignment insert is logged
        and the task is still returned.
        """
        ...

    async def list_team(
        self, identity: Optional[AuthenticatedUser], event_id: str
    ) -> list[EventTeamMember]:
        """List the event team, event creator first."""
        ...

    async def add_team_members(
        self,
        identity: Optional[AuthenticatedUser],
        event_id: str,
        team_member_ids: list[str],
    ) -> AddTeamMembersResult:
        """
        Attach team members to an event. Owner or admin only.

        Raises:
            EmptyTeamMemberListError: If team_member_ids is empty
            TeamMembersNotFoundError: If some ids do not exist
            ForeignTeamMembersError: If some members belong to another manager
        """
        ...

    async def list_documents(
        self, identity: Optional[AuthenticatedUser], event_id: str
    ) -> list[EventDocument]:
        """List document metadata for an event."""
        ...

    async def get_document_url(
        self,
        identity: Optional[AuthenticatedUser],
        event_id: str,
        document_id: str,
    ) -> SignedDocumentUrl:
        """
        Create a signed download URL for a document.

        Raises:
            DocumentNotFoundError: If the document is not on this event
        """
        ...
