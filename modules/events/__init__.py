"""
Events module.

Event reads and deletion, tasks, the event team and event documents.
Access follows the shared policy: admins, the event owner and members of the
event team (reads, plus task creation).

Public API:
- IEventService: Interface used by the API layer
- Event, EventTask, EventTeamMember, EventDocument and request models
- Event exceptions: EventNotFoundError, EventNotDeletableError, etc.
"""

from .interfaces import IEventService
from .models import (
    AddTeamMembersRequest,
    AddTeamMembersResult,
    CreateTaskRequest,
    Event,
    EventDocument,
    EventStatus,
    EventTask,
    EventTeamMember,
    SignedDocumentUrl,
)
from .exceptions import (
    DocumentNotFoundError,
    EmptyTeamMemberListError,
    EventNotDeletableError,
    EventNotFoundError,
    ForeignTeamMembersError,
    TeamMembersNotFoundError,
)

__all__ = [
    # Interface
    "IEventService",
    # Models
    "AddTeamMembersRequest",
    "AddTeamMembersResult",
    "CreateTaskRequest",
    "Event",
    "EventDocument",
    "EventStatus",
    "EventTask",
    "EventTeamMember",
    "SignedDocumentUrl",
    # Exceptions
    "DocumentNotFoundError",
    "EmptyTeamMemberListError",
    "EventNotDeletableError",
    "EventNotFoundError",
    "ForeignTeamMembersError",
    "TeamMembersNotFoundError",
]
