"""
Events service implementation.

Loads the event, asks the authorization module whether the caller may act
on it, then delegates to the repository.
"""

import logging
from typing import Any, Optional

from shared.models import AuthenticatedUser, UserRole
from modules.authorization.interfaces import IAuthorizationService
from modules.authorization.models import (
    DelegationRule,
    Operation,
    ResourceDescriptor,
    ResourceType,
)

from .interfaces import IEventService
from .models import (
    BUDGET_MAX_FACTOR,
    BUDGET_MIN_FACTOR,
    DEFAULT_TASK_PRIORITY,
    DEFAULT_TASK_STATUS,
    UNDELETABLE_STATUSES,
    AddTeamMembersResult,
    CreateEventRequest,
    CreateTaskRequest,
    Event,
    EventFilters,
    EventPage,
    EventStatus,
    EventDocument,
    EventTask,
    EventTeamMember,
    SignedDocumentUrl,
    UpdateEventRequest,
)
from .repository import EventRepository
from .storage import DocumentStorage
from .exceptions import (
    DocumentNotFoundError,
    EmptyTeamMemberListError,
    EventNotDeletableError,
    EventNotFoundError,
    ForeignTeamMembersError,
    TeamMembersNotFoundError,
)

logger = logging.getLogger(__name__)

# Request field -> events column, for fields copied as sent
EVENT_UPDATE_COLUMNS = {
    "event_type": "event_type",
    "title": "title",
    "event_date": "event_date",
    "duration_hours": "duration_hours",
    "attendee_count": "attendee_count",
    "status": "status",
}


class EventService(IEventService):
    """Event operations guarded by the shared authorization policy."""

    def __init__(
        self,
        repository: EventRepository,
        authorization: IAuthorizationService,
        storage: DocumentStorage,
        signed_url_expires_in: int = 3600,
    ):
        self._repo = repository
        self._authz = authorization
        self._storage = storage
        self._signed_url_expires_in = signed_url_expires_in

    async def list_events(
        self, identity: AuthenticatedUser, filters: EventFilters
    ) -> EventPage:
        owner_id = str(filters.user_id) if filters.user_id else identity.id
        if owner_id != identity.id:
            self._authz.require_admin(identity)

        events, total = self._repo.list_events(filters, owner_id)
        return EventPage(events=events, total=total, page=filters.page, limit=filters.limit)

    async def create_event(
        self, identity: AuthenticatedUser, request: CreateEventRequest
    ) -> Event:
        self._authz.require_role(identity, UserRole.EVENT_MANAGER)

        row: dict[str, Any] = {
            "user_id": identity.id,
            "title": request.title,
            "event_type": request.event_type,
            "event_date": request.event_date.isoformat(),
            "location": request.location.address,
            "attendee_count": request.attendee_count,
            "duration_hours": request.duration_hours,
            "budget": request.budget_plan.total_budget if request.budget_plan else 0,
            "status": EventStatus.DRAFT.value if request.is_draft else EventStatus.PLANNING.value,
        }
        if request.description:
            row["description"] = request.description
        if request.special_requirements:
            row["requirements"] = request.special_requirements

        event = self._repo.create_event(row)
        logger.info(f"Event {event.id} created by {identity.id}")

        if request.service_requirements:
            self._repo.add_service_requirements(
                event.id, [req.to_row(event.id) for req in request.service_requirements]
            )
        self._repo.record_event_version(
            event.id,
            1,
            {"action": "created", "data": request.model_dump(mode="json")},
            identity.id,
        )
        return event

    async def update_event(
        self,
        identity: Optional[AuthenticatedUser],
        event_id: str,
        request: UpdateEventRequest,
    ) -> Event:
        event = self._load_event(event_id)
        # Editing the event itself is not delegated to the team
        await self._authz.require(
            identity,
            self._describe(event, ResourceType.EVENT, delegation=DelegationRule.NONE),
            Operation.WRITE,
        )

        changes = self._event_changes(request)
        updated = event
        if changes:
            updated = self._repo.update_event(event.id, changes)
            if updated is None:
                raise EventNotFoundError(event_id)

        if request.service_requirements is not None:
            self._repo.replace_service_requirements(
                event.id, [req.to_row(event.id) for req in request.service_requirements]
            )

        logger.info(f"Event {event.id} updated by {identity.id}")
        return updated

    async def get_event(self, identity: Optional[AuthenticatedUser], event_id: str) -> Event:
        event = self._load_event(event_id)
        await self._authz.require(identity, self._describe(event, ResourceType.EVENT), Operation.READ)
        return event

    async def delete_event(self, identity: Optional[AuthenticatedUser], event_id: str) -> None:
        event = self._load_event(event_id)
        await self._authz.require(identity, self._describe(event, ResourceType.EVENT), Operation.WRITE)

        if event.status in UNDELETABLE_STATUSES:
            raise EventNotDeletableError(event.id, event.status)

        self._repo.delete_event(event.id)
        logger.info(f"Event {event.id} deleted by {identity.id}")

    # ----- Tasks -----

    async def list_tasks(
        self, identity: Optional[AuthenticatedUser], event_id: str
    ) -> list[EventTask]:
        event = self._load_event(event_id)
        await self._authz.require(
            identity, self._describe(event, ResourceType.EVENT_TASK), Operation.READ
        )
        return self._repo.list_tasks(event.id)

    async def create_task(
        self,
        identity: Optional[AuthenticatedUser],
        event_id: str,
        request: CreateTaskRequest,
    ) -> EventTask:
        event = self._load_event(event_id)
        await self._authz.require(
            identity,
            self._describe(event, ResourceType.EVENT_TASK, delegated_write=True),
            Operation.WRITE,
        )

        task = self._repo.create_task({
            "event_id": event.id,
            "title": request.title,
            "description": request.description or None,
            "due_date": request.due_date or None,
            "created_by": identity.id,
            "status": DEFAULT_TASK_STATUS,
            "priority": DEFAULT_TASK_PRIORITY,
        })

        if request.team_member_ids:
            member_ids = self._repo.resolve_assignable_team_member_ids(
                event.id, request.team_member_ids
            )
            if member_ids:
                self._repo.assign_task_team_members(task.id, member_ids)
            else:
                logger.warning(f"No assignable team members for task {task.id} on event {event.id}")

        if request.contractor_ids:
            self._repo.assign_task_contractors(task.id, request.contractor_ids)

        return self._repo.get_task(task.id) or task

    # ----- Team -----

    async def list_team(
        self, identity: Optional[AuthenticatedUser], event_id: str
    ) -> list[EventTeamMember]:
        event = self._load_event(event_id)
        await self._authz.require(
            identity, self._describe(event, ResourceType.EVENT_TEAM), Operation.READ
        )

        team = self._repo.list_event_team(event.id)
        creator = self._repo.get_event_creator(event)
        if creator is not None:
            team.insert(0, creator)
        return team

    async def add_team_members(
        self,
        identity: Optional[AuthenticatedUser],
        event_id: str,
        team_member_ids: list[str],
    ) -> AddTeamMembersResult:
        if not team_member_ids:
            raise EmptyTeamMemberListError()

        event = self._load_event(event_id)
        # Only the owner (or an admin) manages the team, never team members
        await self._authz.require(
            identity,
            self._describe(event, ResourceType.EVENT_TEAM, delegation=DelegationRule.NONE),
            Operation.WRITE,
        )

        requested = list(dict.fromkeys(team_member_ids))
        owners = self._repo.get_team_member_owners(requested)
        missing = [member_id for member_id in requested if member_id not in owners]
        if missing:
            raise TeamMembersNotFoundError(missing)

        # Managers attach their own team; admins may attach anyone's
        if not identity.is_admin:
            foreign = [member_id for member_id in requested if owners[member_id] != identity.id]
            if foreign:
                raise ForeignTeamMembersError(foreign)

        existing = self._repo.get_assigned_team_member_ids(event.id, requested)
        new_ids = [member_id for member_id in requested if member_id not in existing]
        if not new_ids:
            return AddTeamMembersResult(
                added=0,
                skipped=len(existing),
                message="All selected team members are already assigned to this event",
            )

        added = self._repo.add_event_team_members(event.id, new_ids)
        return AddTeamMembersResult(
            added=added,
            skipped=len(existing),
            message=f"Successfully added {added} team member(s) to the event",
        )

    # ----- Documents -----

    async def list_documents(
        self, identity: Optional[AuthenticatedUser], event_id: str
    ) -> list[EventDocument]:
        event = self._load_event(event_id)
        await self._authz.require(
            identity, self._describe(event, ResourceType.EVENT_DOCUMENT), Operation.READ
        )
        return self._repo.list_documents(event.id)

    async def get_document_url(
        self,
        identity: Optional[AuthenticatedUser],
        event_id: str,
        document_id: str,
    ) -> SignedDocumentUrl:
        event = self._load_event(event_id)
        await self._authz.require(
            identity, self._describe(event, ResourceType.EVENT_DOCUMENT), Operation.READ
        )

        document = self._repo.get_document(event.id, document_id)
        if document is None:
            raise DocumentNotFoundError(event.id, document_id)

        url = self._storage.create_signed_url(document.file_path, self._signed_url_expires_in)
        return SignedDocumentUrl(
            document_id=document.id,
            url=url,
            expires_in=self._signed_url_expires_in,
        )

    # ----- Helpers -----

    def _load_event(self, event_id: str) -> Event:
        event = self._repo.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    @staticmethod
    def _event_changes(request: UpdateEventRequest) -> dict[str, Any]:
        """Column changes for the fields the client actually sent."""
        sent = request.model_dump(exclude_unset=True, mode="json")
        changes = {
            column: sent[field]
            for field, column in EVENT_UPDATE_COLUMNS.items()
            if sent.get(field) is not None
        }
        if "description" in sent:
            changes["description"] = sent["description"]
        if "special_requirements" in sent:
            changes["special_requirements"] = sent["special_requirements"]
        if request.location is not None:
            changes["location"] = request.location.address
            changes["location_data"] = sent["location"]
        if request.budget_plan is not None:
            total = request.budget_plan.total_budget
            changes["budget_total"] = total
            changes["budget_min"] = total * BUDGET_MIN_FACTOR
            changes["budget_max"] = total * BUDGET_MAX_FACTOR
        return changes

    def _describe(
        self,
        event: Event,
        resource_type: ResourceType,
        delegated_write: bool = False,
        delegation: DelegationRule = DelegationRule.EVENT_TEAM,
    ) -> ResourceDescriptor:
        """Event-scoped resources inherit the event's owner and team."""
        return ResourceDescriptor(
            resource_type=resource_type,
            resource_id=event.id,
            owner_id=event.user_id,
            delegation_rule=delegation,
            delegated_write=delegated_write,
            event_id=event.id,
        )

