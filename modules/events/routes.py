"""
Event API endpoints.

Every endpoint requires a resolved caller. Task creation and team changes
also accept a user_id in the JSON body for clients that cannot set headers.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from api.middleware.auth import get_current_user, get_current_user_with_body_fallback
from api.dependencies import get_event_service
from shared.models import AuthenticatedUser

from .interfaces import IEventService
from .models import (
    DEFAULT_EVENT_PAGE_SIZE,
    MAX_EVENT_PAGE_SIZE,
    AddTeamMembersRequest,
    AddTeamMembersResponse,
    CreateEventRequest,
    CreateTaskRequest,
    DocumentListResponse,
    DocumentUrlResponse,
    EventFilters,
    EventListResponse,
    EventResponse,
    EventSavedResponse,
    EventStatus,
    TaskListResponse,
    TaskResponse,
    TeamMemberListResponse,
    UpdateEventRequest,
)

router = APIRouter()


@router.get("", response_model=EventListResponse)
async def list_events(
    user_id: Optional[UUID] = Query(default=None, description="Owner to list (admins only for others)"),
    status: Optional[EventStatus] = Query(default=None),
    event_type: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_EVENT_PAGE_SIZE, ge=1, le=MAX_EVENT_PAGE_SIZE),
    user: AuthenticatedUser = Depends(get_current_user),
    service: IEventService = Depends(get_event_service),
) -> EventListResponse:
    """List the caller's events, newest first."""
    filters = EventFilters(
        user_id=user_id, status=status, event_type=event_type, page=page, limit=limit
    )
    result = await service.list_events(user, filters)
    return EventListResponse(**result.model_dump())


@router.post("", response_model=EventSavedResponse, status_code=201)
async def create_event(
    request: CreateEventRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IEventService = Depends(get_event_service),
) -> EventSavedResponse:
    """Create an event. Event managers only."""
    event = await service.create_event(user, request)
    message = "Event draft saved successfully" if request.is_draft else "Event created successfully"
    return EventSavedResponse(event=event, message=message)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IEventService = Depends(get_event_service),
) -> EventResponse:
    """Get an event."""
    return EventResponse(event=await service.get_event(user, event_id))


@router.put("/{event_id}", response_model=EventSavedResponse)
async def update_event(
    event_id: str,
    request: UpdateEventRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IEventService = Depends(get_event_service),
) -> EventSavedResponse:
    """Update an event. Owner or admin only; the event team may not edit it."""
    event = await service.update_event(user, event_id, request)
    return EventSavedResponse(event=event, message="Event updated successfully")


@router.delete("/{event_id}")
async def delete_event(
    event_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IEventService = Depends(get_event_service),
) -> dict:
    """
    Delete an event.

    Events that are in progress or completed cannot be deleted.
    """
    await service.delete_event(user, event_id)
    return {"success": True, "message": "Event deleted successfully"}


@router.get("/{event_id}/tasks", response_model=TaskListResponse)
async def list_tasks(
    event_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IEventService = Depends(get_event_service),
) -> TaskListResponse:
    """List an event's tasks with their assignments."""
    return TaskListResponse(tasks=await service.list_tasks(user, event_id))


@router.post("/{event_id}/tasks", response_model=TaskResponse)
async def create_task(
    event_id: str,
    request: CreateTaskRequest,
    user: AuthenticatedUser = Depends(get_current_user_with_body_fallback),
    service: IEventService = Depends(get_event_service),
) -> TaskResponse:
    """
    Create a task on an event.

    Team members of the event may create tasks. Assignment failures are
    logged and do not fail the request.
    """
    return TaskResponse(task=await service.create_task(user, event_id, request))


@router.get("/{event_id}/team-members", response_model=TeamMemberListResponse)
async def list_team_members(
    event_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IEventService = Depends(get_event_service),
) -> TeamMemberListResponse:
    """List the event team, event creator first."""
    return TeamMemberListResponse(team_members=await service.list_team(user, event_id))


@router.post("/{event_id}/team-members", response_model=AddTeamMembersResponse)
async def add_team_members(
    event_id: str,
    request: AddTeamMembersRequest,
    user: AuthenticatedUser = Depends(get_current_user_with_body_fallback),
    service: IEventService = Depends(get_event_service),
) -> AddTeamMembersResponse:
    """Attach the caller's team members to an event."""
    result = await service.add_team_members(user, event_id, request.team_member_ids)
    return AddTeamMembersResponse(**result.model_dump())


@router.get("/{event_id}/documents", response_model=DocumentListResponse)
async def list_documents(
    event_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IEventService = Depends(get_event_service),
) -> DocumentListResponse:
    """List an event's documents."""
    return DocumentListResponse(documents=await service.list_documents(user, event_id))


@router.get("/{event_id}/documents/{document_id}/url", response_model=DocumentUrlResponse)
async def get_document_url(
    event_id: str,
    document_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IEventService = Depends(get_event_service),
) -> DocumentUrlResponse:
    """Create a time-limited download link for a document."""
    signed = await service.get_document_url(user, event_id, document_id)
    return DocumentUrlResponse(**signed.model_dump())
