"""
Events module data models.

Event managers create, list, edit and delete their events; the event team
works on tasks, and documents are reached through signed links.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Any
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class EventStatus(str, Enum):
    """Event lifecycle status."""

    DRAFT = "draft"
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Events that have started cannot be deleted
UNDELETABLE_STATUSES = frozenset({EventStatus.IN_PROGRESS.value, EventStatus.COMPLETED.value})

DEFAULT_TASK_STATUS = "todo"
DEFAULT_TASK_PRIORITY = "medium"


class Event(BaseModel):
    """An event row. Columns this API does not interpret are passed through."""

    model_config = ConfigDict(extra="allow")

    id: str
    user_id: Optional[str] = Field(
        None, description="Owner (event manager); older rows only carry event_manager_id"
    )
    title: str = ""
    status: str = EventStatus.DRAFT.value


DEFAULT_EVENT_PAGE_SIZE = 20
MAX_EVENT_PAGE_SIZE = 100

# Budget range stored alongside an edited total
BUDGET_MIN_FACTOR = 0.8
BUDGET_MAX_FACTOR = 1.2


class EventRequestModel(BaseModel):
    """Event payloads arrive in camelCase from the web client."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class Coordinates(EventRequestModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class EventLocation(EventRequestModel):
    """A picked place: the address is stored on the event, the rest as location data."""

    address: str = Field(..., min_length=1)
    coordinates: Coordinates
    place_id: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None

    @field_validator("place_id", mode="before")
    @classmethod
    def place_id_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class ServicePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ServiceRequirement(EventRequestModel):
    """A service the event needs (catering, photography, ...)."""

    category: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    description: Optional[str] = None
    priority: ServicePriority = ServicePriority.MEDIUM
    estimated_budget: Optional[float] = Field(None, ge=0)
    is_required: bool = True

    def to_row(self, event_id: str) -> dict[str, Any]:
        return {
            "event_id": event_id,
            "service_category": self.category,
            "service_type": self.type,
            "description": self.description,
            "priority": self.priority.value,
            "estimated_budget": self.estimated_budget,
            "is_required": self.is_required,
        }


class BudgetPlan(EventRequestModel):
    total_budget: float = Field(default=0, ge=0)


class CreateEventRequest(EventRequestModel):
    """Request to create an event. Drafts are stored with status draft."""

    event_type: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: datetime
    duration_hours: Optional[float] = Field(None, ge=1, le=168)
    attendee_count: Optional[int] = Field(None, ge=1, le=10000)
    location: EventLocation
    special_requirements: Optional[str] = None
    service_requirements: list[ServiceRequirement] = Field(default_factory=list)
    budget_plan: Optional[BudgetPlan] = None
    is_draft: bool = False

    @field_validator("location")
    @classmethod
    def location_picked(cls, value: EventLocation) -> EventLocation:
        # The map picker reports 0,0 when nothing was selected
        if value.coordinates.lat == 0 or value.coordinates.lng == 0:
            raise ValueError("Please select a valid location")
        return value


class UpdateEventRequest(EventRequestModel):
    """Partial update of an event. Only fields that are sent are changed."""

    event_type: Optional[str] = Field(None, min_length=1, max_length=100)
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    duration_hours: Optional[float] = Field(None, ge=1, le=168)
    attendee_count: Optional[int] = Field(None, ge=1, le=10000)
    location: Optional[EventLocation] = None
    special_requirements: Optional[str] = None
    service_requirements: Optional[list[ServiceRequirement]] = Field(
        None, description="Replaces the event's service requirements when present"
    )
    budget_plan: Optional[BudgetPlan] = None
    status: Optional[EventStatus] = None


class EventFilters(BaseModel):
    """Query options for listing events."""

    user_id: Optional[UUID] = Field(None, description="Owner to list; defaults to the caller")
    status: Optional[EventStatus] = None
    event_type: Optional[str] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_EVENT_PAGE_SIZE, ge=1, le=MAX_EVENT_PAGE_SIZE)


class EventPage(BaseModel):
    events: list[Event]
    total: int
    page: int
    limit: int


# ----- Tasks -----


class TaskAssignee(BaseModel):
    """Team member assigned to a task."""

    id: Optional[str] = None
    name: str = "Unknown"
    email: Optional[str] = None
    role: Optional[str] = None
    avatar_url: Optional[str] = None


class TaskContractor(BaseModel):
    """Contractor (business profile) assigned to a task."""

    id: Optional[str] = None
    company_name: str = "Unknown"
    user_id: Optional[str] = None


class EventTask(BaseModel):
    """A task belonging to an event, with its assignments."""

    model_config = ConfigDict(extra="allow")

    id: str
    event_id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[str] = None
    status: str = DEFAULT_TASK_STATUS
    priority: str = DEFAULT_TASK_PRIORITY
    created_by: Optional[str] = None
    created_at: Optional[str] = None
    team_members: list[TaskAssignee] = Field(default_factory=list)
    contractors: list[TaskContractor] = Field(default_factory=list)


class CreateTaskRequest(BaseModel):
    """Request to create a task on an event."""

    title: str = Field(..., min_length=1, max_length=500, description="Task title")
    description: Optional[str] = None
    due_date: Optional[str] = None
    team_member_ids: list[str] = Field(
        default_factory=list,
        description="event_team_members.id or team_members.id values",
    )
    contractor_ids: list[str] = Field(default_factory=list)
    user_id: Optional[str] = Field(
        None, description="Caller id for clients that cannot send headers"
    )

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


# ----- Team -----


class EventTeamMember(BaseModel):
    """A member of an event's team, or the event creator."""

    id: str
    event_id: str
    team_member_id: Optional[str] = None
    name: str = "Unknown"
    role: str = "N/A"
    email: str = "N/A"
    phone: str = "N/A"
    status: str = "N/A"
    avatar_url: Optional[str] = None
    is_creator: bool = False


class AddTeamMembersRequest(BaseModel):
    """Request to attach team members to an event."""

    model_config = ConfigDict(populate_by_name=True)

    team_member_ids: list[str] = Field(
        default_factory=list,
        alias="teamMemberIds",
        description="team_members.id values owned by the caller",
    )
    user_id: Optional[str] = None


class AddTeamMembersResult(BaseModel):
    """Outcome of attaching team members."""

    added: int
    skipped: int
    message: str


# ----- Documents -----


class EventDocument(BaseModel):
    """Metadata of a file stored for an event."""

    model_config = ConfigDict(extra="allow")

    id: str
    event_id: str
    file_name: str
    file_path: str
    mime_type: Optional[str] = None
    file_size: Optional[int] = None
    uploaded_by: Optional[str] = None
    created_at: Optional[str] = None


class SignedDocumentUrl(BaseModel):
    """Time-limited download link for a document."""

    document_id: str
    url: str
    expires_in: int = Field(..., description="Seconds until the link expires")


# ----- Responses -----


class EventResponse(BaseModel):
    success: bool = True
    event: Event


class EventListResponse(EventPage):
    success: bool = True


class EventSavedResponse(EventResponse):
    message: str


class TaskListResponse(BaseModel):
    success: bool = True
    tasks: list[EventTask]


class TaskResponse(BaseModel):
    success: bool = True
    task: EventTask
    message: str = "Task created successfully"


class TeamMemberListResponse(BaseModel):
    success: bool = True
    team_members: list[EventTeamMember]


class AddTeamMembersResponse(AddTeamMembersResult):
    success: bool = True


class DocumentListResponse(BaseModel):
    success: bool = True
    documents: list[EventDocument]


class DocumentUrlResponse(SignedDocumentUrl):
    success: bool = True
