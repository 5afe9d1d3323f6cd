"""
Event repository for database access.

Encapsulates all Supabase queries and data mapping for event-related tables:
- events
- event_tasks, event_tasks_team_members, event_tasks_contractors
- team_members, event_team_members
- event_documents
- event_service_requirements, event_versions
"""

import logging
from typing import Optional, Any

from shared.repository import BaseRepository
from .models import (
    Event,
    EventFilters,
    EventDocument,
    EventTask,
    EventTeamMember,
    TaskAssignee,
    TaskContractor,
)

logger = logging.getLogger(__name__)

TASK_TEAM_MEMBER_SELECT = """
    task_id,
    team_member_id,
    team_members:team_member_id (
        id,
        role,
        status,
        users:team_member_id (
            id,
            email,
            profiles (first_name, last_name, avatar_url)
        )
    )
"""

TASK_CONTRACTOR_SELECT = """
    task_id,
    contractor_id,
    business_profiles:contractor_id (id, company_name, user_id)
"""

EVENT_TEAM_SELECT = """
    id,
    event_id,
    team_member_id,
    created_at,
    team_members:team_member_id (
        id,
        role,
        status,
        team_member_id,
        users:team_member_id (
            id,
            email,
            profiles (first_name, last_name, phone, avatar_url)
        )
    )
"""

USER_PROFILE_SELECT = "id, email, profiles (first_name, last_name, phone, avatar_url)"


def _first_profile(user: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """profiles embeds as a list or a single object depending on the relation."""
    if not user:
        return None
    profiles = user.get("profiles")
    if isinstance(profiles, list):
        return profiles[0] if profiles else None
    return profiles


def _display_name(profile: Optional[dict[str, Any]], email: Optional[str]) -> str:
    if profile:
        name = f"{profile.get('first_name') or ''} {profile.get('last_name') or ''}".strip()
        if name:
            return name
    return email or "Unknown"


class EventRepository(BaseRepository[Event]):
    """
    Repository for event data access.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for consulting the authorization module.
    """

    # -------------------------------------------------------------------------
    # Event operations
    # -------------------------------------------------------------------------

    def get_event(self, event_id: str) -> Optional[Event]:
        """Get an event by ID, or None if it does not exist."""
        rows = self._fetch_rows(
            self._db.table("events").select("*").eq("id", event_id).limit(1),
            "fetch event",
        )
        if not rows:
            return None
        return self._map_to_event(rows[0])

    def list_events(self, filters: EventFilters, owner_id: str) -> tuple[list[Event], int]:
        """
        List one manager's events, newest first.

        Returns:
            (page of events, total matching rows)
        """
        query = (
            self._db.table("events")
            .select("*", count="exact")
            .or_(f"user_id.eq.{owner_id},and(user_id.is.null,event_manager_id.eq.{owner_id})")
        )
        if filters.status:
            query = query.eq("status", filters.status.value)
        if filters.event_type:
            query = query.eq("event_type", filters.event_type)

        offset = (filters.page - 1) * filters.limit
        result = self._execute(
            query.order("created_at", desc=True).range(offset, offset + filters.limit - 1),
            "fetch events",
        )
        events = [self._map_to_event(row) for row in result.data or []]
        total = result.count if result.count is not None else len(events)
        return events, total

    def create_event(self, data: dict[str, Any]) -> Event:
        """Insert an event and return the stored row."""
        result = self._execute(self._db.table("events").insert(data), "create event")
        return self._map_to_event(result.data[0])

    def update_event(self, event_id: str, data: dict[str, Any]) -> Optional[Event]:
        """Update columns of an event and return the stored row."""
        result = self._execute(
            self._db.table("events").update(data).eq("id", event_id),
            "update event",
        )
        if not result.data:
            return None
        return self._map_to_event(result.data[0])

    def delete_event(self, event_id: str) -> None:
        """Delete an event. Related rows are removed by cascade."""
        self._execute(self._db.table("events").delete().eq("id", event_id), "delete event")

    # -------------------------------------------------------------------------
    # Task operations
    # -------------------------------------------------------------------------

    def list_tasks(self, event_id: str) -> list[EventTask]:
        """List an event's tasks, newest first, with their assignments."""
        result = self._execute(
            self._db.table("event_tasks")
            .select("*")
            .eq("event_id", event_id)
            .order("created_at", desc=True),
            "fetch tasks",
        )
        tasks = result.data or []
        if not tasks:
            return []

        task_ids = [task["id"] for task in tasks]
        team_rows = self._execute(
            self._db.table("event_tasks_team_members")
            .select(TASK_TEAM_MEMBER_SELECT)
            .in_("task_id", task_ids),
            "fetch task team members",
        ).data or []
        contractor_rows = self._execute(
            self._db.table("event_tasks_contractors")
            .select(TASK_CONTRACTOR_SELECT)
            .in_("task_id", task_ids),
            "fetch task contractors",
        ).data or []

        return [
            self._map_to_task(
                task,
                [row for row in team_rows if row.get("task_id") == task["id"]],
                [row for row in contractor_rows if row.get("task_id") == task["id"]],
            )
            for task in tasks
        ]

    def create_task(self, data: dict[str, Any]) -> EventTask:
        """Insert a task row and return it."""
        result = self._execute(self._db.table("event_tasks").insert(data), "create task")
        return self._map_to_task(result.data[0])

    def get_task(self, task_id: str) -> Optional[EventTask]:
        """Get a single task with its assignments."""
        rows = self._fetch_rows(
            self._db.table("event_tasks").select("*").eq("id", task_id).limit(1),
            "fetch task",
        )
        if not rows:
            return None
        team_rows = self._execute(
            self._db.table("event_tasks_team_members")
            .select(TASK_TEAM_MEMBER_SELECT)
            .eq("task_id", task_id),
            "fetch task team members",
        ).data or []
        contractor_rows = self._execute(
            self._db.table("event_tasks_contractors")
            .select(TASK_CONTRACTOR_SELECT)
            .eq("task_id", task_id),
            "fetch task contractors",
        ).data or []
        return self._map_to_task(rows[0], team_rows, contractor_rows)

    def resolve_assignable_team_member_ids(
        self, event_id: str, candidate_ids: list[str]
    ) -> list[str]:
        """
        Normalize ids sent by clients into team_members.id values.

        Clients send either event_team_members.id or team_members.id. Only
        members attached to the event are returned, whichever form was used.
        """
        by_assignment = self._fetch_rows(
            self._db.table("event_team_members")
            .select("id, team_member_id")
            .eq("event_id", event_id)
            .in_("id", candidate_ids),
            "resolve event team assignments",
        )
        if by_assignment:
            return [str(row["team_member_id"]) for row in by_assignment]

        by_member = self._fetch_rows(
            self._db.table("event_team_members")
            .select("team_member_id")
            .eq("event_id", event_id)
            .in_("team_member_id", candidate_ids),
            "resolve event team members",
        )
        return [str(row["team_member_id"]) for row in by_member]

    def assign_task_team_members(self, task_id: str, team_member_ids: list[str]) -> bool:
        """Link team members to a task. Failure is logged, not raised."""
        rows = [{"task_id": task_id, "team_member_id": member_id} for member_id in team_member_ids]
        return self._best_effort(
            lambda: self._db.table("event_tasks_team_members").insert(rows).execute(),
            f"assign team members to task {task_id}",
        )

    def assign_task_contractors(self, task_id: str, contractor_ids: list[str]) -> bool:
        """Link contractors to a task. Failure is logged, not raised."""
        rows = [{"task_id": task_id, "contractor_id": contractor_id} for contractor_id in contractor_ids]
        return self._best_effort(
            lambda: self._db.table("event_tasks_contractors").insert(rows).execute(),
            f"assign contractors to task {task_id}",
        )

    # -------------------------------------------------------------------------
    # Team operations
    # -------------------------------------------------------------------------

    def list_event_team(self, event_id: str) -> list[EventTeamMember]:
        """List the team members attached to an event."""
        result = self._execute(
            self._db.table("event_team_members").select(EVENT_TEAM_SELECT).eq("event_id", event_id),
            "fetch event team members",
        )
        return [self._map_to_team_member(row) for row in result.data or []]

    def get_event_creator(self, event: Event) -> Optional[EventTeamMember]:
        """The event owner presented as a team entry, if their user row exists."""
        if not event.user_id:
            return None
        rows = self._fetch_rows(
            self._db.table("users").select(USER_PROFILE_SELECT).eq("id", event.user_id).limit(1),
            "fetch event creator",
        )
        if not rows:
            return None
        user = rows[0]
        profile = _first_profile(user)
        return EventTeamMember(
            id=f"creator-{event.user_id}",
            event_id=event.id,
            team_member_id=None,
            name=_display_name(profile, user.get("email")),
            role="Event Creator",
            email=user.get("email") or "N/A",
            phone=(profile or {}).get("phone") or "N/A",
            status="active",
            avatar_url=(profile or {}).get("avatar_url"),
            is_creator=True,
        )

    def get_team_member_owners(self, team_member_ids: list[str]) -> dict[str, str]:
        """Map team_members.id to the event manager who owns that membership."""
        rows = self._fetch_rows(
            self._db.table("team_members").select("id, event_manager_id").in_("id", team_member_ids),
            "verify team members",
        )
        return {str(row["id"]): str(row["event_manager_id"]) for row in rows}

    def get_assigned_team_member_ids(self, event_id: str, team_member_ids: list[str]) -> set[str]:
        """Which of team_member_ids are already attached to the event."""
        result = self._execute(
            self._db.table("event_team_members")
            .select("team_member_id")
            .eq("event_id", event_id)
            .in_("team_member_id", team_member_ids),
            "check existing assignments",
        )
        return {str(row["team_member_id"]) for row in result.data or []}

    def add_event_team_members(self, event_id: str, team_member_ids: list[str]) -> int:
        """Attach team members to an event and return how many rows were written."""
        rows = [{"event_id": event_id, "team_member_id": member_id} for member_id in team_member_ids]
        result = self._execute(
            self._db.table("event_team_members").insert(rows),
            "add team members to event",
        )
        return len(result.data or [])

    # -------------------------------------------------------------------------
    # Document operations
    # -------------------------------------------------------------------------

    def list_documents(self, event_id: str) -> list[EventDocument]:
        """List an event's documents, newest first."""
        result = self._execute(
            self._db.table("event_documents")
            .select("*")
            .eq("event_id", event_id)
            .order("created_at", desc=True),
            "fetch documents",
        )
        return [self._map_to_document(row) for row in result.data or []]

    def get_document(self, event_id: str, document_id: str) -> Optional[EventDocument]:
        """Get a document, scoped to its event."""
        rows = self._fetch_rows(
            self._db.table("event_documents")
            .select("*")
            .eq("id", document_id)
            .eq("event_id", event_id)
            .limit(1),
            "fetch document",
        )
        if not rows:
            return None
        return self._map_to_document(rows[0])

    # -------------------------------------------------------------------------
    # Best-effort side effects
    # -------------------------------------------------------------------------

    def add_service_requirements(self, event_id: str, rows: list[dict[str, Any]]) -> bool:
        """Store an event's service requirements. Failure is logged, not raised."""
        return self._best_effort(
            lambda: self._db.table("event_service_requirements").insert(rows).execute(),
            f"add service requirements to event {event_id}",
        )

    def replace_service_requirements(self, event_id: str, rows: list[dict[str, Any]]) -> bool:
        """Swap an event's service requirements for rows. Failure is logged, not raised."""
        def replace() -> None:
            self._db.table("event_service_requirements").delete().eq("event_id", event_id).execute()
            if rows:
                self._db.table("event_service_requirements").insert(rows).execute()

        return self._best_effort(replace, f"replace service requirements of event {event_id}")

    def record_event_version(
        self, event_id: str, version_number: int, changes: dict[str, Any], created_by: str
    ) -> bool:
        """Append to the event's version history. Failure is logged, not raised."""
        return self._best_effort(
            lambda: self._db.table("event_versions")
            .insert({
                "event_id": event_id,
                "version_number": version_number,
                "changes": changes,
                "created_by": created_by,
            })
            .execute(),
            f"record version {version_number} of event {event_id}",
        )

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    def _map_to_event(self, data: dict[str, Any]) -> Event:
        """Map database row to Event model, owner from user_id or else event_manager_id."""
        owner = data.get("user_id") or data.get("event_manager_id")
        return Event(**{**data, "id": str(data["id"]), "user_id": str(owner) if owner else None})

    def _map_to_task(
        self,
        data: dict[str, Any],
        team_rows: Optional[list[dict[str, Any]]] = None,
        contractor_rows: Optional[list[dict[str, Any]]] = None,
    ) -> EventTask:
        """Map a task row and its assignment rows to EventTask."""
        assignees = []
        for row in team_rows or []:
            member = row.get("team_members") or {}
            user = member.get("users") or {}
            profile = _first_profile(user)
            assignees.append(TaskAssignee(
                id=str(member["id"]) if member.get("id") else None,
                name=_display_name(profile, user.get("email")),
                email=user.get("email"),
                role=member.get("role"),
                avatar_url=(profile or {}).get("avatar_url"),
            ))

        contractors = []
        for row in contractor_rows or []:
            business = row.get("business_profiles") or {}
            contractors.append(TaskContractor(
                id=str(business["id"]) if business.get("id") else None,
                company_name=business.get("company_name") or "Unknown",
                user_id=str(business["user_id"]) if business.get("user_id") else None,
            ))

        return EventTask(
            **{
                **data,
                "id": str(data["id"]),
                "event_id": str(data["event_id"]),
                "team_members": assignees,
                "contractors": contractors,
            }
        )

    def _map_to_team_member(self, data: dict[str, Any]) -> EventTeamMember:
        """Map an event_team_members row with embedded member/user/profile."""
        member = data.get("team_members") or {}
        user = member.get("users") or {}
        profile = _first_profile(user)
        return EventTeamMember(
            id=str(data["id"]),
            event_id=str(data["event_id"]),
            team_member_id=str(data["team_member_id"]) if data.get("team_member_id") else None,
            name=_display_name(profile, user.get("email")),
            role=member.get("role") or "N/A",
            email=user.get("email") or "N/A",
            phone=(profile or {}).get("phone") or "N/A",
            status=member.get("status") or "N/A",
            avatar_url=(profile or {}).get("avatar_url"),
        )

    def _map_to_document(self, data: dict[str, Any]) -> EventDocument:
        """Map database row to EventDocument model."""
        return EventDocument(**{**data, "id": str(data["id"]), "event_id": str(data["event_id"])})
