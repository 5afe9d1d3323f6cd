"""
Delegation repository.

Answers "is this user on the team of that event?" from the team_members and
event_team_members tables.
"""

from shared.repository import BaseRepository

# team_members statuses that still grant access to assigned events
DELEGATING_STATUSES = ("invited", "active", "onboarding")


class DelegationRepository(BaseRepository[bool]):
    """Read-only lookups of team membership relationships."""

    def is_event_delegate(self, user_id: str, event_id: str) -> bool:
        """
        True if user_id is a live team member attached to event_id.

        A user can sit on several managers' teams, so every membership row
        is collected before checking the event assignment.
        """
        memberships = self._execute(
            self._db.table("team_members")
            .select("id")
            .eq("team_member_id", user_id)
            .in_("status", list(DELEGATING_STATUSES)),
            "fetch team memberships",
        )
        member_ids = [str(row["id"]) for row in memberships.data or []]
        if not member_ids:
            return False

        assignment = self._execute(
            self._db.table("event_team_members")
            .select("id")
            .eq("event_id", event_id)
            .in_("team_member_id", member_ids)
            .limit(1),
            "check event team assignment",
        )
        return bool(assignment.data)
