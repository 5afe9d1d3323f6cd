"""
Vote toggle.

A user's vote on a feature request is a three-state machine:

    none      --vote(t)-->   t         (created)
    t         --vote(t)-->   none      (removed)
    t         --vote(u)-->   u         (updated)

transition() is the single definition of that machine. A store must apply it
atomically per (request, user); SupabaseVoteStore does so inside the
apply_feature_request_vote database function.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

from shared.exceptions import ExternalServiceError
from shared.repository import BaseRepository

from .models import Vote, VoteAction, VoteResult, VoteType

logger = logging.getLogger(__name__)


def transition(
    current: Optional[VoteType], requested: VoteType
) -> tuple[Optional[VoteType], VoteAction]:
    """Return (vote after the toggle, action taken)."""
    if current is None:
        return requested, VoteAction.CREATED
    if current == requested:
        return None, VoteAction.REMOVED
    return requested, VoteAction.UPDATED


@runtime_checkable
class IVoteStore(Protocol):
    """Persistence for votes. apply() must be atomic per (request, user)."""

    async def apply(
        self, feature_request_id: str, user_id: str, vote_type: VoteType
    ) -> VoteResult:
        ...

    async def get_user_vote(self, feature_request_id: str, user_id: str) -> Optional[VoteType]:
        ...

    async def list_votes(self, feature_request_id: str) -> list[Vote]:
        ...


class SupabaseVoteStore(BaseRepository[Vote], IVoteStore):
    """
    Votes in the feature_request_votes table.

    The toggle runs in the apply_feature_request_vote function (see
    migrations/), which locks the (request, user) pair, applies the same
    transition and refreshes feature_requests.vote_count in one transaction.
    """

    async def apply(
        self, feature_request_id: str, user_id: str, vote_type: VoteType
    ) -> VoteResult:
        result = self._execute(
            self._db.rpc(
                "apply_feature_request_vote",
                {
                    "p_feature_request_id": feature_request_id,
                    "p_user_id": user_id,
                    "p_vote_type": vote_type.value,
                },
            ),
            "apply vote",
        )

        data = result.data
        if isinstance(data, list):
            data = data[0] if data else None
        if not data or "action" not in data:
            raise ExternalServiceError(
                "Failed to apply vote",
                service="database",
                code="DATABASE_ERROR",
                details={"message": "apply_feature_request_vote returned no result"},
            )

        logger.debug(f"Vote {data['action']} on {feature_request_id} by {user_id}")
        return VoteResult(action=VoteAction(data["action"]), vote_type=data.get("vote_type"))

    async def get_user_vote(self, feature_request_id: str, user_id: str) -> Optional[VoteType]:
        rows = self._fetch_rows(
            self._db.table("feature_request_votes")
            .select("vote_type")
            .eq("feature_request_id", feature_request_id)
            .eq("user_id", user_id)
            .limit(1),
            "fetch user vote",
        )
        return VoteType(rows[0]["vote_type"]) if rows else None

    async def list_votes(self, feature_request_id: str) -> list[Vote]:
        rows = self._fetch_rows(
            self._db.table("feature_request_votes")
            .select("id, feature_request_id, user_id, vote_type, created_at")
            .eq("feature_request_id", feature_request_id)
            .order("created_at", desc=True),
            "fetch votes",
        )
        return [
            Vote(
                id=str(row["id"]),
                feature_request_id=str(row["feature_request_id"]),
                user_id=str(row["user_id"]),
                vote_type=VoteType(row["vote_type"]),
                created_at=row.get("created_at"),
            )
            for row in rows
        ]
