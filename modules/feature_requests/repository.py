"""
Feature request repository for database access.

Encapsulates all Supabase queries and data mapping for:
- feature_requests
- feature_request_comments
- feature_request_status_history
"""

import re
from datetime import datetime, timezone
from typing import Optional, Any

from shared.models import AuthenticatedUser
from shared.repository import BaseRepository
from .models import (
    Comment,
    FeatureRequest,
    FeatureRequestFilters,
    FeatureRequestStatus,
    SortOrder,
)

# Characters with meaning inside PostgREST logical filter trees
_FILTER_SYNTAX = re.compile(r"[,()\"'*%\\:]")

SORT_COLUMNS: dict[SortOrder, tuple[str, bool]] = {
    SortOrder.NEWEST: ("created_at", True),
    SortOrder.OLDEST: ("created_at", False),
    SortOrder.MOST_VOTED: ("vote_count", True),
    SortOrder.LEAST_VOTED: ("vote_count", False),
}

PUBLIC_CONDITION = f"is_public.eq.true,status.neq.{FeatureRequestStatus.REJECTED.value}"


def sanitize_search(term: str) -> str:
    """Strip characters that would break out of a PostgREST filter value."""
    return _FILTER_SYNTAX.sub(" ", term).strip()


def visibility_filter(viewer: Optional[AuthenticatedUser], search: Optional[str]) -> Optional[str]:
    """
    Build the single `or` filter combining visibility and search.

    PostgREST only takes one `or` tree per query, so the search condition is
    folded into each visibility branch. Returns None when no `or` is needed.
    """
    search_clause = None
    if search:
        search_clause = f"or(title.ilike.*{search}*,description.ilike.*{search}*)"

    if viewer is not None and viewer.is_admin:
        return search_clause[len("or("):-1] if search_clause else None

    branches = [PUBLIC_CONDITION]
    if viewer is not None:
        branches.append(f"user_id.eq.{viewer.id}")

    if search_clause:
        branches = [f"{branch},{search_clause}" for branch in branches]

    return ",".join(f"and({branch})" for branch in branches)


class FeatureRequestRepository(BaseRepository[FeatureRequest]):
    """
    Repository for feature request data access.

    Listing applies visibility in the query itself; single-row reads do not,
    the service asks the authorization module instead.
    """

    # -------------------------------------------------------------------------
    # Feature request CRUD operations
    # -------------------------------------------------------------------------

    def list_feature_requests(
        self,
        filters: FeatureRequestFilters,
        viewer: Optional[AuthenticatedUser],
    ) -> tuple[list[FeatureRequest], int]:
        """
        List feature requests visible to viewer.

        Admins see everything, signed-in users see public requests plus their
        own, anonymous callers see public requests only. Rejected requests
        are never public.

        Returns:
            (page of feature requests, total matching rows)
        """
        query = self._db.table("feature_requests").select("*", count="exact")

        if filters.status:
            query = query.eq("status", filters.status.value)
        if filters.category_id:
            query = query.eq("category_id", filters.category_id)
        if filters.user_id:
            query = query.eq("user_id", filters.user_id)

        search = sanitize_search(filters.search) if filters.search else None
        condition = visibility_filter(viewer, search or None)
        if condition:
            query = query.or_(condition)

        column, descending = SORT_COLUMNS[filters.sort]
        query = query.order(column, desc=descending)

        offset = (filters.page - 1) * filters.limit
        result = self._execute(
            query.range(offset, offset + filters.limit - 1),
            "fetch feature requests",
        )

        items = [self._map_to_feature_request(row) for row in result.data or []]
        total = result.count if result.count is not None else len(items)
        return items, total

    def get_feature_request(self, feature_request_id: str) -> Optional[FeatureRequest]:
        """Get a feature request by ID, or None if it does not exist."""
        rows = self._fetch_rows(
            self._db.table("feature_requests").select("*").eq("id", feature_request_id).limit(1),
            "fetch feature request",
        )
        if not rows:
            return None
        return self._map_to_feature_request(rows[0])

    def create_feature_request(self, data: dict[str, Any]) -> FeatureRequest:
        """Insert a feature request and return the stored row."""
        result = self._execute(
            self._db.table("feature_requests").insert(data),
            "create feature request",
        )
        return self._map_to_feature_request(result.data[0])

    def update_feature_request(
        self, feature_request_id: str, data: dict[str, Any]
    ) -> Optional[FeatureRequest]:
        """Update columns of a feature request and return the stored row."""
        data = {**data, "updated_at": datetime.now(timezone.utc).isoformat()}
        result = self._execute(
            self._db.table("feature_requests").update(data).eq("id", feature_request_id),
            "update feature request",
        )
        if not result.data:
            return None
        return self._map_to_feature_request(result.data[0])

    def delete_feature_request(self, feature_request_id: str) -> None:
        """Delete a feature request. Votes and comments go by cascade."""
        self._execute(
            self._db.table("feature_requests").delete().eq("id", feature_request_id),
            "delete feature request",
        )

    # -------------------------------------------------------------------------
    # Best-effort side effects
    # -------------------------------------------------------------------------

    def increment_view_count(self, feature_request: FeatureRequest) -> bool:
        """Bump the view counter. Failure is logged, not raised."""
        return self._best_effort(
            lambda: self._db.table("feature_requests")
            .update({"view_count": feature_request.view_count + 1})
            .eq("id", feature_request.id)
            .execute(),
            f"increment view count of {feature_request.id}",
        )

    def record_status_change(
        self,
        feature_request_id: str,
        old_status: str,
        new_status: str,
        changed_by: str,
    ) -> bool:
        """Append to the status history. Failure is logged, not raised."""
        return self._best_effort(
            lambda: self._db.table("feature_request_status_history")
            .insert({
                "feature_request_id": feature_request_id,
                "old_status": old_status,
                "new_status": new_status,
                "changed_by": changed_by,
            })
            .execute(),
            f"record status change of {feature_request_id}",
        )

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------

    def list_comments(self, feature_request_id: str) -> list[Comment]:
        """List comments, oldest first."""
        result = self._execute(
            self._db.table("feature_request_comments")
            .select("*")
            .eq("feature_request_id", feature_request_id)
            .order("created_at"),
            "fetch comments",
        )
        return [self._map_to_comment(row) for row in result.data or []]

    def create_comment(self, feature_request_id: str, user_id: str, content: str) -> Comment:
        """Insert a comment and return the stored row."""
        result = self._execute(
            self._db.table("feature_request_comments").insert({
                "feature_request_id": feature_request_id,
                "user_id": user_id,
                "content": content,
            }),
            "create comment",
        )
        return self._map_to_comment(result.data[0])

    # -------------------------------------------------------------------------
    # Mapping helpers
    # -------------------------------------------------------------------------

    def _map_to_feature_request(self, data: dict[str, Any]) -> FeatureRequest:
        """Map database row to FeatureRequest model."""
        row = {key: value for key, value in data.items() if value is not None}
        row["id"] = str(data["id"])
        row["user_id"] = str(data["user_id"])
        if data.get("category_id") is not None:
            row["category_id"] = str(data["category_id"])
        return FeatureRequest(**row)

    def _map_to_comment(self, data: dict[str, Any]) -> Comment:
        """Map database row to Comment model."""
        return Comment(
            **{
                **data,
                "id": str(data["id"]),
                "feature_request_id": str(data["feature_request_id"]),
                "user_id": str(data["user_id"]),
            }
        )
