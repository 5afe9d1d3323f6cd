"""
User repository.

Looks users up with the service-role client. Identity resolution relies on
this for every credential type, since the application role lives only in the
users table.
"""

from typing import Any, Optional

from shared.repository import BaseRepository
from .models import UserRecord


class UserRepository(BaseRepository[UserRecord]):
    """Read access to the users table."""

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        """
        Get a user by ID.

        A malformed ID is reported as "no such user" rather than an error,
        because client-supplied IDs (x-user-id) are untrusted input.
        """
        rows = self._fetch_rows(
            self._db.table("users").select("id, email, role").eq("id", user_id).limit(1),
            "look up user",
        )
        if not rows:
            return None
        return self._map_to_user(rows[0])

    def _map_to_user(self, data: dict[str, Any]) -> UserRecord:
        """Map database row to UserRecord model."""
        record: dict[str, Any] = {
            "id": str(data["id"]),
            "email": data.get("email") or "",
        }
        if data.get("role"):
            record["role"] = data["role"]
        return UserRecord(**record)
