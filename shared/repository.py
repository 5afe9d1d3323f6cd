"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

import logging
from typing import Any, Callable, TypeVar, Generic

from postgrest.exceptions import APIError
from supabase import Client

from .exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Postgres "invalid_text_representation", e.g. a malformed UUID in a filter
INVALID_TEXT_REPRESENTATION = "22P02"


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - _execute(): runs a query and converts PostgREST failures
      into ExternalServiceError

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class EventRepository(BaseRepository[Event]):
            def get_event(self, event_id: str) -> Optional[Event]:
                result = self._execute(
                    self._db.table("events").select("*").eq("id", event_id).limit(1),
                    "fetch event",
                )
                if not result.data:
                    return None
                return self._map_to_event(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _execute(self, query: Any, action: str) -> Any:
        """
        Execute a PostgREST query builder.

        Args:
            query: A query builder with an execute() method.
            action: Short description used in error messages ("fetch event").

        Raises:
            ExternalServiceError: If the database rejects the query.
        """
        try:
            return query.execute()
        except APIError as e:
            logger.error(f"Database error while trying to {action}: {e.message}")
            raise ExternalServiceError(
                f"Failed to {action}",
                service="database",
                code="DATABASE_ERROR",
                details={"message": e.message, "db_code": e.code},
            ) from e

    def _fetch_rows(self, query: Any, action: str) -> list[dict[str, Any]]:
        """
        Execute a lookup by client-supplied identifiers.

        A malformed identifier cannot match any row, so it yields an empty
        result instead of a database error.
        """
        try:
            return query.execute().data or []
        except APIError as e:
            if e.code == INVALID_TEXT_REPRESENTATION:
                logger.debug(f"Malformed identifier while trying to {action}")
                return []
            logger.error(f"Database error while trying to {action}: {e.message}")
            raise ExternalServiceError(
                f"Failed to {action}",
                service="database",
                code="DATABASE_ERROR",
                details={"message": e.message, "db_code": e.code},
            ) from e

    def _best_effort(self, operation: Callable[[], Any], action: str) -> bool:
        """
        Run a side-effect query whose failure must not fail the request.

        Returns:
            True if the operation succeeded, False if it failed (failure is logged).
        """
        try:
            operation()
            return True
        except Exception as e:
            logger.warning(f"Best-effort operation failed ({action}): {e}")
            return False
