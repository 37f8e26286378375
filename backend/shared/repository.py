"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and translating PostgREST errors into StorageError.
"""

import logging
from typing import TypeVar, Generic, Any

from postgrest.exceptions import APIError
from supabase import Client

from .exceptions import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Postgres SQLSTATE codes surfaced through PostgREST
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - _execute() which runs a query and wraps driver errors

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class TeamRepository(BaseRepository[Team]):
            def get_by_id(self, team_id: str) -> Optional[Team]:
                result = self._execute(
                    "teams",
                    self._db.table("teams").select("*").eq("id", team_id).limit(1),
                )
                if not result.data:
                    return None
                return Team(**result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _execute(self, table: str, query: Any) -> Any:
        """
        Execute a prepared query, translating driver errors.

        Subclasses that need to react to specific SQLSTATE codes should
        catch APIError themselves before falling back to this method.
        """
        try:
            return query.execute()
        except APIError as e:
            raise self._storage_error(table, e) from e

    def _storage_error(self, table: str, error: APIError) -> StorageError:
        """Log a driver error and wrap it as a StorageError."""
        logger.error(f"Query on '{table}' failed: {error.code} {error.message}")
        return StorageError(
            f"Storage failure on {table}",
            table=table,
            details={"sqlstate": error.code},
        )
