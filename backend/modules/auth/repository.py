"""
User repository for database access.

Encapsulates all Supabase queries against the users table. Soft-deleted
rows (deleted_at set) are invisible to every lookup.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError

from shared.models import Role
from shared.repository import BaseRepository, UNIQUE_VIOLATION

from .exceptions import DuplicateIdentityError
from .models import User

USERS_TABLE = "users"


class UserRepository(BaseRepository[User]):
    """
    Repository for user records.

    Note: This repository does NOT hash passwords. It stores whatever
    password_hash the credential store hands it.
    """

    def create(
        self,
        email: str,
        password_hash: str,
        role: Role,
        username: Optional[str] = None,
    ) -> User:
        """
        Insert a new, unverified user.

        Raises:
            DuplicateIdentityError: If the email or username is taken
        """
        data = {
            "email": email,
            "username": username,
            "password_hash": password_hash,
            "role": role.value,
            "is_email_verified": False,
        }
        result = self._write(self._db.table(USERS_TABLE).insert(data))
        return self._map_to_user(result.data[0])

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get an active user by ID."""
        return self._first("id", user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get an active user by (normalized) email."""
        return self._first("email", email)

    def get_by_username(self, username: str) -> Optional[User]:
        """Get an active user by username."""
        return self._first("username", username)

    def update(self, user_id: str, fields: dict[str, Any]) -> Optional[User]:
        """
        Update columns on an active user.

        Returns:
            The updated user, or None if no active user has that ID.

        Raises:
            DuplicateIdentityError: If a new email or username is taken
        """
        data = dict(fields)
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = self._write(
            self._db.table(USERS_TABLE)
            .update(data)
            .eq("id", user_id)
            .is_("deleted_at", "null")
        )
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def soft_delete(self, user_id: str) -> bool:
        """Mark a user deleted. Returns False if there was no active user."""
        now = datetime.now(timezone.utc).isoformat()
        return self.update(user_id, {"deleted_at": now}) is not None

    def _first(self, column: str, value: str) -> Optional[User]:
        result = self._execute(
            USERS_TABLE,
            self._db.table(USERS_TABLE)
            .select("*")
            .eq(column, value)
            .is_("deleted_at", "null")
            .limit(1),
        )
        if not result.data:
            return None
        return self._map_to_user(result.data[0])

    def _write(self, query: Any) -> Any:
        try:
            return query.execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                field = "username" if "username" in (e.message or "") else "email"
                raise DuplicateIdentityError(field) from e
            raise self._storage_error(USERS_TABLE, e) from e

    def _map_to_user(self, data: dict[str, Any]) -> User:
        return User(
            id=str(data["id"]),
            email=data["email"],
            username=data.get("username"),
            password_hash=data["password_hash"],
            role=Role(data["role"]),
            is_email_verified=bool(data.get("is_email_verified", False)),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
            deleted_at=data.get("deleted_at"),
        )
