"""
Read-only queries backing the access control predicates.

Nothing here writes. Joins are done as two filtered reads so the same
queries work through PostgREST without a database view.
"""

from typing import Any, Optional

from shared.models import Role
from shared.repository import BaseRepository


class AccessRepository(BaseRepository[dict]):
    """Lookups over projects, teams, tasks and membership rows."""

    def get_project(self, project_id: str) -> Optional[dict[str, Any]]:
        return self._one("projects", "id, owner_id", project_id)

    def get_team(self, team_id: str) -> Optional[dict[str, Any]]:
        return self._one("teams", "id, owner_id", team_id)

    def get_task(self, task_id: str) -> Optional[dict[str, Any]]:
        return self._one("tasks", "id, project_id, assigned_to_id", task_id)

    def get_user_role(self, user_id: str) -> Optional[Role]:
        result = self._execute(
            "users",
            self._db.table("users")
            .select("id, role")
            .eq("id", user_id)
            .is_("deleted_at", "null")
            .limit(1),
        )
        if not result.data:
            return None
        return Role(result.data[0]["role"])

    def is_team_member(self, team_id: str, user_id: str) -> bool:
        result = self._execute(
            "team_members",
            self._db.table("team_members")
            .select("team_id")
            .eq("team_id", team_id)
            .eq("user_id", user_id)
            .limit(1),
        )
        return bool(result.data)

    def is_member_of_project_teams(self, user_id: str, project_id: str) -> bool:
        """True if the user belongs to any team linked to the project."""
        links = self._execute(
            "project_teams",
            self._db.table("project_teams").select("team_id").eq("project_id", project_id),
        )
        team_ids = [row["team_id"] for row in links.data or []]
        if not team_ids:
            return False

        result = self._execute(
            "team_members",
            self._db.table("team_members")
            .select("team_id")
            .eq("user_id", user_id)
            .in_("team_id", team_ids)
            .limit(1),
        )
        return bool(result.data)

    def _one(self, table: str, columns: str, row_id: str) -> Optional[dict[str, Any]]:
        result = self._execute(
            table,
            self._db.table(table).select(columns).eq("id", row_id).limit(1),
        )
        if not result.data:
            return None
        return result.data[0]
