"""
Workspace repository for database access.

Encapsulates all Supabase queries and data mapping for:
- projects
- project_teams
- teams
- team_members
- tasks
- notes
- activities
"""

from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError

from shared.repository import BaseRepository, FOREIGN_KEY_VIOLATION, UNIQUE_VIOLATION
from modules.access.exceptions import ResourceNotFoundError

from .exceptions import AlreadyTeamMemberError, TeamAlreadyLinkedError
from .models import Activity, Note, Project, Task, Team

PROJECT_CHILD_TABLES = ("tasks", "notes", "activities")


class WorkspaceRepository(BaseRepository[Project]):
    """
    Repository for projects, teams, tasks and project notes and activities.

    Note: This repository does NOT perform authorization checks.
    The service layer runs the access guards first.
    """

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    def create_project(self, owner_id: str, data: dict[str, Any]) -> Project:
        row = dict(data, owner_id=owner_id)
        result = self._execute("projects", self._db.table("projects").insert(row))
        return self._map_to_project(result.data[0])

    def get_project(self, project_id: str) -> Optional[Project]:
        row = self._get_row("projects", project_id)
        return self._map_to_project(row) if row else None

    def list_projects_for_user(self, user_id: str) -> list[Project]:
        """
        Projects the user owns or reaches through a linked team.

        Most recently created first.
        """
        owned = self._execute(
            "projects",
            self._db.table("projects").select("*").eq("owner_id", user_id),
        ).data or []

        rows = {str(row["id"]): row for row in owned}

        team_ids = self._team_ids_for_user(user_id)
        if team_ids:
            links = self._execute(
                "project_teams",
                self._db.table("project_teams").select("project_id").in_("team_id", team_ids),
            ).data or []
            linked_ids = sorted({str(link["project_id"]) for link in links} - set(rows))
            if linked_ids:
                linked = self._execute(
                    "projects",
                    self._db.table("projects").select("*").in_("id", linked_ids),
                ).data or []
                rows.update({str(row["id"]): row for row in linked})

        projects = [self._map_to_project(row) for row in rows.values()]
        projects.sort(key=lambda p: p.created_at, reverse=True)
        return projects

    def update_project(self, project_id: str, fields: dict[str, Any]) -> Optional[Project]:
        row = self._update_row("projects", project_id, fields)
        return self._map_to_project(row) if row else None

    def delete_project(self, project_id: str) -> bool:
        """
        Delete a project with its tasks, notes, activities and team links.

        Notifications that referenced the project keep their row but lose
        the reference.
        """
        for child in PROJECT_CHILD_TABLES:
            self._execute(child, self._db.table(child).delete().eq("project_id", project_id))
        self._execute(
            "notifications",
            self._db.table("notifications")
            .update({"project_id": None})
            .eq("project_id", project_id),
        )
        self._execute(
            "project_teams",
            self._db.table("project_teams").delete().eq("project_id", project_id),
        )
        result = self._execute("projects", self._db.table("projects").delete().eq("id", project_id))
        return bool(result.data)

    # -------------------------------------------------------------------------
    # Project <-> team links
    # -------------------------------------------------------------------------

    def list_project_teams(self, project_id: str) -> list[Team]:
        links = self._execute(
            "project_teams",
            self._db.table("project_teams").select("team_id").eq("project_id", project_id),
        ).data or []
        team_ids = [str(link["team_id"]) for link in links]
        if not team_ids:
            return []

        result = self._execute(
            "teams",
            self._db.table("teams").select("*").in_("id", team_ids).order("name"),
        )
        return [self._map_to_team(row) for row in result.data or []]

    def link_team(self, project_id: str, team_id: str) -> None:
        query = self._db.table("project_teams").insert(
            {"project_id": project_id, "team_id": team_id}
        )
        try:
            query.execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise TeamAlreadyLinkedError(project_id, team_id) from e
            raise self._storage_error("project_teams", e) from e

    def unlink_team(self, project_id: str, team_id: str) -> bool:
        result = self._execute(
            "project_teams",
            self._db.table("project_teams")
            .delete()
            .eq("project_id", project_id)
            .eq("team_id", team_id),
        )
        return bool(result.data)

    # -------------------------------------------------------------------------
    # Teams
    # -------------------------------------------------------------------------

    def create_team(self, owner_id: str, data: dict[str, Any]) -> Team:
        row = dict(data, owner_id=owner_id)
        result = self._execute("teams", self._db.table("teams").insert(row))
        return self._map_to_team(result.data[0])

    def get_team(self, team_id: str) -> Optional[Team]:
        row = self._get_row("teams", team_id)
        return self._map_to_team(row) if row else None

    def list_member_ids(self, team_id: str) -> list[str]:
        result = self._execute(
            "team_members",
            self._db.table("team_members")
            .select("user_id")
            .eq("team_id", team_id)
            .order("created_at"),
        )
        return [str(row["user_id"]) for row in result.data or []]

    def add_member(self, team_id: str, user_id: str) -> None:
        query = self._db.table("team_members").insert({"team_id": team_id, "user_id": user_id})
        try:
            query.execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise AlreadyTeamMemberError(team_id, user_id) from e
            if e.code == FOREIGN_KEY_VIOLATION:
                raise ResourceNotFoundError("user", user_id) from e
            raise self._storage_error("team_members", e) from e

    def remove_member(self, team_id: str, user_id: str) -> bool:
        result = self._execute(
            "team_members",
            self._db.table("team_members")
            .delete()
            .eq("team_id", team_id)
            .eq("user_id", user_id),
        )
        return bool(result.data)

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def create_task(self, project_id: str, data: dict[str, Any]) -> Task:
        row = dict(data, project_id=project_id)
        result = self._execute("tasks", self._db.table("tasks").insert(row))
        return self._map_to_task(result.data[0])

    def get_task(self, task_id: str) -> Optional[Task]:
        row = self._get_row("tasks", task_id)
        return self._map_to_task(row) if row else None

    def list_tasks(self, project_id: str) -> list[Task]:
        result = self._execute(
            "tasks",
            self._db.table("tasks")
            .select("*")
            .eq("project_id", project_id)
            .order("created_at", desc=True),
        )
        return [self._map_to_task(row) for row in result.data or []]

    def update_task(self, task_id: str, fields: dict[str, Any]) -> Optional[Task]:
        row = self._update_row("tasks", task_id, fields)
        return self._map_to_task(row) if row else None

    # -------------------------------------------------------------------------
    # Notes and activities
    # -------------------------------------------------------------------------

    def create_note(self, project_id: str, author_id: str, data: dict[str, Any]) -> Note:
        row = dict(data, project_id=project_id, user_id=author_id)
        result = self._execute("notes", self._db.table("notes").insert(row))
        return self._map_to_note(result.data[0])

    def list_notes(self, project_id: str) -> list[Note]:
        return [self._map_to_note(row) for row in self._list_children("notes", project_id)]

    def get_note(self, project_id: str, note_id: str) -> Optional[Note]:
        row = self._get_child("notes", project_id, note_id)
        return self._map_to_note(row) if row else None

    def update_note(self, project_id: str, note_id: str, fields: dict[str, Any]) -> Optional[Note]:
        row = self._update_child("notes", project_id, note_id, fields)
        return self._map_to_note(row) if row else None

    def delete_note(self, project_id: str, note_id: str) -> bool:
        return self._delete_child("notes", project_id, note_id)

    def create_activity(self, project_id: str, author_id: str, data: dict[str, Any]) -> Activity:
        row = dict(data, project_id=project_id, user_id=author_id)
        result = self._execute("activities", self._db.table("activities").insert(row))
        return self._map_to_activity(result.data[0])

    def list_activities(self, project_id: str) -> list[Activity]:
        return [
            self._map_to_activity(row) for row in self._list_children("activities", project_id)
        ]

    def get_activity(self, project_id: str, activity_id: str) -> Optional[Activity]:
        row = self._get_child("activities", project_id, activity_id)
        return self._map_to_activity(row) if row else None

    def update_activity(
        self, project_id: str, activity_id: str, fields: dict[str, Any]
    ) -> Optional[Activity]:
        row = self._update_child("activities", project_id, activity_id, fields)
        return self._map_to_activity(row) if row else None

    def delete_activity(self, project_id: str, activity_id: str) -> bool:
        return self._delete_child("activities", project_id, activity_id)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def user_exists(self, user_id: str) -> bool:
        result = self._execute(
            "users",
            self._db.table("users")
            .select("id")
            .eq("id", user_id)
            .is_("deleted_at", "null")
            .limit(1),
        )
        return bool(result.data)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _team_ids_for_user(self, user_id: str) -> list[str]:
        result = self._execute(
            "team_members",
            self._db.table("team_members").select("team_id").eq("user_id", user_id),
        )
        return [str(row["team_id"]) for row in result.data or []]

    def _get_row(self, table: str, row_id: str) -> Optional[dict[str, Any]]:
        result = self._execute(
            table,
            self._db.table(table).select("*").eq("id", row_id).limit(1),
        )
        return result.data[0] if result.data else None

    def _update_row(self, table: str, row_id: str, fields: dict[str, Any]) -> Optional[dict[str, Any]]:
        data = dict(fields)
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = self._execute(table, self._db.table(table).update(data).eq("id", row_id))
        return result.data[0] if result.data else None

    # Child rows are always addressed through their project, so an ID from
    # another project reads as missing.

    def _list_children(self, table: str, project_id: str) -> list[dict[str, Any]]:
        result = self._execute(
            table,
            self._db.table(table)
            .select("*")
            .eq("project_id", project_id)
            .order("created_at", desc=True),
        )
        return result.data or []

    def _get_child(self, table: str, project_id: str, row_id: str) -> Optional[dict[str, Any]]:
        result = self._execute(
            table,
            self._db.table(table)
            .select("*")
            .eq("id", row_id)
            .eq("project_id", project_id)
            .limit(1),
        )
        return result.data[0] if result.data else None

    def _update_child(
        self, table: str, project_id: str, row_id: str, fields: dict[str, Any]
    ) -> Optional[dict[str, Any]]:
        data = dict(fields)
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = self._execute(
            table,
            self._db.table(table).update(data).eq("id", row_id).eq("project_id", project_id),
        )
        return result.data[0] if result.data else None

    def _delete_child(self, table: str, project_id: str, row_id: str) -> bool:
        result = self._execute(
            table,
            self._db.table(table).delete().eq("id", row_id).eq("project_id", project_id),
        )
        return bool(result.data)

    def _map_to_note(self, data: dict[str, Any]) -> Note:
        return Note(
            id=str(data["id"]),
            project_id=str(data["project_id"]),
            user_id=str(data["user_id"]),
            content=data["content"],
            note_type=data["note_type"],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )

    def _map_to_activity(self, data: dict[str, Any]) -> Activity:
        return Activity(
            id=str(data["id"]),
            project_id=str(data["project_id"]),
            user_id=str(data["user_id"]),
            description=data["description"],
            type=data["type"],
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )

    def _map_to_project(self, data: dict[str, Any]) -> Project:
        return Project(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description"),
            status=data.get("status"),
            priority=data.get("priority"),
            deadline=data.get("deadline"),
            owner_id=str(data["owner_id"]),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )

    def _map_to_team(self, data: dict[str, Any]) -> Team:
        return Team(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description"),
            owner_id=str(data["owner_id"]),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )

    def _map_to_task(self, data: dict[str, Any]) -> Task:
        assignee = data.get("assigned_to_id")
        return Task(
            id=str(data["id"]),
            project_id=str(data["project_id"]),
            assigned_to_id=str(assignee) if assignee is not None else None,
            title=data["title"],
            description=data.get("description"),
            priority=data["priority"],
            status=data["status"],
            deadline=data.get("deadline"),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
