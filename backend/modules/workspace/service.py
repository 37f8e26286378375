"""
Workspace service implementation.

Thin orchestration over WorkspaceRepository: existence checks first,
then the access guard, then the write.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel

from shared.exceptions import ValidationError
from shared.models import AuthenticatedUser
from modules.access.exceptions import ResourceNotFoundError
from modules.access.interfaces import IAccessService
from modules.access.models import Action

from .interfaces import IWorkspaceService
from .models import (
    Activity,
    CreateActivityRequest,
    CreateNoteRequest,
    CreateProjectRequest,
    CreateTaskRequest,
    CreateTeamRequest,
    Note,
    Project,
    Task,
    Team,
    TeamDetail,
    UpdateActivityRequest,
    UpdateNoteRequest,
    UpdateProjectRequest,
    UpdateTaskRequest,
)
from .repository import WorkspaceRepository

logger = logging.getLogger(__name__)


def _changes(request: BaseModel) -> dict[str, Any]:
    """Fields present in a partial-update body, JSON-ready."""
    fields = request.model_dump(mode="json", exclude_unset=True)
    if not fields:
        raise ValidationError("No fields to update", code="EMPTY_UPDATE")
    return fields


class WorkspaceService(IWorkspaceService):
    """Implementation of the workspace service."""

    def __init__(self, repository: WorkspaceRepository, access: IAccessService):
        self._repo = repository
        self._access = access

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    async def create_project(self, user: AuthenticatedUser, request: CreateProjectRequest) -> Project:
        self._access.require_role(user, Action.CREATE_PROJECT)
        project = self._repo.create_project(user.id, request.model_dump(mode="json"))
        logger.info(f"Project {project.id} created by user {user.id}")
        return project

    async def list_projects(self, user: AuthenticatedUser) -> list[Project]:
        return self._repo.list_projects_for_user(user.id)

    async def get_project(self, user: AuthenticatedUser, project_id: str) -> Project:
        await self._access.require_project_access(user, project_id)
        return self._require_project(project_id)

    async def update_project(
        self, user: AuthenticatedUser, project_id: str, request: UpdateProjectRequest
    ) -> Project:
        await self._access.require_project_manager(user, project_id)
        project = self._repo.update_project(project_id, _changes(request))
        if project is None:
            raise ResourceNotFoundError("project", project_id)
        logger.info(f"Project {project_id} updated by user {user.id}")
        return project

    async def delete_project(self, user: AuthenticatedUser, project_id: str) -> None:
        await self._access.require_project_manager(user, project_id)
        if not self._repo.delete_project(project_id):
            raise ResourceNotFoundError("project", project_id)
        logger.info(f"Project {project_id} deleted by user {user.id}")

    # -------------------------------------------------------------------------
    # Project <-> team links
    # -------------------------------------------------------------------------

    async def list_project_teams(self, user: AuthenticatedUser, project_id: str) -> list[Team]:
        await self._access.require_project_access(user, project_id)
        return self._repo.list_project_teams(project_id)

    async def link_team(self, user: AuthenticatedUser, project_id: str, team_id: str) -> None:
        self._require_project(project_id)
        self._require_team(team_id)
        await self._access.require_project_manager(user, project_id)
        self._repo.link_team(project_id, team_id)
        logger.info(f"Team {team_id} linked to project {project_id} by user {user.id}")

    async def unlink_team(self, user: AuthenticatedUser, project_id: str, team_id: str) -> None:
        self._require_project(project_id)
        self._require_team(team_id)
        await self._access.require_project_manager(user, project_id)
        if not self._repo.unlink_team(project_id, team_id):
            raise ResourceNotFoundError("project team", team_id)
        logger.info(f"Team {team_id} unlinked from project {project_id} by user {user.id}")

    # -------------------------------------------------------------------------
    # Teams
    # -------------------------------------------------------------------------

    async def create_team(self, user: AuthenticatedUser, request: CreateTeamRequest) -> Team:
        self._access.require_role(user, Action.CREATE_TEAM)
        team = self._repo.create_team(user.id, request.model_dump(mode="json"))
        logger.info(f"Team {team.id} created by user {user.id}")
        return team

    async def get_team(self, user: AuthenticatedUser, team_id: str) -> TeamDetail:
        await self._access.require_team_access(user, team_id)
        return self._team_detail(self._require_team(team_id))

    async def add_member(self, user: AuthenticatedUser, team_id: str, member_id: str) -> TeamDetail:
        team = self._require_team(team_id)
        self._require_user(member_id)
        await self._access.require_team_manager(user, team_id)
        self._repo.add_member(team_id, member_id)
        logger.info(f"User {member_id} added to team {team_id} by user {user.id}")
        return self._team_detail(team)

    async def remove_member(self, user: AuthenticatedUser, team_id: str, member_id: str) -> None:
        self._require_team(team_id)
        await self._access.require_team_manager(user, team_id)
        if not self._repo.remove_member(team_id, member_id):
            raise ResourceNotFoundError("team member", member_id)
        logger.info(f"User {member_id} removed from team {team_id} by user {user.id}")

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    async def list_tasks(self, user: AuthenticatedUser, project_id: str) -> list[Task]:
        await self._access.require_project_access(user, project_id)
        return self._repo.list_tasks(project_id)

    async def create_task(
        self, user: AuthenticatedUser, project_id: str, request: CreateTaskRequest
    ) -> Task:
        self._require_project(project_id)
        self._require_assignee(request.assigned_to_id)
        await self._access.require_project_access(user, project_id)
        task = self._repo.create_task(project_id, request.model_dump(mode="json"))
        logger.info(f"Task {task.id} created in project {project_id} by user {user.id}")
        return task

    async def get_task(self, user: AuthenticatedUser, task_id: str) -> Task:
        await self._access.require_task_access(user, task_id)
        task = self._repo.get_task(task_id)
        if task is None:
            raise ResourceNotFoundError("task", task_id)
        return task

    async def update_task(
        self, user: AuthenticatedUser, task_id: str, request: UpdateTaskRequest
    ) -> Task:
        fields = _changes(request)
        if self._repo.get_task(task_id) is None:
            raise ResourceNotFoundError("task", task_id)
        self._require_assignee(fields.get("assigned_to_id"))
        await self._access.require_task_editor(user, task_id)

        task = self._repo.update_task(task_id, fields)
        if task is None:
            raise ResourceNotFoundError("task", task_id)
        logger.info(f"Task {task_id} updated by user {user.id}")
        return task

    # -------------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------------

    async def list_notes(self, user: AuthenticatedUser, project_id: str) -> list[Note]:
        await self._access.require_project_access(user, project_id)
        return self._repo.list_notes(project_id)

    async def create_note(
        self, user: AuthenticatedUser, project_id: str, request: CreateNoteRequest
    ) -> Note:
        await self._access.require_project_access(user, project_id)
        note = self._repo.create_note(project_id, user.id, request.model_dump(mode="json"))
        logger.info(f"Note {note.id} added to project {project_id} by user {user.id}")
        return note

    async def get_note(self, user: AuthenticatedUser, project_id: str, note_id: str) -> Note:
        await self._access.require_project_access(user, project_id)
        note = self._repo.get_note(project_id, note_id)
        if note is None:
            raise ResourceNotFoundError("note", note_id)
        return note

    async def update_note(
        self, user: AuthenticatedUser, project_id: str, note_id: str, request: UpdateNoteRequest
    ) -> Note:
        fields = _changes(request)
        await self._access.require_project_access(user, project_id)
        note = self._repo.update_note(project_id, note_id, fields)
        if note is None:
            raise ResourceNotFoundError("note", note_id)
        logger.info(f"Note {note_id} updated by user {user.id}")
        return note

    async def delete_note(self, user: AuthenticatedUser, project_id: str, note_id: str) -> None:
        await self._access.require_project_access(user, project_id)
        if not self._repo.delete_note(project_id, note_id):
            raise ResourceNotFoundError("note", note_id)
        logger.info(f"Note {note_id} deleted by user {user.id}")

    # -------------------------------------------------------------------------
    # Activities
    # -------------------------------------------------------------------------

    async def list_activities(self, user: AuthenticatedUser, project_id: str) -> list[Activity]:
        await self._access.require_project_access(user, project_id)
        return self._repo.list_activities(project_id)

    async def create_activity(
        self, user: AuthenticatedUser, project_id: str, request: CreateActivityRequest
    ) -> Activity:
        await self._access.require_project_access(user, project_id)
        activity = self._repo.create_activity(project_id, user.id, request.model_dump(mode="json"))
        logger.info(f"Activity {activity.id} logged in project {project_id} by user {user.id}")
        return activity

    async def get_activity(
        self, user: AuthenticatedUser, project_id: str, activity_id: str
    ) -> Activity:
        await self._access.require_project_access(user, project_id)
        activity = self._repo.get_activity(project_id, activity_id)
        if activity is None:
            raise ResourceNotFoundError("activity", activity_id)
        return activity

    async def update_activity(
        self,
        user: AuthenticatedUser,
        project_id: str,
        activity_id: str,
        request: UpdateActivityRequest,
    ) -> Activity:
        fields = _changes(request)
        await self._access.require_project_access(user, project_id)
        activity = self._repo.update_activity(project_id, activity_id, fields)
        if activity is None:
            raise ResourceNotFoundError("activity", activity_id)
        logger.info(f"Activity {activity_id} updated by user {user.id}")
        return activity

    async def delete_activity(
        self, user: AuthenticatedUser, project_id: str, activity_id: str
    ) -> None:
        await self._access.require_project_access(user, project_id)
        if not self._repo.delete_activity(project_id, activity_id):
            raise ResourceNotFoundError("activity", activity_id)
        logger.info(f"Activity {activity_id} deleted by user {user.id}")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_project(self, project_id: str) -> Project:
        project = self._repo.get_project(project_id)
        if project is None:
            raise ResourceNotFoundError("project", project_id)
        return project

    def _require_team(self, team_id: str) -> Team:
        team = self._repo.get_team(team_id)
        if team is None:
            raise ResourceNotFoundError("team", team_id)
        return team

    def _require_user(self, user_id: str) -> None:
        if not self._repo.user_exists(user_id):
            raise ResourceNotFoundError("user", user_id)

    def _require_assignee(self, assignee_id: Optional[str]) -> None:
        if assignee_id is not None:
            self._require_user(assignee_id)

    def _team_detail(self, team: Team) -> TeamDetail:
        return TeamDetail(**team.model_dump(), member_ids=self._repo.list_member_ids(team.id))
