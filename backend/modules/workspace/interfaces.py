"""
Workspace module interface.

Every method takes the authenticated caller and runs the matching
access guard before touching data.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser

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


@runtime_checkable
class IWorkspaceService(Protocol):
    """Interface for project, team, task, note and activity operations."""

    async def create_project(self, user: AuthenticatedUser, request: CreateProjectRequest) -> Project:
        ...

    async def list_projects(self, user: AuthenticatedUser) -> list[Project]:
        ...

    async def get_project(self, user: AuthenticatedUser, project_id: str) -> Project:
        ...

    async def update_project(
        self, user: AuthenticatedUser, project_id: str, request: UpdateProjectRequest
    ) -> Project:
        ...

    async def delete_project(self, user: AuthenticatedUser, project_id: str) -> None:
        ...

    async def list_project_teams(self, user: AuthenticatedUser, project_id: str) -> list[Team]:
        ...

    async def link_team(self, user: AuthenticatedUser, project_id: str, team_id: str) -> None:
        ...

    async def unlink_team(self, user: AuthenticatedUser, project_id: str, team_id: str) -> None:
        ...

    async def create_team(self, user: AuthenticatedUser, request: CreateTeamRequest) -> Team:
        ...

    async def get_team(self, user: AuthenticatedUser, team_id: str) -> TeamDetail:
        ...

    async def add_member(self, user: AuthenticatedUser, team_id: str, member_id: str) -> TeamDetail:
        ...

    async def remove_member(self, user: AuthenticatedUser, team_id: str, member_id: str) -> None:
        ...

    async def list_tasks(self, user: AuthenticatedUser, project_id: str) -> list[Task]:
        ...

    async def create_task(
        self, user: AuthenticatedUser, project_id: str, request: CreateTaskRequest
    ) -> Task:
        ...

    async def get_task(self, user: AuthenticatedUser, task_id: str) -> Task:
        ...

    async def update_task(
        self, user: AuthenticatedUser, task_id: str, request: UpdateTaskRequest
    ) -> Task:
        ...

    async def list_notes(self, user: AuthenticatedUser, project_id: str) -> list[Note]:
        """Newest first."""
        ...

    async def create_note(
        self, user: AuthenticatedUser, project_id: str, request: CreateNoteRequest
    ) -> Note:
        ...

    async def get_note(self, user: AuthenticatedUser, project_id: str, note_id: str) -> Note:
        ...

    async def update_note(
        self, user: AuthenticatedUser, project_id: str, note_id: str, request: UpdateNoteRequest
    ) -> Note:
        ...

    async def delete_note(self, user: AuthenticatedUser, project_id: str, note_id: str) -> None:
        ...

    async def list_activities(self, user: AuthenticatedUser, project_id: str) -> list[Activity]:
        """Newest first."""
        ...

    async def create_activity(
        self, user: AuthenticatedUser, project_id: str, request: CreateActivityRequest
    ) -> Activity:
        ...

    async def get_activity(
        self, user: AuthenticatedUser, project_id: str, activity_id: str
    ) -> Activity:
        ...

    async def update_activity(
        self,
        user: AuthenticatedUser,
        project_id: str,
        activity_id: str,
        request: UpdateActivityRequest,
    ) -> Activity:
        ...

    async def delete_activity(
        self, user: AuthenticatedUser, project_id: str, activity_id: str
    ) -> None:
        ...
