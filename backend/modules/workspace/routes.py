"""
Workspace API endpoints.

Three routers, mounted by the app factory:
- projects_router at /api/projects (projects with their teams, tasks,
  notes and activities)
- teams_router at /api/teams
- tasks_router at /api/tasks
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_workspace_service
from api.middleware.auth import get_current_user
from shared.models import AuthenticatedUser

from .interfaces import IWorkspaceService
from .models import (
    Activity,
    ActivityListResponse,
    AddMemberRequest,
    CreateActivityRequest,
    CreateNoteRequest,
    CreateProjectRequest,
    CreateTaskRequest,
    CreateTeamRequest,
    LinkTeamRequest,
    Note,
    NoteListResponse,
    Project,
    ProjectListResponse,
    Task,
    TaskListResponse,
    Team,
    TeamDetail,
    UpdateActivityRequest,
    UpdateNoteRequest,
    UpdateProjectRequest,
    UpdateTaskRequest,
)

projects_router = APIRouter()
teams_router = APIRouter()
tasks_router = APIRouter()


# -------------------------------------------------------------------------
# Projects
# -------------------------------------------------------------------------


@projects_router.post("", response_model=Project, status_code=201)
async def create_project(
    request: CreateProjectRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Project:
    """
    Create a project owned by the caller.

    Only admins and managers may create projects.
    """
    return await service.create_project(user, request)


@projects_router.get("", response_model=ProjectListResponse)
async def list_projects(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> ProjectListResponse:
    """List projects the caller owns or reaches through a team."""
    projects = await service.list_projects(user)
    return ProjectListResponse(projects=projects, total=len(projects))


@projects_router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Project:
    return await service.get_project(user, project_id)


@projects_router.put("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    request: UpdateProjectRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Project:
    """Update a project. Owner or admin only."""
    return await service.update_project(user, project_id, request)


@projects_router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> None:
    """Delete a project with its tasks and team links. Owner or admin only."""
    await service.delete_project(user, project_id)


@projects_router.get("/{project_id}/teams", response_model=list[Team])
async def list_project_teams(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> list[Team]:
    return await service.list_project_teams(user, project_id)


@projects_router.post("/{project_id}/teams", status_code=204)
async def link_team(
    project_id: str,
    request: LinkTeamRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> None:
    """Give a team's members access to the project."""
    await service.link_team(user, project_id, request.team_id)


@projects_router.delete("/{project_id}/teams/{team_id}", status_code=204)
async def unlink_team(
    project_id: str,
    team_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> None:
    await service.unlink_team(user, project_id, team_id)


@projects_router.get("/{project_id}/tasks", response_model=TaskListResponse)
async def list_tasks(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> TaskListResponse:
    tasks = await service.list_tasks(user, project_id)
    return TaskListResponse(tasks=tasks, total=len(tasks))


@projects_router.post("/{project_id}/tasks", response_model=Task, status_code=201)
async def create_task(
    project_id: str,
    request: CreateTaskRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Task:
    """Create a task. Anyone with access to the project may do this."""
    return await service.create_task(user, project_id, request)


@projects_router.get("/{project_id}/notes", response_model=NoteListResponse)
async def list_notes(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> NoteListResponse:
    notes = await service.list_notes(user, project_id)
    return NoteListResponse(notes=notes, total=len(notes))


@projects_router.post("/{project_id}/notes", response_model=Note, status_code=201)
async def create_note(
    project_id: str,
    request: CreateNoteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Note:
    """Add a note to the project, authored by the caller."""
    return await service.create_note(user, project_id, request)


@projects_router.get("/{project_id}/notes/{note_id}", response_model=Note)
async def get_note(
    project_id: str,
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Note:
    return await service.get_note(user, project_id, note_id)


@projects_router.put("/{project_id}/notes/{note_id}", response_model=Note)
async def update_note(
    project_id: str,
    note_id: str,
    request: UpdateNoteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Note:
    return await service.update_note(user, project_id, note_id, request)


@projects_router.delete("/{project_id}/notes/{note_id}", status_code=204)
async def delete_note(
    project_id: str,
    note_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> None:
    await service.delete_note(user, project_id, note_id)


@projects_router.get("/{project_id}/activities", response_model=ActivityListResponse)
async def list_activities(
    project_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> ActivityListResponse:
    activities = await service.list_activities(user, project_id)
    return ActivityListResponse(activities=activities, total=len(activities))


@projects_router.post("/{project_id}/activities", response_model=Activity, status_code=201)
async def create_activity(
    project_id: str,
    request: CreateActivityRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Activity:
    """Log an activity (task, event or milestone) on the project."""
    return await service.create_activity(user, project_id, request)


@projects_router.get("/{project_id}/activities/{activity_id}", response_model=Activity)
async def get_activity(
    project_id: str,
    activity_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Activity:
    return await service.get_activity(user, project_id, activity_id)


@projects_router.put("/{project_id}/activities/{activity_id}", response_model=Activity)
async def update_activity(
    project_id: str,
    activity_id: str,
    request: UpdateActivityRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Activity:
    return await service.update_activity(user, project_id, activity_id, request)


@projects_router.delete("/{project_id}/activities/{activity_id}", status_code=204)
async def delete_activity(
    project_id: str,
    activity_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> None:
    await service.delete_activity(user, project_id, activity_id)


# -------------------------------------------------------------------------
# Teams
# -------------------------------------------------------------------------


@teams_router.post("", response_model=Team, status_code=201)
async def create_team(
    request: CreateTeamRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Team:
    return await service.create_team(user, request)


@teams_router.get("/{team_id}", response_model=TeamDetail)
async def get_team(
    team_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> TeamDetail:
    """Get a team and its member IDs. Owner or member only."""
    return await service.get_team(user, team_id)


@teams_router.post("/{team_id}/members", response_model=TeamDetail, status_code=201)
async def add_member(
    team_id: str,
    request: AddMemberRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> TeamDetail:
    """Add a user to a team. Team owner or admin only."""
    return await service.add_member(user, team_id, request.user_id)


@teams_router.delete("/{team_id}/members/{user_id}", status_code=204)
async def remove_member(
    team_id: str,
    user_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> None:
    await service.remove_member(user, team_id, user_id)


# -------------------------------------------------------------------------
# Tasks
# -------------------------------------------------------------------------


@tasks_router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Task:
    return await service.get_task(user, task_id)


@tasks_router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    request: UpdateTaskRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: IWorkspaceService = Depends(get_workspace_service),
) -> Task:
    """Update a task. Project owner, assignee or admin only."""
    return await service.update_task(user, task_id, request)
