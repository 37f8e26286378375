"""
Workspace module.

Projects, teams, tasks, notes and activities, guarded by the access
control module.

Public API:
- IWorkspaceService: Interface for workspace operations
- Project, Team, TeamDetail, Task, Note, Activity: Domain models
"""

from .interfaces import IWorkspaceService
from .models import (
    Activity,
    ActivityType,
    Note,
    NoteType,
    Project,
    Task,
    TaskPriority,
    TaskStatus,
    Team,
    TeamDetail,
)
from .exceptions import AlreadyTeamMemberError, TeamAlreadyLinkedError

__all__ = [
    "IWorkspaceService",
    "Activity",
    "ActivityType",
    "Note",
    "NoteType",
    "Project",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "Team",
    "TeamDetail",
    "AlreadyTeamMemberError",
    "TeamAlreadyLinkedError",
]
