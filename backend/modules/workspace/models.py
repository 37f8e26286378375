"""
Workspace data models: projects, teams, tasks, notes and activities.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class NoteType(str, Enum):
    GENERAL = "general"
    ACTIVITY = "activity"
    PROJECT = "project"


class ActivityType(str, Enum):
    TASK = "task"
    EVENT = "event"
    MILESTONE = "milestone"


class Project(BaseModel):
    """A project owned by one user and shared with linked teams."""

    id: str
    title: str
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    deadline: Optional[datetime] = None
    owner_id: str
    created_at: datetime
    updated_at: datetime


class Team(BaseModel):
    """A named group of users."""

    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    created_at: datetime
    updated_at: datetime


class TeamDetail(Team):
    """A team plus the IDs of its members."""

    member_ids: list[str] = Field(default_factory=list)


class Task(BaseModel):
    """A unit of work inside a project."""

    id: str
    project_id: str
    assigned_to_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    priority: TaskPriority
    status: TaskStatus
    deadline: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class Note(BaseModel):
    """A note attached to a project by one of its users."""

    id: str
    project_id: str
    user_id: str
    content: str
    note_type: NoteType
    created_at: datetime
    updated_at: datetime


class Activity(BaseModel):
    """A task, event or milestone logged against a project."""

    id: str
    project_id: str
    user_id: str
    description: str
    type: ActivityType
    created_at: datetime
    updated_at: datetime


# -------------------------------------------------------------------------
# Request / response bodies
# -------------------------------------------------------------------------


def _reject_null(value):
    # Defaults skip validation, so None here was sent explicitly
    if value is None:
        raise ValueError("may be omitted but not null")
    return value


class CreateProjectRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    status: Optional[str] = Field(None, max_length=50)
    priority: Optional[str] = Field(None, max_length=50)
    deadline: Optional[datetime] = None


class UpdateProjectRequest(BaseModel):
    """Partial update; only fields present in the body are written."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    status: Optional[str] = Field(None, max_length=50)
    priority: Optional[str] = Field(None, max_length=50)
    deadline: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def _title_not_null(cls, value: Optional[str]) -> str:
        return _reject_null(value)


class ProjectListResponse(BaseModel):
    projects: list[Project]
    total: int


class LinkTeamRequest(BaseModel):
    team_id: str = Field(..., min_length=1)


class CreateTeamRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)


class AddMemberRequest(BaseModel):
    user_id: str = Field(..., min_length=1)


class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    deadline: Optional[datetime] = None
    assigned_to_id: Optional[str] = None


class UpdateTaskRequest(BaseModel):
    """Partial update; only fields present in the body are written."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    deadline: Optional[datetime] = None
    assigned_to_id: Optional[str] = None

    @field_validator("title", "priority", "status")
    @classmethod
    def _required_columns_not_null(cls, value):
        return _reject_null(value)


class TaskListResponse(BaseModel):
    tasks: list[Task]
    total: int


class CreateNoteRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000)
    note_type: NoteType = NoteType.GENERAL


class UpdateNoteRequest(BaseModel):
    content: Optional[str] = Field(None, min_length=1, max_length=10000)
    note_type: Optional[NoteType] = None

    @field_validator("content", "note_type")
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class NoteListResponse(BaseModel):
    notes: list[Note]
    total: int


class CreateActivityRequest(BaseModel):
    description: str = Field(..., min_length=1, max_length=5000)
    type: ActivityType


class UpdateActivityRequest(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=5000)
    type: Optional[ActivityType] = None

    @field_validator("description", "type")
    @classmethod
    def _not_null(cls, value):
        return _reject_null(value)


class ActivityListResponse(BaseModel):
    activities: list[Activity]
    total: int
