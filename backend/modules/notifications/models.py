"""
Notification data models.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class NotificationType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class Notification(BaseModel):
    """A message addressed to one user."""

    id: str
    user_id: str
    project_id: Optional[str] = None
    content: str
    type: NotificationType
    is_read: bool = False
    created_at: datetime
    updated_at: datetime


class CreateNotificationRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=5000)
    type: NotificationType
    project_id: Optional[str] = None
    is_read: bool = False


class UpdateNotificationRequest(BaseModel):
    content: Optional[str] = Field(None, min_length=1, max_length=5000)
    type: Optional[NotificationType] = None
    is_read: Optional[bool] = None

    @field_validator("content", "type", "is_read")
    @classmethod
    def _not_null(cls, value):
        # Defaults skip validation, so None here was sent explicitly
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class NotificationListResponse(BaseModel):
    notifications: list[Notification]
    total: int
    unread: int
