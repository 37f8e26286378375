"""
Notifications module interface.
"""

from typing import Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import CreateNotificationRequest, Notification, UpdateNotificationRequest


@runtime_checkable
class INotificationService(Protocol):
    """Interface for notification operations."""

    async def create(
        self, user: AuthenticatedUser, request: CreateNotificationRequest
    ) -> Notification:
        """Send a notification to request.user_id, subject to require_can_notify."""
        ...

    async def list_own(
        self, user: AuthenticatedUser, project_id: Optional[str] = None
    ) -> list[Notification]:
        """The caller's notifications, newest first."""
        ...

    async def get_own(self, user: AuthenticatedUser, notification_id: str) -> Notification:
        ...

    async def update_own(
        self, user: AuthenticatedUser, notification_id: str, request: UpdateNotificationRequest
    ) -> Notification:
        ...

    async def delete_own(self, user: AuthenticatedUser, notification_id: str) -> None:
        ...
