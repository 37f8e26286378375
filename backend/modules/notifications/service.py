"""
Notification service implementation.
"""

import logging
from typing import Optional

from shared.exceptions import ValidationError
from shared.models import AuthenticatedUser
from modules.access.exceptions import ResourceNotFoundError
from modules.access.interfaces import IAccessService

from .interfaces import INotificationService
from .models import CreateNotificationRequest, Notification, UpdateNotificationRequest
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService(INotificationService):
    """Implementation of the notification service."""

    def __init__(self, repository: NotificationRepository, access: IAccessService):
        self._repo = repository
        self._access = access

    async def create(
        self, user: AuthenticatedUser, request: CreateNotificationRequest
    ) -> Notification:
        await self._access.require_can_notify(user, request.user_id, request.project_id)
        notification = self._repo.create(request.model_dump(mode="json"))
        logger.info(
            f"Notification {notification.id} sent to user {request.user_id} by user {user.id}"
        )
        return notification

    async def list_own(
        self, user: AuthenticatedUser, project_id: Optional[str] = None
    ) -> list[Notification]:
        return self._repo.list_for_user(user.id, project_id)

    async def get_own(self, user: AuthenticatedUser, notification_id: str) -> Notification:
        notification = self._repo.get_for_user(notification_id, user.id)
        if notification is None:
            raise ResourceNotFoundError("notification", notification_id)
        return notification

    async def update_own(
        self, user: AuthenticatedUser, notification_id: str, request: UpdateNotificationRequest
    ) -> Notification:
        fields = request.model_dump(mode="json", exclude_unset=True)
        if not fields:
            raise ValidationError("No fields to update", code="EMPTY_UPDATE")
        notification = self._repo.update_for_user(notification_id, user.id, fields)
        if notification is None:
            raise ResourceNotFoundError("notification", notification_id)
        logger.info(f"Notification {notification_id} updated by user {user.id}")
        return notification

    async def delete_own(self, user: AuthenticatedUser, notification_id: str) -> None:
        if not self._repo.delete_for_user(notification_id, user.id):
            raise ResourceNotFoundError("notification", notification_id)
        logger.info(f"Notification {notification_id} deleted by user {user.id}")
