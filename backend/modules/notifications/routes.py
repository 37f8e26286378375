"""
Notification API endpoints, mounted at /api/notifications.

Reads and writes only ever reach the caller's own notifications.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_notification_service
from api.middleware.auth import get_current_user
from shared.models import AuthenticatedUser

from .interfaces import INotificationService
from .models import (
    CreateNotificationRequest,
    Notification,
    NotificationListResponse,
    UpdateNotificationRequest,
)

router = APIRouter()


@router.post("", response_model=Notification, status_code=201)
async def create_notification(
    request: CreateNotificationRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: INotificationService = Depends(get_notification_service),
) -> Notification:
    """
    Send a notification.

    Users may notify themselves, or another user through a project they
    both have access to. Admins may notify anyone.
    """
    return await service.create(user, request)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    project_id: Optional[str] = Query(None),
    user: AuthenticatedUser = Depends(get_current_user),
    service: INotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    """List the caller's notifications, newest first."""
    notifications = await service.list_own(user, project_id)
    return NotificationListResponse(
        notifications=notifications,
        total=len(notifications),
        unread=sum(1 for n in notifications if not n.is_read),
    )


@router.get("/{notification_id}", response_model=Notification)
async def get_notification(
    notification_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: INotificationService = Depends(get_notification_service),
) -> Notification:
    return await service.get_own(user, notification_id)


@router.put("/{notification_id}", response_model=Notification)
async def update_notification(
    notification_id: str,
    request: UpdateNotificationRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: INotificationService = Depends(get_notification_service),
) -> Notification:
    """Edit a notification or mark it read."""
    return await service.update_own(user, notification_id, request)


@router.delete("/{notification_id}", status_code=204)
async def delete_notification(
    notification_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    service: INotificationService = Depends(get_notification_service),
) -> None:
    await service.delete_own(user, notification_id)
