"""
Notifications module.

Per-user notifications, optionally tied to a project. Each user only
ever sees their own rows.

Public API:
- INotificationService: Interface for notification operations
- Notification, NotificationType: Domain models
"""

from .interfaces import INotificationService
from .models import Notification, NotificationType

__all__ = [
    "INotificationService",
    "Notification",
    "NotificationType",
]
