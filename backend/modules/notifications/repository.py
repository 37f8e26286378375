"""
Notification repository for database access.

Every read and write except create is filtered by the owning user, so
another user's notification behaves exactly like a missing one.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from shared.repository import BaseRepository

from .models import Notification

NOTIFICATIONS_TABLE = "notifications"


class NotificationRepository(BaseRepository[Notification]):
    """
    Repository for the notifications table.

    Note: This repository does NOT perform authorization checks.
    """

    def create(self, data: dict[str, Any]) -> Notification:
        result = self._execute(
            NOTIFICATIONS_TABLE, self._db.table(NOTIFICATIONS_TABLE).insert(data)
        )
        return self._map_to_notification(result.data[0])

    def list_for_user(self, user_id: str, project_id: Optional[str] = None) -> list[Notification]:
        query = self._db.table(NOTIFICATIONS_TABLE).select("*").eq("user_id", user_id)
        if project_id is not None:
            query = query.eq("project_id", project_id)
        result = self._execute(NOTIFICATIONS_TABLE, query.order("created_at", desc=True))
        return [self._map_to_notification(row) for row in result.data or []]

    def get_for_user(self, notification_id: str, user_id: str) -> Optional[Notification]:
        result = self._execute(
            NOTIFICATIONS_TABLE,
            self._db.table(NOTIFICATIONS_TABLE)
            .select("*")
            .eq("id", notification_id)
            .eq("user_id", user_id)
            .limit(1),
        )
        return self._map_to_notification(result.data[0]) if result.data else None

    def update_for_user(
        self, notification_id: str, user_id: str, fields: dict[str, Any]
    ) -> Optional[Notification]:
        data = dict(fields)
        data["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = self._execute(
            NOTIFICATIONS_TABLE,
            self._db.table(NOTIFICATIONS_TABLE)
            .update(data)
            .eq("id", notification_id)
            .eq("user_id", user_id),
        )
        return self._map_to_notification(result.data[0]) if result.data else None

    def delete_for_user(self, notification_id: str, user_id: str) -> bool:
        result = self._execute(
            NOTIFICATIONS_TABLE,
            self._db.table(NOTIFICATIONS_TABLE)
            .delete()
            .eq("id", notification_id)
            .eq("user_id", user_id),
        )
        return bool(result.data)

    def _map_to_notification(self, data: dict[str, Any]) -> Notification:
        project_id = data.get("project_id")
        return Notification(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            project_id=str(project_id) if project_id is not None else None,
            content=data["content"],
            type=data["type"],
            is_read=bool(data.get("is_read", False)),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
