"""In-process notification store.

Notifications live in memory only: they are lost on restart and are not
shared between worker processes.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class NotificationService:
    """Create and list per-user notifications."""

    def __init__(self):
        self._notifications: List[Dict[str, Any]] = []

    def create_notification(
        self,
        user_id: str,
        type: str,
        title: str,
        message: str,
        sender: Optional[str] = None,
        document_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        notification = {
            "id": str(uuid4()),
            "user_id": str(user_id),
            "type": type,
            "title": title,
            "message": message,
            "from": sender,
            "document_id": str(document_id) if document_id else None,
            "read": False,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self._notifications.append(notification)
        LOGGER.info(f"Notification '{type}' queued for user {user_id}")
        return notification

    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        """A user's notifications, newest first."""
        user_id = str(user_id)
        return [n for n in reversed(self._notifications) if n["user_id"] == user_id]

    def mark_read(self, user_id: str, notification_id: str) -> bool:
        for notification in self._notifications:
            if notification["id"] == notification_id and notification["user_id"] == str(user_id):
                notification["read"] = True
                return True
        return False

    def clear(self) -> None:
        self._notifications.clear()


notification_service = NotificationService()


def get_notification_service() -> NotificationService:
    return notification_service
