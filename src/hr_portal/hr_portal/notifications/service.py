from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import NotificationType
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Fire-and-forget notifications for reporting managers."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(
        self,
        *,
        recipient_id: str,
        type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[str] = None,
    ) -> int:
        notification_id = self._notifications.create(
            user_id=recipient_id,
            type=type,
            title=title,
            message=message,
            related_id=related_id,
        )
        logger.info("Notification %s (%s) sent to %s", notification_id, type.value, recipient_id)
        return notification_id

    def list_for_user(self, user_id: str, *, unread_only: bool = False) -> Sequence[Notification]:
        return self._notifications.list_for_user(user_id, unread_only=unread_only)
