from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        user_id: str,
        type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[str],
    ) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError
