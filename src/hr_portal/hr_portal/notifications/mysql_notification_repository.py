from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: str,
        type: NotificationType,
        title: str,
        message: str,
        related_id: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, type, title, message, related_id, is_read)
                VALUES(%s,%s,%s,%s,%s,0)
                """,
                (user_id, type.value, title, message, related_id),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        sql = """
            SELECT notification_id, user_id, type, title, message, related_id, is_read, created_at
            FROM notifications
            WHERE user_id=%s
        """
        if unread_only:
            sql += " AND is_read=0"
        sql += " ORDER BY created_at DESC, notification_id DESC LIMIT %s"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (user_id, int(limit)))
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    user_id=str(r["user_id"]),
                    type=NotificationType(r["type"]),
                    title=r["title"],
                    message=r["message"],
                    related_id=r.get("related_id"),
                    read=bool(r["is_read"]),
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]
