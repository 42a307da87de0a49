from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AnnouncementPriority
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Announcement
from .repository import AnnouncementRepository

_COLUMNS = "announcement_id, title, content, priority, author_id, author_name, is_active, created_at, updated_at"


def _to_announcement(r: dict) -> Announcement:
    return Announcement(
        announcement_id=int(r["announcement_id"]),
        title=r["title"],
        content=r["content"],
        priority=AnnouncementPriority(r["priority"]),
        author_id=str(r["author_id"]),
        author_name=r["author_name"],
        is_active=bool(r["is_active"]),
        created_at=r["created_at"],
        updated_at=r.get("updated_at"),
    )


class MySQLAnnouncementRepository(AnnouncementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, announcement_id: int) -> Optional[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM announcements WHERE announcement_id=%s", (int(announcement_id),))
            r = fetchone(cur)
            return _to_announcement(r) if r else None

    def create(
        self,
        *,
        title: str,
        content: str,
        priority: AnnouncementPriority,
        author_id: str,
        author_name: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO announcements(title, content, priority, author_id, author_name)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (title, content, priority.value, author_id, author_name),
            )
            return int(cur.lastrowid)

    def list_active(self, *, offset: int, limit: int) -> Sequence[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM announcements
                WHERE is_active=1
                ORDER BY created_at DESC, announcement_id DESC
                LIMIT %s OFFSET %s
                """,
                (int(limit), int(offset)),
            )
            return [_to_announcement(r) for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM announcements WHERE is_active=1")
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def deactivate(self, announcement_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE announcements SET is_active=0 WHERE announcement_id=%s AND is_active=1",
                (int(announcement_id),),
            )
            return cur.rowcount > 0
