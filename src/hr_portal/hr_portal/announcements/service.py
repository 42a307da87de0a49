from __future__ import annotations

import logging

from ..common.pagination import Page, PageRequest
from ..common.validators import require_non_empty
from ..core.enums import AnnouncementPriority, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.authorization import require_admin
from ..users.model import User
from .model import Announcement
from .repository import AnnouncementRepository

logger = logging.getLogger(__name__)


class AnnouncementService:
    """Company-wide announcements: admins publish, everyone reads."""

    def __init__(self, announcements: AnnouncementRepository):
        self._announcements = announcements

    def publish(self, *, author: User, title: str, content: str, priority: str | None = None) -> Announcement:
        require_admin(author.role)
        title = require_non_empty(title, "Title")
        content = require_non_empty(content, "Content")
        try:
            level = AnnouncementPriority(priority or AnnouncementPriority.MEDIUM.value)
        except ValueError:
            raise ValidationError("Invalid priority. Must be 'low', 'medium' or 'high'")

        announcement_id = self._announcements.create(
            title=title,
            content=content,
            priority=level,
            author_id=author.uid,
            author_name=author.display_name,
        )
        logger.info("Announcement %s published by %s", announcement_id, author.uid)

        created = self._announcements.get_by_id(announcement_id)
        if not created:
            raise NotFoundError("Announcement not found")
        return created

    def list_active(self, *, page: PageRequest) -> Page[Announcement]:
        items = self._announcements.list_active(offset=page.offset, limit=page.limit)
        return Page(items=items, total=self._announcements.count_active(), page=page.page, limit=page.limit)

    def deactivate(self, *, current_uid: str, current_role: Role, announcement_id: int) -> None:
        require_admin(current_role)
        if not self._announcements.deactivate(announcement_id):
            raise NotFoundError("Announcement not found")
        logger.info("Announcement %s deactivated by %s", announcement_id, current_uid)
