from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AnnouncementPriority
from .model import Announcement


class AnnouncementRepository(Protocol):
    def get_by_id(self, announcement_id: int) -> Optional[Announcement]:
        raise NotImplementedError

    def create(
        self,
        *,
        title: str,
        content: str,
        priority: AnnouncementPriority,
        author_id: str,
        author_name: str,
    ) -> int:
        raise NotImplementedError

    def list_active(self, *, offset: int, limit: int) -> Sequence[Announcement]:
        """Newest first."""

        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def deactivate(self, announcement_id: int) -> bool:
        raise NotImplementedError
