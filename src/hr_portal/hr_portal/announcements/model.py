from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AnnouncementPriority


@dataclass(frozen=True)
class Announcement:
    announcement_id: int
    title: str
    content: str
    priority: AnnouncementPriority
    author_id: str
    author_name: str
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None
