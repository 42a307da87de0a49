from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: str
    type: NotificationType
    title: str
    message: str
    related_id: Optional[str]
    read: bool
    created_at: datetime
