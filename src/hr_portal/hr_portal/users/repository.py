from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role, UserStatus
from .model import User


class UserRepository(Protocol):
    """Repository interface for the user directory.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, uid: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        uid: str,
        email: str,
        password_hash: str,
        display_name: str,
        role: Role,
        status: UserStatus,
        department: Optional[str],
        position: Optional[str],
    ) -> str:
        raise NotImplementedError

    def update_fields(self, uid: str, fields: dict) -> bool:
        """Update plain profile columns (keys from ``PROFILE_FIELDS`` plus reporting_manager_name/email)."""

        raise NotImplementedError

    def set_role(self, uid: str, role: Role) -> bool:
        raise NotImplementedError

    def set_status(self, uid: str, status: UserStatus) -> bool:
        raise NotImplementedError

    def set_password_hash(self, uid: str, password_hash: str) -> bool:
        raise NotImplementedError

    def touch_last_active(self, uid: str, *, at: datetime, is_active: bool) -> bool:
        raise NotImplementedError

    def delete_by_id(self, uid: str) -> bool:
        raise NotImplementedError

    def list_page(self, *, offset: int, limit: int) -> Sequence[User]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError
