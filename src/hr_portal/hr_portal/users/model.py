from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Role, UserStatus


@dataclass(frozen=True)
class User:
    """Domain entity: a directory user.

    Note: Plain data object (no DB access code). ``is_active`` is the stored
    presence flag; the computed online state lives in ``attendance.summary``.
    """

    uid: str
    email: str
    password_hash: str
    display_name: str
    role: Role
    status: UserStatus
    department: Optional[str] = None
    position: Optional[str] = None
    designation: Optional[str] = None
    phone_number: Optional[str] = None
    office_location: Optional[str] = None
    home_location: Optional[str] = None
    seating_location: Optional[str] = None
    extension_number: Optional[str] = None
    employee_type: Optional[str] = None
    date_of_birth: Optional[date] = None
    date_of_joining: Optional[date] = None
    reporting_manager_id: Optional[str] = None
    reporting_manager_name: Optional[str] = None
    last_active: Optional[datetime] = None
    is_active: bool = False
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


# Fields a user may edit on their own profile; admins may additionally change email.
PROFILE_FIELDS = (
    "display_name",
    "phone_number",
    "department",
    "position",
    "designation",
    "office_location",
    "home_location",
    "seating_location",
    "extension_number",
    "employee_type",
    "date_of_birth",
    "date_of_joining",
    "reporting_manager_id",
)

PROFILE_DATE_FIELDS = frozenset({"date_of_birth", "date_of_joining"})
