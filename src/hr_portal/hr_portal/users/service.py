from __future__ import annotations

import logging
import uuid
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.cache import TTLCache
from ..common.datetime_utils import parse_iso_date
from ..common.pagination import Page, PageRequest
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import (
    DEFAULT_ANNUAL_LEAVE,
    DEFAULT_EMERGENCY_LEAVE,
    DEFAULT_MANAGER_CACHE_TTL_SECONDS,
    DEFAULT_SICK_LEAVE,
    MIN_PASSWORD_LENGTH,
)
from ..core.enums import Role, UserStatus
from ..core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PolicyViolationError,
    ValidationError,
)
from ..leave.repository import LeaveBalanceRepository
from .authorization import require_access, require_admin
from .model import PROFILE_DATE_FIELDS, PROFILE_FIELDS, User
from .repository import UserRepository

logger = logging.getLogger(__name__)

_MANAGERS_KEY = "managers"


def _password_matches(password_hash: str, password: Optional[str]) -> bool:
    try:
        return check_password_hash(password_hash, password or "")
    except ValueError:
        # e.g. placeholder or corrupted hash values
        return False


class AuthService:
    """Use cases: register, sign in, change password."""

    def __init__(self, users: UserRepository, balances: LeaveBalanceRepository):
        self._users = users
        self._balances = balances

    def register(
        self,
        *,
        email: str,
        password: str,
        display_name: str,
        department: str,
        position: str,
    ) -> User:
        email = require_email(email)
        display_name = require_non_empty(display_name, "Display name")
        department = require_non_empty(department, "Department")
        position = require_non_empty(position, "Position")
        require_min_length(password or "", "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ConflictError("Email already registered")

        uid = uuid.uuid4().hex
        self._users.create_user(
            uid=uid,
            email=email,
            password_hash=generate_password_hash(password),
            display_name=display_name,
            role=Role.USER,
            status=UserStatus.PENDING,
            department=department,
            position=position,
        )
        self._balances.create(
            uid,
            sick_leave=DEFAULT_SICK_LEAVE,
            annual_leave=DEFAULT_ANNUAL_LEAVE,
            emergency_leave=DEFAULT_EMERGENCY_LEAVE,
        )
        logger.info("Registered user %s (%s)", uid, email)

        user = self._users.get_by_id(uid)
        if not user:
            raise NotFoundError("User not found")
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or user.status == UserStatus.INACTIVE:
            raise AuthenticationError("Invalid email or password")

        if not _password_matches(user.password_hash, password):
            raise AuthenticationError("Invalid email or password")
        return user

    def change_password(self, *, uid: str, current_password: str, new_password: str) -> None:
        user = self._users.get_by_id(uid)
        if not user:
            raise NotFoundError("User not found")
        if not _password_matches(user.password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")
        require_min_length(new_password or "", "New password", MIN_PASSWORD_LENGTH)

        self._users.set_password_hash(uid, generate_password_hash(new_password))
        logger.info("Password changed for %s", uid)


class UserService:
    """Use cases: directory reads and administration."""

    def __init__(self, users: UserRepository, *, manager_cache: Optional[TTLCache] = None):
        self._users = users
        self._manager_cache = manager_cache or TTLCache(DEFAULT_MANAGER_CACHE_TTL_SECONDS)

    def _require_user(self, uid: str) -> User:
        user = self._users.get_by_id(uid)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, *, current_role: Role, page: PageRequest) -> Page[User]:
        require_admin(current_role)
        items = self._users.list_page(offset=page.offset, limit=page.limit)
        return Page(items=items, total=self._users.count(), page=page.page, limit=page.limit)

    def list_all(self, *, current_role: Role):
        require_admin(current_role)
        return self._users.list_all()

    def get_user(self, *, current_uid: str, current_role: Role, uid: str) -> User:
        require_access(current_uid, current_role, uid)
        return self._require_user(uid)

    def update_profile(self, *, current_uid: str, current_role: Role, uid: str, changes: dict) -> User:
        require_access(current_uid, current_role, uid)
        user = self._require_user(uid)

        fields: dict = {}
        for name in PROFILE_FIELDS:
            if name not in changes:
                continue
            value = changes[name]
            if value is not None:
                value = str(value).strip() or None
            if value is not None and name in PROFILE_DATE_FIELDS:
                value = parse_iso_date(value[:10])
            fields[name] = value

        if "display_name" in fields:
            fields["display_name"] = require_non_empty(fields["display_name"] or "", "Display name")

        if "reporting_manager_id" in fields:
            manager_id = fields["reporting_manager_id"]
            if manager_id is None:
                fields["reporting_manager_name"] = None
            else:
                if manager_id == uid:
                    raise ValidationError("A user cannot be their own reporting manager")
                manager = self._users.get_by_id(manager_id)
                if not manager:
                    raise NotFoundError("Reporting manager not found")
                fields["reporting_manager_name"] = manager.display_name

        # Profile forms send the whole record back, unchanged email included.
        if "email" in changes:
            email = require_email(changes["email"])
            if email != user.email:
                require_admin(current_role)
                other = self._users.get_by_email(email)
                if other and other.uid != uid:
                    raise ConflictError("Email already registered")
                fields["email"] = email

        if fields:
            self._users.update_fields(uid, fields)
            if user.is_admin and "display_name" in fields:
                self._manager_cache.invalidate(_MANAGERS_KEY)
        return self._require_user(uid)

    def update_role(self, *, current_uid: str, current_role: Role, uid: str, role: str) -> User:
        require_admin(current_role)
        try:
            new_role = Role(role)
        except ValueError:
            raise ValidationError("Invalid role. Must be 'user' or 'admin'")

        self._require_user(uid)
        self._users.set_role(uid, new_role)
        self._manager_cache.invalidate(_MANAGERS_KEY)
        logger.info("Role of %s set to %s by %s", uid, new_role.value, current_uid)
        return self._require_user(uid)

    def update_status(self, *, current_uid: str, current_role: Role, uid: str, status: str) -> User:
        require_admin(current_role)
        try:
            new_status = UserStatus(status)
        except ValueError:
            raise ValidationError("Invalid status. Must be 'active', 'pending' or 'inactive'")

        self._require_user(uid)
        self._users.set_status(uid, new_status)
        logger.info("Status of %s set to %s by %s", uid, new_status.value, current_uid)
        return self._require_user(uid)

    def delete_user(self, *, current_uid: str, current_role: Role, uid: str) -> None:
        require_admin(current_role)
        if uid == current_uid:
            raise PolicyViolationError("Cannot delete your own account")

        user = self._require_user(uid)
        if not self._users.delete_by_id(uid):
            raise NotFoundError("User not found")
        if user.is_admin:
            self._manager_cache.invalidate(_MANAGERS_KEY)
        logger.info("User %s deleted by %s", uid, current_uid)

    def list_managers(self) -> list[User]:
        """Users eligible as reporting managers (admins), cached briefly."""
        return self._manager_cache.get_or_load(_MANAGERS_KEY, lambda: list(self._users.list_by_role(Role.ADMIN)))
