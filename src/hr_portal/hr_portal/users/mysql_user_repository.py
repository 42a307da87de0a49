from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import Role, UserStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PROFILE_FIELDS, User
from .repository import UserRepository

_COLUMNS = """
    uid, email, password_hash, display_name, role, status,
    department, position, designation, phone_number, office_location,
    home_location, seating_location, extension_number, employee_type,
    date_of_birth, date_of_joining,
    reporting_manager_id, reporting_manager_name, last_active, is_active, created_at
"""

_UPDATABLE = frozenset(PROFILE_FIELDS) | {"email", "reporting_manager_name"}


def _to_user(row: dict) -> User:
    return User(
        uid=str(row["uid"]),
        email=row["email"],
        password_hash=row["password_hash"],
        display_name=row["display_name"],
        role=Role(row["role"]),
        status=UserStatus(row["status"]),
        department=row.get("department"),
        position=row.get("position"),
        designation=row.get("designation"),
        phone_number=row.get("phone_number"),
        office_location=row.get("office_location"),
        home_location=row.get("home_location"),
        seating_location=row.get("seating_location"),
        extension_number=row.get("extension_number"),
        employee_type=row.get("employee_type"),
        date_of_birth=row.get("date_of_birth"),
        date_of_joining=row.get("date_of_joining"),
        reporting_manager_id=row.get("reporting_manager_id"),
        reporting_manager_name=row.get("reporting_manager_name"),
        last_active=row.get("last_active"),
        is_active=bool(row.get("is_active", False)),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, uid: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE uid=%s", (uid,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(uid, email, password_hash, display_name, role, status, department, position)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (uid, email, password_hash, display_name, role.value, status.value, department, position),
            )
            return uid

    def update_fields(self, uid: str, fields: dict) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        if not fields:
            return False

        # Column names come from the allow-list above, values are parameterised.
        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {assignments} WHERE uid=%s",
                (*fields.values(), uid),
            )
            return cur.rowcount > 0

    def set_role(self, uid: str, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET role=%s WHERE uid=%s", (role.value, uid))
            return cur.rowcount > 0

    def set_status(self, uid: str, status: UserStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET status=%s WHERE uid=%s", (status.value, uid))
            return cur.rowcount > 0

    def set_password_hash(self, uid: str, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE uid=%s", (password_hash, uid))
            return cur.rowcount > 0

    def touch_last_active(self, uid: str, *, at: datetime, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET last_active=%s, is_active=%s WHERE uid=%s",
                (at, 1 if is_active else 0, uid),
            )
            return cur.rowcount > 0

    def delete_by_id(self, uid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE uid=%s", (uid,))
            return cur.rowcount > 0

    def list_page(self, *, offset: int, limit: int) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users ORDER BY display_name ASC, uid ASC LIMIT %s OFFSET %s",
                (int(limit), int(offset)),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM users")
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY display_name ASC, uid ASC")
            return [_to_user(r) for r in fetchall(cur)]

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY display_name ASC",
                (role.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]
