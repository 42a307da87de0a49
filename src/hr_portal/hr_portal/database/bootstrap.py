from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..core.constants import DEFAULT_ANNUAL_LEAVE, DEFAULT_EMERGENCY_LEAVE, DEFAULT_SICK_LEAVE
from ..core.enums import Role, UserStatus
from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> int:
    sql = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    count = 0
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("Applied %s statements from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("Applied %s seed statements from %s", count, seed_path)


def upsert_account(
    db_config: dict,
    *,
    email: str,
    password: str,
    display_name: str,
    role: Role,
    department: str | None = None,
    position: str | None = None,
) -> str:
    """Create or reset an active account and make sure it has a leave balance.

    Returns the account uid.
    """
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash(password)

        cur.execute("SELECT uid FROM users WHERE email=%s", (email,))
        existing = cur.fetchone()
        if existing:
            uid = existing["uid"]
            cur.execute(
                """
                UPDATE users
                SET display_name=%s, password_hash=%s, role=%s, status=%s
                WHERE uid=%s
                """,
                (display_name, password_hash, role.value, UserStatus.ACTIVE.value, uid),
            )
        else:
            uid = uuid.uuid4().hex
            cur.execute(
                """
                INSERT INTO users (uid, email, password_hash, display_name, role, status, department, position)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (uid, email, password_hash, display_name, role.value, UserStatus.ACTIVE.value, department, position),
            )

        cur.execute(
            """
            INSERT IGNORE INTO leave_balances (user_id, sick_leave, annual_leave, emergency_leave)
            VALUES (%s, %s, %s, %s)
            """,
            (uid, DEFAULT_SICK_LEAVE, DEFAULT_ANNUAL_LEAVE, DEFAULT_EMERGENCY_LEAVE),
        )
        conn.commit()
        return uid
    finally:
        conn.close()


def ensure_demo_users(db_config: dict) -> None:
    admin_uid = upsert_account(
        db_config,
        email="admin@example.com",
        password="admin123",
        display_name="Admin User",
        role=Role.ADMIN,
        department="HR",
        position="HR Manager",
    )
    upsert_account(
        db_config,
        email="employee@example.com",
        password="employee123",
        display_name="Demo Employee",
        role=Role.USER,
        department="Engineering",
        position="Developer",
    )

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            UPDATE users SET reporting_manager_id=%s, reporting_manager_name=%s
            WHERE email=%s AND reporting_manager_id IS NULL
            """,
            (admin_uid, "Admin User", "employee@example.com"),
        )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
