from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import LeaveBalance
from .repository import LeaveBalanceRepository


def _to_balance(row: dict) -> LeaveBalance:
    return LeaveBalance(
        user_id=str(row["user_id"]),
        sick_leave=int(row["sick_leave"]),
        annual_leave=int(row["annual_leave"]),
        emergency_leave=int(row["emergency_leave"]),
        updated_at=row.get("updated_at"),
    )


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: str) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, sick_leave, annual_leave, emergency_leave, updated_at
                FROM leave_balances
                WHERE user_id=%s
                """,
                (user_id,),
            )
            row = fetchone(cur)
            return _to_balance(row) if row else None

    def create(self, user_id: str, *, sick_leave: int, annual_leave: int, emergency_leave: int) -> LeaveBalance:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO leave_balances(user_id, sick_leave, annual_leave, emergency_leave)
                VALUES(%s,%s,%s,%s)
                """,
                (user_id, int(sick_leave), int(annual_leave), int(emergency_leave)),
            )
            cur.execute(
                """
                SELECT user_id, sick_leave, annual_leave, emergency_leave, updated_at
                FROM leave_balances
                WHERE user_id=%s
                """,
                (user_id,),
            )
            return _to_balance(fetchone(cur))

    def update(self, user_id: str, *, sick_leave: int, annual_leave: int, emergency_leave: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_balances
                SET sick_leave=%s, annual_leave=%s, emergency_leave=%s
                WHERE user_id=%s
                """,
                (int(sick_leave), int(annual_leave), int(emergency_leave), user_id),
            )
            return cur.rowcount > 0
