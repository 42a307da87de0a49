from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import DocumentRequest, LeaveRequest
from .repository import RequestRepository


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Leave requests --------
    def create_leave(
        self,
        *,
        user_id: str,
        user_name: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        number_of_days: int,
        reason: str,
        reporting_manager_id: Optional[str],
        reporting_manager_name: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    user_id, user_name, leave_type, start_date, end_date, number_of_days,
                    reason, status, reporting_manager_id, reporting_manager_name
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user_id,
                    user_name,
                    leave_type.value,
                    start_date,
                    end_date,
                    int(number_of_days),
                    reason,
                    RequestStatus.PENDING.value,
                    reporting_manager_id,
                    reporting_manager_name,
                ),
            )
            return int(cur.lastrowid)

    def list_leave_requests(
        self,
        *,
        user_id: str,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        clauses = ["user_id=%s"]
        params: list[object] = [user_id]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        params.append(int(limit))
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT request_id, user_id, user_name, leave_type, start_date, end_date, number_of_days,
                       reason, status, created_at, reporting_manager_id, reporting_manager_name
                FROM leave_requests
                WHERE {where}
                ORDER BY created_at DESC, request_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [
                LeaveRequest(
                    request_id=int(r["request_id"]),
                    user_id=str(r["user_id"]),
                    user_name=r["user_name"],
                    leave_type=LeaveType(r["leave_type"]),
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                    number_of_days=int(r["number_of_days"]),
                    reason=r["reason"],
                    status=RequestStatus(r["status"]),
                    created_at=r["created_at"],
                    reporting_manager_id=r.get("reporting_manager_id"),
                    reporting_manager_name=r.get("reporting_manager_name"),
                )
                for r in fetchall(cur)
            ]

    # -------- Document requests --------
    def create_document(
        self,
        *,
        user_id: str,
        user_name: str,
        document_type: str,
        reason: str,
        reporting_manager_id: Optional[str],
        reporting_manager_name: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO document_requests(
                    user_id, user_name, document_type, reason, status,
                    reporting_manager_id, reporting_manager_name
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user_id,
                    user_name,
                    document_type,
                    reason,
                    RequestStatus.PENDING.value,
                    reporting_manager_id,
                    reporting_manager_name,
                ),
            )
            return int(cur.lastrowid)

    def list_document_requests(
        self,
        *,
        user_id: str,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[DocumentRequest]:
        clauses = ["user_id=%s"]
        params: list[object] = [user_id]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        params.append(int(limit))
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT request_id, user_id, user_name, document_type, reason, status, created_at,
                       reporting_manager_id, reporting_manager_name
                FROM document_requests
                WHERE {where}
                ORDER BY created_at DESC, request_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [
                DocumentRequest(
                    request_id=int(r["request_id"]),
                    user_id=str(r["user_id"]),
                    user_name=r["user_name"],
                    document_type=r["document_type"],
                    reason=r["reason"],
                    status=RequestStatus(r["status"]),
                    created_at=r["created_at"],
                    reporting_manager_id=r.get("reporting_manager_id"),
                    reporting_manager_name=r.get("reporting_manager_name"),
                )
                for r in fetchall(cur)
            ]
