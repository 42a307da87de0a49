from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveType, RequestStatus
from .model import DocumentRequest, LeaveBalance, LeaveRequest


class LeaveBalanceRepository(Protocol):
    def get(self, user_id: str) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def create(self, user_id: str, *, sick_leave: int, annual_leave: int, emergency_leave: int) -> LeaveBalance:
        """Insert a balance row; an existing row is kept as is and returned."""

        raise NotImplementedError

    def update(self, user_id: str, *, sick_leave: int, annual_leave: int, emergency_leave: int) -> bool:
        raise NotImplementedError


class RequestRepository(Protocol):
    # Leave requests
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
        raise NotImplementedError

    def list_leave_requests(
        self,
        *,
        user_id: str,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        """Newest first."""

        raise NotImplementedError

    # Document requests
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
        raise NotImplementedError

    def list_document_requests(
        self,
        *,
        user_id: str,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[DocumentRequest]:
        """Newest first."""

        raise NotImplementedError
