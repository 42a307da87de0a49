from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveType, RequestStatus


@dataclass(frozen=True)
class LeaveBalance:
    """Days remaining per leave category."""

    user_id: str
    sick_leave: int
    annual_leave: int
    emergency_leave: int
    updated_at: Optional[datetime] = None

    def remaining(self, leave_type: LeaveType) -> int:
        return {
            LeaveType.SICK: self.sick_leave,
            LeaveType.ANNUAL: self.annual_leave,
            LeaveType.EMERGENCY: self.emergency_leave,
        }[leave_type]


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    user_id: str
    user_name: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    number_of_days: int
    reason: str
    status: RequestStatus
    created_at: datetime
    reporting_manager_id: Optional[str] = None
    reporting_manager_name: Optional[str] = None


@dataclass(frozen=True)
class DocumentRequest:
    request_id: int
    user_id: str
    user_name: str
    document_type: str
    reason: str
    status: RequestStatus
    created_at: datetime
    reporting_manager_id: Optional[str] = None
    reporting_manager_name: Optional[str] = None
