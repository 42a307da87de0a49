from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, TodayState


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in per user per calendar day."""

    attendance_id: int
    user_id: str
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus


@dataclass(frozen=True)
class TodayStatus:
    record_id: int
    check_in: datetime
    check_out: Optional[datetime]
    status: AttendanceStatus
    state: TodayState


@dataclass(frozen=True)
class MonthlySummary:
    total_days: int
    present_days: int
    late_days: int
    absent_days: int
    percentage: int


@dataclass(frozen=True)
class DailyOverviewRow:
    """Read-model for the admin dashboard (one row per user)."""

    user_id: str
    display_name: str
    email: str
    department: Optional[str]
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: str
    is_active: bool
    last_active: Optional[datetime]


@dataclass(frozen=True)
class DailyReportRow:
    user_id: str
    user_name: str
    department: Optional[str]
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
