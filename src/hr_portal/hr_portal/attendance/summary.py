"""Attendance status and aggregation rules.

Pure functions over attendance records. Every time-sensitive function takes
the reference instant explicitly so callers (and tests) control "now".
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import month_bounds
from ..core.constants import DEFAULT_ACTIVE_WINDOW_MINUTES
from ..core.enums import AttendanceStatus, TodayState
from .model import AttendanceRecord, MonthlySummary


def resolve_today_state(record: Optional[AttendanceRecord]) -> TodayState:
    if record is None:
        return TodayState.NOT_CHECKED_IN
    if record.check_out_time is None:
        return TodayState.CHECKED_IN
    return TodayState.CHECKED_OUT


def working_days_in_month(as_of: date) -> int:
    """Monday to Friday count of the calendar month containing ``as_of``."""
    first, last = month_bounds(as_of)
    days = sum(
        1
        for offset in range((last - first).days + 1)
        if (first + timedelta(days=offset)).weekday() < 5
    )
    assert days >= 1, "a calendar month always has working days"
    return days


def summarize_month(records: Iterable[AttendanceRecord], as_of: date) -> MonthlySummary:
    """Present/late/absent counts and attendance percentage for the month of ``as_of``.

    ``absent_days`` is derived, not counted, so it goes negative when records
    exist for weekend days.
    """
    if isinstance(as_of, datetime):
        as_of = as_of.date()
    first, last = month_bounds(as_of)
    total = working_days_in_month(as_of)

    present = late = 0
    for record in records:
        if not first <= record.work_date <= last:
            continue
        if record.status == AttendanceStatus.PRESENT:
            present += 1
        elif record.status == AttendanceStatus.LATE:
            late += 1

    attended = present + late
    return MonthlySummary(
        total_days=total,
        present_days=present,
        late_days=late,
        absent_days=total - attended,
        # Half-up, not Python's banker's rounding.
        percentage=int(math.floor(attended / total * 100 + 0.5)),
    )


def is_active(
    last_active: Optional[datetime],
    as_of: datetime,
    window: timedelta = timedelta(minutes=DEFAULT_ACTIVE_WINDOW_MINUTES),
) -> bool:
    if last_active is None:
        return False
    return as_of - last_active < window
