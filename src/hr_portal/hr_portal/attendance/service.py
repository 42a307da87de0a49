from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local
from ..common.pagination import Page, PageRequest
from ..core.constants import (
    DEFAULT_ACTIVE_WINDOW_MINUTES,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_LATE_CUTOFF,
    MAX_PAGE_LIMIT,
)
from ..core.enums import AttendanceStatus, Role, UserStatus
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AuthorizationError,
    NotFoundError,
)
from ..users.authorization import require_admin
from ..users.model import User
from ..users.repository import UserRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, DailyOverviewRow, DailyReportRow, MonthlySummary, TodayStatus
from .repository import AttendanceRepository
from .summary import is_active, resolve_today_state, summarize_month

logger = logging.getLogger(__name__)

_ABSENT_LABEL = "Absent"


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        late_cutoff: time = DEFAULT_LATE_CUTOFF,
        active_window_minutes: int = DEFAULT_ACTIVE_WINDOW_MINUTES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._users = users
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._late_cutoff = late_cutoff
        self._active_window = timedelta(minutes=int(active_window_minutes))
        self._clock = clock

    def _require_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_today_status(self, user_id: str, *, as_of: datetime | None = None) -> Optional[TodayStatus]:
        as_of = as_of or self._clock()
        record = self._attendance.get_for_user_and_date(user_id, as_of.date())
        if record is None:
            return None
        return TodayStatus(
            record_id=record.attendance_id,
            check_in=record.check_in_time,
            check_out=record.check_out_time,
            status=record.status,
            state=resolve_today_state(record),
        )

    def check_in(self, user_id: str, *, now: datetime | None = None) -> int:
        now = now or self._clock()
        today = now.date()

        user = self._require_user(user_id)
        if user.status != UserStatus.ACTIVE:
            raise AuthorizationError("Account is not active")

        # At most one check-in per calendar day, open or closed.
        if self._attendance.get_for_user_and_date(user_id, today):
            raise AlreadyCheckedInError("Already checked in today")

        strategy = self._factory.for_checkin(now=now, cutoff=self._late_cutoff)
        decision = strategy.decide_checkin(now=now, cutoff=self._late_cutoff)

        attendance_id = self._attendance.create_checkin(
            user_id=user_id,
            work_date=today,
            check_in_time=now,
            status=decision.status,
        )
        logger.info("User %s checked in at %s (%s)", user_id, now.isoformat(), decision.status.value)

        # Not rolled back if this fails; the record above stays.
        self._users.touch_last_active(user_id, at=now, is_active=True)
        return attendance_id

    def check_out(self, user_id: str, attendance_id: int, *, now: datetime | None = None) -> None:
        now = now or self._clock()

        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        if record.user_id != user_id:
            raise AuthorizationError("Forbidden")
        if record.check_out_time is not None:
            raise AlreadyCheckedOutError("Already checked out")

        if not self._attendance.update_checkout(attendance_id=record.attendance_id, check_out_time=now):
            raise AlreadyCheckedOutError("Already checked out")
        logger.info("User %s checked out at %s", user_id, now.isoformat())

        self._users.touch_last_active(user_id, at=now, is_active=False)

    def get_monthly_records(self, user_id: str, *, as_of: datetime | date | None = None) -> Sequence[AttendanceRecord]:
        as_of = as_of or self._clock()
        first, last = month_bounds(as_of.date() if isinstance(as_of, datetime) else as_of)
        return self._attendance.list_for_user_between(user_id, first, last)

    def get_monthly_summary(self, user_id: str, *, as_of: datetime | date | None = None) -> MonthlySummary:
        as_of = as_of or self._clock()
        day = as_of.date() if isinstance(as_of, datetime) else as_of
        return summarize_month(self.get_monthly_records(user_id, as_of=day), day)

    def get_history(self, user_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(user_id, min(max(int(limit), 1), MAX_PAGE_LIMIT))

    def heartbeat(self, user_id: str, *, now: datetime | None = None) -> datetime:
        now = now or self._clock()
        self._require_user(user_id)
        self._users.touch_last_active(user_id, at=now, is_active=True)
        return now

    def is_user_active(self, user: User, *, as_of: datetime | None = None) -> bool:
        return is_active(user.last_active, as_of or self._clock(), self._active_window)

    def daily_overview(
        self,
        *,
        current_role: Role,
        work_date: date,
        page: PageRequest,
        as_of: datetime | None = None,
    ) -> Page[DailyOverviewRow]:
        require_admin(current_role)
        as_of = as_of or self._clock()

        users = self._users.list_page(offset=page.offset, limit=page.limit)
        by_user = {r.user_id: r for r in self._attendance.list_for_date(work_date)}

        rows = []
        for user in users:
            record = by_user.get(user.uid)
            if record:
                label = resolve_today_state(record).value
            else:
                label = _ABSENT_LABEL
            rows.append(
                DailyOverviewRow(
                    user_id=user.uid,
                    display_name=user.display_name,
                    email=user.email,
                    department=user.department,
                    check_in_time=record.check_in_time if record else None,
                    check_out_time=record.check_out_time if record else None,
                    status=label,
                    is_active=is_active(user.last_active, as_of, self._active_window),
                    last_active=user.last_active,
                )
            )
        return Page(items=rows, total=self._users.count(), page=page.page, limit=page.limit)

    def daily_report(self, *, current_role: Role, work_date: date) -> list[DailyReportRow]:
        """Every record of the day plus an Absent row per user without one."""
        require_admin(current_role)

        users = {u.uid: u for u in self._users.list_all()}
        records = self._attendance.list_for_date(work_date)

        rows = []
        for record in records:
            user = users.get(record.user_id)
            rows.append(
                DailyReportRow(
                    user_id=record.user_id,
                    user_name=user.display_name if user else "Unknown",
                    department=user.department if user else None,
                    check_in_time=record.check_in_time,
                    check_out_time=record.check_out_time,
                    status=record.status,
                )
            )

        seen = {r.user_id for r in records}
        for user in users.values():
            if user.uid in seen:
                continue
            rows.append(
                DailyReportRow(
                    user_id=user.uid,
                    user_name=user.display_name,
                    department=user.department,
                    check_in_time=None,
                    check_out_time=None,
                    status=AttendanceStatus.ABSENT,
                )
            )
        return rows
