from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .announcements.mysql_announcement_repository import MySQLAnnouncementRepository
from .announcements.repository import AnnouncementRepository
from .announcements.service import AnnouncementService
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.cache import TTLCache
from .common.datetime_utils import parse_clock
from .core.constants import (
    DEFAULT_ACTIVE_WINDOW_MINUTES,
    DEFAULT_MANAGER_CACHE_TTL_SECONDS,
    DEFAULT_SESSION_TTL_HOURS,
    DEFAULT_TOKEN_TTL_MINUTES,
)
from .database.connection import DBConfig, DatabaseConnection
from .identity.provider import IdentityProvider, JwtIdentityProvider
from .leave.mysql_leave_balance_repository import MySQLLeaveBalanceRepository
from .leave.mysql_request_repository import MySQLRequestRepository
from .leave.repository import LeaveBalanceRepository, RequestRepository
from .leave.service import LeaveService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    balances_repo: LeaveBalanceRepository
    requests_repo: RequestRepository
    notifications_repo: NotificationRepository
    announcements_repo: AnnouncementRepository

    identity: IdentityProvider

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    leave_service: LeaveService
    notification_service: NotificationService
    announcement_service: AnnouncementService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    balances_repo: LeaveBalanceRepository,
    requests_repo: RequestRepository,
    notifications_repo: NotificationRepository,
    announcements_repo: AnnouncementRepository,
    identity: IdentityProvider,
    settings=None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over the given repositories (MySQL in the app, fakes in tests)."""
    late_cutoff = parse_clock(getattr(settings, "LATE_CUTOFF", "09:00"))
    active_window = int(getattr(settings, "ACTIVE_WINDOW_MINUTES", DEFAULT_ACTIVE_WINDOW_MINUTES))
    cache_ttl = float(getattr(settings, "MANAGER_CACHE_TTL_SECONDS", DEFAULT_MANAGER_CACHE_TTL_SECONDS))

    notification_service = NotificationService(notifications_repo)
    auth_service = AuthService(users_repo, balances_repo)
    user_service = UserService(users_repo, manager_cache=TTLCache(cache_ttl))
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        strategy_factory=AttendanceStrategyFactory(),
        late_cutoff=late_cutoff,
        active_window_minutes=active_window,
    )
    leave_service = LeaveService(users_repo, balances_repo, requests_repo, notification_service)
    announcement_service = AnnouncementService(announcements_repo)

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        balances_repo=balances_repo,
        requests_repo=requests_repo,
        notifications_repo=notifications_repo,
        announcements_repo=announcements_repo,
        identity=identity,
        auth_service=auth_service,
        user_service=user_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        notification_service=notification_service,
        announcement_service=announcement_service,
        conn=conn,
    )


def build_container(*, db_config: dict, settings=None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    identity = JwtIdentityProvider(
        str(getattr(settings, "SECRET_KEY", "")),
        token_ttl_minutes=int(getattr(settings, "TOKEN_TTL_MINUTES", DEFAULT_TOKEN_TTL_MINUTES)),
        session_ttl_hours=int(getattr(settings, "SESSION_TTL_HOURS", DEFAULT_SESSION_TTL_HOURS)),
    )

    return build_services(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        balances_repo=MySQLLeaveBalanceRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        announcements_repo=MySQLAnnouncementRepository(conn),
        identity=identity,
        settings=settings,
        conn=conn,
    )
