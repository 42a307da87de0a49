from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from src.hr_portal.hr_portal.announcements.model import Announcement
from src.hr_portal.hr_portal.attendance.model import AttendanceRecord
from src.hr_portal.hr_portal.container import build_services
from src.hr_portal.hr_portal.core.enums import RequestStatus, Role, UserStatus
from src.hr_portal.hr_portal.core.exceptions import AlreadyCheckedInError
from src.hr_portal.hr_portal.identity.provider import JwtIdentityProvider
from src.hr_portal.hr_portal.leave.model import DocumentRequest, LeaveBalance, LeaveRequest
from src.hr_portal.hr_portal.notifications.model import Notification
from src.hr_portal.hr_portal.users.model import User

CREATED_AT = datetime(2025, 1, 1, 9, 0, 0)


class FakeUserRepo:
    def __init__(self):
        self.users: dict[str, User] = {}
        self.touches: list[tuple[str, datetime, bool]] = []
        self.list_by_role_calls = 0

    def add(self, user: User) -> User:
        self.users[user.uid] = user
        return user

    def get_by_id(self, uid):
        return self.users.get(uid)

    def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, *, uid, email, password_hash, display_name, role, status, department, position):
        self.users[uid] = User(
            uid=uid,
            email=email,
            password_hash=password_hash,
            display_name=display_name,
            role=role,
            status=status,
            department=department,
            position=position,
            created_at=CREATED_AT,
        )
        return uid

    def update_fields(self, uid, fields):
        if uid not in self.users:
            return False
        self.users[uid] = replace(self.users[uid], **fields)
        return True

    def set_role(self, uid, role):
        return self.update_fields(uid, {"role": role})

    def set_status(self, uid, status):
        return self.update_fields(uid, {"status": status})

    def set_password_hash(self, uid, password_hash):
        return self.update_fields(uid, {"password_hash": password_hash})

    def touch_last_active(self, uid, *, at, is_active):
        self.touches.append((uid, at, is_active))
        return self.update_fields(uid, {"last_active": at, "is_active": is_active})

    def delete_by_id(self, uid):
        return self.users.pop(uid, None) is not None

    def list_all(self):
        return sorted(self.users.values(), key=lambda u: (u.display_name, u.uid))

    def list_page(self, *, offset, limit):
        return self.list_all()[offset:offset + limit]

    def count(self):
        return len(self.users)

    def list_by_role(self, role):
        self.list_by_role_calls += 1
        return [u for u in self.list_all() if u.role == role]


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.records: dict[int, AttendanceRecord] = {}

    def add(self, *, user_id, work_date, check_in_time, status, check_out_time=None) -> AttendanceRecord:
        rid = self._next_id
        self._next_id += 1
        record = AttendanceRecord(
            attendance_id=rid,
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            status=status,
        )
        self.records[rid] = record
        return record

    def get_by_id(self, attendance_id):
        return self.records.get(int(attendance_id))

    def get_for_user_and_date(self, user_id, work_date):
        return next(
            (r for r in self.records.values() if r.user_id == user_id and r.work_date == work_date),
            None,
        )

    def list_for_user_between(self, user_id, start_date, end_date):
        rows = [r for r in self.records.values() if r.user_id == user_id and start_date <= r.work_date <= end_date]
        return sorted(rows, key=lambda r: r.work_date, reverse=True)

    def get_recent_for_user(self, user_id, limit):
        rows = [r for r in self.records.values() if r.user_id == user_id]
        return sorted(rows, key=lambda r: r.work_date, reverse=True)[:limit]

    def list_for_date(self, work_date):
        return [r for r in self.records.values() if r.work_date == work_date]

    def create_checkin(self, *, user_id, work_date, check_in_time, status):
        if self.get_for_user_and_date(user_id, work_date):
            raise AlreadyCheckedInError("Already checked in today")
        return self.add(user_id=user_id, work_date=work_date, check_in_time=check_in_time, status=status).attendance_id

    def update_checkout(self, *, attendance_id, check_out_time):
        record = self.records.get(int(attendance_id))
        if not record or record.check_out_time is not None:
            return False
        self.records[record.attendance_id] = replace(record, check_out_time=check_out_time)
        return True


class FakeBalanceRepo:
    def __init__(self):
        self.balances: dict[str, LeaveBalance] = {}

    def get(self, user_id):
        return self.balances.get(user_id)

    def create(self, user_id, *, sick_leave, annual_leave, emergency_leave):
        if user_id not in self.balances:
            self.balances[user_id] = LeaveBalance(user_id, sick_leave, annual_leave, emergency_leave)
        return self.balances[user_id]

    def update(self, user_id, *, sick_leave, annual_leave, emergency_leave):
        if user_id not in self.balances:
            return False
        self.balances[user_id] = LeaveBalance(user_id, sick_leave, annual_leave, emergency_leave)
        return True


class FakeRequestRepo:
    def __init__(self):
        self._next_id = 1
        self.leaves: list[LeaveRequest] = []
        self.documents: list[DocumentRequest] = []

    def _take_id(self):
        rid = self._next_id
        self._next_id += 1
        return rid

    def create_leave(self, *, user_id, user_name, leave_type, start_date, end_date, number_of_days, reason,
                     reporting_manager_id, reporting_manager_name):
        rid = self._take_id()
        self.leaves.append(
            LeaveRequest(
                request_id=rid,
                user_id=user_id,
                user_name=user_name,
                leave_type=leave_type,
                start_date=start_date,
                end_date=end_date,
                number_of_days=number_of_days,
                reason=reason,
                status=RequestStatus.PENDING,
                created_at=CREATED_AT,
                reporting_manager_id=reporting_manager_id,
                reporting_manager_name=reporting_manager_name,
            )
        )
        return rid

    def list_leave_requests(self, *, user_id, status=None, limit=200):
        rows = [r for r in self.leaves if r.user_id == user_id and (status is None or r.status == status)]
        return list(reversed(rows))[:limit]

    def create_document(self, *, user_id, user_name, document_type, reason, reporting_manager_id,
                        reporting_manager_name):
        rid = self._take_id()
        self.documents.append(
            DocumentRequest(
                request_id=rid,
                user_id=user_id,
                user_name=user_name,
                document_type=document_type,
                reason=reason,
                status=RequestStatus.PENDING,
                created_at=CREATED_AT,
                reporting_manager_id=reporting_manager_id,
                reporting_manager_name=reporting_manager_name,
            )
        )
        return rid

    def list_document_requests(self, *, user_id, status=None, limit=200):
        rows = [r for r in self.documents if r.user_id == user_id and (status is None or r.status == status)]
        return list(reversed(rows))[:limit]


class FakeNotificationRepo:
    def __init__(self):
        self.items: list[Notification] = []

    def create(self, *, user_id, type, title, message, related_id):
        nid = len(self.items) + 1
        self.items.append(
            Notification(
                notification_id=nid,
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                related_id=related_id,
                read=False,
                created_at=CREATED_AT,
            )
        )
        return nid

    def list_for_user(self, user_id, *, unread_only=False, limit=50):
        rows = [n for n in self.items if n.user_id == user_id and not (unread_only and n.read)]
        return list(reversed(rows))[:limit]


class FakeAnnouncementRepo:
    def __init__(self):
        self.items: dict[int, Announcement] = {}

    def get_by_id(self, announcement_id):
        return self.items.get(int(announcement_id))

    def create(self, *, title, content, priority, author_id, author_name):
        aid = len(self.items) + 1
        self.items[aid] = Announcement(
            announcement_id=aid,
            title=title,
            content=content,
            priority=priority,
            author_id=author_id,
            author_name=author_name,
            is_active=True,
            created_at=CREATED_AT,
        )
        return aid

    def _active(self):
        return sorted((a for a in self.items.values() if a.is_active), key=lambda a: a.announcement_id, reverse=True)

    def list_active(self, *, offset, limit):
        return self._active()[offset:offset + limit]

    def count_active(self):
        return len(self._active())

    def deactivate(self, announcement_id):
        a = self.items.get(int(announcement_id))
        if not a or not a.is_active:
            return False
        self.items[a.announcement_id] = replace(a, is_active=False)
        return True


def make_user(uid="u1", *, role=Role.USER, status=UserStatus.ACTIVE, password="secret123", **kwargs) -> User:
    fields = {
        "email": f"{uid}@example.com",
        "display_name": f"User {uid}",
        "department": "Engineering",
        "position": "Developer",
        "created_at": CREATED_AT,
    }
    fields.update(kwargs)
    return User(
        uid=uid,
        password_hash=generate_password_hash(password),
        role=role,
        status=status,
        **fields,
    )


@pytest.fixture()
def fixed_now():
    # Wednesday; January 2025 has 23 working days.
    return datetime(2025, 1, 15, 8, 30, 0)


@pytest.fixture()
def users_repo():
    return FakeUserRepo()


@pytest.fixture()
def attendance_repo():
    return FakeAttendanceRepo()


@pytest.fixture()
def container(users_repo, attendance_repo):
    return build_services(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        balances_repo=FakeBalanceRepo(),
        requests_repo=FakeRequestRepo(),
        notifications_repo=FakeNotificationRepo(),
        announcements_repo=FakeAnnouncementRepo(),
        identity=JwtIdentityProvider("test-secret-key-for-hs256-signing-0001"),
    )
