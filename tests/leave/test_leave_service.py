from __future__ import annotations

from datetime import date

import pytest

from conftest import FakeBalanceRepo, FakeNotificationRepo, FakeRequestRepo, FakeUserRepo, make_user
from src.hr_portal.hr_portal.core.enums import LeaveType, NotificationType, RequestKind, Role
from src.hr_portal.hr_portal.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    PolicyViolationError,
    ValidationError,
)
from src.hr_portal.hr_portal.leave.service import LeaveService
from src.hr_portal.hr_portal.notifications.service import NotificationService


@pytest.fixture()
def users():
    repo = FakeUserRepo()
    repo.add(make_user("boss", role=Role.ADMIN, display_name="Boss"))
    repo.add(make_user("u1", display_name="Alice", reporting_manager_id="boss", reporting_manager_name="Boss"))
    repo.add(make_user("solo", display_name="Solo"))
    return repo


@pytest.fixture()
def balances():
    return FakeBalanceRepo()


@pytest.fixture()
def requests_repo():
    return FakeRequestRepo()


@pytest.fixture()
def notifications():
    return FakeNotificationRepo()


@pytest.fixture()
def service(users, balances, requests_repo, notifications):
    return LeaveService(users, balances, requests_repo, NotificationService(notifications))


def test_get_balance_creates_defaults(service, balances):
    balance = service.get_balance("u1")

    assert (balance.sick_leave, balance.annual_leave, balance.emergency_leave) == (7, 12, 3)
    assert balances.get("u1") is not None


def test_get_balance_for_unknown_user_creates_nothing(service, balances):
    with pytest.raises(NotFoundError):
        service.get_balance("ghost")

    assert balances.balances == {}


def test_set_balance_is_admin_only(service):
    with pytest.raises(AuthorizationError):
        service.set_balance(current_uid="u1", current_role=Role.USER, user_id="u1", sick_leave=9, annual_leave=9, emergency_leave=9)

    balance = service.set_balance(
        current_uid="boss", current_role=Role.ADMIN, user_id="u1", sick_leave="5", annual_leave=10, emergency_leave=0
    )
    assert (balance.sick_leave, balance.annual_leave, balance.emergency_leave) == (5, 10, 0)


def test_set_balance_rejects_negative_values(service):
    with pytest.raises(ValidationError):
        service.set_balance(current_uid="boss", current_role=Role.ADMIN, user_id="u1", sick_leave=-1, annual_leave=1, emergency_leave=1)
    with pytest.raises(ValidationError):
        service.set_balance(current_uid="boss", current_role=Role.ADMIN, user_id="u1", sick_leave=2.5, annual_leave=1, emergency_leave=1)


def test_submit_leave_defaults_to_inclusive_days_and_notifies_manager(service, requests_repo, notifications):
    submission = service.submit_leave(
        user_id="u1",
        leave_type="annual",
        start_date="2025-03-03",
        end_date="2025-03-05",
        reason="Family trip",
    )

    assert submission.kind == RequestKind.LEAVE
    assert submission.reporting_manager_name == "Boss"

    stored = requests_repo.leaves[0]
    assert stored.number_of_days == 3
    assert stored.leave_type == LeaveType.ANNUAL
    assert stored.start_date == date(2025, 3, 3)
    assert stored.user_name == "Alice"
    assert stored.reporting_manager_id == "boss"

    [note] = notifications.items
    assert note.user_id == "boss"
    assert note.type == NotificationType.LEAVE_REQUEST
    assert note.title == "New Leave Request"
    assert note.message == "Alice has requested annual leave"
    assert note.related_id == str(submission.request_id)


def test_submit_leave_does_not_decrement_balance(service):
    service.submit_leave(user_id="u1", leave_type="sick", start_date="2025-03-03", end_date="2025-03-03", reason="Flu")

    assert service.get_balance("u1").sick_leave == 7


def test_submit_leave_beyond_balance_is_rejected(service):
    with pytest.raises(PolicyViolationError):
        service.submit_leave(
            user_id="u1",
            leave_type="emergency",
            start_date="2025-03-03",
            end_date="2025-03-06",
            reason="Emergency",
        )


def test_submit_leave_accepts_explicit_day_count(service, requests_repo):
    service.submit_leave(
        user_id="u1",
        leave_type="annual",
        start_date="2025-03-07T00:00:00.000Z",
        end_date="2025-03-10",
        reason="Long weekend",
        number_of_days=2,
    )

    assert requests_repo.leaves[0].number_of_days == 2


@pytest.mark.parametrize(
    "overrides",
    [
        {"leave_type": "vacation"},
        {"start_date": ""},
        {"end_date": "03/05/2025"},
        {"reason": " "},
        {"end_date": "2025-03-01"},
        {"number_of_days": 0},
        {"number_of_days": 1.5},
        {"number_of_days": "1.5"},
    ],
)
def test_submit_leave_validates_input(service, overrides):
    data = {
        "user_id": "u1",
        "leave_type": "annual",
        "start_date": "2025-03-03",
        "end_date": "2025-03-05",
        "reason": "Trip",
    }
    data.update(overrides)

    with pytest.raises(ValidationError):
        service.submit_leave(**data)


def test_submit_without_manager_sends_no_notification(service, notifications):
    submission = service.submit_leave(
        user_id="solo", leave_type="sick", start_date="2025-03-03", end_date="2025-03-03", reason="Flu"
    )

    assert submission.reporting_manager_name is None
    assert notifications.items == []


def test_submit_for_unknown_user(service):
    with pytest.raises(NotFoundError):
        service.submit_document(user_id="ghost", document_type="payslip", reason="Bank")


def test_submit_document_notifies_manager(service, requests_repo, notifications):
    submission = service.submit_document(user_id="u1", document_type="employment letter", reason="Visa")

    assert submission.kind == RequestKind.DOCUMENT
    assert requests_repo.documents[0].document_type == "employment letter"
    assert notifications.items[0].type == NotificationType.DOCUMENT_REQUEST
    assert notifications.items[0].message == "Alice has requested a employment letter document"


def test_list_requests_by_kind_and_status(service):
    service.submit_leave(user_id="u1", leave_type="sick", start_date="2025-03-03", end_date="2025-03-03", reason="Flu")
    service.submit_leave(user_id="u1", leave_type="annual", start_date="2025-04-01", end_date="2025-04-02", reason="Trip")
    service.submit_document(user_id="u1", document_type="payslip", reason="Bank")

    leaves = service.list_requests(user_id="u1", kind="leave", status="pending")
    assert [r.leave_type for r in leaves] == [LeaveType.ANNUAL, LeaveType.SICK]
    assert len(service.list_requests(user_id="u1", kind="document")) == 1
    assert service.list_requests(user_id="u1", kind="leave", status="approved") == []

    with pytest.raises(ValidationError):
        service.list_requests(user_id="u1", kind="payroll")
    with pytest.raises(ValidationError):
        service.list_requests(user_id="u1", status="done")
