from __future__ import annotations

from datetime import date

import pytest

from conftest import FakeBalanceRepo, FakeUserRepo, make_user
from src.hr_portal.hr_portal.common.cache import TTLCache
from src.hr_portal.hr_portal.common.pagination import PageRequest
from src.hr_portal.hr_portal.core.enums import Role, UserStatus
from src.hr_portal.hr_portal.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PolicyViolationError,
    ValidationError,
)
from src.hr_portal.hr_portal.users.service import AuthService, UserService


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture()
def users():
    repo = FakeUserRepo()
    repo.add(make_user("u1", display_name="Alice"))
    repo.add(make_user("boss", role=Role.ADMIN, display_name="Boss"))
    return repo


@pytest.fixture()
def balances():
    return FakeBalanceRepo()


@pytest.fixture()
def auth(users, balances):
    return AuthService(users, balances)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def service(users, clock):
    return UserService(users, manager_cache=TTLCache(300, clock=clock))


def test_register_creates_pending_user_with_default_balance(auth, users, balances):
    user = auth.register(
        email="New@Example.com",
        password="secret1",
        display_name="Newbie",
        department="Sales",
        position="Rep",
    )

    assert user.email == "new@example.com"
    assert user.role == Role.USER
    assert user.status == UserStatus.PENDING
    balance = balances.get(user.uid)
    assert (balance.sick_leave, balance.annual_leave, balance.emergency_leave) == (7, 12, 3)


def test_register_rejects_duplicate_email(auth):
    with pytest.raises(ConflictError):
        auth.register(email="u1@example.com", password="secret1", display_name="X", department="D", position="P")


@pytest.mark.parametrize(
    "overrides",
    [
        {"password": "12345"},
        {"display_name": ""},
        {"department": "  "},
        {"email": "not-an-email"},
    ],
)
def test_register_validates_fields(auth, overrides):
    data = {
        "email": "x@example.com",
        "password": "secret1",
        "display_name": "X",
        "department": "D",
        "position": "P",
    }
    data.update(overrides)

    with pytest.raises(ValidationError):
        auth.register(**data)


def test_authenticate_checks_password(auth):
    assert auth.authenticate("U1@example.com", "secret123").uid == "u1"

    with pytest.raises(AuthenticationError):
        auth.authenticate("u1@example.com", "wrong")
    with pytest.raises(AuthenticationError):
        auth.authenticate("nobody@example.com", "secret123")


def test_inactive_user_cannot_sign_in(auth, users):
    users.add(make_user("gone", status=UserStatus.INACTIVE))

    with pytest.raises(AuthenticationError):
        auth.authenticate("gone@example.com", "secret123")


def test_change_password(auth):
    auth.change_password(uid="u1", current_password="secret123", new_password="better-secret")

    assert auth.authenticate("u1@example.com", "better-secret").uid == "u1"
    with pytest.raises(AuthenticationError):
        auth.change_password(uid="u1", current_password="secret123", new_password="again123")


def test_change_password_with_corrupted_hash_is_rejected(auth, users):
    users.update_fields("u1", {"password_hash": "not-a-hash"})

    with pytest.raises(AuthenticationError):
        auth.change_password(uid="u1", current_password="secret123", new_password="better-secret")
    with pytest.raises(AuthenticationError):
        auth.authenticate("u1@example.com", "secret123")


def test_list_users_is_admin_only_and_paginated(service, users):
    for i in range(5):
        users.add(make_user(f"x{i}"))

    page = service.list_users(current_role=Role.ADMIN, page=PageRequest.from_args("2", "3"))

    assert page.total == 7
    assert page.total_pages == 3
    assert len(page.items) == 3
    with pytest.raises(AuthorizationError):
        service.list_users(current_role=Role.USER, page=PageRequest.from_args(None, None))


def test_page_request_clamps_limit():
    assert PageRequest.from_args("0", "500") == PageRequest(page=1, limit=100)
    assert PageRequest.from_args("abc", "") == PageRequest(page=1, limit=50)


def test_get_user_self_or_admin(service):
    assert service.get_user(current_uid="u1", current_role=Role.USER, uid="u1").uid == "u1"
    assert service.get_user(current_uid="boss", current_role=Role.ADMIN, uid="u1").uid == "u1"
    with pytest.raises(AuthorizationError):
        service.get_user(current_uid="u1", current_role=Role.USER, uid="boss")
    with pytest.raises(NotFoundError):
        service.get_user(current_uid="boss", current_role=Role.ADMIN, uid="ghost")


def test_update_profile_snapshots_manager_name(service):
    user = service.update_profile(
        current_uid="u1",
        current_role=Role.USER,
        uid="u1",
        changes={"phone_number": " 555-0100 ", "reporting_manager_id": "boss"},
    )

    assert user.phone_number == "555-0100"
    assert user.reporting_manager_id == "boss"
    assert user.reporting_manager_name == "Boss"


def test_update_profile_ignores_fields_outside_the_allow_list(service):
    user = service.update_profile(
        current_uid="u1",
        current_role=Role.USER,
        uid="u1",
        changes={"role": "admin", "position": "Lead"},
    )

    assert user.role == Role.USER
    assert user.position == "Lead"


def test_update_profile_rejects_self_as_manager_and_unknown_manager(service):
    with pytest.raises(ValidationError):
        service.update_profile(current_uid="u1", current_role=Role.USER, uid="u1", changes={"reporting_manager_id": "u1"})
    with pytest.raises(NotFoundError):
        service.update_profile(current_uid="u1", current_role=Role.USER, uid="u1", changes={"reporting_manager_id": "nobody"})


def test_only_admin_changes_email(service):
    with pytest.raises(AuthorizationError):
        service.update_profile(current_uid="u1", current_role=Role.USER, uid="u1", changes={"email": "a@b.co"})

    user = service.update_profile(current_uid="boss", current_role=Role.ADMIN, uid="u1", changes={"email": "A@B.co"})
    assert user.email == "a@b.co"


def test_user_can_resubmit_own_unchanged_email(service):
    user = service.update_profile(
        current_uid="u1",
        current_role=Role.USER,
        uid="u1",
        changes={"display_name": "Alice B", "email": " U1@Example.com ", "phone_number": "555"},
    )

    assert user.display_name == "Alice B"
    assert user.phone_number == "555"
    assert user.email == "u1@example.com"


def test_update_profile_extended_fields(service):
    user = service.update_profile(
        current_uid="u1",
        current_role=Role.USER,
        uid="u1",
        changes={
            "date_of_birth": "1990-05-01",
            "date_of_joining": "2021-02-15T00:00:00.000Z",
            "employee_type": "Full-time",
            "home_location": "Springfield",
            "seating_location": "B2-14",
            "extension_number": "4021",
        },
    )

    assert user.date_of_birth == date(1990, 5, 1)
    assert user.date_of_joining == date(2021, 2, 15)
    assert (user.employee_type, user.home_location, user.seating_location, user.extension_number) == (
        "Full-time",
        "Springfield",
        "B2-14",
        "4021",
    )

    cleared = service.update_profile(current_uid="u1", current_role=Role.USER, uid="u1", changes={"date_of_birth": ""})
    assert cleared.date_of_birth is None
    assert cleared.date_of_joining == date(2021, 2, 15)


def test_update_profile_rejects_malformed_dates(service):
    with pytest.raises(ValidationError):
        service.update_profile(current_uid="u1", current_role=Role.USER, uid="u1", changes={"date_of_birth": "01/05/1990"})


def test_update_role(service):
    assert service.update_role(current_uid="boss", current_role=Role.ADMIN, uid="u1", role="admin").role == Role.ADMIN

    with pytest.raises(ValidationError):
        service.update_role(current_uid="boss", current_role=Role.ADMIN, uid="u1", role="superuser")
    with pytest.raises(NotFoundError):
        service.update_role(current_uid="boss", current_role=Role.ADMIN, uid="ghost", role="user")
    with pytest.raises(AuthorizationError):
        service.update_role(current_uid="u1", current_role=Role.USER, uid="u1", role="admin")


def test_update_status(service):
    user = service.update_status(current_uid="boss", current_role=Role.ADMIN, uid="u1", status="inactive")

    assert user.status == UserStatus.INACTIVE
    with pytest.raises(ValidationError):
        service.update_status(current_uid="boss", current_role=Role.ADMIN, uid="u1", status="banned")


def test_admin_cannot_delete_self(service, users):
    with pytest.raises(PolicyViolationError):
        service.delete_user(current_uid="boss", current_role=Role.ADMIN, uid="boss")

    service.delete_user(current_uid="boss", current_role=Role.ADMIN, uid="u1")
    assert users.get_by_id("u1") is None


def test_delete_requires_admin(service):
    with pytest.raises(AuthorizationError):
        service.delete_user(current_uid="u1", current_role=Role.USER, uid="boss")


def test_manager_list_is_cached_until_ttl_or_role_change(service, users, clock):
    assert [m.uid for m in service.list_managers()] == ["boss"]
    service.list_managers()
    assert users.list_by_role_calls == 1

    clock.now = 301
    service.list_managers()
    assert users.list_by_role_calls == 2

    service.update_role(current_uid="boss", current_role=Role.ADMIN, uid="u1", role="admin")
    assert [m.uid for m in service.list_managers()] == ["u1", "boss"]
    assert users.list_by_role_calls == 3
