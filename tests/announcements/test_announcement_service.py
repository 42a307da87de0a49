import pytest

from conftest import FakeAnnouncementRepo, make_user
from src.hr_portal.hr_portal.announcements.service import AnnouncementService
from src.hr_portal.hr_portal.common.pagination import PageRequest
from src.hr_portal.hr_portal.core.enums import AnnouncementPriority, Role
from src.hr_portal.hr_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError


@pytest.fixture()
def service():
    return AnnouncementService(FakeAnnouncementRepo())


def test_publish_requires_admin(service):
    with pytest.raises(AuthorizationError):
        service.publish(author=make_user("u1"), title="Hi", content="There")


def test_publish_defaults_to_medium_priority(service):
    announcement = service.publish(author=make_user("boss", role=Role.ADMIN, display_name="Boss"), title=" Hi ", content="There")

    assert announcement.title == "Hi"
    assert announcement.priority == AnnouncementPriority.MEDIUM
    assert announcement.author_name == "Boss"


def test_publish_validates_input(service):
    admin = make_user("boss", role=Role.ADMIN)

    with pytest.raises(ValidationError):
        service.publish(author=admin, title="", content="There")
    with pytest.raises(ValidationError):
        service.publish(author=admin, title="Hi", content="There", priority="urgent")


def test_list_active_is_newest_first_and_hides_deactivated(service):
    admin = make_user("boss", role=Role.ADMIN)
    first = service.publish(author=admin, title="First", content="a")
    service.publish(author=admin, title="Second", content="b")
    service.publish(author=admin, title="Third", content="c")

    service.deactivate(current_uid="boss", current_role=Role.ADMIN, announcement_id=first.announcement_id)

    page = service.list_active(page=PageRequest(page=1, limit=1))
    assert [a.title for a in page.items] == ["Third"]
    assert page.total == 2


def test_deactivate_unknown_or_by_user(service):
    with pytest.raises(NotFoundError):
        service.deactivate(current_uid="boss", current_role=Role.ADMIN, announcement_id=42)
    with pytest.raises(AuthorizationError):
        service.deactivate(current_uid="u1", current_role=Role.USER, announcement_id=1)
