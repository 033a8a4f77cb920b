from __future__ import annotations

from datetime import datetime

import pytest

from src.choir_system.choir_system.announcements.model import announcement_dict, announcement_state
from src.choir_system.choir_system.core.enums import AnnouncementState, AnnouncementType, Role
from src.choir_system.choir_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from tests.fakes import FakeWorld, actor_for


@pytest.fixture
def world():
    return FakeWorld()


def test_state_from_window(fixed_now):
    before = datetime(2024, 4, 30, 12, 0)
    after = datetime(2024, 5, 2, 12, 0)
    assert announcement_state(fixed_now, None, None) == AnnouncementState.ACTIVE
    assert announcement_state(fixed_now, after, None) == AnnouncementState.SCHEDULED
    assert announcement_state(fixed_now, None, before) == AnnouncementState.EXPIRED
    assert announcement_state(fixed_now, before, after) == AnnouncementState.ACTIVE


def test_any_member_can_post_and_is_author(world, fixed_now):
    member = world.users.add("Alice Mukamana")
    a = world.container.announcement_service.create_announcement(
        actor_for(member), {"title": "Robes", "content": "Bring robes"}, now=fixed_now
    )
    assert a.author == "Alice Mukamana"
    assert a.type == AnnouncementType.GENERAL
    assert announcement_dict(a, fixed_now)["state"] == "active"


def test_window_must_be_ordered(world):
    member = world.users.add("Alice Mukamana")
    with pytest.raises(ValidationError):
        world.container.announcement_service.create_announcement(
            actor_for(member),
            {
                "title": "T",
                "content": "C",
                "start_time": "2024-05-03T10:00",
                "end_time": "2024-05-02T10:00",
            },
        )


def test_listing_hides_expired_newest_first(world, fixed_now):
    svc = world.container.announcement_service
    member = actor_for(world.users.add("Alice Mukamana"))
    old = svc.create_announcement(member, {"title": "Old", "content": "x"}, now=datetime(2024, 4, 1))
    svc.create_announcement(
        member, {"title": "Gone", "content": "x", "end_time": "2024-04-30T00:00"}, now=datetime(2024, 4, 2)
    )
    soon = svc.create_announcement(
        member, {"title": "Soon", "content": "x", "start_time": "2024-05-05T08:00"}, now=datetime(2024, 4, 3)
    )

    listed = svc.list_announcements(fixed_now)

    assert [a.announcement_id for a in listed] == [soon.announcement_id, old.announcement_id]
    assert listed[0].state(fixed_now) == AnnouncementState.SCHEDULED


def test_update_and_delete_are_admin_only(world, fixed_now):
    svc = world.container.announcement_service
    member = actor_for(world.users.add("Alice Mukamana"))
    advisor = actor_for(world.users.add("Victor Advisor", role=Role.ADVISOR))
    a = svc.create_announcement(member, {"title": "T", "content": "C"}, now=fixed_now)

    with pytest.raises(AuthorizationError):
        svc.update_announcement(member, a.announcement_id, {"title": "X"})

    updated = svc.update_announcement(advisor, a.announcement_id, {"title": "New", "type": "permission"})
    assert updated.title == "New"
    assert updated.content == "C"
    assert updated.type == AnnouncementType.PERMISSION

    svc.delete_announcement(advisor, a.announcement_id)
    with pytest.raises(NotFoundError):
        svc.get_announcement(a.announcement_id)
