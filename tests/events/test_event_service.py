from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.choir_system.choir_system.core.enums import EventType, Role
from src.choir_system.choir_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.choir_system.choir_system.events.model import EventInput
from tests.fakes import FakeWorld, actor_for


@pytest.fixture
def world():
    return FakeWorld()


@pytest.fixture
def admin(world):
    return actor_for(world.users.add("Grace President", role=Role.PRESIDENT))


def _add(world, day, start=time(9, 0), end=time(11, 0), name="Practice"):
    return world.events.create_event(
        EventInput(name=name, type=EventType.PRACTICE, date=day, start_time=start, end_time=end)
    )


def test_create_event_validates(world, admin):
    svc = world.container.event_service
    event = svc.create_event(
        admin, {"name": "Rehearsal", "type": "Practice", "date": "2024-05-02", "start_time": "18:00", "end_time": "20:00"}
    )
    assert event.start_time == time(18, 0)
    assert event.type == EventType.PRACTICE


@pytest.mark.parametrize(
    "data",
    [
        {"name": "", "type": "Practice", "date": "2024-05-02", "start_time": "18:00", "end_time": "20:00"},
        {"name": "X", "type": "Concert", "date": "2024-05-02", "start_time": "18:00", "end_time": "20:00"},
        {"name": "X", "type": "Practice", "date": "2024-5-2x", "start_time": "18:00", "end_time": "20:00"},
        {"name": "X", "type": "Practice", "date": "2024-05-02", "start_time": "6pm", "end_time": "20:00"},
        {"name": "X", "type": "Practice", "date": "2024-05-02", "start_time": "20:00", "end_time": "18:00"},
    ],
)
def test_create_event_rejects_bad_input(world, admin, data):
    with pytest.raises(ValidationError):
        world.container.event_service.create_event(admin, data)


def test_members_cannot_create(world):
    member = actor_for(world.users.add("Alice Mukamana"))
    with pytest.raises(AuthorizationError):
        world.container.event_service.create_event(member, {})


def test_partial_update_keeps_other_fields(world, admin):
    svc = world.container.event_service
    eid = _add(world, date(2024, 5, 3), name="Old name")
    updated = svc.update_event(admin, eid, {"name": "New name", "type": None, "date": ""})
    assert updated.name == "New name"
    assert updated.date == date(2024, 5, 3)
    assert updated.end_time == time(11, 0)


def test_get_missing_event(world):
    with pytest.raises(NotFoundError):
        world.container.event_service.get_event(7)


def test_listing_sweeps_past_unreferenced_events(world, admin, fixed_now):
    svc = world.container.event_service
    past_free = _add(world, date(2024, 4, 20))
    past_used = _add(world, date(2024, 4, 21))
    later_today = _add(world, fixed_now.date(), start=time(18, 0), end=time(20, 0))
    earlier_today = _add(world, fixed_now.date(), start=time(8, 0), end=time(10, 0))
    future = _add(world, date(2024, 5, 2))

    u = world.users.add("Alice Mukamana")
    world.container.attendance_service.save_attendance(admin, past_used, {str(u.user_id): "Present"})

    listed = svc.list_events(now=fixed_now)

    assert [e.event_id for e in listed] == [later_today, future]
    assert world.events.get_by_id(past_free) is None
    assert world.events.get_by_id(earlier_today) is None
    # Referenced by a record: kept, but not listed.
    assert world.events.get_by_id(past_used) is not None


def test_listing_orders_by_date_then_start(world, fixed_now):
    b = _add(world, date(2024, 5, 3), start=time(10, 0), end=time(11, 0))
    a = _add(world, date(2024, 5, 3), start=time(8, 0), end=time(9, 0))
    c = _add(world, date(2024, 5, 2))
    listed = world.container.event_service.list_events(now=fixed_now)
    assert [e.event_id for e in listed] == [c, a, b]


def test_admin_may_delete_referenced_event(world, admin):
    eid = _add(world, date(2024, 5, 3))
    u = world.users.add("Alice Mukamana")
    world.container.attendance_service.save_attendance(admin, eid, {str(u.user_id): "Present"})

    world.container.event_service.delete_event(admin, eid)

    assert world.events.get_by_id(eid) is None
    assert world.attendance.get_bucket(u.user_id).records[0].event_id == eid


def test_cleanup_reports_count(world):
    _add(world, date(2024, 4, 1))
    _add(world, date(2024, 4, 2))
    assert world.container.event_service.cleanup_past_events(now=datetime(2024, 5, 1)) == 2
