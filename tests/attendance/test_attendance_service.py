from __future__ import annotations

from datetime import date, time

import pytest

from src.choir_system.choir_system.core.enums import AttendanceStatus, EventType, Role, UserStatus
from src.choir_system.choir_system.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.choir_system.choir_system.events.model import EventInput
from tests.fakes import FakeWorld, actor_for

P, A, E = AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.EXCUSED


@pytest.fixture
def world():
    return FakeWorld()


@pytest.fixture
def president(world):
    return world.users.add("Grace President", role=Role.PRESIDENT)


def _event(world, day=date(2024, 5, 1), name="Sunday Service"):
    eid = world.events.create_event(
        EventInput(name=name, type=EventType.SERVICE, date=day, start_time=time(9, 0), end_time=time(11, 0))
    )
    return world.events.get_by_id(eid)


def test_permission_overrides_submitted_present(world, president):
    svc = world.container.attendance_service
    u = world.users.add("Jean Uwimana")
    world.permissions.add(u, date(2024, 4, 28), date(2024, 5, 3))
    event = _event(world)

    svc.save_attendance(actor_for(president), event.event_id, {str(u.user_id): "Present"})

    assert world.attendance.get_bucket(u.user_id).record_for(event.event_id).status == E


def test_unsubmitted_approved_user_defaults_to_absent(world, president):
    svc = world.container.attendance_service
    a = world.users.add("Alice Mukamana")
    b = world.users.add("Bob Habimana")
    event = _event(world)

    result = svc.save_attendance(actor_for(president), event.event_id, {str(a.user_id): "Present"})

    by_event = svc.get_attendance_by_event(event.event_id)
    assert by_event[a.user_id] == P
    assert by_event[b.user_id] == A
    # The president is approved too, and gets a record.
    assert by_event[president.user_id] == A
    assert result.updated_count == 3


def test_second_save_replaces_record(world, president):
    svc = world.container.attendance_service
    u = world.users.add("Alice Mukamana")
    event = _event(world)
    actor = actor_for(president)

    svc.save_attendance(actor, event.event_id, {str(u.user_id): "Present"})
    svc.save_attendance(actor, event.event_id, {str(u.user_id): "Absent"})

    records = world.attendance.get_bucket(u.user_id).records
    assert [(r.event_id, r.status) for r in records] == [(event.event_id, A)]


def test_save_is_idempotent(world, president):
    svc = world.container.attendance_service
    u = world.users.add("Alice Mukamana")
    event = _event(world)
    actor = actor_for(president)
    submitted = {str(u.user_id): "Present", str(president.user_id): "Excused"}

    svc.save_attendance(actor, event.event_id, submitted)
    once = dict(world.attendance.buckets)
    svc.save_attendance(actor, event.event_id, submitted)

    assert world.attendance.buckets == once


def test_pending_users_get_no_record(world, president):
    svc = world.container.attendance_service
    pending = world.users.add("Paul Pending", status=UserStatus.PENDING)
    event = _event(world)

    svc.save_attendance(actor_for(president), event.event_id, {str(pending.user_id): "Present"})

    assert world.attendance.get_bucket(pending.user_id) is None


def test_records_keep_event_snapshot_after_event_deleted(world, president):
    svc = world.container.attendance_service
    u = world.users.add("Alice Mukamana")
    event = _event(world, name="Easter Vigil")
    svc.save_attendance(actor_for(president), event.event_id, {str(u.user_id): "Present"})

    world.events.delete_by_id(event.event_id)

    records = svc.get_user_attendance(actor_for(u), u.user_id)
    assert records[0].snapshot.name == "Easter Vigil"
    assert records[0].snapshot.date == date(2024, 5, 1)


def test_by_event_filters_unapproved_but_all_does_not(world, president):
    svc = world.container.attendance_service
    u = world.users.add("Alice Mukamana")
    event = _event(world)
    svc.save_attendance(actor_for(president), event.event_id, {str(u.user_id): "Present"})

    world.users.set_status(u.user_id, UserStatus.REJECTED)

    assert u.user_id not in svc.get_attendance_by_event(event.event_id)
    assert svc.get_all_attendances(actor_for(president))[event.event_id][u.user_id] == P


def test_detailed_skips_deleted_users(world, president):
    svc = world.container.attendance_service
    u = world.users.add("Alice Mukamana")
    event = _event(world)
    svc.save_attendance(actor_for(president), event.event_id, {})

    world.users.delete_by_id(u.user_id)
    detailed = svc.get_detailed_attendances(actor_for(president))

    assert set(detailed) == {president.user_id}
    assert detailed[president.user_id].records[0].status == A


def test_invalid_status_rejected_before_any_write(world, president):
    svc = world.container.attendance_service
    u = world.users.add("Alice Mukamana")
    event = _event(world)

    with pytest.raises(ValidationError):
        svc.save_attendance(actor_for(president), event.event_id, {str(u.user_id): "No Event"})
    with pytest.raises(ValidationError):
        svc.save_attendance(actor_for(president), event.event_id, {str(u.user_id): "Late"})

    assert world.attendance.buckets == {}


def test_missing_event_is_not_found(world, president):
    with pytest.raises(NotFoundError):
        world.container.attendance_service.save_attendance(actor_for(president), 999, {})
    assert world.attendance.buckets == {}


def test_only_admin_tier_can_save(world):
    accountant = world.users.add("Ann Accountant", role=Role.ACCOUNTANT)
    event = _event(world)
    with pytest.raises(AuthorizationError):
        world.container.attendance_service.save_attendance(actor_for(accountant), event.event_id, {})


def test_failed_write_leaves_buckets_untouched(world, president):
    svc = world.container.attendance_service
    a = world.users.add("Alice Mukamana")
    b = world.users.add("Bob Habimana")
    first = _event(world)
    svc.save_attendance(actor_for(president), first.event_id, {})
    before = dict(world.attendance.buckets)

    world.attendance.fail_on_user = b.user_id
    second = _event(world, day=date(2024, 5, 5))
    with pytest.raises(StorageError):
        svc.save_attendance(actor_for(president), second.event_id, {str(a.user_id): "Present"})

    assert world.attendance.buckets == before


def test_summary_for_user(world, president):
    svc = world.container.attendance_service
    u = world.users.add("Alice Mukamana")
    actor = actor_for(president)
    for day, status in [(1, "Present"), (2, "Absent"), (3, "Excused")]:
        event = _event(world, day=date(2024, 5, day))
        svc.save_attendance(actor, event.event_id, {str(u.user_id): status})

    summary = svc.get_attendance_summary(actor_for(u), u.user_id)
    assert (summary.present, summary.absent, summary.excused, summary.total_events) == (1, 1, 1, 3)
    assert summary.percentage == 67


def test_summary_zero_for_user_without_bucket(world):
    u = world.users.add("Alice Mukamana")
    summary = world.container.attendance_service.get_attendance_summary(actor_for(u), u.user_id)
    assert summary.total_events == 0
    assert summary.percentage == 0


def test_summary_unknown_user_not_found(world, president):
    with pytest.raises(NotFoundError):
        world.container.attendance_service.get_attendance_summary(actor_for(president), 404)


def test_members_cannot_read_other_members(world):
    a = world.users.add("Alice Mukamana")
    b = world.users.add("Bob Habimana")
    with pytest.raises(AuthorizationError):
        world.container.attendance_service.get_attendance_summary(actor_for(a), b.user_id)


def test_all_summaries_cover_every_bucket(world, president):
    svc = world.container.attendance_service
    u = world.users.add("Alice Mukamana")
    event = _event(world)
    svc.save_attendance(actor_for(president), event.event_id, {str(u.user_id): "Present"})

    summaries = svc.get_all_attendance_summaries(actor_for(president))
    assert summaries[u.user_id].percentage == 100
    assert summaries[president.user_id].percentage == 0
