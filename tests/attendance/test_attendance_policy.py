from __future__ import annotations

from datetime import date

import pytest

from src.choir_system.choir_system.attendance.model import AttendanceRecord, EventSnapshot
from src.choir_system.choir_system.attendance.policy import (
    attendance_percentage,
    resolve_effective_status,
    summarize,
    upsert_record,
)
from src.choir_system.choir_system.core.enums import AttendanceStatus

P, A, E = AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.EXCUSED


def _rec(event_id: int, status: AttendanceStatus) -> AttendanceRecord:
    return AttendanceRecord(
        event_id=event_id,
        snapshot=EventSnapshot(name=f"Event {event_id}", date=date(2024, 5, event_id)),
        status=status,
    )


@pytest.mark.parametrize("submitted", [P, A, E, None])
def test_permission_always_excuses(submitted):
    assert resolve_effective_status(submitted, True) == E


def test_submitted_status_kept_without_permission():
    assert resolve_effective_status(P, False) == P
    assert resolve_effective_status(E, False) == E


def test_missing_submission_defaults_to_absent():
    assert resolve_effective_status(None, False) == A


def test_upsert_replaces_in_place_and_keeps_order():
    records = [_rec(1, P), _rec(2, A), _rec(3, P)]
    out = upsert_record(records, _rec(2, P))
    assert [(r.event_id, r.status) for r in out] == [(1, P), (2, P), (3, P)]


def test_upsert_appends_new_event():
    out = upsert_record([_rec(1, P)], _rec(4, A))
    assert [r.event_id for r in out] == [1, 4]


def test_upsert_collapses_duplicates():
    out = upsert_record([_rec(1, P), _rec(2, A), _rec(1, A)], _rec(1, E))
    assert [(r.event_id, r.status) for r in out] == [(1, E), (2, A)]


@pytest.mark.parametrize(
    "attended,total,expected",
    [(0, 0, 0), (0, 5, 0), (5, 5, 100), (2, 3, 67), (1, 3, 33), (1, 2, 50), (1, 8, 13)],
)
def test_percentage_rounds_half_up(attended, total, expected):
    assert attendance_percentage(attended, total) == expected


def test_summarize_counts_excused_as_attended():
    summary = summarize([_rec(1, P), _rec(2, A), _rec(3, E), _rec(4, A)])
    assert summary.to_dict() == {
        "Present": 1,
        "Absent": 2,
        "Excused": 1,
        "totalEvents": 4,
        "percentage": 50,
    }


def test_summarize_empty():
    assert summarize([]).to_dict() == {
        "Present": 0,
        "Absent": 0,
        "Excused": 0,
        "totalEvents": 0,
        "percentage": 0,
    }


def test_record_wire_shape():
    rec = _rec(1, P)
    assert rec.to_dict() == {"eventId": 1, "event": "Event 1", "date": "2024-05-01", "status": "Present"}
    assert AttendanceRecord.from_dict(rec.to_dict()) == rec
