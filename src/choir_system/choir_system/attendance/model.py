from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Tuple

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class EventSnapshot:
    """Event name and date copied into each record so history survives deletion."""

    name: str
    date: date


@dataclass(frozen=True)
class AttendanceRecord:
    event_id: int
    snapshot: EventSnapshot
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {
            "eventId": self.event_id,
            "event": self.snapshot.name,
            "date": self.snapshot.date.isoformat(),
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AttendanceRecord":
        return cls(
            event_id=int(data["eventId"]),
            snapshot=EventSnapshot(
                name=data.get("event") or "",
                date=date.fromisoformat(data["date"]),
            ),
            status=AttendanceStatus(data["status"]),
        )


@dataclass(frozen=True)
class AttendanceBucket:
    """All attendance records of one user, in insertion order."""

    user_id: int
    name: str
    records: Tuple[AttendanceRecord, ...] = field(default_factory=tuple)

    def record_for(self, event_id: int):
        for record in self.records:
            if record.event_id == event_id:
                return record
        return None


@dataclass(frozen=True)
class AttendanceSummary:
    present: int = 0
    absent: int = 0
    excused: int = 0
    total_events: int = 0
    percentage: int = 0

    def to_dict(self) -> dict:
        return {
            "Present": self.present,
            "Absent": self.absent,
            "Excused": self.excused,
            "totalEvents": self.total_events,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class SaveResult:
    updated_count: int
    excused_count: int = 0
