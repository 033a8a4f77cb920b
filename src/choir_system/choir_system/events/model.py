from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import format_hhmm
from ..core.enums import EventType


@dataclass(frozen=True)
class Event:
    event_id: int
    name: str
    type: EventType
    date: date
    start_time: time
    end_time: time
    created_at: Optional[datetime] = None

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.date, self.start_time)

    @property
    def ends_at(self) -> datetime:
        return datetime.combine(self.date, self.end_time)

    def has_ended(self, now: datetime) -> bool:
        return self.ends_at < now


@dataclass(frozen=True)
class EventInput:
    """Validated fields for insert/update."""

    name: str
    type: EventType
    date: date
    start_time: time
    end_time: time


def event_dict(e: Event) -> dict:
    return {
        "_id": e.event_id,
        "name": e.name,
        "type": e.type.value,
        "date": e.date.isoformat(),
        "startTime": format_hhmm(e.start_time),
        "endTime": format_hhmm(e.end_time),
    }
