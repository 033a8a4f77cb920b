from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_datetime
from ..core.enums import AnnouncementState, AnnouncementType


def announcement_state(
    now: datetime, start: Optional[datetime], end: Optional[datetime]
) -> AnnouncementState:
    if start is not None and start > now:
        return AnnouncementState.SCHEDULED
    if end is not None and end < now:
        return AnnouncementState.EXPIRED
    return AnnouncementState.ACTIVE


@dataclass(frozen=True)
class Announcement:
    announcement_id: int
    type: AnnouncementType
    title: str
    author: str
    content: str
    announced_at: datetime
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    def state(self, now: datetime) -> AnnouncementState:
        return announcement_state(now, self.start_time, self.end_time)


@dataclass(frozen=True)
class AnnouncementInput:
    type: AnnouncementType
    title: str
    content: str
    start_time: Optional[datetime]
    end_time: Optional[datetime]


def announcement_dict(a: Announcement, now: datetime) -> dict:
    return {
        "_id": a.announcement_id,
        "type": a.type.value,
        "title": a.title,
        "author": a.author,
        "content": a.content,
        "date": format_datetime(a.announced_at),
        "startTime": format_datetime(a.start_time),
        "endTime": format_datetime(a.end_time),
        "state": a.state(now).value,
    }
