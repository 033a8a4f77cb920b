from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.access import ensure_admin
from ..common.datetime_utils import now_local, require_date, require_hhmm
from ..common.validators import require_enum, require_non_empty
from ..core.enums import EventType
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Actor
from .model import Event, EventInput
from .repository import EventRepository

logger = logging.getLogger(__name__)


def _validate(data: dict) -> EventInput:
    start = require_hhmm(data.get("start_time"), "Start time")
    end = require_hhmm(data.get("end_time"), "End time")
    if end <= start:
        raise ValidationError("End time must be after start time")
    return EventInput(
        name=require_non_empty(data.get("name"), "Name"),
        type=require_enum(EventType, data.get("type"), "type"),
        date=require_date(data.get("date"), "Date"),
        start_time=start,
        end_time=end,
    )


class EventService:
    """Event scheduling.

    Past events are swept on listing, unless an attendance bucket still
    references them.
    """

    def __init__(self, events: EventRepository, attendance):
        self._events = events
        self._attendance = attendance

    def _require_event(self, event_id: int) -> Event:
        event = self._events.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("Event not found")
        return event

    def create_event(self, actor: Actor, data: dict) -> Event:
        ensure_admin(actor)
        event_id = self._events.create_event(_validate(data))
        return self._require_event(event_id)

    def get_event(self, event_id: int) -> Event:
        return self._require_event(event_id)

    def update_event(self, actor: Actor, event_id: int, data: dict) -> Event:
        ensure_admin(actor)
        current = self._require_event(event_id)
        merged = {
            "name": current.name,
            "type": current.type.value,
            "date": current.date,
            "start_time": current.start_time,
            "end_time": current.end_time,
        }
        merged.update({k: v for k, v in data.items() if v not in (None, "")})
        self._events.update_event(current.event_id, _validate(merged))
        return self._require_event(current.event_id)

    def delete_event(self, actor: Actor, event_id: int) -> None:
        ensure_admin(actor)
        event = self._require_event(event_id)
        self._events.delete_by_id(event.event_id)
        logger.info("Event %s deleted by %s", event.event_id, actor.user_id)

    def cleanup_past_events(self, now: Optional[datetime] = None) -> int:
        """Delete ended events that no attendance record points at."""
        now = now or now_local()
        ended = [e for e in self._events.list_on_or_before(now.date()) if e.has_ended(now)]
        if not ended:
            return 0

        referenced = self._attendance.referenced_event_ids()
        deleted = 0
        for event in ended:
            if event.event_id in referenced:
                continue
            if self._events.delete_by_id(event.event_id):
                deleted += 1
        if deleted:
            logger.info("Removed %d past event(s) without attendance", deleted)
        return deleted

    def list_events(self, now: Optional[datetime] = None) -> Sequence[Event]:
        now = now or now_local()
        self.cleanup_past_events(now)
        upcoming = [e for e in self._events.list_all() if not e.has_ended(now)]
        return sorted(upcoming, key=lambda e: (e.date, e.start_time))
