from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Event, EventInput


class EventRepository(Protocol):
    def create_event(self, data: EventInput) -> int:
        raise NotImplementedError

    def get_by_id(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def update_event(self, event_id: int, data: EventInput) -> bool:
        raise NotImplementedError

    def delete_by_id(self, event_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Event]:
        """Ordered by date then start time."""

        raise NotImplementedError

    def list_on_or_before(self, day: date) -> Sequence[Event]:
        """Candidates for the cleanup sweep."""

        raise NotImplementedError
