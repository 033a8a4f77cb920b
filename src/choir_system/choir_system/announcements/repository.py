from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Announcement, AnnouncementInput


class AnnouncementRepository(Protocol):
    def create_announcement(self, data: AnnouncementInput, *, author: str, announced_at: datetime) -> int:
        raise NotImplementedError

    def get_by_id(self, announcement_id: int) -> Optional[Announcement]:
        raise NotImplementedError

    def list_not_expired(self, now: datetime) -> Sequence[Announcement]:
        """Announcements without an end, or ending at/after `now`; newest first."""

        raise NotImplementedError

    def update_announcement(self, announcement_id: int, data: AnnouncementInput) -> bool:
        raise NotImplementedError

    def delete_by_id(self, announcement_id: int) -> bool:
        raise NotImplementedError
