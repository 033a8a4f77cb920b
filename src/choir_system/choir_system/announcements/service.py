from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.access import ensure_admin
from ..common.datetime_utils import now_local, optional_datetime
from ..common.validators import optional_text, require_enum, require_non_empty
from ..core.enums import AnnouncementType
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Actor
from .model import Announcement, AnnouncementInput
from .repository import AnnouncementRepository


def _check_window(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start and end and end <= start:
        raise ValidationError("End time must be after start time")


class AnnouncementService:
    def __init__(self, announcements: AnnouncementRepository):
        self._announcements = announcements

    def _require(self, announcement_id: int) -> Announcement:
        announcement = self._announcements.get_by_id(int(announcement_id))
        if not announcement:
            raise NotFoundError("Announcement not found")
        return announcement

    def list_announcements(self, now: Optional[datetime] = None) -> Sequence[Announcement]:
        return self._announcements.list_not_expired(now or now_local())

    def get_announcement(self, announcement_id: int) -> Announcement:
        return self._require(announcement_id)

    def create_announcement(
        self,
        actor: Actor,
        data: dict,
        *,
        now: Optional[datetime] = None,
    ) -> Announcement:
        start = optional_datetime(data.get("start_time"), "Start time")
        end = optional_datetime(data.get("end_time"), "End time")
        _check_window(start, end)
        payload = AnnouncementInput(
            type=require_enum(AnnouncementType, data.get("type") or AnnouncementType.GENERAL.value, "type"),
            title=require_non_empty(data.get("title"), "Title"),
            content=require_non_empty(data.get("content"), "Content"),
            start_time=start,
            end_time=end,
        )
        announcement_id = self._announcements.create_announcement(
            payload, author=actor.name, announced_at=now or now_local()
        )
        return self._require(announcement_id)

    def update_announcement(self, actor: Actor, announcement_id: int, data: dict) -> Announcement:
        """Partial update; blank fields keep their current value."""
        ensure_admin(actor)
        current = self._require(announcement_id)

        start = optional_datetime(data.get("start_time"), "Start time") or current.start_time
        end = optional_datetime(data.get("end_time"), "End time") or current.end_time
        _check_window(start, end)

        type_value = data.get("type")
        payload = AnnouncementInput(
            type=require_enum(AnnouncementType, type_value, "type") if type_value else current.type,
            title=optional_text(data.get("title")) or current.title,
            content=optional_text(data.get("content")) or current.content,
            start_time=start,
            end_time=end,
        )
        self._announcements.update_announcement(current.announcement_id, payload)
        return self._require(current.announcement_id)

    def delete_announcement(self, actor: Actor, announcement_id: int) -> None:
        ensure_admin(actor)
        current = self._require(announcement_id)
        self._announcements.delete_by_id(current.announcement_id)
