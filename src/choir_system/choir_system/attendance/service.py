from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Sequence, Tuple

from ..common.access import ensure_admin, ensure_self_or_admin
from ..core.enums import NO_EVENT, AttendanceStatus, UserStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..events.repository import EventRepository
from ..permissions.service import PermissionService
from ..users.model import Actor, User
from ..users.repository import UserRepository
from .model import AttendanceRecord, AttendanceSummary, EventSnapshot, SaveResult
from .policy import resolve_effective_status, summarize
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserAttendance:
    user: User
    records: Tuple[AttendanceRecord, ...]


def _parse_submitted(submitted: Mapping) -> Dict[int, AttendanceStatus]:
    """Validate a {user_id: status} map; keys may arrive as strings from JSON."""
    if not isinstance(submitted, Mapping):
        raise ValidationError("Attendance must be an object of userId -> status")

    out: Dict[int, AttendanceStatus] = {}
    for raw_id, raw_status in submitted.items():
        if raw_status == NO_EVENT:
            raise ValidationError(f"'{NO_EVENT}' cannot be saved as an attendance status")
        try:
            status = AttendanceStatus(raw_status)
        except ValueError:
            raise ValidationError(f"Invalid attendance status: {raw_status!r}")
        try:
            out[int(raw_id)] = status
        except (TypeError, ValueError):
            # Not a user id; no approved user can match it.
            continue
    return out


class AttendanceService:
    """Attendance reconciliation and the views derived from per-user buckets."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        events: EventRepository,
        permissions: PermissionService,
    ):
        self._attendance = attendance
        self._users = users
        self._events = events
        self._permissions = permissions

    def _approved_ids(self) -> set[int]:
        return {u.user_id for u in self._users.list_by_status(UserStatus.APPROVED)}

    def save_attendance(self, actor: Actor, event_id: int, submitted: Mapping) -> SaveResult:
        ensure_admin(actor)
        statuses = _parse_submitted(submitted)

        event = self._events.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("Event not found")

        approved = self._users.list_by_status(UserStatus.APPROVED)
        excused_ids = self._permissions.active_user_ids_for_date(event.date)
        snapshot = EventSnapshot(name=event.name, date=event.date)

        entries: Dict[int, tuple[str, AttendanceRecord]] = {}
        excused = 0
        for user in approved:
            has_permission = user.user_id in excused_ids
            status = resolve_effective_status(statuses.get(user.user_id), has_permission)
            if has_permission:
                excused += 1
            entries[user.user_id] = (
                user.name,
                AttendanceRecord(event_id=event.event_id, snapshot=snapshot, status=status),
            )

        updated = self._attendance.save_event_records(event.event_id, entries)
        logger.info(
            "Attendance saved for event %s: %d bucket(s) updated, %d excused by permission",
            event.event_id,
            updated,
            excused,
        )
        return SaveResult(updated_count=updated, excused_count=excused)

    def get_attendance_by_event(self, event_id: int) -> Dict[int, AttendanceStatus]:
        event_id = int(event_id)
        approved = self._approved_ids()
        out: Dict[int, AttendanceStatus] = {}
        for bucket in self._attendance.list_buckets():
            if bucket.user_id not in approved:
                continue
            record = bucket.record_for(event_id)
            if record:
                out[bucket.user_id] = record.status
        return out

    def get_all_attendances(self, actor: Actor) -> Dict[int, Dict[int, AttendanceStatus]]:
        """Every stored record keyed by event then user; no approval filter."""
        ensure_admin(actor)
        out: Dict[int, Dict[int, AttendanceStatus]] = {}
        for bucket in self._attendance.list_buckets():
            for record in bucket.records:
                out.setdefault(record.event_id, {})[bucket.user_id] = record.status
        return out

    def get_detailed_attendances(self, actor: Actor) -> Dict[int, UserAttendance]:
        ensure_admin(actor)
        users = {u.user_id: u for u in self._users.list_all()}
        return {
            bucket.user_id: UserAttendance(user=users[bucket.user_id], records=bucket.records)
            for bucket in self._attendance.list_buckets()
            if bucket.user_id in users
        }

    def get_user_attendance(self, actor: Actor, user_id: int) -> Sequence[AttendanceRecord]:
        ensure_self_or_admin(actor, user_id)
        bucket = self._attendance.get_bucket(int(user_id))
        if bucket:
            return bucket.records
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")
        return ()

    def get_attendance_summary(self, actor: Actor, user_id: int) -> AttendanceSummary:
        return summarize(self.get_user_attendance(actor, user_id))

    def get_all_attendance_summaries(self, actor: Actor) -> Dict[int, AttendanceSummary]:
        ensure_admin(actor)
        return {bucket.user_id: summarize(bucket.records) for bucket in self._attendance.list_buckets()}
