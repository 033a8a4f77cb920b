from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_date, format_datetime
from ..core.enums import PermissionStatus


@dataclass(frozen=True)
class Permission:
    """Absence request covering [start_date, end_date] inclusive."""

    permission_id: int
    user_id: int
    user_name: str
    start_date: date
    end_date: date
    reason: str
    details: str
    status: PermissionStatus
    created_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    reviewer_name: Optional[str] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and start <= self.end_date


def permission_dict(p: Permission) -> dict:
    return {
        "_id": p.permission_id,
        "userId": p.user_id,
        "userName": p.user_name,
        "startDate": format_date(p.start_date),
        "endDate": format_date(p.end_date),
        "reason": p.reason,
        "details": p.details,
        "status": p.status.value,
        "createdAt": format_datetime(p.created_at),
        "reviewedBy": (
            {"_id": p.reviewed_by, "name": p.reviewer_name} if p.reviewed_by is not None else None
        ),
        "reviewedAt": format_datetime(p.reviewed_at),
    }


def active_permission_dict(p: Permission) -> dict:
    """Shape used by the attendance screen for a given day."""
    return {
        "userId": p.user_id,
        "userName": p.user_name,
        "startDate": format_date(p.start_date),
        "endDate": format_date(p.end_date),
        "reason": p.reason,
        "details": p.details,
    }
