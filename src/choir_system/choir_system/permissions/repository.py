from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PermissionStatus
from .model import Permission


class PermissionRepository(Protocol):
    def create_permission(
        self,
        *,
        user_id: int,
        user_name: str,
        start_date: date,
        end_date: date,
        reason: str,
        details: str,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, permission_id: int) -> Optional[Permission]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Permission]:
        """Newest first, with reviewer names."""

        raise NotImplementedError

    def list_for_user(self, user_id: int, *, status: Optional[PermissionStatus] = None) -> Sequence[Permission]:
        """Newest first."""

        raise NotImplementedError

    def decide(
        self,
        *,
        permission_id: int,
        status: PermissionStatus,
        reviewed_by: int,
        reviewed_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def list_approved_covering(self, day: date) -> Sequence[Permission]:
        """Approved permissions whose range contains `day`, for users that still exist."""

        raise NotImplementedError
