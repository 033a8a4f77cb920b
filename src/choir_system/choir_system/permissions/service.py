from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.access import ensure_admin
from ..common.datetime_utils import now_local, require_date
from ..common.validators import optional_text, require_non_empty
from ..core.enums import PermissionStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Actor
from .model import Permission
from .repository import PermissionRepository

logger = logging.getLogger(__name__)

DECISION_STATUSES = (PermissionStatus.APPROVED, PermissionStatus.REJECTED)


class PermissionService:
    """Absence requests and the date-range lookups attendance relies on."""

    def __init__(self, permissions: PermissionRepository):
        self._permissions = permissions

    def create_permission(
        self,
        actor: Actor,
        *,
        start_date,
        end_date,
        reason: str,
        details: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Permission:
        start = require_date(start_date, "Start date")
        end = require_date(end_date, "End date")
        if end < start:
            raise ValidationError("End date must be on or after start date")
        reason = require_non_empty(reason, "Reason")
        today = today or now_local().date()

        # One open request at a time: a pending request that has not ended blocks new ones.
        pending = [
            p
            for p in self._permissions.list_for_user(actor.user_id, status=PermissionStatus.PENDING)
            if p.end_date >= today
        ]
        if pending:
            raise ValidationError(
                "You already have a pending permission request. "
                "Please wait for it to be reviewed before submitting a new one."
            )

        for existing in self._permissions.list_for_user(actor.user_id, status=PermissionStatus.APPROVED):
            if existing.overlaps(start, end):
                raise ValidationError(
                    f"You already have an approved permission from {existing.start_date:%Y-%m-%d} "
                    f"to {existing.end_date:%Y-%m-%d} for: {existing.reason}. "
                    "You cannot request overlapping permissions."
                )

        permission_id = self._permissions.create_permission(
            user_id=actor.user_id,
            user_name=actor.name,
            start_date=start,
            end_date=end,
            reason=reason,
            details=optional_text(details) or "",
        )
        created = self._permissions.get_by_id(permission_id)
        if not created:
            raise NotFoundError("Permission not found")
        return created

    def get_all_permissions(self, actor: Actor) -> Sequence[Permission]:
        ensure_admin(actor)
        return self._permissions.list_all()

    def get_user_permissions(self, actor: Actor) -> Sequence[Permission]:
        return self._permissions.list_for_user(actor.user_id)

    def update_permission_status(
        self,
        actor: Actor,
        permission_id: int,
        status,
        *,
        now: Optional[datetime] = None,
    ) -> Permission:
        ensure_admin(actor)
        try:
            target = PermissionStatus(status)
        except ValueError:
            target = None
        if target not in DECISION_STATUSES:
            raise ValidationError("Invalid status")

        if not self._permissions.get_by_id(int(permission_id)):
            raise NotFoundError("Permission not found")

        self._permissions.decide(
            permission_id=int(permission_id),
            status=target,
            reviewed_by=actor.user_id,
            reviewed_at=now or now_local(),
        )
        logger.info("Permission %s %s by user %s", permission_id, target.value, actor.user_id)

        updated = self._permissions.get_by_id(int(permission_id))
        if not updated:
            raise NotFoundError("Permission not found")
        return updated

    def get_active_permissions_for_date(self, day) -> Sequence[Permission]:
        day = require_date(day, "Date")
        return [p for p in self._permissions.list_approved_covering(day) if p.covers(day)]

    def active_user_ids_for_date(self, day: date) -> set[int]:
        return {p.user_id for p in self.get_active_permissions_for_date(day)}
