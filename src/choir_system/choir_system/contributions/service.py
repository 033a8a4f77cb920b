from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence, Tuple

from ..common.access import ensure_role
from ..common.datetime_utils import now_local, require_date
from ..common.validators import optional_text, require_non_empty, require_positive_amount
from ..core.enums import FINANCE_ROLES, ContributionStatus, UserStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Actor, User
from ..users.repository import UserRepository
from .model import Contribution, MemberPayment, Payment, PaymentEntry
from .repository import ContributionRepository

logger = logging.getLogger(__name__)

MARKED_AS_PAID_NOTE = "Marked as paid"


def _ensure_finance(actor: Actor) -> None:
    ensure_role(actor, FINANCE_ROLES, "Access denied. Finance role required.")


class ContributionService:
    """Contribution campaigns and per-member payment ledgers."""

    def __init__(self, contributions: ContributionRepository, users: UserRepository):
        self._contributions = contributions
        self._users = users

    def _require_contribution(self, contribution_id: int) -> Contribution:
        contribution = self._contributions.get_by_id(int(contribution_id))
        if not contribution:
            raise NotFoundError("Contribution not found")
        return contribution

    def _require_approved_member(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_approved:
            raise NotFoundError("User not found or not approved")
        return user

    def create_contribution(
        self,
        actor: Actor,
        *,
        title: str,
        amount_per_person,
        start_date,
        end_date,
        description: Optional[str] = None,
    ) -> Contribution:
        _ensure_finance(actor)
        title = require_non_empty(title, "Title")
        amount = require_positive_amount(amount_per_person, "Amount per person")
        start = require_date(start_date, "Start date")
        end = require_date(end_date, "End date")
        if end <= start:
            raise ValidationError("End date must be after start date")

        contribution_id = self._contributions.create_contribution(
            title=title,
            description=optional_text(description) or "",
            amount_per_person=amount,
            start_date=start,
            end_date=end,
            created_by=actor.user_id,
        )
        logger.info("Contribution %s created by %s", contribution_id, actor.user_id)
        return self._require_contribution(contribution_id)

    def list_contributions(self) -> Sequence[Contribution]:
        return self._contributions.list_all()

    def get_active_contribution(self, actor: Actor) -> Optional[Tuple[Contribution, Optional[Payment]]]:
        """Latest active contribution with the caller's own payment, or None."""
        contribution = self._contributions.latest_active()
        if not contribution:
            return None
        return contribution, self._contributions.get_payment(contribution.contribution_id, actor.user_id)

    def close_contribution(self, actor: Actor, contribution_id: int) -> Contribution:
        _ensure_finance(actor)
        contribution = self._require_contribution(contribution_id)
        self._contributions.set_status(contribution.contribution_id, ContributionStatus.CLOSED)
        logger.info("Contribution %s closed by %s", contribution.contribution_id, actor.user_id)
        return self._require_contribution(contribution.contribution_id)

    def get_member_payments(self, contribution_id: int) -> Tuple[Contribution, Sequence[MemberPayment]]:
        contribution = self._require_contribution(contribution_id)
        payments = {p.user_id: p for p in self._contributions.list_payments(contribution.contribution_id)}
        members = sorted(self._users.list_by_status(UserStatus.APPROVED), key=lambda u: u.name.lower())
        return contribution, [MemberPayment(user=u, payment=payments.get(u.user_id)) for u in members]

    def add_payment(
        self,
        actor: Actor,
        contribution_id: int,
        user_id: int,
        *,
        amount,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Payment:
        _ensure_finance(actor)
        value = require_positive_amount(amount, "Payment amount")
        user = self._require_approved_member(user_id)
        contribution = self._require_contribution(contribution_id)

        payment = self._contributions.append_payment(
            contribution.contribution_id,
            user.user_id,
            PaymentEntry(amount=value, date_paid=now or now_local(), notes=optional_text(notes) or ""),
            amount_due=contribution.amount_per_person,
        )
        logger.info(
            "Payment of %s recorded for user %s on contribution %s",
            value,
            user.user_id,
            contribution.contribution_id,
        )
        return payment

    def mark_as_paid(
        self,
        actor: Actor,
        contribution_id: int,
        user_id: int,
        *,
        amount=None,
        now: Optional[datetime] = None,
    ) -> Payment:
        _ensure_finance(actor)
        user = self._require_approved_member(user_id)
        contribution = self._require_contribution(contribution_id)

        current = self._contributions.get_payment(contribution.contribution_id, user.user_id)
        paid = current.amount_paid if current else 0
        remaining = contribution.amount_per_person - paid
        if remaining <= 0:
            raise ValidationError("Payment is already complete")

        value = remaining if amount in (None, "", 0) else require_positive_amount(amount, "Payment amount")
        return self._contributions.append_payment(
            contribution.contribution_id,
            user.user_id,
            PaymentEntry(amount=value, date_paid=now or now_local(), notes=MARKED_AS_PAID_NOTE),
            amount_due=contribution.amount_per_person,
        )
