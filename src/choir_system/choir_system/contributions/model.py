from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple

from ..common.datetime_utils import format_date, format_datetime
from ..core.enums import ContributionStatus
from ..users.model import User


@dataclass(frozen=True)
class Contribution:
    contribution_id: int
    title: str
    description: str
    amount_per_person: Decimal
    start_date: date
    end_date: date
    status: ContributionStatus
    created_by: Optional[int] = None
    created_by_name: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PaymentEntry:
    amount: Decimal
    date_paid: datetime
    notes: str = ""


@dataclass(frozen=True)
class Payment:
    """One member's running total for one contribution."""

    payment_id: int
    contribution_id: int
    user_id: int
    amount_paid: Decimal
    is_paid: bool
    history: Tuple[PaymentEntry, ...] = field(default_factory=tuple)

    @property
    def last_paid_at(self) -> Optional[datetime]:
        return self.history[-1].date_paid if self.history else None


@dataclass(frozen=True)
class MemberPayment:
    user: User
    payment: Optional[Payment]


def contribution_dict(c: Contribution) -> dict:
    return {
        "_id": c.contribution_id,
        "title": c.title,
        "description": c.description,
        "amountPerPerson": float(c.amount_per_person),
        "startDate": format_date(c.start_date),
        "endDate": format_date(c.end_date),
        "status": c.status.value,
        "createdBy": {"_id": c.created_by, "name": c.created_by_name} if c.created_by is not None else None,
        "createdAt": format_datetime(c.created_at),
    }


def payment_dict(p: Payment) -> dict:
    return {
        "_id": p.payment_id,
        "contributionId": p.contribution_id,
        "userId": p.user_id,
        "amountPaid": float(p.amount_paid),
        "isPaid": p.is_paid,
        "paymentHistory": [
            {"amount": float(e.amount), "datePaid": format_datetime(e.date_paid), "notes": e.notes}
            for e in p.history
        ],
    }


def member_payment_dict(m: MemberPayment) -> dict:
    p = m.payment
    return {
        "userId": m.user.user_id,
        "name": m.user.name,
        "email": m.user.email,
        "payment": payment_dict(p) if p else None,
        "isPaid": p.is_paid if p else False,
        "amountPaid": float(p.amount_paid) if p else 0.0,
        "datePaid": format_datetime(p.last_paid_at) if p else None,
    }
