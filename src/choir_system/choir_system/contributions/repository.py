from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import ContributionStatus
from .model import Contribution, Payment, PaymentEntry


class ContributionRepository(Protocol):
    def create_contribution(
        self,
        *,
        title: str,
        description: str,
        amount_per_person: Decimal,
        start_date: date,
        end_date: date,
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, contribution_id: int) -> Optional[Contribution]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Contribution]:
        """Newest first."""

        raise NotImplementedError

    def latest_active(self) -> Optional[Contribution]:
        raise NotImplementedError

    def set_status(self, contribution_id: int, status: ContributionStatus) -> bool:
        raise NotImplementedError

    def get_payment(self, contribution_id: int, user_id: int) -> Optional[Payment]:
        raise NotImplementedError

    def list_payments(self, contribution_id: int) -> Sequence[Payment]:
        raise NotImplementedError

    def append_payment(
        self,
        contribution_id: int,
        user_id: int,
        entry: PaymentEntry,
        *,
        amount_due: Decimal,
    ) -> Payment:
        """Create the member's payment if needed, add `entry` to its history and
        recompute the total and `is_paid` against `amount_due`."""

        raise NotImplementedError
