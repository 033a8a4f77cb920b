from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from ..core.enums import ContributionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Contribution, Payment, PaymentEntry
from .repository import ContributionRepository

_SELECT_CONTRIBUTION = """
    SELECT c.contribution_id, c.title, c.description, c.amount_per_person,
           c.start_date, c.end_date, c.status, c.created_by, c.created_at,
           u.name AS created_by_name
    FROM contributions c
    LEFT JOIN users u ON u.user_id = c.created_by
"""

_SELECT_PAYMENT = "SELECT payment_id, contribution_id, user_id, amount_paid, is_paid FROM payments"


def _row_to_contribution(r: dict) -> Contribution:
    return Contribution(
        contribution_id=int(r["contribution_id"]),
        title=r["title"],
        description=r.get("description") or "",
        amount_per_person=Decimal(r["amount_per_person"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=ContributionStatus(r["status"]),
        created_by=r.get("created_by"),
        created_by_name=r.get("created_by_name"),
        created_at=r.get("created_at"),
    )


def _history_by_payment(cur, payment_ids: List[int]) -> Dict[int, List[PaymentEntry]]:
    out: Dict[int, List[PaymentEntry]] = {pid: [] for pid in payment_ids}
    if not payment_ids:
        return out
    cur.execute(
        f"""
        SELECT payment_id, amount, date_paid, notes FROM payment_history
        WHERE payment_id IN ({in_clause(payment_ids)})
        ORDER BY payment_id, entry_id
        """,
        tuple(payment_ids),
    )
    for r in fetchall(cur):
        out[int(r["payment_id"])].append(
            PaymentEntry(amount=Decimal(r["amount"]), date_paid=r["date_paid"], notes=r.get("notes") or "")
        )
    return out


def _rows_to_payments(cur, rows: List[dict]) -> List[Payment]:
    history = _history_by_payment(cur, [int(r["payment_id"]) for r in rows])
    return [
        Payment(
            payment_id=int(r["payment_id"]),
            contribution_id=int(r["contribution_id"]),
            user_id=int(r["user_id"]),
            amount_paid=Decimal(r["amount_paid"]),
            is_paid=bool(r["is_paid"]),
            history=tuple(history[int(r["payment_id"])]),
        )
        for r in rows
    ]


class MySQLContributionRepository(ContributionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO contributions(title, description, amount_per_person, start_date, end_date, status, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    title,
                    description,
                    amount_per_person,
                    start_date,
                    end_date,
                    ContributionStatus.ACTIVE.value,
                    int(created_by),
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, contribution_id: int) -> Optional[Contribution]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_CONTRIBUTION + " WHERE c.contribution_id=%s", (int(contribution_id),))
            r = fetchone(cur)
            return _row_to_contribution(r) if r else None

    def list_all(self) -> Sequence[Contribution]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_CONTRIBUTION + " ORDER BY c.created_at DESC, c.contribution_id DESC")
            return [_row_to_contribution(r) for r in fetchall(cur)]

    def latest_active(self) -> Optional[Contribution]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_CONTRIBUTION
                + " WHERE c.status=%s ORDER BY c.created_at DESC, c.contribution_id DESC LIMIT 1",
                (ContributionStatus.ACTIVE.value,),
            )
            r = fetchone(cur)
            return _row_to_contribution(r) if r else None

    def set_status(self, contribution_id: int, status: ContributionStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE contributions SET status=%s WHERE contribution_id=%s",
                (status.value, int(contribution_id)),
            )
            return cur.rowcount > 0

    def get_payment(self, contribution_id: int, user_id: int) -> Optional[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_PAYMENT + " WHERE contribution_id=%s AND user_id=%s",
                (int(contribution_id), int(user_id)),
            )
            rows = fetchall(cur)
            payments = _rows_to_payments(cur, rows)
            return payments[0] if payments else None

    def list_payments(self, contribution_id: int) -> Sequence[Payment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_PAYMENT + " WHERE contribution_id=%s ORDER BY payment_id", (int(contribution_id),))
            return _rows_to_payments(cur, fetchall(cur))

    def append_payment(
        self,
        contribution_id: int,
        user_id: int,
        entry: PaymentEntry,
        *,
        amount_due: Decimal,
    ) -> Payment:
        key = (int(contribution_id), int(user_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT IGNORE INTO payments(contribution_id, user_id) VALUES(%s,%s)", key)
            cur.execute(_SELECT_PAYMENT + " WHERE contribution_id=%s AND user_id=%s FOR UPDATE", key)
            row = fetchone(cur)
            payment_id = int(row["payment_id"])
            total = Decimal(row["amount_paid"]) + entry.amount

            cur.execute(
                "INSERT INTO payment_history(payment_id, amount, date_paid, notes) VALUES(%s,%s,%s,%s)",
                (payment_id, entry.amount, entry.date_paid, entry.notes),
            )
            cur.execute(
                "UPDATE payments SET amount_paid=%s, is_paid=%s WHERE payment_id=%s",
                (total, 1 if total >= amount_due else 0, payment_id),
            )

            cur.execute(_SELECT_PAYMENT + " WHERE payment_id=%s", (payment_id,))
            return _rows_to_payments(cur, fetchall(cur))[0]
