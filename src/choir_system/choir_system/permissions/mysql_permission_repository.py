from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import PermissionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Permission
from .repository import PermissionRepository

_SELECT = """
    SELECT p.permission_id, p.user_id, p.user_name, p.start_date, p.end_date,
           p.reason, p.details, p.status, p.created_at, p.reviewed_by, p.reviewed_at,
           r.name AS reviewer_name
    FROM permissions p
    LEFT JOIN users r ON r.user_id = p.reviewed_by
"""


def _row_to_permission(r: dict) -> Permission:
    return Permission(
        permission_id=int(r["permission_id"]),
        user_id=int(r["user_id"]),
        user_name=r["user_name"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        details=r.get("details") or "",
        status=PermissionStatus(r["status"]),
        created_at=r.get("created_at"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        reviewer_name=r.get("reviewer_name"),
    )


class MySQLPermissionRepository(PermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO permissions(user_id, user_name, start_date, end_date, reason, details, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    user_name,
                    start_date,
                    end_date,
                    reason,
                    details,
                    PermissionStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, permission_id: int) -> Optional[Permission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.permission_id=%s", (int(permission_id),))
            r = fetchone(cur)
            return _row_to_permission(r) if r else None

    def list_all(self) -> Sequence[Permission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY p.created_at DESC, p.permission_id DESC")
            return [_row_to_permission(r) for r in fetchall(cur)]

    def list_for_user(self, user_id: int, *, status: Optional[PermissionStatus] = None) -> Sequence[Permission]:
        clauses = ["p.user_id=%s"]
        params: list[object] = [int(user_id)]
        if status is not None:
            clauses.append("p.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY p.created_at DESC, p.permission_id DESC",
                tuple(params),
            )
            return [_row_to_permission(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        permission_id: int,
        status: PermissionStatus,
        reviewed_by: int,
        reviewed_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE permissions
                SET status=%s, reviewed_by=%s, reviewed_at=%s
                WHERE permission_id=%s
                """,
                (status.value, int(reviewed_by), reviewed_at, int(permission_id)),
            )
            return cur.rowcount > 0

    def list_approved_covering(self, day: date) -> Sequence[Permission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                JOIN users u ON u.user_id = p.user_id
                WHERE p.status=%s AND p.start_date <= %s AND p.end_date >= %s
                ORDER BY p.user_name
                """,
                (PermissionStatus.APPROVED.value, day, day),
            )
            return [_row_to_permission(r) for r in fetchall(cur)]
