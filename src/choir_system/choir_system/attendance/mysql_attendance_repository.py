from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

import mysql.connector

from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, in_clause, load_json
from .model import AttendanceBucket, AttendanceRecord
from .policy import upsert_record
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _row_to_bucket(r: dict) -> AttendanceBucket:
    records = load_json(r.get("records"), [])
    return AttendanceBucket(
        user_id=int(r["user_id"]),
        name=r["name"],
        records=tuple(AttendanceRecord.from_dict(x) for x in records),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_buckets(self) -> Sequence[AttendanceBucket]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id, name, records FROM attendance_buckets ORDER BY user_id")
            return [_row_to_bucket(r) for r in fetchall(cur)]

    def get_bucket(self, user_id: int) -> Optional[AttendanceBucket]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, name, records FROM attendance_buckets WHERE user_id=%s",
                (int(user_id),),
            )
            r = fetchone(cur)
            return _row_to_bucket(r) if r else None

    def save_event_records(
        self,
        event_id: int,
        entries: Mapping[int, tuple[str, AttendanceRecord]],
    ) -> int:
        if not entries:
            return 0

        user_ids = [int(uid) for uid in entries]
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT user_id, name, records FROM attendance_buckets
                    WHERE user_id IN ({in_clause(user_ids)})
                    FOR UPDATE
                    """,
                    tuple(user_ids),
                )
                existing = {int(r["user_id"]): _row_to_bucket(r) for r in fetchall(cur)}

                for user_id in user_ids:
                    name, record = entries[user_id]
                    bucket = existing.get(user_id)
                    records = upsert_record(bucket.records if bucket else (), record)
                    cur.execute(
                        """
                        INSERT INTO attendance_buckets(user_id, name, records)
                        VALUES(%s,%s,%s)
                        ON DUPLICATE KEY UPDATE name=VALUES(name), records=VALUES(records)
                        """,
                        (user_id, name, dump_json([r.to_dict() for r in records])),
                    )
        except mysql.connector.Error as e:
            logger.error("Attendance save for event %s rolled back: %s", event_id, e)
            raise StorageError("Failed to save attendance; no changes were applied") from e

        return len(user_ids)

    def referenced_event_ids(self) -> set[int]:
        referenced: set[int] = set()
        for bucket in self.list_buckets():
            referenced.update(r.event_id for r in bucket.records)
        return referenced
