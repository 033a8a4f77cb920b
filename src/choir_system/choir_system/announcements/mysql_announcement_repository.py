from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AnnouncementType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Announcement, AnnouncementInput
from .repository import AnnouncementRepository

_COLUMNS = "announcement_id, type, title, author, content, announced_at, start_time, end_time"


def _row_to_announcement(r: dict) -> Announcement:
    return Announcement(
        announcement_id=int(r["announcement_id"]),
        type=AnnouncementType(r["type"]),
        title=r["title"],
        author=r["author"],
        content=r["content"],
        announced_at=r["announced_at"],
        start_time=r.get("start_time"),
        end_time=r.get("end_time"),
    )


class MySQLAnnouncementRepository(AnnouncementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_announcement(self, data: AnnouncementInput, *, author: str, announced_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO announcements(type, title, author, content, announced_at, start_time, end_time)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    data.type.value,
                    data.title,
                    author,
                    data.content,
                    announced_at,
                    data.start_time,
                    data.end_time,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, announcement_id: int) -> Optional[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM announcements WHERE announcement_id=%s",
                (int(announcement_id),),
            )
            r = fetchone(cur)
            return _row_to_announcement(r) if r else None

    def list_not_expired(self, now: datetime) -> Sequence[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM announcements
                WHERE end_time IS NULL OR end_time >= %s
                ORDER BY announced_at DESC, announcement_id DESC
                """,
                (now,),
            )
            return [_row_to_announcement(r) for r in fetchall(cur)]

    def update_announcement(self, announcement_id: int, data: AnnouncementInput) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE announcements
                SET type=%s, title=%s, content=%s, start_time=%s, end_time=%s
                WHERE announcement_id=%s
                """,
                (
                    data.type.value,
                    data.title,
                    data.content,
                    data.start_time,
                    data.end_time,
                    int(announcement_id),
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, announcement_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM announcements WHERE announcement_id=%s", (int(announcement_id),))
            return cur.rowcount > 0
