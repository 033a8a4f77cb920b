from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import EventType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Event, EventInput
from .repository import EventRepository

_COLUMNS = "event_id, name, type, event_date, start_time, end_time, created_at"


def _row_to_event(r: dict) -> Event:
    return Event(
        event_id=int(r["event_id"]),
        name=r["name"],
        type=EventType(r["type"]),
        date=r["event_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        created_at=r.get("created_at"),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_event(self, data: EventInput) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO events(name, type, event_date, start_time, end_time)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (data.name, data.type.value, data.date, data.start_time, data.end_time),
            )
            return int(cur.lastrowid)

    def get_by_id(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events WHERE event_id=%s", (int(event_id),))
            r = fetchone(cur)
            return _row_to_event(r) if r else None

    def update_event(self, event_id: int, data: EventInput) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE events
                SET name=%s, type=%s, event_date=%s, start_time=%s, end_time=%s
                WHERE event_id=%s
                """,
                (data.name, data.type.value, data.date, data.start_time, data.end_time, int(event_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, event_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM events WHERE event_id=%s", (int(event_id),))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events ORDER BY event_date, start_time, event_id")
            return [_row_to_event(r) for r in fetchall(cur)]

    def list_on_or_before(self, day: date) -> Sequence[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM events WHERE event_date <= %s ORDER BY event_date, start_time",
                (day,),
            )
            return [_row_to_event(r) for r in fetchall(cur)]
