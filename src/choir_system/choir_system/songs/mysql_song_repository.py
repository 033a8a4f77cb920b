from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Song
from .repository import SongRepository

_COLUMNS = "song_id, title, composer, lyrics, created_at, updated_at"


def _row_to_song(r: dict) -> Song:
    return Song(
        song_id=int(r["song_id"]),
        title=r["title"],
        composer=r["composer"],
        lyrics=r["lyrics"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLSongRepository(SongRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_song(self, *, title: str, composer: str, lyrics: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO songs(title, composer, lyrics) VALUES(%s,%s,%s)",
                (title, composer, lyrics),
            )
            return int(cur.lastrowid)

    def get_by_id(self, song_id: int) -> Optional[Song]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM songs WHERE song_id=%s", (int(song_id),))
            r = fetchone(cur)
            return _row_to_song(r) if r else None

    def list_all(self) -> Sequence[Song]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM songs ORDER BY title, song_id")
            return [_row_to_song(r) for r in fetchall(cur)]

    def update_song(self, song_id: int, *, title: str, composer: str, lyrics: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE songs SET title=%s, composer=%s, lyrics=%s WHERE song_id=%s",
                (title, composer, lyrics, int(song_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, song_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM songs WHERE song_id=%s", (int(song_id),))
            return cur.rowcount > 0
