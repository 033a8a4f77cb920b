from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_datetime


@dataclass(frozen=True)
class Song:
    song_id: int
    title: str
    composer: str
    lyrics: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def song_dict(s: Song) -> dict:
    return {
        "_id": s.song_id,
        "title": s.title,
        "composer": s.composer,
        "lyrics": s.lyrics,
        "createdAt": format_datetime(s.created_at),
        "updatedAt": format_datetime(s.updated_at),
    }
