from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Song


class SongRepository(Protocol):
    def create_song(self, *, title: str, composer: str, lyrics: str) -> int:
        raise NotImplementedError

    def get_by_id(self, song_id: int) -> Optional[Song]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Song]:
        raise NotImplementedError

    def update_song(self, song_id: int, *, title: str, composer: str, lyrics: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, song_id: int) -> bool:
        raise NotImplementedError
