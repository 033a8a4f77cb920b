from __future__ import annotations

from typing import Optional, Sequence

from ..common.access import ensure_role
from ..common.validators import optional_text, require_non_empty
from ..core.enums import SONG_MANAGER_ROLES
from ..core.exceptions import NotFoundError
from ..users.model import Actor
from .model import Song
from .repository import SongRepository


def _ensure_song_manager(actor: Actor) -> None:
    ensure_role(actor, SONG_MANAGER_ROLES, "Access denied. Only song managers can change songs.")


class SongService:
    def __init__(self, songs: SongRepository):
        self._songs = songs

    def _require_song(self, song_id: int) -> Song:
        song = self._songs.get_by_id(int(song_id))
        if not song:
            raise NotFoundError("Song not found")
        return song

    def list_songs(self) -> Sequence[Song]:
        return self._songs.list_all()

    def get_song(self, song_id: int) -> Song:
        return self._require_song(song_id)

    def create_song(self, actor: Actor, *, title: str, composer: str, lyrics: str) -> Song:
        _ensure_song_manager(actor)
        song_id = self._songs.create_song(
            title=require_non_empty(title, "Title"),
            composer=require_non_empty(composer, "Composer"),
            lyrics=require_non_empty(lyrics, "Lyrics"),
        )
        return self._require_song(song_id)

    def update_song(
        self,
        actor: Actor,
        song_id: int,
        *,
        title: Optional[str] = None,
        composer: Optional[str] = None,
        lyrics: Optional[str] = None,
    ) -> Song:
        _ensure_song_manager(actor)
        song = self._require_song(song_id)
        self._songs.update_song(
            song.song_id,
            title=optional_text(title) or song.title,
            composer=optional_text(composer) or song.composer,
            lyrics=optional_text(lyrics) or song.lyrics,
        )
        return self._require_song(song.song_id)

    def delete_song(self, actor: Actor, song_id: int) -> None:
        _ensure_song_manager(actor)
        song = self._require_song(song_id)
        self._songs.delete_by_id(song.song_id)
