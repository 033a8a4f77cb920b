from __future__ import annotations

import pytest

from src.choir_system.choir_system.core.enums import Role
from src.choir_system.choir_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from tests.fakes import FakeWorld, actor_for


@pytest.fixture
def world():
    return FakeWorld()


def test_conductor_manages_songs(world):
    svc = world.container.song_service
    conductor = actor_for(world.users.add("Claude Conductor", role=Role.SONG_CONDUCTOR))

    song = svc.create_song(conductor, title="Gloria", composer="Vivaldi", lyrics="Gloria in excelsis")
    svc.create_song(conductor, title="Ave Maria", composer="Schubert", lyrics="Ave Maria")
    assert [s.title for s in svc.list_songs()] == ["Ave Maria", "Gloria"]

    updated = svc.update_song(conductor, song.song_id, title="Gloria RV 589", lyrics="")
    assert (updated.title, updated.lyrics) == ("Gloria RV 589", "Gloria in excelsis")

    svc.delete_song(conductor, song.song_id)
    with pytest.raises(NotFoundError):
        svc.get_song(song.song_id)


def test_all_fields_required(world):
    president = actor_for(world.users.add("Grace President", role=Role.PRESIDENT))
    with pytest.raises(ValidationError):
        world.container.song_service.create_song(president, title="Gloria", composer="", lyrics="x")


def test_singer_cannot_change_songs(world):
    singer = actor_for(world.users.add("Alice Mukamana"))
    with pytest.raises(AuthorizationError):
        world.container.song_service.create_song(singer, title="a", composer="b", lyrics="c")
