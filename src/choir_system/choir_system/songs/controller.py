from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.guards import auth_required, roles_required
from ..common.http import json_body, message
from ..container import Container
from ..core.enums import SONG_MANAGER_ROLES
from .model import song_dict

song_manager_required = roles_required(SONG_MANAGER_ROLES, "Access denied. Only song managers can change songs.")


def register(app: Flask, container: Container) -> None:
    service = container.song_service

    @app.route("/api/songs", methods=["GET"], endpoint="list_songs")
    @auth_required
    def list_songs():
        return jsonify([song_dict(s) for s in service.list_songs()])

    @app.route("/api/songs", methods=["POST"], endpoint="create_song")
    @song_manager_required
    def create_song():
        data = json_body()
        song = service.create_song(
            g.actor,
            title=data.get("title"),
            composer=data.get("composer"),
            lyrics=data.get("lyrics"),
        )
        return jsonify(song_dict(song)), 201

    @app.route("/api/songs/<int:song_id>", methods=["GET"], endpoint="get_song")
    @auth_required
    def get_song(song_id: int):
        return jsonify(song_dict(service.get_song(song_id)))

    @app.route("/api/songs/<int:song_id>", methods=["PUT"], endpoint="update_song")
    @song_manager_required
    def update_song(song_id: int):
        data = json_body()
        song = service.update_song(
            g.actor,
            song_id,
            title=data.get("title"),
            composer=data.get("composer"),
            lyrics=data.get("lyrics"),
        )
        return jsonify(song_dict(song))

    @app.route("/api/songs/<int:song_id>", methods=["DELETE"], endpoint="delete_song")
    @song_manager_required
    def delete_song(song_id: int):
        service.delete_song(g.actor, song_id)
        return message("Song removed")
