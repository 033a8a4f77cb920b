from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.datetime_utils import now_local
from ..common.guards import admin_required, auth_required
from ..common.http import json_body, message
from ..container import Container
from .model import announcement_dict


def _fields(data: dict) -> dict:
    return {
        "type": data.get("type"),
        "title": data.get("title"),
        "content": data.get("content"),
        "start_time": data.get("startTime"),
        "end_time": data.get("endTime"),
    }


def register(app: Flask, container: Container) -> None:
    service = container.announcement_service

    @app.route("/api/announcements", methods=["GET"], endpoint="list_announcements")
    @auth_required
    def list_announcements():
        now = now_local()
        return jsonify([announcement_dict(a, now) for a in service.list_announcements(now)])

    @app.route("/api/announcements", methods=["POST"], endpoint="create_announcement")
    @auth_required
    def create_announcement():
        announcement = service.create_announcement(g.actor, _fields(json_body()))
        return jsonify(announcement_dict(announcement, now_local())), 201

    @app.route("/api/announcements/<int:announcement_id>", methods=["GET"], endpoint="get_announcement")
    @auth_required
    def get_announcement(announcement_id: int):
        return jsonify(announcement_dict(service.get_announcement(announcement_id), now_local()))

    @app.route("/api/announcements/<int:announcement_id>", methods=["PUT"], endpoint="update_announcement")
    @admin_required
    def update_announcement(announcement_id: int):
        announcement = service.update_announcement(g.actor, announcement_id, _fields(json_body()))
        return jsonify(announcement_dict(announcement, now_local()))

    @app.route("/api/announcements/<int:announcement_id>", methods=["DELETE"], endpoint="delete_announcement")
    @admin_required
    def delete_announcement(announcement_id: int):
        service.delete_announcement(g.actor, announcement_id)
        return message("Announcement removed")
