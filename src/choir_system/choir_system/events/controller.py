from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.guards import admin_required, auth_required
from ..common.http import json_body, message
from ..container import Container
from .model import event_dict


def _event_fields(data: dict) -> dict:
    return {
        "name": data.get("name"),
        "type": data.get("type"),
        "date": data.get("date"),
        "start_time": data.get("startTime"),
        "end_time": data.get("endTime"),
    }


def register(app: Flask, container: Container) -> None:
    service = container.event_service

    @app.route("/api/events", methods=["GET"], endpoint="list_events")
    @auth_required
    def list_events():
        return jsonify([event_dict(e) for e in service.list_events()])

    @app.route("/api/events", methods=["POST"], endpoint="create_event")
    @admin_required
    def create_event():
        event = service.create_event(g.actor, _event_fields(json_body()))
        return jsonify(event_dict(event)), 201

    @app.route("/api/events/<int:event_id>", methods=["GET"], endpoint="get_event")
    @auth_required
    def get_event(event_id: int):
        return jsonify(event_dict(service.get_event(event_id)))

    @app.route("/api/events/<int:event_id>", methods=["PUT"], endpoint="update_event")
    @admin_required
    def update_event(event_id: int):
        event = service.update_event(g.actor, event_id, _event_fields(json_body()))
        return jsonify(event_dict(event))

    @app.route("/api/events/<int:event_id>", methods=["DELETE"], endpoint="delete_event")
    @admin_required
    def delete_event(event_id: int):
        service.delete_event(g.actor, event_id)
        return message("Event deleted successfully")
