from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.guards import admin_required, auth_required
from ..common.http import message
from ..container import Container
from ..users.model import public_user_dict


def _status_map(statuses: dict) -> dict:
    return {str(user_id): status.value for user_id, status in statuses.items()}


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendances/event/<int:event_id>", methods=["POST"], endpoint="save_attendance")
    @admin_required
    def save_attendance(event_id: int):
        submitted = request.get_json(silent=True)
        if submitted is None:
            submitted = {}
        result = service.save_attendance(g.actor, event_id, submitted)
        return message(
        "Attendance saved successfully",
        updatedCount=result.updated_count,
        excusedCount=result.excused_count,
    )

    @app.route("/api/attendances/event/<int:event_id>", methods=["GET"], endpoint="attendance_by_event")
    @auth_required
    def attendance_by_event(event_id: int):
        return jsonify(_status_map(service.get_attendance_by_event(event_id)))

    @app.route("/api/attendances/all", methods=["GET"], endpoint="all_attendances")
    @admin_required
    def all_attendances():
        data = service.get_all_attendances(g.actor)
        return jsonify({str(event_id): _status_map(per_user) for event_id, per_user in data.items()})

    @app.route("/api/attendances/detailed", methods=["GET"], endpoint="detailed_attendances")
    @admin_required
    def detailed_attendances():
        data = service.get_detailed_attendances(g.actor)
        return jsonify(
            {
                str(user_id): {
                    "user": public_user_dict(entry.user),
                    "records": [r.to_dict() for r in entry.records],
                }
                for user_id, entry in data.items()
            }
        )

    @app.route("/api/attendances/user/<int:user_id>", methods=["GET"], endpoint="user_attendance")
    @auth_required
    def user_attendance(user_id: int):
        return jsonify([r.to_dict() for r in service.get_user_attendance(g.actor, user_id)])

    @app.route("/api/attendances/summary/<int:user_id>", methods=["GET"], endpoint="attendance_summary")
    @auth_required
    def attendance_summary(user_id: int):
        return jsonify(service.get_attendance_summary(g.actor, user_id).to_dict())

    @app.route("/api/attendances/summaries", methods=["GET"], endpoint="attendance_summaries")
    @admin_required
    def attendance_summaries():
        data = service.get_all_attendance_summaries(g.actor)
        return jsonify({str(user_id): summary.to_dict() for user_id, summary in data.items()})
