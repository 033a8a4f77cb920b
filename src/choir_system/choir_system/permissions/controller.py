from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.guards import admin_required, auth_required
from ..common.http import json_body, message
from ..container import Container
from .model import active_permission_dict, permission_dict


def register(app: Flask, container: Container) -> None:
    service = container.permission_service

    @app.route("/api/permissions", methods=["POST"], endpoint="create_permission")
    @auth_required
    def create_permission():
        data = json_body()
        permission = service.create_permission(
            g.actor,
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            reason=data.get("reason"),
            details=data.get("details"),
        )
        return message(
            "Permission request submitted successfully",
            201,
            permission=permission_dict(permission),
        )

    @app.route("/api/permissions", methods=["GET"], endpoint="list_permissions")
    @admin_required
    def list_permissions():
        return jsonify([permission_dict(p) for p in service.get_all_permissions(g.actor)])

    @app.route("/api/permissions/user", methods=["GET"], endpoint="my_permissions")
    @auth_required
    def my_permissions():
        return jsonify([permission_dict(p) for p in service.get_user_permissions(g.actor)])

    @app.route("/api/permissions/<int:permission_id>", methods=["PUT"], endpoint="decide_permission")
    @admin_required
    def decide_permission(permission_id: int):
        permission = service.update_permission_status(
            g.actor, permission_id, json_body().get("status")
        )
        return message(
            f"Permission {permission.status.value} successfully",
            permission=permission_dict(permission),
        )

    @app.route("/api/permissions/active/<day>", methods=["GET"], endpoint="active_permissions")
    @auth_required
    def active_permissions(day: str):
        return jsonify([active_permission_dict(p) for p in service.get_active_permissions_for_date(day)])
