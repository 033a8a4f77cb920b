from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.guards import admin_required, auth_required
from ..common.http import json_body, message
from ..container import Container
from .model import PROFILE_FIELDS, public_user_dict


def _user_fields(data: dict) -> dict:
    """Wire (camelCase) body -> service field names."""
    return {
        "name": data.get("name"),
        "email": data.get("email"),
        "phone_number": data.get("phoneNumber"),
        "profile_picture_url": data.get("profilePictureUrl"),
        "username": data.get("username"),
        "role": data.get("role"),
        "profile": {key: data.get(wire_key) for key, wire_key in PROFILE_FIELDS.items()},
    }


def _with_token(result) -> dict:
    return {**public_user_dict(result.user), "token": result.token}


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    users = container.user_service

    @app.route("/api/users/register", methods=["POST"], endpoint="register_user")
    def register_user():
        data = json_body()
        fields = _user_fields(data)
        user = auth.register(
            name=fields["name"],
            email=fields["email"],
            password=data.get("password"),
            role=fields["role"],
            username=fields["username"],
            phone_number=fields["phone_number"],
            profile_picture_url=fields["profile_picture_url"],
            profile=fields["profile"],
        )
        return message(
            "Registration successful. Your account is pending approval.",
            201,
            user=public_user_dict(user),
        )

    @app.route("/api/users/login", methods=["POST"], endpoint="login_user")
    def login_user():
        data = json_body()
        identifier = data.get("username") or data.get("email") or ""
        return jsonify(_with_token(auth.login(identifier, data.get("password") or "")))

    @app.route("/api/users/profile", methods=["GET"], endpoint="get_profile")
    @auth_required
    def get_profile():
        return jsonify(public_user_dict(users.get_profile(g.actor)))

    @app.route("/api/users/profile", methods=["PUT"], endpoint="update_profile")
    @auth_required
    def update_profile():
        data = json_body()
        result = users.update_profile(g.actor, _user_fields(data), password=data.get("password"))
        return jsonify(_with_token(result))

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        return jsonify([public_user_dict(u) for u in users.list_users(g.actor)])

    @app.route("/api/users/pending", methods=["GET"], endpoint="pending_users")
    @admin_required
    def pending_users():
        return jsonify([public_user_dict(u) for u in users.list_pending(g.actor)])

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="get_user")
    @admin_required
    def get_user(user_id: int):
        return jsonify(public_user_dict(users.get_user(g.actor, user_id)))

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="update_user")
    @admin_required
    def update_user(user_id: int):
        data = json_body()
        user = users.update_user(g.actor, user_id, _user_fields(data), password=data.get("password"))
        return jsonify(public_user_dict(user))

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: int):
        users.delete_user(g.actor, user_id)
        return message("User removed")

    @app.route("/api/users/<int:user_id>/approve", methods=["PUT"], endpoint="approve_user")
    @admin_required
    def approve_user(user_id: int):
        user = users.approve_user(g.actor, user_id)
        return message("User approved successfully", user=public_user_dict(user))

    @app.route("/api/users/<int:user_id>/reject", methods=["PUT"], endpoint="reject_user")
    @admin_required
    def reject_user(user_id: int):
        user = users.reject_user(g.actor, user_id)
        return message("User rejected successfully", user=public_user_dict(user))
