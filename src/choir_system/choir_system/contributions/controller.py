from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.guards import auth_required, roles_required
from ..common.http import json_body, message
from ..container import Container
from ..core.enums import FINANCE_ROLES
from .model import contribution_dict, member_payment_dict, payment_dict

finance_required = roles_required(FINANCE_ROLES, "Access denied. Finance role required.")


def register(app: Flask, container: Container) -> None:
    service = container.contribution_service

    @app.route("/api/contributions", methods=["GET"], endpoint="list_contributions")
    @auth_required
    def list_contributions():
        return jsonify([contribution_dict(c) for c in service.list_contributions()])

    @app.route("/api/contributions", methods=["POST"], endpoint="create_contribution")
    @finance_required
    def create_contribution():
        data = json_body()
        contribution = service.create_contribution(
            g.actor,
            title=data.get("title"),
            description=data.get("description"),
            amount_per_person=data.get("amountPerPerson"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
        )
        return jsonify(contribution_dict(contribution)), 201

    @app.route("/api/contributions/active", methods=["GET"], endpoint="active_contribution")
    @auth_required
    def active_contribution():
        active = service.get_active_contribution(g.actor)
        if active is None:
            return jsonify(None)
        contribution, payment = active
        return jsonify(
            {
                "contribution": contribution_dict(contribution),
                "userPayment": payment_dict(payment) if payment else None,
            }
        )

    @app.route("/api/contributions/<int:contribution_id>/close", methods=["PUT"], endpoint="close_contribution")
    @finance_required
    def close_contribution(contribution_id: int):
        contribution = service.close_contribution(g.actor, contribution_id)
        return jsonify(contribution_dict(contribution))

    @app.route("/api/contributions/<int:contribution_id>/payments", methods=["GET"], endpoint="member_payments")
    @auth_required
    def member_payments(contribution_id: int):
        contribution, members = service.get_member_payments(contribution_id)
        return jsonify(
            {
                "contribution": contribution_dict(contribution),
                "memberPayments": [member_payment_dict(m) for m in members],
            }
        )

    @app.route(
        "/api/contributions/<int:contribution_id>/payments/<int:user_id>",
        methods=["POST"],
        endpoint="add_payment",
    )
    @finance_required
    def add_payment(contribution_id: int, user_id: int):
        data = json_body()
        payment = service.add_payment(
            g.actor, contribution_id, user_id, amount=data.get("amount"), notes=data.get("notes")
        )
        return message("Payment added successfully", payment=payment_dict(payment))

    @app.route(
        "/api/contributions/<int:contribution_id>/payments/<int:user_id>/mark-paid",
        methods=["PUT"],
        endpoint="mark_as_paid",
    )
    @finance_required
    def mark_as_paid(contribution_id: int, user_id: int):
        payment = service.mark_as_paid(g.actor, contribution_id, user_id, amount=json_body().get("amount"))
        return message("Payment marked as paid", payment=payment_dict(payment))
