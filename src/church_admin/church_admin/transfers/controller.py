from __future__ import annotations

from flask import Flask

from ..common.web import current_actor, json_body, login_required, respond
from ..container import Container


def register(app: Flask, container: Container) -> None:
    actions = container.actions

    @app.route("/api/transfers", methods=["POST"], endpoint="create_transfer")
    @login_required
    def create_transfer():
        data = json_body()
        result = actions.create_transfer(
            current_actor(),
            member_id=data.get("member_id"),
            from_church_id=data.get("from_church_id"),
            to_church_id=data.get("to_church_id"),
            notes=data.get("notes"),
        )
        return respond(result, success_status=201)

    @app.route("/api/transfers/bulk", methods=["POST"], endpoint="create_transfers_bulk")
    @login_required
    def create_transfers_bulk():
        data = json_body()
        result = actions.create_transfers_bulk(
            current_actor(),
            member_ids=data.get("member_ids") or [],
            from_church_id=data.get("from_church_id"),
            to_church_id=data.get("to_church_id"),
            notes=data.get("notes"),
        )
        return respond(result, success_status=201)

    @app.route("/api/transfers/<transfer_id>/approve", methods=["POST"], endpoint="approve_transfer")
    @login_required
    def approve_transfer(transfer_id: str):
        return respond(actions.approve_transfer(current_actor(), transfer_id))

    @app.route("/api/transfers/<transfer_id>/reject", methods=["POST"], endpoint="reject_transfer")
    @login_required
    def reject_transfer(transfer_id: str):
        data = json_body()
        return respond(actions.reject_transfer(current_actor(), transfer_id, data.get("rejection_reason")))
