from __future__ import annotations

from flask import Flask, request

from ..common.web import current_actor, json_body, login_required, respond
from ..container import Container


def register(app: Flask, container: Container) -> None:
    actions = container.actions

    @app.route("/api/events/<event_id>/registrations", methods=["GET"], endpoint="event_registrations")
    @login_required
    def event_registrations(event_id: str):
        status = request.args.get("status") or None
        return respond(actions.list_registrations(current_actor(), event_id, status=status))

    @app.route("/api/events/<event_id>/registrations/summary", methods=["GET"], endpoint="event_registration_summary")
    @login_required
    def event_registration_summary(event_id: str):
        return respond(actions.registration_summary(current_actor(), event_id))

    @app.route("/api/events/<event_id>/registrations", methods=["POST"], endpoint="register_for_event")
    @login_required
    def register_for_event(event_id: str):
        data = json_body()
        result = actions.register(
            current_actor(),
            event_id,
            member_id=data.get("member_id"),
            visitor_id=data.get("visitor_id"),
            notes=data.get("notes"),
        )
        return respond(result, success_status=201)

    @app.route("/api/events/<event_id>/registrations/bulk", methods=["POST"], endpoint="register_for_event_bulk")
    @login_required
    def register_for_event_bulk(event_id: str):
        data = json_body()
        result = actions.register_bulk(
            current_actor(),
            event_id,
            member_ids=data.get("member_ids") or [],
            visitor_ids=data.get("visitor_ids") or [],
            notes=data.get("notes"),
        )
        return respond(result, success_status=201)

    @app.route("/api/registrations/<registration_id>/attendance", methods=["POST"], endpoint="confirm_attendance")
    @login_required
    def confirm_attendance(registration_id: str):
        data = json_body()
        return respond(actions.confirm(current_actor(), registration_id, data.get("status")))

    @app.route("/api/registrations/attendance/bulk", methods=["POST"], endpoint="confirm_attendance_bulk")
    @login_required
    def confirm_attendance_bulk():
        data = json_body()
        return respond(
            actions.confirm_bulk(current_actor(), data.get("registration_ids") or [], data.get("status"))
        )

    @app.route("/api/events/<event_id>/attendance/finalize", methods=["POST"], endpoint="finalize_attendance")
    @login_required
    def finalize_attendance(event_id: str):
        return respond(actions.finalize(current_actor(), event_id))

    @app.route("/api/registrations/<registration_id>/cancel", methods=["POST"], endpoint="cancel_registration")
    @login_required
    def cancel_registration(registration_id: str):
        data = json_body()
        return respond(actions.cancel(current_actor(), registration_id, data.get("reason")))

    @app.route("/api/registrations/<registration_id>", methods=["DELETE"], endpoint="delete_registration")
    @login_required
    def delete_registration(registration_id: str):
        return respond(actions.delete(current_actor(), registration_id))
