from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_actor, login_required, respond
from ..container import Container
from .gate import can_access_module, default_landing_module, module_from_path


def register(app: Flask, container: Container) -> None:
    actions = container.actions

    @app.route("/api/me/permissions", methods=["GET"], endpoint="my_permissions")
    @login_required
    def my_permissions():
        return respond(actions.permissions(current_actor()))

    @app.route("/api/me/churches/<church_id>", methods=["GET"], endpoint="can_access_church")
    @login_required
    def can_access_church(church_id: str):
        return respond(actions.can_access_church(current_actor(), church_id))

    @app.route("/api/me/route-check", methods=["GET"], endpoint="route_check")
    @login_required
    def route_check():
        """Route guard: may the current user open ``?path=``, and where to go if not."""
        actor = current_actor()
        module = module_from_path(request.args.get("path", "/"))
        allowed = module is None or can_access_module(actor.role, module)
        return jsonify(
            {
                "success": True,
                "data": {
                    "module": module.value if module else None,
                    "allowed": allowed,
                    "redirect": None if allowed else default_landing_module(actor.role).value,
                },
            }
        )
