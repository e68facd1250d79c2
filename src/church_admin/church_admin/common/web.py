from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..actions import Actor, actor_from
from ..core.results import ActionResult

HTTP_STATUS = {
    "unauthorized": 401,
    "forbidden": 403,
    "not_found": 404,
    "invalid_transition": 409,
    "validation_error": 400,
    "internal_error": 500,
}


def current_actor() -> Optional[Actor]:
    return actor_from(session.get("user_id"), session.get("role"))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_actor() is None:
            return jsonify({"success": False, "error": "Unauthorized", "code": "unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def respond(result: ActionResult, *, success_status: int = 200):
    if result.ok:
        return jsonify(result.to_dict()), success_status
    return jsonify(result.to_dict()), HTTP_STATUS.get(result.code or "", 400)
