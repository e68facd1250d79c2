from __future__ import annotations

import json
import logging

from church_admin.actions import Actor, actor_from
from church_admin.core.enums import RegistrationStatus, Role
from church_admin.core.exceptions import InvalidTransitionError
from church_admin.core.logging_setup import JsonLogFormatter
from church_admin.core.results import ActionResult, run_action

SEC = Actor(user_id="u-sec", role=Role.CHURCH_SECRETARY)
SUPER = Actor(user_id="u-super", role=Role.SUPERADMIN)


def test_actor_from_session_values():
    assert actor_from("u1", "pastor") == Actor(user_id="u1", role=Role.PASTOR)
    assert actor_from(None, "pastor") is None
    assert actor_from("u1", "deacon") is None


def test_run_action_tags_domain_errors():
    def boom():
        raise InvalidTransitionError("locked")

    result = run_action("demo", boom)
    assert result == ActionResult(ok=False, error="locked", code="invalid_transition")
    assert result.to_dict() == {"success": False, "error": "locked", "code": "invalid_transition"}


def test_run_action_hides_unexpected_errors():
    def boom():
        raise KeyError("secret")

    result = run_action("demo", boom)
    assert not result.ok
    assert result.code == "internal_error"
    assert "secret" not in result.error


def test_unauthenticated_actor(container):
    result = container.actions.finalize(None, "e1")
    assert result.code == "unauthorized"


def test_permissions_payload(container):
    data = container.actions.permissions(Actor(user_id="u-bw", role=Role.BIBLEWORKER)).data

    assert data["data_scope"] == "church"
    assert data["churches"] == ["c1", "c2"]
    assert "attendance" in data["writable_modules"]
    assert "members" not in data["writable_modules"]
    assert data["landing_module"] == "dashboard"

    assert container.actions.permissions(SUPER).data["churches"] == "unrestricted"


def test_finalize_result(container, registrations):
    registrations.add(event_id="e1", member_id="m1", status=RegistrationStatus.ATTENDED)
    registrations.add(event_id="e1", member_id="m2")

    assert container.actions.finalize(SUPER, "e1").data == {"count": 1}
    assert container.actions.finalize(SUPER, "e1").data == {"count": 0}

    denied = container.actions.finalize(SEC, "e1")
    assert denied.code == "forbidden"


def test_bulk_register_and_confirm(container, registrations):
    registered = container.actions.register_bulk(SEC, "e1", member_ids=["m1", "m2"])
    assert registered.ok
    assert registered.data["registered"] == 2

    ids = [r["id"] for r in registered.data["data"]]
    confirmed = container.actions.confirm_bulk(SEC, ids + ["missing"], "attended")
    assert confirmed.data["successCount"] == 2
    assert confirmed.data["failureCount"] == 1
    assert all(r["status"] == "attended" for r in confirmed.data["succeeded"])


def test_transfers_bulk_result(container):
    result = container.actions.create_transfers_bulk(
        SEC, member_ids=["m1", "m7"], from_church_id="c1", to_church_id="c2"
    )
    assert result.data["successCount"] == 1
    assert result.data["errorCount"] == 1

    short = container.actions.reject_transfer(SUPER, result.data["succeeded"][0]["id"], "too short")
    assert short.code == "validation_error"


def test_json_log_formatter():
    record = logging.LogRecord("church_admin.test", logging.INFO, __file__, 1, "finalized %d", (5,), None)
    record.event_id = "e1"

    payload = json.loads(JsonLogFormatter().format(record))

    assert payload["message"] == "finalized 5"
    assert payload["level"] == "INFO"
    assert payload["event_id"] == "e1"


def test_register_passes_both_registrants_through(container):
    result = container.actions.register(SEC, "e1", member_id="m1", visitor_id="v1")
    assert result.code == "validation_error"

    visitor = container.actions.register(SEC, "e1", visitor_id="v1")
    assert visitor.data["visitor_id"] == "v1"
