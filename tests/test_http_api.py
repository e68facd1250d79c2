from __future__ import annotations

import pytest

from church_admin.core.enums import RegistrationStatus
from church_admin.main import create_app


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


def _login(client, user_id, role):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_requires_login(client):
    resp = client.get("/api/me/permissions")
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "unauthorized"


def test_route_check_redirects_coordinator(client):
    _login(client, "u-coord", "coordinator")

    resp = client.get("/api/me/route-check?path=/members/5")
    assert resp.get_json()["data"] == {"module": "members", "allowed": False, "redirect": "events"}

    resp = client.get("/api/me/route-check?path=/events")
    assert resp.get_json()["data"]["allowed"] is True


def test_church_access_check(client):
    _login(client, "u-pastor", "pastor")
    assert client.get("/api/me/churches/c2").get_json()["data"] is True
    assert client.get("/api/me/churches/c4").get_json()["data"] is False


def test_attendance_flow_over_http(client, registrations):
    _login(client, "u-sec", "church_secretary")

    resp = client.post("/api/events/e1/registrations", json={"member_id": "m1"})
    assert resp.status_code == 201
    reg_id = resp.get_json()["data"]["id"]

    resp = client.post(f"/api/registrations/{reg_id}/attendance", json={"status": "attended"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "attended"

    resp = client.post("/api/events/e1/attendance/finalize")
    assert resp.status_code == 403

    _login(client, "u-coord", "coordinator")
    resp = client.post("/api/events/e1/attendance/finalize")
    assert resp.get_json()["data"] == {"count": 1}

    _login(client, "u-sec", "church_secretary")
    resp = client.post(f"/api/registrations/{reg_id}/attendance", json={"status": "no_show"})
    assert resp.status_code == 409
    assert registrations.rows[reg_id].status == RegistrationStatus.ATTENDED

    resp = client.get("/api/events/e1/registrations/summary")
    assert resp.get_json()["data"]["locked"] == 1


def test_bulk_registration_over_http(client):
    _login(client, "u-sec", "church_secretary")

    resp = client.post("/api/events/e1/registrations/bulk", json={"member_ids": []})
    assert resp.status_code == 400

    resp = client.post("/api/events/e1/registrations/bulk", json={"member_ids": ["m1", "m2"]})
    assert resp.status_code == 201
    assert resp.get_json()["data"]["registered"] == 2

    resp = client.get("/api/events/e1/registrations?status=registered")
    assert len(resp.get_json()["data"]) == 2


def test_cancel_and_delete_over_http(client, registrations):
    registrations.add(registration_id="r1", event_id="e1", member_id="m1")
    _login(client, "u-sec", "church_secretary")

    resp = client.post("/api/registrations/r1/cancel", json={"reason": "sick"})
    assert resp.get_json()["data"]["notes"] == "Cancelled: sick"

    resp = client.delete("/api/registrations/r1")
    assert resp.get_json()["data"] == {"event_id": "e1"}

    resp = client.delete("/api/registrations/r1")
    assert resp.status_code == 404


def test_transfer_reject_over_http(client, transfers):
    _login(client, "u-super", "superadmin")

    resp = client.post("/api/transfers", json={"member_id": "m1", "from_church_id": "c1", "to_church_id": "c3"})
    assert resp.status_code == 201
    transfer_id = resp.get_json()["data"]["id"]

    resp = client.post(f"/api/transfers/{transfer_id}/reject", json={"rejection_reason": "short"})
    assert resp.status_code == 400
    assert transfers.get_by_id(transfer_id).status.value == "pending"

    resp = client.post(f"/api/transfers/{transfer_id}/approve")
    assert resp.get_json()["data"]["status"] == "approved"


def test_unknown_status_filter_is_a_bad_request(client):
    _login(client, "u-super", "superadmin")

    resp = client.get("/api/events/e1/registrations?status=bogus")

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "validation_error"


def test_member_and_visitor_in_one_registration(client, registrations):
    _login(client, "u-sec", "church_secretary")

    resp = client.post("/api/events/e1/registrations", json={"member_id": "m1", "visitor_id": "v1"})
    assert resp.status_code == 400

    resp = client.post("/api/events/e1/registrations/bulk", json={"member_ids": ["m1"], "visitor_ids": ["v1"]})
    assert resp.status_code == 400
    assert registrations.rows == {}
