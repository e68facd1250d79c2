from __future__ import annotations

import pytest

from church_admin.core.enums import Module, Role
from church_admin.core.exceptions import AuthorizationError
from church_admin.rbac.scope import UNRESTRICTED, is_unrestricted
from church_admin.users.mysql_user_repository import _to_assignment


def test_national_scope_is_unrestricted(scopes):
    scope = scopes.resolve_scope("u-super", Role.SUPERADMIN)
    assert scope is UNRESTRICTED
    assert "any-church" in scope


def test_field_scope(scopes):
    assert scopes.resolve_scope("u-field", Role.FIELD_SECRETARY) == frozenset({"c1", "c2", "c3"})


def test_field_scope_without_field_is_empty(scopes):
    assert scopes.resolve_scope("u-field-none", Role.FIELD_SECRETARY) == frozenset()


def test_district_scope(scopes):
    assert scopes.resolve_scope("u-pastor", Role.PASTOR) == frozenset({"c1", "c2"})


def test_district_scope_ignores_church_assignment(scopes):
    assert scopes.resolve_scope("u-pastor-none", Role.PASTOR) == frozenset()


def test_church_scope_prefers_assigned_churches(scopes):
    assert scopes.resolve_scope("u-bw", Role.BIBLEWORKER) == frozenset({"c1", "c2"})


def test_church_scope_falls_back_to_home_church(scopes):
    assert scopes.resolve_scope("u-sec", Role.CHURCH_SECRETARY) == frozenset({"c1"})


def test_church_scope_without_assignment_is_empty(scopes):
    assert scopes.resolve_scope("u-bw-none", Role.BIBLEWORKER) == frozenset()


def test_events_only_scope_is_empty(scopes):
    assert scopes.resolve_scope("u-coord", Role.COORDINATOR) == frozenset()


def test_unknown_user_never_unrestricted(scopes):
    scope = scopes.resolve_scope("ghost", Role.SUPERADMIN)
    assert scope == frozenset()
    assert not is_unrestricted(scope)


def test_can_access_church(scopes):
    assert scopes.can_access_church("u-super", Role.SUPERADMIN, "c4")
    assert scopes.can_access_church("u-bw", Role.BIBLEWORKER, "c2")
    assert not scopes.can_access_church("u-bw", Role.BIBLEWORKER, "c3")
    assert not scopes.can_access_church("u-field", Role.FIELD_SECRETARY, "c4")
    assert not scopes.can_access_church("u-sec", Role.CHURCH_SECRETARY, None)


def test_gate_require_church_raises(gate):
    gate.require_church("u-sec", Role.CHURCH_SECRETARY, "c1")
    with pytest.raises(AuthorizationError):
        gate.require_church("u-sec", Role.CHURCH_SECRETARY, "c2")


def test_gate_require_write(gate):
    gate.require_write(Role.BIBLEWORKER, Module.VISITORS)
    with pytest.raises(AuthorizationError):
        gate.require_write(Role.BIBLEWORKER, Module.MEMBERS)
    with pytest.raises(AuthorizationError):
        gate.require_module(Role.COORDINATOR, Module.TRANSFERS)


def test_unknown_stored_role_resolves_to_empty_scope(users, scopes):
    users.add(_to_assignment({"id": "u-odd", "role": "deacon", "church_id": "c1", "assigned_church_ids": '["c1"]'}))

    assert scopes.resolve_scope("u-odd", Role.CHURCH_SECRETARY) == frozenset()
    assert not scopes.can_access_church("u-odd", Role.SUPERADMIN, "c1")


def test_user_row_mapping():
    user = _to_assignment({"id": 7, "role": "bibleworker", "assigned_church_ids": b'["c1", "c2", null]'})

    assert user.user_id == "7"
    assert user.role == Role.BIBLEWORKER
    assert user.assigned_church_ids == frozenset({"c1", "c2"})
    assert _to_assignment({"id": "u-x", "role": None}).role is None
