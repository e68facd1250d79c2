from __future__ import annotations

import pytest

from church_admin.bulk.coordinator import BulkCoordinator
from church_admin.container import wire
from church_admin.rbac.gate import ModuleGate
from church_admin.rbac.scope import ScopeResolver
from church_admin.registrations.access import RegistrationAccess
from church_admin.registrations.service import RegistrationService
from church_admin.registrations.workflow import AttendanceWorkflow
from church_admin.transfers.service import TransferService
from fakes import (
    CHURCHES,
    FIXED_NOW,
    MEMBERS,
    USERS,
    VISITORS,
    InMemoryChurches,
    InMemoryMembers,
    InMemoryRegistrations,
    InMemoryTransfers,
    InMemoryUsers,
)


@pytest.fixture
def users():
    return InMemoryUsers(USERS)


@pytest.fixture
def churches():
    return InMemoryChurches(CHURCHES)


@pytest.fixture
def members():
    return InMemoryMembers(MEMBERS, VISITORS)


@pytest.fixture
def registrations(members):
    return InMemoryRegistrations(members)


@pytest.fixture
def transfers():
    return InMemoryTransfers()


@pytest.fixture
def scopes(users, churches):
    return ScopeResolver(users, churches)


@pytest.fixture
def gate(scopes):
    return ModuleGate(scopes)


@pytest.fixture
def access(gate, members):
    return RegistrationAccess(gate, members)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def workflow(registrations, access, clock):
    return AttendanceWorkflow(registrations, access, BulkCoordinator(), clock=clock)


@pytest.fixture
def registration_service(registrations, access):
    return RegistrationService(registrations, access, BulkCoordinator())


@pytest.fixture
def transfer_service(transfers, members, churches, gate, clock):
    return TransferService(transfers, members, churches, gate, BulkCoordinator(), clock=clock)


@pytest.fixture
def container(users, churches, members, registrations, transfers):
    return wire(
        users_repo=users,
        churches_repo=churches,
        members_repo=members,
        registrations_repo=registrations,
        transfers_repo=transfers,
    )
