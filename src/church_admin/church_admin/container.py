from __future__ import annotations

from dataclasses import dataclass

from .actions import Actions
from .bulk.coordinator import BulkCoordinator
from .churches.mysql_church_repository import MySQLChurchRepository
from .churches.repository import ChurchRepository
from .database.connection import DBConfig, DatabaseConnection
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .rbac.gate import ModuleGate
from .rbac.scope import ScopeResolver
from .registrations.access import RegistrationAccess
from .registrations.mysql_registration_repository import MySQLRegistrationRepository
from .registrations.repository import RegistrationRepository
from .registrations.service import RegistrationService
from .registrations.workflow import AttendanceWorkflow
from .transfers.mysql_transfer_repository import MySQLTransferRepository
from .transfers.repository import TransferRepository
from .transfers.service import TransferService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    churches_repo: ChurchRepository
    members_repo: MemberRepository
    registrations_repo: RegistrationRepository
    transfers_repo: TransferRepository

    scope_resolver: ScopeResolver
    module_gate: ModuleGate
    registration_service: RegistrationService
    attendance_workflow: AttendanceWorkflow
    transfer_service: TransferService
    actions: Actions


def wire(
    *,
    users_repo: UserRepository,
    churches_repo: ChurchRepository,
    members_repo: MemberRepository,
    registrations_repo: RegistrationRepository,
    transfers_repo: TransferRepository,
) -> Container:
    """Build the service graph over any set of repositories."""
    bulk = BulkCoordinator()
    scope_resolver = ScopeResolver(users_repo, churches_repo)
    module_gate = ModuleGate(scope_resolver)
    access = RegistrationAccess(module_gate, members_repo)

    registration_service = RegistrationService(registrations_repo, access, bulk)
    attendance_workflow = AttendanceWorkflow(registrations_repo, access, bulk)
    transfer_service = TransferService(transfers_repo, members_repo, churches_repo, module_gate, bulk)

    return Container(
        users_repo=users_repo,
        churches_repo=churches_repo,
        members_repo=members_repo,
        registrations_repo=registrations_repo,
        transfers_repo=transfers_repo,
        scope_resolver=scope_resolver,
        module_gate=module_gate,
        registration_service=registration_service,
        attendance_workflow=attendance_workflow,
        transfer_service=transfer_service,
        actions=Actions(scope_resolver, registration_service, attendance_workflow, transfer_service),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    return wire(
        users_repo=MySQLUserRepository(conn),
        churches_repo=MySQLChurchRepository(conn),
        members_repo=MySQLMemberRepository(conn),
        registrations_repo=MySQLRegistrationRepository(conn),
        transfers_repo=MySQLTransferRepository(conn),
    )
