from __future__ import annotations

from typing import AbstractSet, Optional

from ..core.enums import DataScope, Module, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..members.repository import MemberRepository
from ..rbac.gate import ModuleGate, can_access_module, can_write
from ..rbac.permissions import lookup
from ..rbac.scope import is_unrestricted
from .model import EventRegistration

# Registrations are managed from both the events and the attendance screens.
REGISTRATION_MODULES = (Module.EVENTS, Module.ATTENDANCE)


class RegistrationAccess:
    """Authorization checks shared by registration creation and the attendance workflow."""

    def __init__(self, gate: ModuleGate, members: MemberRepository):
        self._gate = gate
        self._members = members

    def require_read(self, role: Role) -> None:
        if not any(can_access_module(role, m) for m in REGISTRATION_MODULES):
            raise AuthorizationError("You do not have access to event registrations")

    def require_write(self, role: Role) -> None:
        if not any(can_access_module(role, m) and can_write(role, m) for m in REGISTRATION_MODULES):
            raise AuthorizationError("Insufficient permissions to manage registrations")

    def church_filter(self, actor_id: str, role: Role) -> Optional[AbstractSet[str]]:
        """Church ids to filter registration lists by; ``None`` means no filter.

        Event-scoped roles work across all churches' events.
        """
        if lookup(role).data_scope == DataScope.EVENTS_ONLY:
            return None
        scope = self._gate.scopes.resolve_scope(actor_id, role)
        if is_unrestricted(scope):
            return None
        return scope

    def registrant_church(self, *, member_id: Optional[str] = None, visitor_id: Optional[str] = None) -> Optional[str]:
        if member_id:
            member = self._members.get_member(member_id)
            if not member:
                raise NotFoundError("Member not found")
            return member.church_id
        visitor = self._members.get_visitor(str(visitor_id))
        if not visitor:
            raise NotFoundError("Visitor not found")
        return visitor.associated_church_id

    def require_registrant(
        self,
        actor_id: str,
        role: Role,
        *,
        member_id: Optional[str] = None,
        visitor_id: Optional[str] = None,
    ) -> None:
        church_id = self.registrant_church(member_id=member_id, visitor_id=visitor_id)
        if lookup(role).data_scope == DataScope.EVENTS_ONLY:
            return
        # Visitors not tied to any church are not church-scoped data.
        if church_id is None and visitor_id:
            return
        self._gate.require_church(actor_id, role, church_id)

    def require_registration(self, actor_id: str, role: Role, registration: EventRegistration) -> None:
        self.require_registrant(
            actor_id,
            role,
            member_id=registration.member_id,
            visitor_id=registration.visitor_id,
        )
