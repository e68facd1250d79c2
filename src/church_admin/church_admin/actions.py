"""Public action surface.

Each method authenticates the actor, calls the underlying service and returns
an :class:`ActionResult` instead of raising, so request handlers only branch
on ``result.ok`` / ``result.code``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .core.enums import Module, Role
from .core.exceptions import AuthenticationError
from .core.results import ActionResult, run_action
from .rbac import gate
from .rbac.permissions import lookup, parse_role
from .rbac.scope import ScopeResolver, is_unrestricted
from .registrations.service import RegistrationService
from .registrations.workflow import AttendanceWorkflow
from .transfers.service import TransferService


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: Role


def actor_from(user_id: object, role: object) -> Optional[Actor]:
    parsed = parse_role(role)
    if not user_id or parsed is None:
        return None
    return Actor(user_id=str(user_id), role=parsed)


def _authenticated(actor: Optional[Actor]) -> Actor:
    if actor is None:
        raise AuthenticationError("Unauthorized")
    return actor


class Actions:
    def __init__(
        self,
        scopes: ScopeResolver,
        registrations: RegistrationService,
        attendance: AttendanceWorkflow,
        transfers: TransferService,
    ):
        self._scopes = scopes
        self._registrations = registrations
        self._attendance = attendance
        self._transfers = transfers

    # -------- Permissions --------
    def permissions(self, actor: Optional[Actor]) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            config = lookup(a.role)
            scope = self._scopes.resolve_scope(a.user_id, a.role)
            modules = [m for m in Module if gate.can_access_module(a.role, m)]
            return {
                "role": a.role.value,
                "display_name": config.display_name,
                "data_scope": config.data_scope.value,
                "modules": [m.value for m in modules],
                "writable_modules": [m.value for m in modules if gate.can_write(a.role, m)],
                "landing_module": gate.default_landing_module(a.role).value,
                "churches": "unrestricted" if is_unrestricted(scope) else sorted(scope),
            }

        return run_action("permissions", _run)

    def can_access_church(self, actor: Optional[Actor], church_id: str) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            return self._scopes.can_access_church(a.user_id, a.role, church_id)

        return run_action("can_access_church", _run)

    # -------- Registrations --------
    def list_registrations(self, actor: Optional[Actor], event_id: str, *, status=None) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            rows = self._registrations.list_for_event(event_id=event_id, actor_id=a.user_id, role=a.role, status=status)
            return [r.to_dict() for r in rows]

        return run_action("list_registrations", _run)

    def registration_summary(self, actor: Optional[Actor], event_id: str) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            return self._registrations.summary(event_id=event_id, actor_id=a.user_id, role=a.role)

        return run_action("registration_summary", _run)

    def register(
        self,
        actor: Optional[Actor],
        event_id: str,
        *,
        member_id: Optional[str] = None,
        visitor_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            reg = self._registrations.register(
                event_id=event_id,
                member_id=member_id,
                visitor_id=visitor_id,
                actor_id=a.user_id,
                role=a.role,
                notes=notes,
            )
            return reg.to_dict()

        return run_action("register", _run)

    def register_bulk(
        self,
        actor: Optional[Actor],
        event_id: str,
        *,
        member_ids: Iterable[str] = (),
        visitor_ids: Iterable[str] = (),
        notes: Optional[str] = None,
    ) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            result = self._registrations.register_bulk(
                event_id=event_id,
                member_ids=member_ids,
                visitor_ids=visitor_ids,
                actor_id=a.user_id,
                role=a.role,
                notes=notes,
            )
            return result.to_dict()

        return run_action("register_bulk", _run)

    # -------- Attendance workflow --------
    def confirm(self, actor: Optional[Actor], registration_id: str, status: str) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            reg = self._attendance.confirm(
                registration_id=registration_id, status=status, actor_id=a.user_id, role=a.role
            )
            return reg.to_dict()

        return run_action("confirm", _run)

    def confirm_bulk(self, actor: Optional[Actor], registration_ids: Iterable[str], status: str) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            outcome = self._attendance.confirm_bulk(
                registration_ids=registration_ids, status=status, actor_id=a.user_id, role=a.role
            )
            return outcome.to_dict(lambda r: r.to_dict())

        return run_action("confirm_bulk", _run)

    def finalize(self, actor: Optional[Actor], event_id: str) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            return {"count": self._attendance.finalize(event_id=event_id, actor_id=a.user_id, role=a.role)}

        return run_action("finalize", _run)

    def cancel(self, actor: Optional[Actor], registration_id: str, reason: Optional[str] = None) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            reg = self._attendance.cancel(
                registration_id=registration_id, reason=reason, actor_id=a.user_id, role=a.role
            )
            return reg.to_dict()

        return run_action("cancel", _run)

    def delete(self, actor: Optional[Actor], registration_id: str) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            event_id = self._attendance.delete(registration_id=registration_id, actor_id=a.user_id, role=a.role)
            return {"event_id": event_id}

        return run_action("delete", _run)

    # -------- Transfers --------
    def create_transfer(
        self,
        actor: Optional[Actor],
        *,
        member_id: str,
        from_church_id: str,
        to_church_id: str,
        notes: Optional[str] = None,
    ) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            req = self._transfers.create_transfer_request(
                member_id=member_id,
                from_church_id=from_church_id,
                to_church_id=to_church_id,
                notes=notes,
                actor_id=a.user_id,
                role=a.role,
            )
            return req.to_dict()

        return run_action("create_transfer", _run)

    def create_transfers_bulk(
        self,
        actor: Optional[Actor],
        *,
        member_ids: Iterable[str],
        from_church_id: str,
        to_church_id: str,
        notes: Optional[str] = None,
    ) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            outcome = self._transfers.create_bulk(
                member_ids=member_ids,
                from_church_id=from_church_id,
                to_church_id=to_church_id,
                notes=notes,
                actor_id=a.user_id,
                role=a.role,
            )
            return {
                "successCount": outcome.success_count,
                "errorCount": outcome.failure_count,
                "succeeded": [r.to_dict() for r in outcome.succeeded],
                "failed": [f.to_dict() for f in outcome.failed],
            }

        return run_action("create_transfers_bulk", _run)

    def approve_transfer(self, actor: Optional[Actor], transfer_id: str) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            return self._transfers.approve(transfer_id=transfer_id, actor_id=a.user_id, role=a.role).to_dict()

        return run_action("approve_transfer", _run)

    def reject_transfer(self, actor: Optional[Actor], transfer_id: str, reason: str) -> ActionResult:
        def _run():
            a = _authenticated(actor)
            return self._transfers.reject(
                transfer_id=transfer_id, reason=reason, actor_id=a.user_id, role=a.role
            ).to_dict()

        return run_action("reject_transfer", _run)
