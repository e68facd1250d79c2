from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..bulk.coordinator import BulkCoordinator, BulkItemError
from ..common.validators import clean_optional, parse_enum, require_ids, require_non_empty
from ..core.constants import ACTIVE_REGISTRATION_STATUSES, DEFAULT_LIST_LIMIT
from ..core.enums import RegistrationStatus, Role
from ..core.exceptions import ValidationError
from .access import RegistrationAccess
from .model import EventRegistration, NewRegistration
from .repository import RegistrationRepository

logger = logging.getLogger(__name__)


@dataclass
class BulkRegistrationResult:
    registered: int
    skipped: int
    data: List[EventRegistration] = field(default_factory=list)
    failed: List[BulkItemError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "registered": self.registered,
            "skipped": self.skipped,
            "data": [r.to_dict() for r in self.data],
            "failed": [f.to_dict() for f in self.failed],
        }


class RegistrationService:
    """Use cases: register members/visitors for events and list registrations."""

    def __init__(
        self,
        registrations: RegistrationRepository,
        access: RegistrationAccess,
        bulk: Optional[BulkCoordinator] = None,
    ):
        self._registrations = registrations
        self._access = access
        self._bulk = bulk or BulkCoordinator()

    def register_member(
        self,
        *,
        event_id: str,
        member_id: str,
        actor_id: str,
        role: Role,
        notes: Optional[str] = None,
    ) -> EventRegistration:
        return self._register_one(event_id=event_id, actor_id=actor_id, role=role, notes=notes, member_id=member_id)

    def register_visitor(
        self,
        *,
        event_id: str,
        visitor_id: str,
        actor_id: str,
        role: Role,
        notes: Optional[str] = None,
    ) -> EventRegistration:
        return self._register_one(event_id=event_id, actor_id=actor_id, role=role, notes=notes, visitor_id=visitor_id)

    def register(
        self,
        *,
        event_id: str,
        actor_id: str,
        role: Role,
        member_id: Optional[str] = None,
        visitor_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> EventRegistration:
        """Register exactly one of a member or a visitor."""
        return self._register_one(
            event_id=event_id, actor_id=actor_id, role=role, notes=notes, member_id=member_id, visitor_id=visitor_id
        )

    def _register_one(
        self,
        *,
        event_id: str,
        actor_id: str,
        role: Role,
        notes: Optional[str],
        member_id: Optional[str] = None,
        visitor_id: Optional[str] = None,
    ) -> EventRegistration:
        event_id = require_non_empty(str(event_id or ""), "Event id")
        if bool(member_id) == bool(visitor_id):
            raise ValidationError("Provide either a member or a visitor, not both")
        self._access.require_write(role)
        self._access.require_registrant(actor_id, role, member_id=member_id, visitor_id=visitor_id)

        existing = self._registrations.find_active_registrants(
            event_id,
            member_ids=[member_id] if member_id else [],
            visitor_ids=[visitor_id] if visitor_id else [],
            statuses=ACTIVE_REGISTRATION_STATUSES,
        )
        if existing:
            kind = "Member" if member_id else "Visitor"
            raise ValidationError(f"{kind} is already registered for this event")

        reg = self._registrations.create(
            NewRegistration(
                event_id=event_id,
                registered_by=str(actor_id),
                member_id=member_id,
                visitor_id=visitor_id,
                notes=clean_optional(notes),
            )
        )
        logger.info("Registered %s %s for event %s", reg.registrant_kind, member_id or visitor_id, event_id)
        return reg

    def register_members_bulk(
        self,
        *,
        event_id: str,
        member_ids: Iterable[str],
        actor_id: str,
        role: Role,
        notes: Optional[str] = None,
    ) -> BulkRegistrationResult:
        return self._register_bulk(
            event_id=event_id, ids=member_ids, kind="member", actor_id=actor_id, role=role, notes=notes
        )

    def register_visitors_bulk(
        self,
        *,
        event_id: str,
        visitor_ids: Iterable[str],
        actor_id: str,
        role: Role,
        notes: Optional[str] = None,
    ) -> BulkRegistrationResult:
        return self._register_bulk(
            event_id=event_id, ids=visitor_ids, kind="visitor", actor_id=actor_id, role=role, notes=notes
        )

    def register_bulk(
        self,
        *,
        event_id: str,
        actor_id: str,
        role: Role,
        member_ids: Iterable[str] = (),
        visitor_ids: Iterable[str] = (),
        notes: Optional[str] = None,
    ) -> BulkRegistrationResult:
        member_ids, visitor_ids = list(member_ids or []), list(visitor_ids or [])
        if member_ids and visitor_ids:
            raise ValidationError("Register members and visitors in separate batches")
        if visitor_ids:
            return self.register_visitors_bulk(
                event_id=event_id, visitor_ids=visitor_ids, actor_id=actor_id, role=role, notes=notes
            )
        return self.register_members_bulk(
            event_id=event_id, member_ids=member_ids, actor_id=actor_id, role=role, notes=notes
        )

    def _register_bulk(
        self,
        *,
        event_id: str,
        ids: Iterable[str],
        kind: str,
        actor_id: str,
        role: Role,
        notes: Optional[str],
    ) -> BulkRegistrationResult:
        event_id = require_non_empty(str(event_id or ""), "Event id")
        ids = require_ids(ids, kind)
        self._access.require_write(role)

        is_member = kind == "member"
        existing = self._registrations.find_active_registrants(
            event_id,
            member_ids=ids if is_member else [],
            visitor_ids=[] if is_member else ids,
            statuses=ACTIVE_REGISTRATION_STATUSES,
        )
        to_register = [i for i in ids if i not in existing]
        if not to_register:
            raise ValidationError(f"All selected {kind}s are already registered")

        notes = clean_optional(notes)

        def _one(registrant_id: str) -> EventRegistration:
            ref = {"member_id": registrant_id} if is_member else {"visitor_id": registrant_id}
            self._access.require_registrant(actor_id, role, **ref)
            return self._registrations.create(
                NewRegistration(event_id=event_id, registered_by=str(actor_id), notes=notes, **ref)
            )

        outcome = self._bulk.run(to_register, _one, label=f"register_{kind}s_bulk")
        return BulkRegistrationResult(
            registered=outcome.success_count,
            skipped=len(ids) - len(to_register),
            data=list(outcome.succeeded),
            failed=list(outcome.failed),
        )

    def list_for_event(
        self,
        *,
        event_id: str,
        actor_id: str,
        role: Role,
        status: Optional[RegistrationStatus] = None,
        limit: int = DEFAULT_LIST_LIMIT,
        offset: int = 0,
    ) -> List[EventRegistration]:
        statuses = [parse_enum(status, RegistrationStatus)] if status else None
        self._access.require_read(role)
        church_ids = self._access.church_filter(actor_id, role)
        if church_ids is not None and not church_ids:
            return []
        return list(
            self._registrations.list_for_event(
                str(event_id),
                statuses=statuses,
                church_ids=church_ids,
                limit=int(limit),
                offset=int(offset),
            )
        )

    def summary(self, *, event_id: str, actor_id: str, role: Role) -> dict:
        """Status counts for the attendance screen."""
        self._access.require_read(role)
        church_ids = self._access.church_filter(actor_id, role)
        if church_ids is not None and not church_ids:
            counts = {}
        else:
            counts = self._registrations.count_by_status(str(event_id), church_ids=church_ids)

        by_status = {s: counts.get(s, (0, 0))[0] for s in RegistrationStatus}
        return {
            "total": sum(by_status.values()),
            **{s.value: n for s, n in by_status.items()},
            "locked": sum(locked for _, locked in counts.values()),
            "pending_confirmation": by_status[RegistrationStatus.REGISTERED],
        }
