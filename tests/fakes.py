from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from church_admin.churches.model import Church
from church_admin.core.enums import RegistrationStatus, Role, TransferStatus
from church_admin.members.model import Member, Visitor
from church_admin.registrations.model import EventRegistration, NewRegistration
from church_admin.transfers.model import TransferRequest
from church_admin.users.model import UserAssignment


class InMemoryUsers:
    def __init__(self, users=()):
        self._users = {u.user_id: u for u in users}

    def add(self, user: UserAssignment) -> None:
        self._users[user.user_id] = user

    def get_assignment(self, user_id):
        return self._users.get(user_id)


class InMemoryChurches:
    def __init__(self, churches=()):
        self._churches = {c.church_id: c for c in churches}

    def get_by_id(self, church_id):
        return self._churches.get(church_id)

    def list_ids_by_field(self, field):
        return [c.church_id for c in self._churches.values() if c.field == field]

    def list_ids_by_district(self, district):
        return [c.church_id for c in self._churches.values() if c.district == district]


class InMemoryMembers:
    def __init__(self, members=(), visitors=()):
        self.members = {m.member_id: m for m in members}
        self.visitors = {v.visitor_id: v for v in visitors}

    def get_member(self, member_id):
        return self.members.get(member_id)

    def get_visitor(self, visitor_id):
        return self.visitors.get(visitor_id)

    def update_member_church(self, member_id, *, church_id):
        member = self.members.get(member_id)
        if not member:
            return False
        self.members[member_id] = replace(member, church_id=church_id)
        return True


class InMemoryRegistrations:
    """Mirrors the conditional-update semantics of the MySQL repository."""

    def __init__(self, members: Optional[InMemoryMembers] = None):
        self.rows: dict[str, EventRegistration] = {}
        self._ids = itertools.count(1)
        self._members = members
        self.create_calls = 0

    def add(self, **fields) -> EventRegistration:
        rid = fields.pop("registration_id", None) or f"r{next(self._ids)}"
        fields.setdefault("registered_by", "u-super")
        fields.setdefault("status", RegistrationStatus.REGISTERED)
        reg = EventRegistration(registration_id=rid, **fields)
        self.rows[rid] = reg
        return reg

    def get_by_id(self, registration_id):
        return self.rows.get(registration_id)

    def _church_of(self, reg: EventRegistration):
        if reg.member_id:
            member = self._members.get_member(reg.member_id)
            return member.church_id if member else None
        visitor = self._members.get_visitor(reg.visitor_id)
        return visitor.associated_church_id if visitor else None

    def _in_churches(self, reg: EventRegistration, church_ids) -> bool:
        if church_ids is None:
            return True
        church = self._church_of(reg)
        if church is None and reg.visitor_id:
            return True
        return church in church_ids

    def list_for_event(self, event_id, *, statuses=None, church_ids=None, limit=500, offset=0):
        out = []
        for reg in self.rows.values():
            if reg.event_id != event_id:
                continue
            if statuses is not None and reg.status not in set(statuses):
                continue
            if not self._in_churches(reg, church_ids):
                continue
            out.append(reg)
        return out[offset : offset + limit]

    def count_by_status(self, event_id, *, church_ids=None):
        counts = {}
        for reg in self.rows.values():
            if reg.event_id != event_id or not self._in_churches(reg, church_ids):
                continue
            total, locked = counts.get(reg.status, (0, 0))
            counts[reg.status] = (total + 1, locked + (1 if reg.is_locked else 0))
        return counts

    def find_active_registrants(self, event_id, *, member_ids=(), visitor_ids=(), statuses):
        statuses = set(statuses)
        found = set()
        for reg in self.rows.values():
            if reg.event_id != event_id or reg.status not in statuses:
                continue
            if reg.member_id and reg.member_id in member_ids:
                found.add(reg.member_id)
            if reg.visitor_id and reg.visitor_id in visitor_ids:
                found.add(reg.visitor_id)
        return found

    def create(self, new: NewRegistration) -> EventRegistration:
        self.create_calls += 1
        return self.add(
            event_id=new.event_id,
            member_id=new.member_id,
            visitor_id=new.visitor_id,
            registered_by=new.registered_by,
            notes=new.notes,
            created_at=datetime(2026, 3, 1, 9, 0),
        )

    def create_many(self, rows):
        return [self.create(r) for r in rows]

    def set_attendance(self, registration_id, *, expected_status, status, confirmed_at, confirmed_by):
        reg = self.rows.get(registration_id)
        if not reg or reg.status != expected_status or reg.final_confirmed_at is not None:
            return False
        self.rows[registration_id] = replace(
            reg,
            status=status,
            attendance_confirmed_at=confirmed_at,
            attendance_confirmed_by=confirmed_by,
        )
        return True

    def cancel(self, registration_id, *, notes):
        reg = self.rows.get(registration_id)
        if not reg or reg.status != RegistrationStatus.REGISTERED or reg.final_confirmed_at is not None:
            return False
        self.rows[registration_id] = replace(reg, status=RegistrationStatus.CANCELLED, notes=notes)
        return True

    def finalize_event(self, event_id, *, statuses, confirmed_at, confirmed_by):
        statuses = set(statuses)
        count = 0
        for rid, reg in list(self.rows.items()):
            if reg.event_id == event_id and reg.status in statuses and reg.final_confirmed_at is None:
                self.rows[rid] = replace(reg, final_confirmed_at=confirmed_at, final_confirmed_by=confirmed_by)
                count += 1
        return count

    def delete(self, registration_id, *, statuses):
        reg = self.rows.get(registration_id)
        if not reg or reg.status not in set(statuses) or reg.final_confirmed_at is not None:
            return False
        del self.rows[registration_id]
        return True


class InMemoryTransfers:
    def __init__(self):
        self.rows: dict[str, TransferRequest] = {}
        self.history: list[dict] = []
        self.audit: list[dict] = []
        self._ids = itertools.count(1)

    def create(self, *, member_id, from_church_id, to_church_id, notes):
        tid = f"t{next(self._ids)}"
        self.rows[tid] = TransferRequest(
            transfer_id=tid,
            member_id=member_id,
            from_church_id=from_church_id,
            to_church_id=to_church_id,
            status=TransferStatus.PENDING,
            notes=notes,
        )
        return self.rows[tid]

    def get_by_id(self, transfer_id):
        return self.rows.get(transfer_id)

    def get_pending_for_member(self, member_id):
        for req in self.rows.values():
            if req.member_id == member_id and req.status == TransferStatus.PENDING:
                return req
        return None

    def decide(self, transfer_id, *, status, decided_by, decided_at, rejection_reason=None):
        req = self.rows.get(transfer_id)
        if not req or req.status != TransferStatus.PENDING:
            return False
        if status == TransferStatus.APPROVED:
            self.rows[transfer_id] = replace(req, status=status, approved_by=decided_by, approval_date=decided_at)
        else:
            self.rows[transfer_id] = replace(req, status=status, rejection_reason=rejection_reason)
        return True

    def add_history(self, **fields):
        self.history.append(fields)

    def log_action(self, *, user_id, action, record_id, new_values):
        self.audit.append({"user_id": user_id, "action": action, "record_id": record_id, "new_values": new_values})


CHURCHES = [
    Church(church_id="c1", name="Manila Central", field="luzon", district="d1"),
    Church(church_id="c2", name="Quezon City", field="luzon", district="d1"),
    Church(church_id="c3", name="Baguio", field="luzon", district="d2"),
    Church(church_id="c4", name="Cebu", field="visayan", district="d3"),
]

USERS = [
    UserAssignment(user_id="u-super", role=Role.SUPERADMIN),
    UserAssignment(user_id="u-field", role=Role.FIELD_SECRETARY, field_id="luzon"),
    UserAssignment(user_id="u-field-none", role=Role.FIELD_SECRETARY),
    UserAssignment(user_id="u-pastor", role=Role.PASTOR, district_id="d1"),
    UserAssignment(user_id="u-pastor-none", role=Role.PASTOR, church_id="c1"),
    UserAssignment(user_id="u-sec", role=Role.CHURCH_SECRETARY, church_id="c1"),
    UserAssignment(user_id="u-sec-c4", role=Role.CHURCH_SECRETARY, church_id="c4"),
    UserAssignment(
        user_id="u-bw",
        role=Role.BIBLEWORKER,
        church_id="c3",
        assigned_church_ids=frozenset({"c1", "c2"}),
    ),
    UserAssignment(user_id="u-bw-none", role=Role.BIBLEWORKER),
    UserAssignment(user_id="u-coord", role=Role.COORDINATOR),
]

MEMBERS = [Member(member_id=f"m{i}", full_name=f"Member {i}", church_id="c1") for i in range(1, 7)] + [
    Member(member_id="m7", full_name="Member 7", church_id="c4"),
]

VISITORS = [
    Visitor(visitor_id="v1", full_name="Visitor 1", associated_church_id="c1"),
    Visitor(visitor_id="v2", full_name="Visitor 2"),
    Visitor(visitor_id="v3", full_name="Visitor 3", associated_church_id="c4"),
]

FIXED_NOW = datetime(2026, 3, 7, 18, 30)
LATER = datetime(2026, 3, 8, 8, 0)
TODAY = date(2026, 3, 7)
