from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RegistrationStatus


@dataclass(frozen=True)
class EventRegistration:
    """Domain entity: one member's or visitor's registration for an event.

    Exactly one of ``member_id`` / ``visitor_id`` is set. Once
    ``final_confirmed_at`` is set the record is locked.
    """

    registration_id: str
    event_id: str
    status: RegistrationStatus
    registered_by: str
    member_id: Optional[str] = None
    visitor_id: Optional[str] = None
    notes: Optional[str] = None
    attendance_confirmed_at: Optional[datetime] = None
    attendance_confirmed_by: Optional[str] = None
    final_confirmed_at: Optional[datetime] = None
    final_confirmed_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_locked(self) -> bool:
        return self.final_confirmed_at is not None

    @property
    def registrant_kind(self) -> str:
        return "member" if self.member_id else "visitor"

    def to_dict(self) -> dict:
        def _ts(v: Optional[datetime]) -> Optional[str]:
            return v.isoformat() if v else None

        return {
            "id": self.registration_id,
            "event_id": self.event_id,
            "member_id": self.member_id,
            "visitor_id": self.visitor_id,
            "status": self.status.value,
            "registered_by": self.registered_by,
            "notes": self.notes,
            "attendance_confirmed_at": _ts(self.attendance_confirmed_at),
            "attendance_confirmed_by": self.attendance_confirmed_by,
            "final_confirmed_at": _ts(self.final_confirmed_at),
            "final_confirmed_by": self.final_confirmed_by,
            "locked": self.is_locked,
        }


@dataclass(frozen=True)
class NewRegistration:
    event_id: str
    registered_by: str
    member_id: Optional[str] = None
    visitor_id: Optional[str] = None
    notes: Optional[str] = None
