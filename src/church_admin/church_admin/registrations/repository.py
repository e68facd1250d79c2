from __future__ import annotations

from datetime import datetime
from typing import AbstractSet, Dict, Iterable, Optional, Protocol, Sequence, Tuple

from ..core.enums import RegistrationStatus
from .model import EventRegistration, NewRegistration


class RegistrationRepository(Protocol):
    """Store for event registrations.

    Every mutating method is a conditional update: it only touches rows that
    are not finalized (``final_confirmed_at IS NULL``) and, where given, whose
    current status matches. The return value says whether (or how many) rows
    matched.
    """

    def get_by_id(self, registration_id: str) -> Optional[EventRegistration]:
        raise NotImplementedError

    def list_for_event(
        self,
        event_id: str,
        *,
        statuses: Optional[Iterable[RegistrationStatus]] = None,
        church_ids: Optional[AbstractSet[str]] = None,
        limit: int = 500,
        offset: int = 0,
    ) -> Sequence[EventRegistration]:
        """``church_ids=None`` means no church filter."""

        raise NotImplementedError

    def count_by_status(
        self,
        event_id: str,
        *,
        church_ids: Optional[AbstractSet[str]] = None,
    ) -> Dict[RegistrationStatus, Tuple[int, int]]:
        """Unpaginated ``status -> (rows, locked rows)`` for the event; same church filter as ``list_for_event``."""

        raise NotImplementedError

    def find_active_registrants(
        self,
        event_id: str,
        *,
        member_ids: Sequence[str] = (),
        visitor_ids: Sequence[str] = (),
        statuses: Iterable[RegistrationStatus],
    ) -> set[str]:
        """Return the member/visitor ids that already hold a registration in ``statuses``."""

        raise NotImplementedError

    def create(self, new: NewRegistration) -> EventRegistration:
        raise NotImplementedError

    def create_many(self, rows: Sequence[NewRegistration]) -> Sequence[EventRegistration]:
        raise NotImplementedError

    def set_attendance(
        self,
        registration_id: str,
        *,
        expected_status: RegistrationStatus,
        status: RegistrationStatus,
        confirmed_at: Optional[datetime],
        confirmed_by: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def cancel(self, registration_id: str, *, notes: str) -> bool:
        raise NotImplementedError

    def finalize_event(
        self,
        event_id: str,
        *,
        statuses: Iterable[RegistrationStatus],
        confirmed_at: datetime,
        confirmed_by: str,
    ) -> int:
        raise NotImplementedError

    def delete(self, registration_id: str, *, statuses: Iterable[RegistrationStatus]) -> bool:
        raise NotImplementedError
