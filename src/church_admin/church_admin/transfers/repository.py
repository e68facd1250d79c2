from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from ..core.enums import TransferStatus
from .model import TransferRequest


class TransferRepository(Protocol):
    def create(
        self,
        *,
        member_id: str,
        from_church_id: str,
        to_church_id: str,
        notes: Optional[str],
    ) -> TransferRequest:
        raise NotImplementedError

    def get_by_id(self, transfer_id: str) -> Optional[TransferRequest]:
        raise NotImplementedError

    def get_pending_for_member(self, member_id: str) -> Optional[TransferRequest]:
        raise NotImplementedError

    def decide(
        self,
        transfer_id: str,
        *,
        status: TransferStatus,
        decided_by: str,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a pending request to ``status``; False when it is no longer pending."""

        raise NotImplementedError

    def add_history(
        self,
        *,
        member_id: str,
        from_church: str,
        to_church: str,
        from_church_id: str,
        to_church_id: str,
        transfer_date: date,
    ) -> None:
        raise NotImplementedError

    def log_action(self, *, user_id: str, action: str, record_id: str, new_values: dict) -> None:
        raise NotImplementedError
