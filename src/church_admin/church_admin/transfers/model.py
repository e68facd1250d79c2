from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import TransferStatus


@dataclass(frozen=True)
class TransferRequest:
    transfer_id: str
    member_id: str
    from_church_id: str
    to_church_id: str
    status: TransferStatus
    notes: Optional[str] = None
    approved_by: Optional[str] = None
    approval_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.transfer_id,
            "member_id": self.member_id,
            "from_church_id": self.from_church_id,
            "to_church_id": self.to_church_id,
            "status": self.status.value,
            "notes": self.notes,
            "approved_by": self.approved_by,
            "approval_date": self.approval_date.isoformat() if self.approval_date else None,
            "rejection_reason": self.rejection_reason,
        }
