from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from ..bulk.coordinator import BulkCoordinator, BulkOutcome
from ..churches.repository import ChurchRepository
from ..common.datetime_utils import now_utc
from ..common.validators import clean_optional, require_ids, require_min_length, require_non_empty
from ..core.constants import MIN_REJECTION_REASON_LENGTH
from ..core.enums import Module, Role, TransferStatus
from ..core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from ..members.repository import MemberRepository
from ..rbac.gate import ModuleGate
from .model import TransferRequest
from .repository import TransferRepository

logger = logging.getLogger(__name__)


class TransferService:
    """Use cases: request, approve and reject member transfers between churches."""

    def __init__(
        self,
        transfers: TransferRepository,
        members: MemberRepository,
        churches: ChurchRepository,
        gate: ModuleGate,
        bulk: Optional[BulkCoordinator] = None,
        *,
        clock: Callable = now_utc,
    ):
        self._transfers = transfers
        self._members = members
        self._churches = churches
        self._gate = gate
        self._bulk = bulk or BulkCoordinator()
        self._clock = clock

    def _get_pending(self, transfer_id: str) -> TransferRequest:
        transfer_id = require_non_empty(str(transfer_id or ""), "Transfer request id")
        req = self._transfers.get_by_id(transfer_id)
        if not req:
            raise NotFoundError("Transfer request not found")
        if req.status != TransferStatus.PENDING:
            raise InvalidTransitionError("Transfer request is not pending")
        return req

    def create_transfer_request(
        self,
        *,
        member_id: str,
        from_church_id: str,
        to_church_id: str,
        actor_id: str,
        role: Role,
        notes: Optional[str] = None,
    ) -> TransferRequest:
        self._gate.require_write(role, Module.TRANSFERS)
        member_id = require_non_empty(str(member_id or ""), "Member")
        from_church_id = require_non_empty(str(from_church_id or ""), "Source church")
        to_church_id = require_non_empty(str(to_church_id or ""), "Destination church")
        if from_church_id == to_church_id:
            raise ValidationError("Cannot transfer to the same church")

        self._gate.require_church(actor_id, role, from_church_id)

        if not self._churches.get_by_id(to_church_id):
            raise NotFoundError("Destination church not found")
        member = self._members.get_member(member_id)
        if not member:
            raise NotFoundError("Member not found")
        if member.church_id != from_church_id:
            raise ValidationError("Member does not belong to the source church")
        if self._transfers.get_pending_for_member(member_id):
            raise ValidationError("There is already a pending transfer request for this member")

        notes = clean_optional(notes)
        req = self._transfers.create(
            member_id=member_id,
            from_church_id=from_church_id,
            to_church_id=to_church_id,
            notes=notes,
        )
        self._transfers.log_action(
            user_id=str(actor_id),
            action="created_transfer_request",
            record_id=req.transfer_id,
            new_values={
                "member_id": member_id,
                "from_church_id": from_church_id,
                "to_church_id": to_church_id,
                "notes": notes,
            },
        )
        logger.info("Transfer request %s created for member %s by %s", req.transfer_id, member_id, actor_id)
        return req

    def create_bulk(
        self,
        *,
        member_ids: Iterable[str],
        from_church_id: str,
        to_church_id: str,
        actor_id: str,
        role: Role,
        notes: Optional[str] = None,
    ) -> BulkOutcome:
        """One transfer request per member; failures are reported per member."""
        ids = require_ids(member_ids, "member")
        if from_church_id and from_church_id == to_church_id:
            raise ValidationError("Cannot transfer to the same church")
        self._gate.require_write(role, Module.TRANSFERS)

        return self._bulk.run(
            ids,
            lambda member_id: self.create_transfer_request(
                member_id=member_id,
                from_church_id=from_church_id,
                to_church_id=to_church_id,
                actor_id=actor_id,
                role=role,
                notes=notes,
            ),
            label="create_transfers_bulk",
        )

    def approve(self, *, transfer_id: str, actor_id: str, role: Role) -> TransferRequest:
        self._gate.require_write(role, Module.TRANSFERS)
        req = self._get_pending(transfer_id)
        self._gate.require_church(actor_id, role, req.to_church_id)

        if not self._members.get_member(req.member_id):
            raise NotFoundError("Member not found")

        # The conditional decide claims the request; only the winner moves the member.
        now = self._clock()
        if not self._transfers.decide(
            req.transfer_id,
            status=TransferStatus.APPROVED,
            decided_by=str(actor_id),
            decided_at=now,
        ):
            raise InvalidTransitionError("Transfer request is not pending")
        if not self._members.update_member_church(req.member_id, church_id=req.to_church_id):
            logger.error("Transfer request %s approved but member %s could not be moved", req.transfer_id, req.member_id)
            raise NotFoundError("Member not found")

        from_church = self._churches.get_by_id(req.from_church_id)
        to_church = self._churches.get_by_id(req.to_church_id)
        self._transfers.add_history(
            member_id=req.member_id,
            from_church=from_church.name if from_church else "Unknown",
            to_church=to_church.name if to_church else "Unknown",
            from_church_id=req.from_church_id,
            to_church_id=req.to_church_id,
            transfer_date=now.date(),
        )
        self._transfers.log_action(
            user_id=str(actor_id),
            action="approved_transfer_request",
            record_id=req.transfer_id,
            new_values={"status": TransferStatus.APPROVED.value},
        )
        logger.info("Transfer request %s approved by %s", req.transfer_id, actor_id)
        return self._transfers.get_by_id(req.transfer_id) or req

    def reject(self, *, transfer_id: str, reason: str, actor_id: str, role: Role) -> TransferRequest:
        self._gate.require_write(role, Module.TRANSFERS)
        reason = require_min_length(reason, "Rejection reason", MIN_REJECTION_REASON_LENGTH)
        req = self._get_pending(transfer_id)
        self._gate.require_church(actor_id, role, req.to_church_id)

        if not self._transfers.decide(
            req.transfer_id,
            status=TransferStatus.REJECTED,
            decided_by=str(actor_id),
            decided_at=self._clock(),
            rejection_reason=reason,
        ):
            raise InvalidTransitionError("Transfer request is not pending")

        self._transfers.log_action(
            user_id=str(actor_id),
            action="rejected_transfer_request",
            record_id=req.transfer_id,
            new_values={"status": TransferStatus.REJECTED.value, "rejection_reason": reason},
        )
        logger.info("Transfer request %s rejected by %s", req.transfer_id, actor_id)
        return self._transfers.get_by_id(req.transfer_id) or req
