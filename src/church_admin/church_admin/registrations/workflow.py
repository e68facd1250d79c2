"""Attendance lifecycle for event registrations.

``registered`` -> ``attended`` | ``no_show`` | ``cancelled``; ``attended`` /
``no_show`` can be corrected or reverted to ``registered`` until the event is
finalized, after which the rows are locked for good. ``cancelled`` is terminal.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from ..bulk.coordinator import BulkCoordinator, BulkOutcome
from ..common.datetime_utils import now_utc
from ..common.validators import clean_optional, parse_enum, require_ids, require_non_empty
from ..core.constants import DELETABLE_STATUSES, FINALIZABLE_STATUSES, FINALIZER_ROLES
from ..core.enums import RegistrationStatus, Role
from ..core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError
from ..rbac.permissions import parse_role
from .access import RegistrationAccess
from .model import EventRegistration
from .repository import RegistrationRepository

logger = logging.getLogger(__name__)

CONFIRM_TARGETS = frozenset({RegistrationStatus.ATTENDED, RegistrationStatus.NO_SHOW, RegistrationStatus.REGISTERED})
BULK_CONFIRM_TARGETS = frozenset({RegistrationStatus.ATTENDED, RegistrationStatus.NO_SHOW})

_ALLOWED = {
    RegistrationStatus.REGISTERED: frozenset({RegistrationStatus.ATTENDED, RegistrationStatus.NO_SHOW}),
    RegistrationStatus.ATTENDED: CONFIRM_TARGETS,
    RegistrationStatus.NO_SHOW: CONFIRM_TARGETS,
}


def can_transition(current: RegistrationStatus, target: RegistrationStatus) -> bool:
    return target in _ALLOWED.get(current, frozenset())


class AttendanceWorkflow:
    def __init__(
        self,
        registrations: RegistrationRepository,
        access: RegistrationAccess,
        bulk: Optional[BulkCoordinator] = None,
        *,
        clock: Callable = now_utc,
    ):
        self._registrations = registrations
        self._access = access
        self._bulk = bulk or BulkCoordinator()
        self._clock = clock

    def _get(self, registration_id: str) -> EventRegistration:
        registration_id = require_non_empty(str(registration_id or ""), "Registration id")
        reg = self._registrations.get_by_id(registration_id)
        if not reg:
            raise NotFoundError("Registration not found")
        return reg

    def _apply_confirmation(self, reg: EventRegistration, status: RegistrationStatus, actor_id: str) -> EventRegistration:
        if reg.is_locked:
            raise InvalidTransitionError("Attendance for this registration has been finalized and is locked")
        if not can_transition(reg.status, status):
            raise InvalidTransitionError(f"Cannot change status from {reg.status.value} to {status.value}")

        if status == RegistrationStatus.REGISTERED:
            confirmed_at, confirmed_by = None, None
        else:
            confirmed_at, confirmed_by = self._clock(), str(actor_id)

        ok = self._registrations.set_attendance(
            reg.registration_id,
            expected_status=reg.status,
            status=status,
            confirmed_at=confirmed_at,
            confirmed_by=confirmed_by,
        )
        if not ok:
            # Finalized or changed by someone else since we read it.
            raise InvalidTransitionError("Registration was modified or locked; reload and try again")

        logger.info(
            "Registration %s: %s -> %s by %s",
            reg.registration_id,
            reg.status.value,
            status.value,
            actor_id,
        )
        return self._get(reg.registration_id)

    def confirm(self, *, registration_id: str, status: RegistrationStatus, actor_id: str, role: Role) -> EventRegistration:
        target = parse_enum(status, RegistrationStatus, CONFIRM_TARGETS)
        self._access.require_write(role)

        reg = self._get(registration_id)
        self._access.require_registration(actor_id, role, reg)
        return self._apply_confirmation(reg, target, actor_id)

    def confirm_bulk(
        self,
        *,
        registration_ids: Iterable[str],
        status: RegistrationStatus,
        actor_id: str,
        role: Role,
    ) -> BulkOutcome:
        """Confirm many registrations; locked or ineligible rows fail individually."""
        target = parse_enum(status, RegistrationStatus, BULK_CONFIRM_TARGETS)
        ids = require_ids(registration_ids, "registration")
        self._access.require_write(role)

        def _one(registration_id: str) -> EventRegistration:
            reg = self._get(registration_id)
            self._access.require_registration(actor_id, role, reg)
            return self._apply_confirmation(reg, target, actor_id)

        return self._bulk.run(ids, _one, label=f"confirm_bulk[{target.value}]")

    def finalize(self, *, event_id: str, actor_id: str, role: Role) -> int:
        """Lock every attended/no-show registration of the event.

        Already-locked rows are left alone, so re-running returns 0 and keeps the
        original stamps.
        """
        if parse_role(role) not in FINALIZER_ROLES:
            logger.warning("User %s (%s) attempted to finalize event %s", actor_id, role, event_id)
            raise AuthorizationError("Only superadmins and coordinators can finalize event attendance")
        event_id = require_non_empty(str(event_id or ""), "Event id")

        count = self._registrations.finalize_event(
            event_id,
            statuses=FINALIZABLE_STATUSES,
            confirmed_at=self._clock(),
            confirmed_by=str(actor_id),
        )
        logger.info("Finalized %d registrations for event %s by %s", count, event_id, actor_id)
        return count

    def cancel(
        self,
        *,
        registration_id: str,
        actor_id: str,
        role: Role,
        reason: Optional[str] = None,
    ) -> EventRegistration:
        self._access.require_write(role)
        reg = self._get(registration_id)
        self._access.require_registration(actor_id, role, reg)

        if reg.is_locked:
            raise InvalidTransitionError("Attendance for this registration has been finalized and is locked")
        if reg.status != RegistrationStatus.REGISTERED:
            raise InvalidTransitionError('Can only cancel registrations that are in "registered" status')

        reason = clean_optional(reason)
        notes = f"Cancelled: {reason}" if reason else "Cancelled"
        if not self._registrations.cancel(reg.registration_id, notes=notes):
            raise InvalidTransitionError("Registration was modified; reload and try again")

        logger.info("Registration %s cancelled by %s", reg.registration_id, actor_id)
        return self._get(reg.registration_id)

    def delete(self, *, registration_id: str, actor_id: str, role: Role) -> str:
        """Hard-delete a registration that was never confirmed. Returns its event id."""
        self._access.require_write(role)
        reg = self._get(registration_id)
        self._access.require_registration(actor_id, role, reg)

        if reg.is_locked or reg.status not in DELETABLE_STATUSES:
            raise InvalidTransitionError("Can only delete registrations that are not yet confirmed")
        if not self._registrations.delete(reg.registration_id, statuses=DELETABLE_STATUSES):
            raise InvalidTransitionError("Registration was modified; reload and try again")

        logger.info("Registration %s deleted by %s", reg.registration_id, actor_id)
        return reg.event_id
