"""Church scope resolution.

Turns a user's role and stored assignments into the set of churches whose
data they may see. Every missing assignment resolves to an empty set; only
national scope resolves to ``UNRESTRICTED``.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from ..churches.repository import ChurchRepository
from ..core.enums import DataScope, Role
from ..users.model import UserAssignment
from ..users.repository import UserRepository
from .permissions import lookup

logger = logging.getLogger(__name__)


class _Unrestricted:
    _instance: Optional["_Unrestricted"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __contains__(self, church_id: object) -> bool:
        return True

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "UNRESTRICTED"


UNRESTRICTED = _Unrestricted()

Scope = Union[frozenset, _Unrestricted]


def is_unrestricted(scope: Scope) -> bool:
    return scope is UNRESTRICTED


def scope_for_assignment(user: UserAssignment, role: Role, churches: ChurchRepository) -> Scope:
    data_scope = lookup(role).data_scope

    if data_scope == DataScope.NATIONAL:
        return UNRESTRICTED

    if data_scope == DataScope.FIELD:
        if not user.field_id:
            return frozenset()
        return frozenset(churches.list_ids_by_field(user.field_id))

    if data_scope == DataScope.DISTRICT:
        if not user.district_id:
            return frozenset()
        return frozenset(churches.list_ids_by_district(user.district_id))

    if data_scope == DataScope.CHURCH:
        if user.assigned_church_ids:
            return frozenset(user.assigned_church_ids)
        if user.church_id:
            return frozenset({user.church_id})
        return frozenset()

    # events_only: event visibility is a module question, not a church filter.
    return frozenset()


class ScopeResolver:
    def __init__(self, users: UserRepository, churches: ChurchRepository):
        self._users = users
        self._churches = churches

    def resolve_scope(self, user_id: str, role: Role) -> Scope:
        user = self._users.get_assignment(str(user_id)) if user_id else None
        if not user:
            logger.warning("No assignment found for user %s; resolving to empty scope", user_id)
            return frozenset()
        if user.role is None:
            logger.warning("User %s has no valid stored role; resolving to empty scope", user_id)
            return frozenset()
        return scope_for_assignment(user, role, self._churches)

    def can_access_church(self, user_id: str, role: Role, church_id: Optional[str]) -> bool:
        if not church_id:
            return False
        scope = self.resolve_scope(user_id, role)
        return is_unrestricted(scope) or str(church_id) in scope
