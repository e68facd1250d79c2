"""Module and write-permission checks over the permission table."""

from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import DataScope, Module, Role, SpecialPermission
from ..core.exceptions import AuthorizationError
from .permissions import lookup, parse_role
from .scope import ScopeResolver

logger = logging.getLogger(__name__)

_PATH_MODULES = {m.value: m for m in Module}


def can_access_module(role: Role, module: Module) -> bool:
    return module in lookup(role).modules


def can_write(role: Role, module: Optional[Module] = None) -> bool:
    config = lookup(role)
    if module is not None and module in config.special_permissions:
        return config.special_permissions[module] == SpecialPermission.WRITE
    return config.can_write


def default_landing_module(role: Role) -> Module:
    """Where to send a user after sign-in or a denied module."""
    config = lookup(role)
    if config.data_scope == DataScope.EVENTS_ONLY and Module.EVENTS in config.modules:
        return Module.EVENTS
    if config.has_all_modules or Module.DASHBOARD in config.modules:
        return Module.DASHBOARD
    for module in Module:
        if module in config.modules:
            return module
    return Module.EVENTS


def module_from_path(pathname: str) -> Optional[Module]:
    segments = [s for s in (pathname or "").split("/") if s]
    if not segments:
        return Module.DASHBOARD
    return _PATH_MODULES.get(segments[0])


def has_elevated_privileges(role: Role) -> bool:
    return parse_role(role) in {Role.SUPERADMIN, Role.FIELD_SECRETARY}


def is_church_admin(role: Role) -> bool:
    return parse_role(role) in {Role.SUPERADMIN, Role.FIELD_SECRETARY, Role.PASTOR, Role.CHURCH_SECRETARY}


class ModuleGate:
    """Raising variants of the checks, for use at the top of service methods."""

    def __init__(self, scopes: ScopeResolver):
        self._scopes = scopes

    @property
    def scopes(self) -> ScopeResolver:
        return self._scopes

    def require_module(self, role: Role, module: Module) -> None:
        if not can_access_module(role, module):
            logger.warning("Role %s denied access to module %s", role, module.value)
            raise AuthorizationError(f"You do not have access to {module.value}")

    def require_write(self, role: Role, module: Module) -> None:
        self.require_module(role, module)
        if not can_write(role, module):
            logger.warning("Role %s denied write on module %s", role, module.value)
            raise AuthorizationError("Insufficient permissions")

    def require_church(self, user_id: str, role: Role, church_id: Optional[str]) -> None:
        if not self._scopes.can_access_church(user_id, role, church_id):
            logger.warning("User %s (%s) denied access to church %s", user_id, role, church_id)
            raise AuthorizationError("This church is outside your assigned scope")
