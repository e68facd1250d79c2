"""Role permission table.

Single source of truth for which modules a role may open, whether it may
write, and how far its data access reaches. The table is built once at import
time and exposed read-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Union

from ..core.enums import DataScope, Module, Role, SpecialPermission


class _AllModules:
    """Sentinel for roles that can open every module."""

    _instance: Optional["_AllModules"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __contains__(self, module: object) -> bool:
        return True

    def __repr__(self) -> str:
        return "ALL_MODULES"


ALL_MODULES = _AllModules()

ModuleSet = Union[frozenset, _AllModules]


@dataclass(frozen=True)
class RoleConfig:
    modules: ModuleSet
    can_write: bool
    data_scope: DataScope
    display_name: str
    special_permissions: Mapping[Module, SpecialPermission] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def has_all_modules(self) -> bool:
        return self.modules is ALL_MODULES


# Returned for anything outside the closed role set: no modules, no writes, no church data.
NO_ACCESS = RoleConfig(
    modules=frozenset(),
    can_write=False,
    data_scope=DataScope.EVENTS_ONLY,
    display_name="No access",
)

_CHURCH_ADMIN_MODULES = (
    Module.DASHBOARD,
    Module.MEMBERS,
    Module.VISITORS,
    Module.CHURCHES,
    Module.EVENTS,
    Module.ATTENDANCE,
    Module.TRANSFERS,
    Module.CALENDAR,
    Module.REPORTS,
    Module.MISSIONARY_REPORTS,
)

ROLE_PERMISSIONS: Mapping[Role, RoleConfig] = MappingProxyType(
    {
        Role.SUPERADMIN: RoleConfig(
            modules=ALL_MODULES,
            can_write=True,
            data_scope=DataScope.NATIONAL,
            display_name="Superadmin",
        ),
        Role.FIELD_SECRETARY: RoleConfig(
            modules=frozenset(_CHURCH_ADMIN_MODULES),
            can_write=True,
            data_scope=DataScope.FIELD,
            display_name="Field Secretary",
        ),
        Role.PASTOR: RoleConfig(
            modules=frozenset(_CHURCH_ADMIN_MODULES),
            can_write=True,
            data_scope=DataScope.DISTRICT,
            display_name="Pastor",
        ),
        # Manages a single church, so no churches list.
        Role.CHURCH_SECRETARY: RoleConfig(
            modules=frozenset(m for m in _CHURCH_ADMIN_MODULES if m != Module.CHURCHES),
            can_write=True,
            data_scope=DataScope.CHURCH,
            display_name="Church Secretary",
        ),
        Role.COORDINATOR: RoleConfig(
            modules=frozenset({Module.DASHBOARD, Module.EVENTS, Module.CALENDAR}),
            can_write=True,
            data_scope=DataScope.EVENTS_ONLY,
            display_name="Coordinator",
        ),
        Role.BIBLEWORKER: RoleConfig(
            modules=frozenset(
                {
                    Module.DASHBOARD,
                    Module.MEMBERS,
                    Module.VISITORS,
                    Module.EVENTS,
                    Module.ATTENDANCE,
                    Module.CALENDAR,
                    Module.REPORTS,
                    Module.MISSIONARY_REPORTS,
                }
            ),
            can_write=False,
            data_scope=DataScope.CHURCH,
            display_name="Bibleworker",
            special_permissions=MappingProxyType(
                {
                    Module.VISITORS: SpecialPermission.WRITE,
                    Module.MISSIONARY_REPORTS: SpecialPermission.WRITE,
                    Module.ATTENDANCE: SpecialPermission.WRITE,
                }
            ),
        ),
    }
)

# Lowest to highest. Used only for comparisons, never for scope.
ROLE_HIERARCHY: tuple[Role, ...] = (
    Role.BIBLEWORKER,
    Role.CHURCH_SECRETARY,
    Role.COORDINATOR,
    Role.PASTOR,
    Role.FIELD_SECRETARY,
    Role.SUPERADMIN,
)


def parse_role(value: object) -> Optional[Role]:
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value))
    except ValueError:
        return None


def lookup(role: object) -> RoleConfig:
    parsed = parse_role(role)
    if parsed is None:
        return NO_ACCESS
    return ROLE_PERMISSIONS.get(parsed, NO_ACCESS)


def role_display_name(role: object) -> str:
    return lookup(role).display_name


def is_role_higher_than(role1: Role, role2: Role) -> bool:
    return ROLE_HIERARCHY.index(role1) > ROLE_HIERARCHY.index(role2)


def roles_for_module(module: Module) -> list[Role]:
    return [role for role, config in ROLE_PERMISSIONS.items() if module in config.modules]
