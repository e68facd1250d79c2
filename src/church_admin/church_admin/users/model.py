from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class UserAssignment:
    """Domain entity: the organizational assignments of a user.

    Only the fields consulted by scope resolution; other profile data lives
    elsewhere.
    """

    user_id: str
    role: Optional[Role]
    church_id: Optional[str] = None
    district_id: Optional[str] = None
    field_id: Optional[str] = None
    assigned_church_ids: frozenset = field(default_factory=frozenset)
