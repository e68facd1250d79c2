from __future__ import annotations

from typing import Optional, Protocol

from .model import UserAssignment


class UserRepository(Protocol):
    """Repository interface for user assignments.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_assignment(self, user_id: str) -> Optional[UserAssignment]:
        raise NotImplementedError
