from __future__ import annotations

from typing import Optional, Protocol

from .model import Member, Visitor


class MemberRepository(Protocol):
    def get_member(self, member_id: str) -> Optional[Member]:
        raise NotImplementedError

    def get_visitor(self, visitor_id: str) -> Optional[Visitor]:
        raise NotImplementedError

    def update_member_church(self, member_id: str, *, church_id: str) -> bool:
        raise NotImplementedError
