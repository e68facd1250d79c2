from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Member:
    member_id: str
    full_name: str
    church_id: str


@dataclass(frozen=True)
class Visitor:
    visitor_id: str
    full_name: str
    associated_church_id: Optional[str] = None
