from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Church:
    church_id: str
    name: str
    field: str
    district: str
