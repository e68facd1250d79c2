from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Church


class ChurchRepository(Protocol):
    def get_by_id(self, church_id: str) -> Optional[Church]:
        raise NotImplementedError

    def list_ids_by_field(self, field: str) -> Sequence[str]:
        raise NotImplementedError

    def list_ids_by_district(self, district: str) -> Sequence[str]:
        raise NotImplementedError
