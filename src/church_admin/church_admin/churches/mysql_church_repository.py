from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Church
from .repository import ChurchRepository


class MySQLChurchRepository(ChurchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, church_id: str) -> Optional[Church]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, field, district FROM churches WHERE id=%s",
                (str(church_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Church(church_id=str(r["id"]), name=r["name"], field=r["field"], district=r["district"])

    def list_ids_by_field(self, field: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM churches WHERE field=%s", (field,))
            return [str(r["id"]) for r in fetchall(cur)]

    def list_ids_by_district(self, district: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM churches WHERE district=%s", (district,))
            return [str(r["id"]) for r in fetchall(cur)]
