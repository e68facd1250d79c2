from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Member, Visitor
from .repository import MemberRepository


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_member(self, member_id: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, full_name, church_id FROM members WHERE id=%s", (str(member_id),))
            r = fetchone(cur)
            if not r:
                return None
            return Member(member_id=str(r["id"]), full_name=r["full_name"], church_id=str(r["church_id"]))

    def get_visitor(self, visitor_id: str) -> Optional[Visitor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, full_name, associated_church_id FROM visitors WHERE id=%s",
                (str(visitor_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Visitor(
                visitor_id=str(r["id"]),
                full_name=r["full_name"],
                associated_church_id=r.get("associated_church_id"),
            )

    def update_member_church(self, member_id: str, *, church_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE members SET church_id=%s WHERE id=%s", (str(church_id), str(member_id)))
            return cur.rowcount > 0
