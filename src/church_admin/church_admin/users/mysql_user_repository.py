from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..rbac.permissions import parse_role
from .model import UserAssignment
from .repository import UserRepository

logger = logging.getLogger(__name__)


def _parse_church_ids(value: Any) -> frozenset:
    # JSON column; connectors return either a decoded list or the raw text.
    if not value:
        return frozenset()
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value)
    return frozenset(str(v) for v in value if v)


def _to_assignment(row: Dict[str, Any]) -> UserAssignment:
    role = parse_role(row.get("role"))
    if role is None:
        logger.warning("User %s has unknown role %r", row.get("id"), row.get("role"))
    return UserAssignment(
        user_id=str(row["id"]),
        role=role,
        church_id=row.get("church_id"),
        district_id=row.get("district_id"),
        field_id=row.get("field_id"),
        assigned_church_ids=_parse_church_ids(row.get("assigned_church_ids")),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_assignment(self, user_id: str) -> Optional[UserAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, role, church_id, district_id, field_id, assigned_church_ids
                FROM users
                WHERE id=%s
                """,
                (str(user_id),),
            )
            row = fetchone(cur)
            return _to_assignment(row) if row else None
