from __future__ import annotations

import json
import uuid
from datetime import date, datetime
from typing import Any, Dict, Optional

from ..core.enums import TransferStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import TransferRequest
from .repository import TransferRepository

_COLUMNS = """
    id, member_id, from_church_id, to_church_id, status, notes,
    approved_by, approval_date, rejection_reason, created_at
"""


def _to_transfer(r: Dict[str, Any]) -> TransferRequest:
    return TransferRequest(
        transfer_id=str(r["id"]),
        member_id=str(r["member_id"]),
        from_church_id=str(r["from_church_id"]),
        to_church_id=str(r["to_church_id"]),
        status=TransferStatus(r["status"]),
        notes=r.get("notes"),
        approved_by=r.get("approved_by"),
        approval_date=r.get("approval_date"),
        rejection_reason=r.get("rejection_reason"),
        created_at=r.get("created_at"),
    )


class MySQLTransferRepository(TransferRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        member_id: str,
        from_church_id: str,
        to_church_id: str,
        notes: Optional[str],
    ) -> TransferRequest:
        transfer_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO transfer_requests(id, member_id, from_church_id, to_church_id, status, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (transfer_id, member_id, from_church_id, to_church_id, TransferStatus.PENDING.value, notes),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM transfer_requests WHERE id=%s", (transfer_id,))
            return _to_transfer(fetchone(cur))

    def get_by_id(self, transfer_id: str) -> Optional[TransferRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM transfer_requests WHERE id=%s", (str(transfer_id),))
            r = fetchone(cur)
            return _to_transfer(r) if r else None

    def get_pending_for_member(self, member_id: str) -> Optional[TransferRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM transfer_requests WHERE member_id=%s AND status=%s LIMIT 1",
                (str(member_id), TransferStatus.PENDING.value),
            )
            r = fetchone(cur)
            return _to_transfer(r) if r else None

    def decide(
        self,
        transfer_id: str,
        *,
        status: TransferStatus,
        decided_by: str,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if status == TransferStatus.APPROVED:
                cur.execute(
                    """
                    UPDATE transfer_requests
                    SET status=%s, approved_by=%s, approval_date=%s
                    WHERE id=%s AND status=%s
                    """,
                    (status.value, decided_by, decided_at, str(transfer_id), TransferStatus.PENDING.value),
                )
            else:
                cur.execute(
                    """
                    UPDATE transfer_requests
                    SET status=%s, rejection_reason=%s
                    WHERE id=%s AND status=%s
                    """,
                    (status.value, rejection_reason, str(transfer_id), TransferStatus.PENDING.value),
                )
            return cur.rowcount > 0

    def add_history(
        self,
        *,
        member_id: str,
        from_church: str,
        to_church: str,
        from_church_id: str,
        to_church_id: str,
        transfer_date: date,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO transfer_history(
                    member_id, from_church, to_church, from_church_id, to_church_id, transfer_date, transfer_type
                )
                VALUES(%s,%s,%s,%s,%s,%s,'transfer_in')
                """,
                (member_id, from_church, to_church, from_church_id, to_church_id, transfer_date),
            )

    def log_action(self, *, user_id: str, action: str, record_id: str, new_values: dict) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(user_id, action, table_name, record_id, new_values)
                VALUES(%s,%s,'transfer_requests',%s,%s)
                """,
                (user_id, action, record_id, json.dumps(new_values, default=str)),
            )
