from __future__ import annotations

import uuid
from datetime import datetime
from typing import AbstractSet, Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.enums import RegistrationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import any_of, build_where, db_cursor, fetchall, fetchone, in_clause
from .model import EventRegistration, NewRegistration
from .repository import RegistrationRepository

_COLUMNS = """
    r.id, r.event_id, r.member_id, r.visitor_id, r.status, r.registered_by, r.notes,
    r.attendance_confirmed_at, r.attendance_confirmed_by,
    r.final_confirmed_at, r.final_confirmed_by, r.created_at
"""


def _to_registration(r: Dict[str, Any]) -> EventRegistration:
    return EventRegistration(
        registration_id=str(r["id"]),
        event_id=str(r["event_id"]),
        member_id=r.get("member_id"),
        visitor_id=r.get("visitor_id"),
        status=RegistrationStatus(r["status"]),
        registered_by=str(r["registered_by"]),
        notes=r.get("notes"),
        attendance_confirmed_at=r.get("attendance_confirmed_at"),
        attendance_confirmed_by=r.get("attendance_confirmed_by"),
        final_confirmed_at=r.get("final_confirmed_at"),
        final_confirmed_by=r.get("final_confirmed_by"),
        created_at=r.get("created_at"),
    )


def _status_values(statuses: Iterable[RegistrationStatus]) -> list[str]:
    return [RegistrationStatus(s).value for s in statuses]


def _church_clause(church_ids: AbstractSet[str]) -> Tuple[str, List[Any]]:
    # Needs the members m / visitors v joins. Church-less visitors are never filtered out.
    ids = sorted(church_ids)
    return any_of(
        in_clause("m.church_id", ids),
        in_clause("v.associated_church_id", ids),
        ("r.visitor_id IS NOT NULL AND v.associated_church_id IS NULL", []),
    )


class MySQLRegistrationRepository(RegistrationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, registration_id: str) -> Optional[EventRegistration]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM event_registrations r WHERE r.id=%s",
                (str(registration_id),),
            )
            r = fetchone(cur)
            return _to_registration(r) if r else None

    def list_for_event(
        self,
        event_id: str,
        *,
        statuses: Optional[Iterable[RegistrationStatus]] = None,
        church_ids: Optional[AbstractSet[str]] = None,
        limit: int = 500,
        offset: int = 0,
    ) -> Sequence[EventRegistration]:
        clauses = [("r.event_id=%s", [str(event_id)])]
        if statuses is not None:
            clauses.append(in_clause("r.status", _status_values(statuses)))
        if church_ids is not None:
            clauses.append(_church_clause(church_ids))
        where, params = build_where(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM event_registrations r
                LEFT JOIN members m ON m.id = r.member_id
                LEFT JOIN visitors v ON v.id = r.visitor_id
                WHERE {where}
                ORDER BY r.created_at ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_to_registration(r) for r in fetchall(cur)]

    def count_by_status(
        self,
        event_id: str,
        *,
        church_ids: Optional[AbstractSet[str]] = None,
    ) -> Dict[RegistrationStatus, Tuple[int, int]]:
        clauses = [("r.event_id=%s", [str(event_id)])]
        if church_ids is not None:
            clauses.append(_church_clause(church_ids))
        where, params = build_where(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.status, COUNT(*) AS total, SUM(r.final_confirmed_at IS NOT NULL) AS locked
                FROM event_registrations r
                LEFT JOIN members m ON m.id = r.member_id
                LEFT JOIN visitors v ON v.id = r.visitor_id
                WHERE {where}
                GROUP BY r.status
                """,
                tuple(params),
            )
            return {
                RegistrationStatus(r["status"]): (int(r["total"]), int(r["locked"] or 0)) for r in fetchall(cur)
            }

    def find_active_registrants(
        self,
        event_id: str,
        *,
        member_ids: Sequence[str] = (),
        visitor_ids: Sequence[str] = (),
        statuses: Iterable[RegistrationStatus],
    ) -> set[str]:
        where, params = build_where(
            [
                ("event_id=%s", [str(event_id)]),
                in_clause("status", _status_values(statuses)),
                any_of(in_clause("member_id", list(member_ids)), in_clause("visitor_id", list(visitor_ids))),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT member_id, visitor_id FROM event_registrations WHERE {where}", tuple(params))
            return {str(r.get("member_id") or r.get("visitor_id")) for r in fetchall(cur)}

    def create(self, new: NewRegistration) -> EventRegistration:
        return self.create_many([new])[0]

    def create_many(self, rows: Sequence[NewRegistration]) -> Sequence[EventRegistration]:
        ids = [str(uuid.uuid4()) for _ in rows]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO event_registrations(id, event_id, member_id, visitor_id, registered_by, status, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (
                        rid,
                        row.event_id,
                        row.member_id,
                        row.visitor_id,
                        row.registered_by,
                        RegistrationStatus.REGISTERED.value,
                        row.notes,
                    )
                    for rid, row in zip(ids, rows)
                ],
            )
            where, params = in_clause("r.id", ids)
            cur.execute(f"SELECT {_COLUMNS} FROM event_registrations r WHERE {where}", tuple(params))
            by_id = {str(r["id"]): _to_registration(r) for r in fetchall(cur)}
        return [by_id[rid] for rid in ids if rid in by_id]

    def set_attendance(
        self,
        registration_id: str,
        *,
        expected_status: RegistrationStatus,
        status: RegistrationStatus,
        confirmed_at: Optional[datetime],
        confirmed_by: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE event_registrations
                SET status=%s, attendance_confirmed_at=%s, attendance_confirmed_by=%s
                WHERE id=%s AND status=%s AND final_confirmed_at IS NULL
                """,
                (status.value, confirmed_at, confirmed_by, str(registration_id), expected_status.value),
            )
            return cur.rowcount > 0

    def cancel(self, registration_id: str, *, notes: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE event_registrations
                SET status=%s, notes=%s
                WHERE id=%s AND status=%s AND final_confirmed_at IS NULL
                """,
                (
                    RegistrationStatus.CANCELLED.value,
                    notes,
                    str(registration_id),
                    RegistrationStatus.REGISTERED.value,
                ),
            )
            return cur.rowcount > 0

    def finalize_event(
        self,
        event_id: str,
        *,
        statuses: Iterable[RegistrationStatus],
        confirmed_at: datetime,
        confirmed_by: str,
    ) -> int:
        status_sql, status_params = in_clause("status", _status_values(statuses))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE event_registrations
                SET final_confirmed_at=%s, final_confirmed_by=%s
                WHERE event_id=%s AND {status_sql} AND final_confirmed_at IS NULL
                """,
                tuple([confirmed_at, str(confirmed_by), str(event_id)] + status_params),
            )
            return int(cur.rowcount)

    def delete(self, registration_id: str, *, statuses: Iterable[RegistrationStatus]) -> bool:
        status_sql, status_params = in_clause("status", _status_values(statuses))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                DELETE FROM event_registrations
                WHERE id=%s AND {status_sql} AND final_confirmed_at IS NULL
                """,
                tuple([str(registration_id)] + status_params),
            )
            return cur.rowcount > 0
