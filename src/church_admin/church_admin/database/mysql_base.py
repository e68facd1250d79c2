from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(column: str, values: Iterable[Any]) -> Tuple[str, List[Any]]:
    """Build ``column IN (...)``; an empty list matches nothing."""
    params = list(values)
    if not params:
        return "1=0", []
    placeholders = ",".join(["%s"] * len(params))
    return f"{column} IN ({placeholders})", params


def build_where(clauses: Sequence[Tuple[str, Sequence[Any]]]) -> Tuple[str, List[Any]]:
    """AND together ``(sql, params)`` pairs into a WHERE body."""
    parts = ["1=1"]
    params: List[Any] = []
    for sql, p in clauses:
        parts.append(f"({sql})")
        params.extend(p)
    return " AND ".join(parts), params


def any_of(*clauses: Tuple[str, Sequence[Any]]) -> Tuple[str, List[Any]]:
    """OR together ``(sql, params)`` pairs."""
    parts: List[str] = []
    params: List[Any] = []
    for sql, p in clauses:
        parts.append(f"({sql})")
        params.extend(p)
    if not parts:
        return "1=0", []
    return " OR ".join(parts), params
