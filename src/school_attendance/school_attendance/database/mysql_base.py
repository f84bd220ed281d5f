from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, time, timedelta
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Connection + cursor committed on success, rolled back on any exception."""

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


def fetch_count(cur, column: str = "total") -> int:
    row = fetchone(cur)
    return int(row[column]) if row and row[column] is not None else 0


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Coerce a TIME column into `datetime.time`.

    The pure-python connector hands back `timedelta` (seconds since midnight),
    the C extension and some drivers give `time` or 'HH:MM[:SS]' strings.
    Class periods never cross midnight, so a timedelta is taken modulo one day.
    """

    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return (datetime.min + timedelta(seconds=seconds)).time()

    if isinstance(value, str):
        parts = [int(p) for p in value.strip().split(":") if p]
        if len(parts) not in (2, 3):
            raise ValueError(f"Invalid time string: {value!r}")
        return time(*parts)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
