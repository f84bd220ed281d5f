from __future__ import annotations

from typing import Optional

from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, cur):
        self._cur = cur

    def record(
        self,
        *,
        user_id: Optional[int],
        action: str,
        table_affected: Optional[str] = None,
        record_id: Optional[int] = None,
        details: Optional[str] = None,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO audit_trail(user_id, action, table_affected, record_id, details)
            VALUES(%s,%s,%s,%s,%s)
            """,
            (user_id, action, table_affected, record_id, details),
        )
        return int(self._cur.lastrowid)
