from __future__ import annotations

from typing import Optional, Protocol


class AuditRepository(Protocol):
    def record(
        self,
        *,
        user_id: Optional[int],
        action: str,
        table_affected: Optional[str] = None,
        record_id: Optional[int] = None,
        details: Optional[str] = None,
    ) -> int:
        """Append an audit trail row inside the current unit of work."""

        raise NotImplementedError
