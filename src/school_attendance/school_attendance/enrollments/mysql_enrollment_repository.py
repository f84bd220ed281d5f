from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import EnrollmentStatus
from ..database.mysql_base import fetch_count, fetchall, fetchone
from .model import EnrollmentApplication
from .repository import EnrollmentRepository

_COLUMNS = """
    application_id, full_name, date_of_birth, gender, place_of_birth, nationality, address,
    grade_level, parent_name, parent_contact, parent_email, documents, additional_info,
    status, submitted_at, reviewed_by, reviewed_at, review_notes, decline_reason,
    student_id, section_id
"""


def _parse_documents(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    try:
        docs = json.loads(value)
    except (TypeError, ValueError):
        return (str(value),)
    if isinstance(docs, list):
        return tuple(str(d) for d in docs)
    return (str(docs),)


def _row_to_application(r: dict) -> EnrollmentApplication:
    return EnrollmentApplication(
        application_id=int(r["application_id"]),
        full_name=r["full_name"],
        date_of_birth=r.get("date_of_birth"),
        gender=r.get("gender"),
        place_of_birth=r.get("place_of_birth"),
        nationality=r.get("nationality"),
        address=r.get("address"),
        grade_level=r["grade_level"],
        parent_name=r.get("parent_name"),
        parent_contact=r.get("parent_contact"),
        parent_email=r.get("parent_email"),
        status=EnrollmentStatus(r["status"]),
        submitted_at=r.get("submitted_at"),
        documents=_parse_documents(r.get("documents")),
        additional_info=r.get("additional_info"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        review_notes=r.get("review_notes"),
        decline_reason=r.get("decline_reason"),
        student_id=r.get("student_id"),
        section_id=r.get("section_id"),
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, cur):
        self._cur = cur

    def get(self, *, application_id: int, for_update: bool = False) -> Optional[EnrollmentApplication]:
        lock = " FOR UPDATE" if for_update else ""
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM enrollment_applications WHERE application_id=%s{lock}",
            (int(application_id),),
        )
        r = fetchone(self._cur)
        return _row_to_application(r) if r else None

    def list(
        self,
        *,
        status: Optional[EnrollmentStatus] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[Sequence[EnrollmentApplication], int]:
        where = "1=1"
        params: list[Any] = []
        if status is not None:
            where = "status=%s"
            params.append(status.value)

        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM enrollment_applications
            WHERE {where}
            ORDER BY submitted_at DESC, application_id DESC
            LIMIT %s OFFSET %s
            """,
            tuple(params + [int(limit), int(offset)]),
        )
        rows = [_row_to_application(r) for r in fetchall(self._cur)]

        self._cur.execute(f"SELECT COUNT(*) AS total FROM enrollment_applications WHERE {where}", tuple(params))
        return rows, fetch_count(self._cur)

    def count_by_status(self) -> dict[str, int]:
        self._cur.execute("SELECT status, COUNT(*) AS total FROM enrollment_applications GROUP BY status")
        counts = {s.value: 0 for s in EnrollmentStatus}
        for r in fetchall(self._cur):
            counts[r["status"]] = int(r["total"])
        return counts

    def mark_approved(
        self,
        *,
        application_id: int,
        student_id: int,
        section_id: int,
        reviewed_by: int,
        reviewed_at: datetime,
        notes: Optional[str] = None,
    ) -> bool:
        self._cur.execute(
            """
            UPDATE enrollment_applications
            SET status=%s, student_id=%s, section_id=%s,
                reviewed_by=%s, reviewed_at=%s, review_notes=%s
            WHERE application_id=%s AND status=%s
            """,
            (
                EnrollmentStatus.APPROVED.value,
                int(student_id),
                int(section_id),
                int(reviewed_by),
                reviewed_at,
                notes,
                int(application_id),
                EnrollmentStatus.PENDING.value,
            ),
        )
        return self._cur.rowcount > 0

    def mark_declined(
        self,
        *,
        application_id: int,
        reason: str,
        reviewed_by: int,
        reviewed_at: datetime,
        notes: Optional[str] = None,
    ) -> bool:
        self._cur.execute(
            """
            UPDATE enrollment_applications
            SET status=%s, decline_reason=%s, reviewed_by=%s, reviewed_at=%s, review_notes=%s
            WHERE application_id=%s AND status=%s
            """,
            (
                EnrollmentStatus.DECLINED.value,
                reason,
                int(reviewed_by),
                reviewed_at,
                notes,
                int(application_id),
                EnrollmentStatus.PENDING.value,
            ),
        )
        return self._cur.rowcount > 0
