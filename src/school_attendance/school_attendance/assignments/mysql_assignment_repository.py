from __future__ import annotations

from typing import Any, Optional, Sequence

from ..database.mysql_base import fetch_count, fetchall, fetchone, normalize_mysql_time
from .model import StudentScheduleAssignment
from .repository import AssignmentRepository


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, cur):
        self._cur = cur

    def exists(self, *, student_id: int, schedule_id: int) -> bool:
        self._cur.execute(
            "SELECT assignment_id FROM student_schedules WHERE student_id=%s AND schedule_id=%s",
            (int(student_id), int(schedule_id)),
        )
        return fetchone(self._cur) is not None

    def get(self, *, assignment_id: int) -> Optional[StudentScheduleAssignment]:
        self._cur.execute(
            """
            SELECT assignment_id, student_id, schedule_id, created_by, created_at
            FROM student_schedules
            WHERE assignment_id=%s
            """,
            (int(assignment_id),),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return StudentScheduleAssignment(
            assignment_id=int(r["assignment_id"]),
            student_id=int(r["student_id"]),
            schedule_id=int(r["schedule_id"]),
            created_by=r.get("created_by"),
            created_at=r.get("created_at"),
        )

    def create(self, *, student_id: int, schedule_id: int, created_by: Optional[int] = None) -> int:
        self._cur.execute(
            "INSERT INTO student_schedules(student_id, schedule_id, created_by) VALUES(%s,%s,%s)",
            (int(student_id), int(schedule_id), created_by),
        )
        return int(self._cur.lastrowid)

    def delete(self, *, assignment_id: int) -> bool:
        self._cur.execute("DELETE FROM student_schedules WHERE assignment_id=%s", (int(assignment_id),))
        return self._cur.rowcount > 0

    def list(
        self,
        *,
        student_id: Optional[int] = None,
        schedule_id: Optional[int] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[Sequence[dict], int]:
        clauses = ["1=1"]
        params: list[Any] = []
        if student_id is not None:
            clauses.append("ss.student_id=%s")
            params.append(int(student_id))
        if schedule_id is not None:
            clauses.append("ss.schedule_id=%s")
            params.append(int(schedule_id))

        where = " AND ".join(clauses)

        self._cur.execute(
            f"""
            SELECT
                ss.assignment_id,
                ss.student_id,
                ss.schedule_id,
                st.full_name AS student_name,
                st.grade_level,
                sec.section_name,
                sub.subject_name,
                COALESCE(u.full_name, u.username) AS teacher_name,
                sc.start_time,
                sc.end_time,
                (SELECT GROUP_CONCAT(sd.day_of_week ORDER BY FIELD(sd.day_of_week, 'Mon', 'Tue', 'Wed', 'Thu', 'Fri'))
                 FROM schedule_days sd WHERE sd.schedule_id = ss.schedule_id) AS days
            FROM student_schedules ss
            JOIN students st ON st.student_id = ss.student_id
            JOIN schedules sc ON sc.schedule_id = ss.schedule_id
            LEFT JOIN subjects sub ON sub.subject_id = sc.subject_id
            LEFT JOIN users u ON u.user_id = sc.teacher_id
            LEFT JOIN sections sec ON sec.section_id = sc.section_id
            WHERE {where}
            ORDER BY st.full_name ASC, sub.subject_name ASC
            LIMIT %s OFFSET %s
            """,
            tuple(params + [int(limit), int(offset)]),
        )
        out: list[dict] = []
        for r in fetchall(self._cur):
            out.append(
                {
                    "id": int(r["assignment_id"]),
                    "studentId": int(r["student_id"]),
                    "scheduleId": int(r["schedule_id"]),
                    "studentName": r["student_name"],
                    "gradeLevel": r.get("grade_level"),
                    "section": r.get("section_name"),
                    "subjectName": r.get("subject_name"),
                    "teacherName": r.get("teacher_name"),
                    "startTime": normalize_mysql_time(r["start_time"]).strftime("%H:%M"),
                    "endTime": normalize_mysql_time(r["end_time"]).strftime("%H:%M"),
                    "days": (r.get("days") or "").split(",") if r.get("days") else [],
                }
            )

        self._cur.execute(f"SELECT COUNT(*) AS total FROM student_schedules ss WHERE {where}", tuple(params))
        return out, fetch_count(self._cur)
