from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import Role, Weekday
from ..database.mysql_base import fetchall, fetchone, normalize_mysql_time
from .model import Schedule, ScheduleDraft
from .repository import ScheduleRepository

_SELECT_SCHEDULES = """
    SELECT
        sc.schedule_id,
        sc.subject_id,
        sc.teacher_id,
        sc.section_id,
        sc.grade_level,
        sc.start_time,
        sc.end_time,
        sub.subject_name,
        COALESCE(u.full_name, u.username) AS teacher_name,
        u.is_active AS teacher_active,
        sec.section_name,
        GROUP_CONCAT(sd.day_of_week ORDER BY FIELD(sd.day_of_week, 'Mon', 'Tue', 'Wed', 'Thu', 'Fri')) AS days
    FROM schedules sc
    JOIN schedule_days sd ON sd.schedule_id = sc.schedule_id
    LEFT JOIN subjects sub ON sub.subject_id = sc.subject_id
    LEFT JOIN users u ON u.user_id = sc.teacher_id
    LEFT JOIN sections sec ON sec.section_id = sc.section_id
    WHERE {where}
    GROUP BY sc.schedule_id, sc.subject_id, sc.teacher_id, sc.section_id, sc.grade_level,
             sc.start_time, sc.end_time, sub.subject_name, u.full_name, u.username, u.is_active, sec.section_name
    ORDER BY sc.start_time ASC, sc.schedule_id ASC
"""

_HAS_DAY = "EXISTS (SELECT 1 FROM schedule_days x WHERE x.schedule_id = sc.schedule_id AND x.day_of_week=%s)"


def _row_to_schedule(r: dict) -> Schedule:
    days = tuple(Weekday(d) for d in (r.get("days") or "").split(",") if d)
    return Schedule(
        schedule_id=int(r["schedule_id"]),
        subject_id=int(r["subject_id"]),
        teacher_id=int(r["teacher_id"]),
        section_id=int(r["section_id"]) if r.get("section_id") is not None else None,
        grade_level=r.get("grade_level"),
        days=days,
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        subject_name=r.get("subject_name"),
        teacher_name=r.get("teacher_name"),
        section_name=r.get("section_name"),
        teacher_active=bool(r.get("teacher_active")),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, cur):
        self._cur = cur

    def _select(self, clauses: list[str], params: list[Any]) -> list[Schedule]:
        where = " AND ".join(clauses) if clauses else "1=1"
        self._cur.execute(_SELECT_SCHEDULES.format(where=where), tuple(params))
        return [_row_to_schedule(r) for r in fetchall(self._cur)]

    def get(self, *, schedule_id: int) -> Optional[Schedule]:
        rows = self._select(["sc.schedule_id=%s"], [int(schedule_id)])
        return rows[0] if rows else None

    def list(
        self,
        *,
        teacher_id: Optional[int] = None,
        section_id: Optional[int] = None,
        day: Optional[Weekday] = None,
    ) -> Sequence[Schedule]:
        clauses: list[str] = []
        params: list[Any] = []
        if teacher_id is not None:
            clauses.append("sc.teacher_id=%s")
            params.append(int(teacher_id))
        if section_id is not None:
            clauses.append("sc.section_id=%s")
            params.append(int(section_id))
        if day is not None:
            clauses.append(_HAS_DAY)
            params.append(day.value)
        return self._select(clauses, params)

    def find_on_day(
        self,
        *,
        day: Weekday,
        teacher_id: Optional[int] = None,
        section_id: Optional[int] = None,
        exclude_schedule_id: Optional[int] = None,
    ) -> Sequence[Schedule]:
        clauses = [_HAS_DAY]
        params: list[Any] = [day.value]
        if teacher_id is not None:
            clauses.append("sc.teacher_id=%s")
            params.append(int(teacher_id))
        if section_id is not None:
            clauses.append("sc.section_id=%s")
            params.append(int(section_id))
        if exclude_schedule_id is not None:
            clauses.append("sc.schedule_id<>%s")
            params.append(int(exclude_schedule_id))
        return self._select(clauses, params)

    def lock_owners(self, *, teacher_id: int, section_id: Optional[int]) -> None:
        # Always teacher first, then section, so concurrent writers lock in the same order.
        self._cur.execute("SELECT user_id FROM users WHERE user_id=%s FOR UPDATE", (int(teacher_id),))
        fetchall(self._cur)
        if section_id is not None:
            self._cur.execute("SELECT section_id FROM sections WHERE section_id=%s FOR UPDATE", (int(section_id),))
            fetchall(self._cur)

    def _insert_days(self, schedule_id: int, days: Sequence[Weekday]) -> None:
        self._cur.executemany(
            "INSERT INTO schedule_days(schedule_id, day_of_week) VALUES(%s,%s)",
            [(int(schedule_id), d.value) for d in days],
        )

    def create(self, draft: ScheduleDraft) -> int:
        self._cur.execute(
            """
            INSERT INTO schedules(subject_id, teacher_id, section_id, grade_level, start_time, end_time)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (
                int(draft.subject_id),
                int(draft.teacher_id),
                draft.section_id,
                draft.grade_level,
                draft.start_time,
                draft.end_time,
            ),
        )
        schedule_id = int(self._cur.lastrowid)
        self._insert_days(schedule_id, draft.days)
        return schedule_id

    def update(self, *, schedule_id: int, draft: ScheduleDraft) -> bool:
        self._cur.execute("SELECT schedule_id FROM schedules WHERE schedule_id=%s FOR UPDATE", (int(schedule_id),))
        if not fetchone(self._cur):
            return False

        self._cur.execute(
            """
            UPDATE schedules
            SET subject_id=%s, teacher_id=%s, section_id=%s, grade_level=%s,
                start_time=%s, end_time=%s, updated_at=CURRENT_TIMESTAMP
            WHERE schedule_id=%s
            """,
            (
                int(draft.subject_id),
                int(draft.teacher_id),
                draft.section_id,
                draft.grade_level,
                draft.start_time,
                draft.end_time,
                int(schedule_id),
            ),
        )
        self._cur.execute("DELETE FROM schedule_days WHERE schedule_id=%s", (int(schedule_id),))
        self._insert_days(int(schedule_id), draft.days)
        return True

    def delete(self, *, schedule_id: int) -> bool:
        self._cur.execute("DELETE FROM schedules WHERE schedule_id=%s", (int(schedule_id),))
        return self._cur.rowcount > 0

    def resolve_subject_id(self, value: str) -> Optional[int]:
        value = str(value).strip()
        if value.isdigit():
            self._cur.execute("SELECT subject_id FROM subjects WHERE subject_id=%s", (int(value),))
        else:
            self._cur.execute("SELECT subject_id FROM subjects WHERE subject_name=%s LIMIT 1", (value,))
        r = fetchone(self._cur)
        return int(r["subject_id"]) if r else None

    def resolve_teacher_id(self, value: str) -> Optional[int]:
        value = str(value).strip()
        if value.isdigit():
            self._cur.execute(
                "SELECT user_id FROM users WHERE user_id=%s AND role=%s",
                (int(value), Role.TEACHER.value),
            )
        else:
            self._cur.execute(
                """
                SELECT user_id FROM users
                WHERE role=%s AND (username=%s OR full_name=%s)
                ORDER BY (username=%s) DESC
                LIMIT 1
                """,
                (Role.TEACHER.value, value, value, value),
            )
        r = fetchone(self._cur)
        return int(r["user_id"]) if r else None
