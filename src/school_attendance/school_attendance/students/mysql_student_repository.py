from __future__ import annotations

from typing import Optional

from ..core.enums import StudentStatus
from ..database.mysql_base import fetch_count, fetchone
from ..enrollments.model import EnrollmentApplication
from .model import Student
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, cur):
        self._cur = cur

    def get(self, *, student_id: int) -> Optional[Student]:
        self._cur.execute(
            """
            SELECT student_id, application_id, full_name, date_of_birth, gender,
                   grade_level, section_id, status, enrolled_at
            FROM students
            WHERE student_id=%s
            """,
            (int(student_id),),
        )
        r = fetchone(self._cur)
        if not r:
            return None
        return Student(
            student_id=int(r["student_id"]),
            application_id=r.get("application_id"),
            full_name=r["full_name"],
            date_of_birth=r.get("date_of_birth"),
            gender=r.get("gender"),
            grade_level=r["grade_level"],
            section_id=r.get("section_id"),
            status=StudentStatus(r["status"]),
            enrolled_at=r.get("enrolled_at"),
        )

    def create_from_application(self, application: EnrollmentApplication, *, section_id: int) -> int:
        self._cur.execute(
            """
            INSERT INTO students(
                application_id, full_name, date_of_birth, gender, place_of_birth,
                nationality, address, grade_level, section_id, status, enrolled_at
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,NOW())
            """,
            (
                int(application.application_id),
                application.full_name,
                application.date_of_birth,
                application.gender,
                application.place_of_birth,
                application.nationality,
                application.address,
                application.grade_level,
                int(section_id),
                StudentStatus.ACTIVE.value,
            ),
        )
        return int(self._cur.lastrowid)

    def count_in_section(self, *, section_id: int) -> int:
        self._cur.execute(
            "SELECT COUNT(*) AS total FROM students WHERE section_id=%s AND status=%s",
            (int(section_id), StudentStatus.ACTIVE.value),
        )
        return fetch_count(self._cur)
