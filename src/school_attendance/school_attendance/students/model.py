from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import StudentStatus


@dataclass(frozen=True)
class Student:
    student_id: int
    application_id: Optional[int]
    full_name: str
    date_of_birth: Optional[date]
    gender: Optional[str]
    grade_level: str
    section_id: Optional[int]
    status: StudentStatus
    enrolled_at: Optional[datetime] = None
