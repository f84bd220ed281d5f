from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..common.validators import optional_positive_int, optional_str
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ScheduleRequest:
    """Schedule create/update body as sent by the admin dashboard.

    `subject` and `teacher` may be ids or names. On update, fields left out
    keep their stored value; `section_given` tells an explicit null section
    apart from an omitted one.
    """

    subject: Optional[str] = None
    teacher: Optional[str] = None
    section_id: Optional[int] = None
    section_given: bool = False
    grade_level: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    days: Optional[list] = None

    @classmethod
    def from_json(cls, body: Any) -> "ScheduleRequest":
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")

        days = body.get("days")
        if days is None and body.get("dayOfWeek"):
            days = [body["dayOfWeek"]]

        return cls(
            subject=optional_str(body.get("subject", body.get("subjectId"))),
            teacher=optional_str(body.get("teacher", body.get("teacherId"))),
            section_id=optional_positive_int(body.get("sectionId"), "sectionId"),
            section_given="sectionId" in body,
            grade_level=optional_str(body.get("gradeLevel")),
            start_time=optional_str(body.get("startTime")),
            end_time=optional_str(body.get("endTime")),
            days=days,
        )
