from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Optional

from ..common.datetime_utils import format_hhmm
from ..core.enums import Weekday
from .interval import TimeInterval


@dataclass(frozen=True)
class ScheduleDraft:
    """Validated input of a schedule write."""

    subject_id: int
    teacher_id: int
    section_id: Optional[int]
    grade_level: Optional[str]
    days: tuple[Weekday, ...]
    start_time: time
    end_time: time

    def interval_on(self, day: Weekday) -> TimeInterval:
        return TimeInterval(day, self.start_time, self.end_time)


@dataclass(frozen=True)
class Schedule:
    schedule_id: int
    subject_id: int
    teacher_id: int
    section_id: Optional[int]
    grade_level: Optional[str]
    days: tuple[Weekday, ...]
    start_time: time
    end_time: time
    subject_name: Optional[str] = None
    teacher_name: Optional[str] = None
    section_name: Optional[str] = None
    # False when the teacher account is disabled or gone.
    teacher_active: bool = True

    def interval_on(self, day: Weekday) -> TimeInterval:
        return TimeInterval(day, self.start_time, self.end_time)

    def to_dict(self) -> dict:
        return {
            "id": self.schedule_id,
            "subjectId": self.subject_id,
            "subject": self.subject_name or str(self.subject_id),
            "teacherId": self.teacher_id,
            "teacher": self.teacher_name or str(self.teacher_id),
            "sectionId": self.section_id,
            "sectionName": self.section_name,
            "gradeLevel": self.grade_level,
            "days": [d.value for d in self.days],
            "startTime": format_hhmm(self.start_time),
            "endTime": format_hhmm(self.end_time),
        }


@dataclass(frozen=True)
class ConflictingSchedule:
    schedule_id: int
    subject: str
    start_time: time
    end_time: time
    teacher_name: Optional[str] = None
    section_name: Optional[str] = None

    @classmethod
    def from_schedule(cls, schedule: Schedule) -> "ConflictingSchedule":
        return cls(
            schedule_id=schedule.schedule_id,
            subject=schedule.subject_name or str(schedule.subject_id),
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            teacher_name=schedule.teacher_name,
            section_name=schedule.section_name,
        )

    @property
    def time_range(self) -> str:
        return f"{format_hhmm(self.start_time)}-{format_hhmm(self.end_time)}"

    def to_dict(self) -> dict:
        return {
            "scheduleId": self.schedule_id,
            "subject": self.subject,
            "startTime": format_hhmm(self.start_time),
            "endTime": format_hhmm(self.end_time),
            "teacherName": self.teacher_name,
            "sectionName": self.section_name,
        }


@dataclass(frozen=True)
class DayConflict:
    """Conflict report entry for one requested weekday. Never persisted."""

    day: Weekday
    teacher_conflicts: tuple[ConflictingSchedule, ...] = field(default_factory=tuple)
    section_conflicts: tuple[ConflictingSchedule, ...] = field(default_factory=tuple)

    @property
    def has_conflict(self) -> bool:
        return bool(self.teacher_conflicts or self.section_conflicts)

    def messages(self) -> list[str]:
        out: list[str] = []
        if self.teacher_conflicts:
            items = ", ".join(f"{c.subject} ({c.time_range})" for c in self.teacher_conflicts)
            out.append(f"{self.day.value}: Teacher is already scheduled for {items}")
        if self.section_conflicts:
            items = ", ".join(
                f"{c.subject} with {c.teacher_name or 'another teacher'} ({c.time_range})"
                for c in self.section_conflicts
            )
            out.append(f"{self.day.value}: Section is already scheduled for {items}")
        return out

    def to_dict(self) -> dict:
        return {
            "day": self.day.value,
            "conflicts": {
                "teacher": {
                    "hasOverlap": bool(self.teacher_conflicts),
                    "conflictingSchedules": [c.to_dict() for c in self.teacher_conflicts],
                },
                "section": {
                    "hasOverlap": bool(self.section_conflicts),
                    "conflictingSchedules": [c.to_dict() for c in self.section_conflicts],
                },
            },
        }
