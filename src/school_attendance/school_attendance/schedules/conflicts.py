from __future__ import annotations

from typing import Optional

from .interval import overlaps
from .model import ConflictingSchedule, DayConflict, ScheduleDraft
from .repository import ScheduleRepository


class ConflictDetector:
    """Finds teacher and section double-bookings for a schedule draft.

    Read only. Returns an empty list when the draft can be committed.
    """

    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def detect(self, draft: ScheduleDraft, *, exclude_schedule_id: Optional[int] = None) -> list[DayConflict]:
        report: list[DayConflict] = []

        for day in draft.days:
            candidate = draft.interval_on(day)

            teacher_pool = self._schedules.find_on_day(
                day=day,
                teacher_id=draft.teacher_id,
                exclude_schedule_id=exclude_schedule_id,
            )
            teacher_hits = tuple(
                ConflictingSchedule.from_schedule(s) for s in teacher_pool if overlaps(candidate, s.interval_on(day))
            )

            section_hits: tuple[ConflictingSchedule, ...] = ()
            if draft.section_id is not None:
                section_pool = self._schedules.find_on_day(
                    day=day,
                    section_id=draft.section_id,
                    exclude_schedule_id=exclude_schedule_id,
                )
                section_hits = tuple(
                    ConflictingSchedule.from_schedule(s)
                    for s in section_pool
                    if overlaps(candidate, s.interval_on(day))
                )

            entry = DayConflict(day=day, teacher_conflicts=teacher_hits, section_conflicts=section_hits)
            if entry.has_conflict:
                report.append(entry)

        return report
