from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Weekday
from .model import Schedule, ScheduleDraft


class ScheduleRepository(Protocol):
    def get(self, *, schedule_id: int) -> Optional[Schedule]:
        raise NotImplementedError

    def list(
        self,
        *,
        teacher_id: Optional[int] = None,
        section_id: Optional[int] = None,
        day: Optional[Weekday] = None,
    ) -> Sequence[Schedule]:
        raise NotImplementedError

    def find_on_day(
        self,
        *,
        day: Weekday,
        teacher_id: Optional[int] = None,
        section_id: Optional[int] = None,
        exclude_schedule_id: Optional[int] = None,
    ) -> Sequence[Schedule]:
        """Schedules recurring on `day` for the given teacher or section."""

        raise NotImplementedError

    def lock_owners(self, *, teacher_id: int, section_id: Optional[int]) -> None:
        """Serialise concurrent writers for the same teacher/section until commit."""

        raise NotImplementedError

    def create(self, draft: ScheduleDraft) -> int:
        raise NotImplementedError

    def update(self, *, schedule_id: int, draft: ScheduleDraft) -> bool:
        raise NotImplementedError

    def delete(self, *, schedule_id: int) -> bool:
        raise NotImplementedError

    def resolve_subject_id(self, value: str) -> Optional[int]:
        """Subject id from an id string or a subject name."""

        raise NotImplementedError

    def resolve_teacher_id(self, value: str) -> Optional[int]:
        """Teacher user id from an id string, a username or a full name."""

        raise NotImplementedError
