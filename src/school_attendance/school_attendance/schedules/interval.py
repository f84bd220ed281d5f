from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Any

from ..common.datetime_utils import format_hhmm, parse_hhmm, to_minutes
from ..core.enums import Weekday
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class TimeInterval:
    """A [start, end) wall-clock range recurring on one weekday.

    Schedules repeat every week, so there is no date or timezone component.
    """

    day: Weekday
    start: time
    end: time

    def __post_init__(self) -> None:
        validate_range(self.start, self.end)

    @classmethod
    def of(cls, day: Weekday, start: Any, end: Any) -> "TimeInterval":
        """Build from 'HH:MM' strings or `time` values."""
        return cls(day, parse_hhmm(start, "start"), parse_hhmm(end, "end"))

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end)

    def overlaps(self, other: "TimeInterval") -> bool:
        return overlaps(self, other)

    def __str__(self) -> str:
        return f"{self.day.value} {format_hhmm(self.start)}-{format_hhmm(self.end)}"


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    # Half-open ranges: 09:00-10:00 and 10:00-11:00 only touch.
    if a.day != b.day:
        return False
    return a.start_minutes < b.end_minutes and b.start_minutes < a.end_minutes


def validate_range(start: time, end: time) -> None:
    if to_minutes(start) >= to_minutes(end):
        raise ValidationError(f"Start time must be before end time ({format_hhmm(start)}-{format_hhmm(end)})")
