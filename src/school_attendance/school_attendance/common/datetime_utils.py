from __future__ import annotations

import re
from datetime import datetime, time
from typing import Any

from ..core.exceptions import ValidationError

_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$")


def parse_hhmm(value: Any, field_name: str = "time") -> time:
    """Parse 'H:MM', 'HH:MM' or 'HH:MM:SS' into a wall-clock time."""

    if isinstance(value, time):
        return value
    match = _TIME_RE.match(str(value or "").strip())
    if not match:
        raise ValidationError(f"{field_name} must be in HH:MM format")
    hours, minutes, seconds = match.groups()
    return time(hour=int(hours), minute=int(minutes), second=int(seconds or 0))


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
