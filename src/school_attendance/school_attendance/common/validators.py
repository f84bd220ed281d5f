from __future__ import annotations

from typing import Any, Iterable, Optional

from ..core.enums import Weekday
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a positive integer")
    if isinstance(value, bool) or number <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return number


def optional_positive_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return require_positive_int(value, field_name)


_DAY_NAMES = {
    "mon": Weekday.MON,
    "monday": Weekday.MON,
    "tue": Weekday.TUE,
    "tuesday": Weekday.TUE,
    "wed": Weekday.WED,
    "wednesday": Weekday.WED,
    "thu": Weekday.THU,
    "thursday": Weekday.THU,
    "fri": Weekday.FRI,
    "friday": Weekday.FRI,
}


def parse_weekday(value: Any) -> Weekday:
    day = _DAY_NAMES.get(str(value).strip().lower())
    if day is None:
        raise ValidationError(f"Invalid day of week: {value!r} (expected Mon..Fri)")
    return day


def parse_weekdays(values: Optional[Iterable[Any]]) -> tuple[Weekday, ...]:
    """Parse a day list into a de-duplicated tuple in calendar order."""

    if values is None or isinstance(values, (str, bytes)):
        raise ValidationError("days must be a list of weekdays")

    days = {parse_weekday(v) for v in values}
    if not days:
        raise ValidationError("At least one day of week is required")
    return tuple(sorted(days, key=lambda d: d.order))
