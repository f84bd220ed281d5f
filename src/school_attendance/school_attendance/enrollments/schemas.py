from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..common.validators import optional_positive_int, optional_str, require_positive_int
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ApproveRequest:
    section_id: Optional[int]
    schedule_ids: tuple[int, ...]
    notes: Optional[str] = None

    @classmethod
    def from_json(cls, body: Any) -> "ApproveRequest":
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")

        raw = body.get("scheduleAssignments") or []
        if not isinstance(raw, list):
            raise ValidationError("scheduleAssignments must be a list")

        schedule_ids: list[int] = []
        for item in raw:
            value = item.get("scheduleId") if isinstance(item, dict) else item
            schedule_ids.append(require_positive_int(value, "scheduleId"))

        return cls(
            section_id=optional_positive_int(body.get("sectionId"), "sectionId"),
            schedule_ids=tuple(schedule_ids),
            notes=optional_str(body.get("notes")),
        )


@dataclass(frozen=True)
class DeclineRequest:
    reason: Optional[str]
    notes: Optional[str] = None

    @classmethod
    def from_json(cls, body: Any) -> "DeclineRequest":
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return cls(reason=optional_str(body.get("reason")), notes=optional_str(body.get("notes")))
