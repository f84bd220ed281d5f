from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def normalize_grade(value: Optional[str]) -> str:
    """'Grade 1', 'grade  1' and ' GRADE 1' all compare equal."""
    return " ".join((value or "").split()).lower()


@dataclass(frozen=True)
class Section:
    section_id: int
    section_name: str
    grade_level: str
    description: Optional[str] = None
    capacity: Optional[int] = None
    is_active: bool = True

    def accepts_grade(self, grade_level: Optional[str]) -> bool:
        return normalize_grade(self.grade_level) == normalize_grade(grade_level)

    def to_dict(self) -> dict:
        return {
            "id": self.section_id,
            "sectionName": self.section_name,
            "gradeLevel": self.grade_level,
            "description": self.description,
            "capacity": self.capacity,
            "isActive": self.is_active,
        }
