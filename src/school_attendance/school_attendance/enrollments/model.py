from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import EnrollmentStatus


@dataclass(frozen=True)
class EnrollmentApplication:
    application_id: int
    full_name: str
    date_of_birth: Optional[date]
    gender: Optional[str]
    place_of_birth: Optional[str]
    nationality: Optional[str]
    address: Optional[str]
    grade_level: str
    parent_name: Optional[str]
    parent_contact: Optional[str]
    parent_email: Optional[str]
    status: EnrollmentStatus
    submitted_at: Optional[datetime] = None
    documents: tuple[str, ...] = field(default_factory=tuple)
    additional_info: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    decline_reason: Optional[str] = None
    student_id: Optional[int] = None
    section_id: Optional[int] = None

    @property
    def is_pending(self) -> bool:
        return self.status == EnrollmentStatus.PENDING

    def to_dict(self) -> dict:
        def _iso(value):
            return value.isoformat() if value else None

        return {
            "id": self.application_id,
            "name": self.full_name,
            "dateOfBirth": _iso(self.date_of_birth),
            "gender": self.gender,
            "placeOfBirth": self.place_of_birth,
            "nationality": self.nationality,
            "address": self.address,
            "gradeLevel": self.grade_level,
            "parentName": self.parent_name,
            "parentContact": self.parent_contact,
            "parentEmail": self.parent_email,
            "documents": list(self.documents),
            "additionalInfo": self.additional_info,
            "enrollmentStatus": self.status.value,
            "submittedAt": _iso(self.submitted_at),
            "reviewedBy": self.reviewed_by,
            "reviewDate": _iso(self.reviewed_at),
            "reviewNotes": self.review_notes,
            "declineReason": self.decline_reason,
            "studentId": self.student_id,
            "sectionId": self.section_id,
        }
